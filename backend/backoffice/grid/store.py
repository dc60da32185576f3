"""
Contrat du magasin de documents d'assistance.

Un document par (personne, mois) : `days` (date ISO → statut) et `notes`
(date ISO → texte). L'implémentation SQLAlchemy se trouve dans
services/attendance_store.py.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Protocol

from backoffice.grid.status import DayStatus


class AttendanceStoreError(RuntimeError):
    """Échec d'une lecture/écriture dans le magasin (réseau, base, ...)."""


@dataclass(frozen=True)
class Person:
    id: str
    full_name: str
    document_number: str
    active: bool = True


@dataclass
class AttendanceRecord:
    person_id: str
    month: str
    days: Dict[str, str] = field(default_factory=dict)
    notes: Dict[str, str] = field(default_factory=dict)


@dataclass
class MonthSnapshot:
    people: List[Person]
    records: List[AttendanceRecord]


class AttendanceStore(Protocol):
    def load_month(self, month: str) -> MonthSnapshot:
        raise NotImplementedError

    def write_day_status(
        self,
        person_id: str,
        iso_date: str,
        month: str,
        status: Optional[DayStatus],
    ) -> None:
        """Upsert d'un jour ; `status=None` efface le jour."""
        raise NotImplementedError

    def write_note(self, person_id: str, iso_date: str, month: str, text: Optional[str]) -> None:
        raise NotImplementedError

    def create_person(self, full_name: str, document_number: str, created_by: str = "") -> Person:
        raise NotImplementedError

    def delete_person(self, person_id: str) -> None:
        """Supprime la personne et, en cascade, ses présences et notes."""
        raise NotImplementedError

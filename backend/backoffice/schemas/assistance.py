"""
Schémas Pydantic pour la grille d'assistance mensuelle.

Les exceptions de week-end appartiennent à la session du client : chaque
requête renvoie la liste `unlocked` des dates déverrouillées.
"""

from datetime import date
from typing import Dict, List, Optional

from pydantic import BaseModel, field_validator

from backoffice.grid.calendar_meta import parse_month
from backoffice.grid.status import parse_status


def _check_month(v: str) -> str:
    parse_month(v)
    return v.strip()


def _check_iso_date(v: str) -> str:
    try:
        return date.fromisoformat(v.strip()).isoformat()
    except ValueError:
        raise ValueError(f"Date invalide : '{v}' (format attendu YYYY-MM-DD).")


def check_iso_dates(values: List[str]) -> List[str]:
    return [_check_iso_date(v) for v in values]


class CalendarDayResponse(BaseModel):
    day: int
    iso_date: str
    weekday_index: int
    letter: str
    is_weekend: bool

    model_config = {"from_attributes": True}


class TotalsResponse(BaseModel):
    """Totaux recalculés : asistencia est un ratio dans [0, 1]."""
    asistencia: float
    ausencia: int
    tardanza: int
    justificacion: int
    laborables: int

    model_config = {"from_attributes": True}


class AssistantResponse(BaseModel):
    id: str
    full_name: str
    document_number: str
    active: bool = True

    model_config = {"from_attributes": True}


class AssistantRow(BaseModel):
    """
    Une ligne de la grille. `days` reprend le stockage brut (il peut garder un
    statut sur un week-end reverrouillé) ;
    `display` donne la valeur à afficher, N sur chaque week-end verrouillé.
    """
    assistant: AssistantResponse
    days: Dict[str, str]
    display: Dict[str, str]
    notes: Dict[str, str]
    totals: TotalsResponse


class MonthViewResponse(BaseModel):
    month: str
    unlocked: List[str]
    calendar_days: List[CalendarDayResponse]
    rows: List[AssistantRow]


class GridRequest(BaseModel):
    """Champs communs à toutes les mutations de cellule."""
    assistant_id: str
    date: str
    month: str
    unlocked: List[str] = []

    @field_validator("assistant_id")
    @classmethod
    def assistant_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("L'identifiant de l'assistant est obligatoire.")
        return v.strip()

    @field_validator("month")
    @classmethod
    def valid_month(cls, v: str) -> str:
        return _check_month(v)

    @field_validator("date")
    @classmethod
    def valid_date(cls, v: str) -> str:
        return _check_iso_date(v)

    @field_validator("unlocked")
    @classmethod
    def valid_unlocked(cls, v: List[str]) -> List[str]:
        return check_iso_dates(v)


class CellToggleRequest(GridRequest):
    """Clic sur une cellule (cycle P → A → T → J)."""


class CellSetRequest(GridRequest):
    """Affectation directe d'un statut ; null efface le jour."""
    status: Optional[str] = None

    @field_validator("status")
    @classmethod
    def valid_status(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return parse_status(v).value


class CellResponse(BaseModel):
    assistant_id: str
    date: str
    status: Optional[str]           # N si la cellule est verrouillée
    locked: bool
    persisted: bool                 # False si l'écriture a échoué (vue optimiste)
    totals: TotalsResponse


class WeekendToggleRequest(BaseModel):
    month: str
    date: str
    unlocked: List[str] = []

    @field_validator("month")
    @classmethod
    def valid_month(cls, v: str) -> str:
        return _check_month(v)

    @field_validator("date")
    @classmethod
    def valid_date(cls, v: str) -> str:
        return _check_iso_date(v)

    @field_validator("unlocked")
    @classmethod
    def valid_unlocked(cls, v: List[str]) -> List[str]:
        return check_iso_dates(v)


class WeekendToggleResponse(BaseModel):
    date: str
    unlocked_now: bool
    unlocked: List[str]
    totals: Dict[str, TotalsResponse]   # assistant_id → totaux recalculés


class NoteRequest(GridRequest):
    text: Optional[str] = None


class NoteResponse(BaseModel):
    assistant_id: str
    date: str
    text: Optional[str]             # None : note supprimée
    persisted: bool

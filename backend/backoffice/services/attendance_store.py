"""
Magasin des documents d'assistance sur SQLAlchemy.

Implémente le contrat AttendanceStore (grid/store.py) :
- un document `assistance` par (assistant, mois), créé à la première écriture
- écritures unitaires (un jour, une note) fusionnées dans le document
- instantané `totals` recalculé après chaque écriture de statut
- suppression d'un assistant en cascade sur ses documents (statuts + notes)

Les erreurs SQLAlchemy sont converties en AttendanceStoreError après rollback.
"""

import logging
import re
from contextlib import contextmanager
from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from backoffice.grid.calendar_meta import ensure_date_in_month, month_meta, parse_month
from backoffice.grid.notes import normalize_note
from backoffice.grid.status import DayStatus, parse_status
from backoffice.grid.store import AttendanceRecord, AttendanceStoreError, MonthSnapshot, Person
from backoffice.grid.totals import compute_totals
from backoffice.models.assistance import AssistanceDoc
from backoffice.models.assistant import Assistant

logger = logging.getLogger(__name__)

_FORBIDDEN_ID_CHARS = re.compile(r"[/#?\[\]]")


def sanitize_doc_id(value) -> str:
    """Identifiant utilisable comme clé de document (caractères réservés → '_')."""
    return _FORBIDDEN_ID_CHARS.sub("_", str(value).strip())


def assistance_doc_id(assistant_id: str, month: str) -> str:
    return f"{assistant_id}_{month}"


def _to_person(assistant: Assistant) -> Person:
    return Person(
        id=assistant.id,
        full_name=assistant.full_name,
        document_number=assistant.document_number,
        active=bool(assistant.active),
    )


class SqlAttendanceStore:
    def __init__(self, db: Session):
        self._db = db

    @contextmanager
    def _store_errors(self, action: str):
        try:
            yield
        except SQLAlchemyError as exc:
            self._db.rollback()
            logger.error("Erreur magasin pendant %s : %s", action, exc)
            raise AttendanceStoreError(f"Échec de {action} : {exc}") from exc

    # ------------------------------------------------------------------
    # Lecture
    # ------------------------------------------------------------------

    def load_month(self, month: str) -> MonthSnapshot:
        """Assistants actifs (triés par nom) et documents du mois."""
        parse_month(month)
        with self._store_errors("load_month"):
            assistants = self._db.execute(
                select(Assistant)
                .where(Assistant.active.is_(True))
                .order_by(Assistant.full_name)
            ).scalars().all()
            docs = self._db.execute(
                select(AssistanceDoc).where(AssistanceDoc.month == month)
            ).scalars().all()

        return MonthSnapshot(
            people=[_to_person(a) for a in assistants],
            records=[
                AttendanceRecord(
                    person_id=d.assistant_id,
                    month=d.month,
                    days=dict(d.days or {}),
                    notes=dict(d.notes or {}),
                )
                for d in docs
            ],
        )

    # ------------------------------------------------------------------
    # Écritures
    # ------------------------------------------------------------------

    def write_day_status(
        self,
        person_id: str,
        iso_date: str,
        month: str,
        status: Optional[DayStatus],
    ) -> None:
        """Fusionne un jour dans le document du mois (None efface le jour)."""
        ensure_date_in_month(iso_date, month)
        if status is not None:
            status = parse_status(status)

        with self._store_errors("write_day_status"):
            doc = self._get_doc(person_id, month, create=status is not None)
            if doc is None:
                return

            days = dict(doc.days or {})
            if status is None:
                days.pop(iso_date, None)
            else:
                days[iso_date] = status.value
            # Réaffectation : la colonne JSON n'est pas suivie en mutation
            doc.days = days
            doc.totals = compute_totals(days, month_meta(month)).as_dict()
            self._db.commit()

        logger.info(
            "Statut %s → %s pour %s",
            iso_date, status.value if status else "(effacé)", person_id,
        )

    def write_note(self, person_id: str, iso_date: str, month: str, text: Optional[str]) -> None:
        """Enregistre la note d'un jour, ou la supprime si le texte est vide."""
        ensure_date_in_month(iso_date, month)
        cleaned = normalize_note(text)

        with self._store_errors("write_note"):
            doc = self._get_doc(person_id, month, create=cleaned is not None)
            if doc is None:
                return

            notes = dict(doc.notes or {})
            if cleaned is None:
                notes.pop(iso_date, None)
            else:
                notes[iso_date] = cleaned
            doc.notes = notes
            self._db.commit()

        logger.info("Note %s %s pour %s", iso_date, "enregistrée" if cleaned else "supprimée", person_id)

    def create_person(self, full_name: str, document_number: str, created_by: str = "") -> Person:
        """
        Crée un assistant actif. L'identifiant est le numéro de document nettoyé.
        Lève ValueError si un champ est vide ou si l'assistant existe déjà.
        """
        full_name = str(full_name or "").strip()
        document_number = str(document_number or "").strip()
        if not full_name or not document_number:
            raise ValueError("Le nom complet et le numéro de document sont obligatoires.")

        assistant_id = sanitize_doc_id(document_number)
        with self._store_errors("create_person"):
            if self._db.get(Assistant, assistant_id) is not None:
                raise ValueError(f"L'assistant {assistant_id} existe déjà.")

            assistant = Assistant(
                id=assistant_id,
                full_name=full_name,
                document_number=document_number,
                active=True,
                created_by=created_by or None,
            )
            self._db.add(assistant)
            try:
                self._db.commit()
            except IntegrityError:
                self._db.rollback()
                raise ValueError(f"L'assistant {assistant_id} existe déjà.")

        logger.info("Assistant créé : %s (%s) par %s", full_name, assistant_id, created_by or "inconnu")
        return Person(id=assistant_id, full_name=full_name, document_number=document_number, active=True)

    def deactivate_person(self, person_id: str) -> Person:
        """Désactivation douce : l'assistant disparaît des grilles, ses documents restent."""
        with self._store_errors("deactivate_person"):
            assistant = self._require_assistant(person_id)
            assistant.active = False
            self._db.commit()
            person = _to_person(assistant)

        logger.info("Assistant désactivé : %s", person_id)
        return person

    def delete_person(self, person_id: str) -> None:
        """Supprime l'assistant et tous ses documents d'assistance (statuts et notes)."""
        with self._store_errors("delete_person"):
            assistant = self._require_assistant(person_id)

            removed = self._db.execute(
                delete(AssistanceDoc).where(AssistanceDoc.assistant_id == person_id)
            ).rowcount
            self._db.delete(assistant)
            self._db.commit()

        logger.info("Assistant supprimé : %s (%d documents mensuels)", person_id, removed or 0)

    # ------------------------------------------------------------------
    # Interne
    # ------------------------------------------------------------------

    def _get_doc(self, person_id: str, month: str, create: bool) -> Optional[AssistanceDoc]:
        self._require_assistant(person_id)

        doc_id = assistance_doc_id(person_id, month)
        doc = self._db.get(AssistanceDoc, doc_id)
        if doc is None and create:
            doc = AssistanceDoc(id=doc_id, assistant_id=person_id, month=month, days={}, notes={})
            self._db.add(doc)
        return doc

    def _require_assistant(self, person_id: str) -> Assistant:
        assistant = self._db.get(Assistant, person_id)
        if assistant is None:
            raise ValueError(f"Assistant {person_id} introuvable.")
        return assistant

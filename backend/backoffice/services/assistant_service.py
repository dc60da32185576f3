"""
Service métier pour les assistants : création, désactivation, suppression.
La suppression est en cascade sur les documents d'assistance (statuts + notes).
"""

from sqlalchemy.orm import Session

from backoffice.schemas.assistance import AssistantResponse
from backoffice.schemas.assistant import AssistantCreate
from backoffice.services.attendance_store import SqlAttendanceStore


def create_assistant(db: Session, data: AssistantCreate, created_by: str = "") -> AssistantResponse:
    """
    Crée un assistant actif.
    Lève ValueError si l'identifiant (numéro de document nettoyé) existe déjà.
    """
    person = SqlAttendanceStore(db).create_person(data.full_name, data.document_number, created_by)
    return AssistantResponse.model_validate(person)


def deactivate_assistant(db: Session, assistant_id: str) -> AssistantResponse:
    """Lève ValueError si l'assistant est introuvable."""
    person = SqlAttendanceStore(db).deactivate_person(assistant_id)
    return AssistantResponse.model_validate(person)


def delete_assistant(db: Session, assistant_id: str) -> None:
    """Lève ValueError si l'assistant est introuvable."""
    SqlAttendanceStore(db).delete_person(assistant_id)

"""
Router pour les assistants.
POST   /api/v1/assistants                 : création
POST   /api/v1/assistants/{id}/deactivate : désactivation
DELETE /api/v1/assistants/{id}            : suppression (cascade présences + notes)
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from backoffice.database import get_db
from backoffice.schemas.assistance import AssistantResponse
from backoffice.schemas.assistant import AssistantCreate
from backoffice.security import Actor, require_admin
from backoffice.services import assistant_service

router = APIRouter(prefix="/api/v1/assistants", tags=["Asistentes"])


@router.post("", response_model=AssistantResponse, status_code=201, summary="Créer un assistant")
def create_assistant(
    data: AssistantCreate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_admin),
):
    """Crée un assistant. Retourne 409 si le numéro de document est déjà utilisé."""
    try:
        return assistant_service.create_assistant(db, data, created_by=actor.email)
    except ValueError as e:
        msg = str(e)
        if "existe déjà" in msg:
            raise HTTPException(status_code=409, detail=msg)
        raise HTTPException(status_code=400, detail=msg)


@router.post("/{assistant_id}/deactivate", response_model=AssistantResponse,
             summary="Désactiver un assistant")
def deactivate_assistant(
    assistant_id: str,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_admin),
):
    """L'assistant n'apparaît plus dans les grilles ; son historique est conservé."""
    try:
        return assistant_service.deactivate_assistant(db, assistant_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/{assistant_id}", status_code=204, summary="Supprimer un assistant")
def delete_assistant(
    assistant_id: str,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_admin),
):
    """Supprime définitivement l'assistant, ses présences et ses notes."""
    try:
        assistant_service.delete_assistant(db, assistant_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))

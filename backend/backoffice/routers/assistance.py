"""
Router pour la grille d'assistance mensuelle.
GET  /api/v1/assistance                : vue du mois
POST /api/v1/assistance/cells/toggle   : clic sur une cellule (cycle)
PUT  /api/v1/assistance/cells          : affectation directe / effacement
POST /api/v1/assistance/weekend/toggle : exception de week-end
PUT  /api/v1/assistance/notes          : note d'une cellule
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from backoffice.database import get_db
from backoffice.schemas.assistance import (
    CellResponse,
    CellSetRequest,
    CellToggleRequest,
    MonthViewResponse,
    NoteRequest,
    NoteResponse,
    WeekendToggleRequest,
    WeekendToggleResponse,
    check_iso_dates,
)
from backoffice.security import Actor, get_actor, require_admin
from backoffice.services import assistance_service

router = APIRouter(prefix="/api/v1/assistance", tags=["Asistencias"])


def _http_error(e: ValueError) -> HTTPException:
    msg = str(e)
    if "introuvable" in msg:
        return HTTPException(status_code=404, detail=msg)
    return HTTPException(status_code=400, detail=msg)


@router.get("", response_model=MonthViewResponse, summary="Grille d'assistance du mois")
def get_month_view(
    month: Optional[str] = Query(None, description="Mois YYYY-MM (mois courant par défaut)"),
    unlocked: List[str] = Query([], description="Dates de week-end déverrouillées (YYYY-MM-DD)"),
    q: Optional[str] = Query(None, description="Filtre par nom ou numéro de document"),
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_actor),
):
    """
    Retourne le calendrier du mois, les assistants actifs, leurs statuts,
    leurs notes et les totaux recalculés avec les exceptions `unlocked`.

    Retourne 400 si le mois est mal formé ou si une date `unlocked` n'est pas
    un week-end du mois.
    """
    try:
        return assistance_service.get_month_view(db, month, check_iso_dates(unlocked), q)
    except ValueError as e:
        raise _http_error(e)


@router.post("/cells/toggle", response_model=CellResponse, summary="Cycler le statut d'une cellule")
def toggle_cell(
    data: CellToggleRequest,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_admin),
):
    """
    Passe la cellule au statut suivant (P → A → T → J → P).

    Une cellule de week-end non déverrouillée n'est pas modifiée :
    la réponse porte `locked: true` et le statut N.
    Retourne 404 si l'assistant est introuvable, 400 si la date est hors du mois.
    """
    try:
        return assistance_service.toggle_cell(db, data)
    except ValueError as e:
        raise _http_error(e)


@router.put("/cells", response_model=CellResponse, summary="Affecter ou effacer le statut d'une cellule")
def set_cell(
    data: CellSetRequest,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_admin),
):
    """
    Affecte `status` (P, A, T, J) à la cellule, ou l'efface si `status` est null.
    Retourne 400 si la cellule est un week-end verrouillé.
    """
    try:
        return assistance_service.set_cell(db, data)
    except ValueError as e:
        raise _http_error(e)


@router.post("/weekend/toggle", response_model=WeekendToggleResponse,
             summary="Déverrouiller / verrouiller une colonne de week-end")
def toggle_weekend(
    data: WeekendToggleRequest,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_actor),
):
    """
    Bascule l'exception de la date et renvoie la nouvelle liste `unlocked`
    ainsi que les totaux recalculés de tous les assistants.
    Rien n'est persisté : le client conserve la liste pour ses prochains appels.
    """
    try:
        return assistance_service.toggle_weekend(db, data)
    except ValueError as e:
        raise _http_error(e)


@router.put("/notes", response_model=NoteResponse, summary="Enregistrer la note d'une cellule")
def save_note(
    data: NoteRequest,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_admin),
):
    """Enregistre la note ; un texte vide ou composé d'espaces la supprime."""
    try:
        return assistance_service.save_note(db, data)
    except ValueError as e:
        raise _http_error(e)

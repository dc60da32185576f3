"""
Service métier de la grille d'assistance.

Chaque appel HTTP ouvre une session de grille (AttendanceGrid) sur le mois
demandé, avec les exceptions de week-end transmises par le client, applique
l'opération puis renvoie la vue recalculée.

Lève ValueError pour toute entrée invalide (mois, date hors mois, assistant
introuvable, cellule verrouillée).
"""

from typing import Iterable, Optional

from sqlalchemy.orm import Session

from backoffice.grid.calendar_meta import current_month
from backoffice.grid.exceptions import WeekendExceptions
from backoffice.grid.session import AttendanceGrid, MonthView
from backoffice.grid.status import CellLock, parse_status
from backoffice.grid.totals import Totals
from backoffice.schemas.assistance import (
    AssistantResponse,
    AssistantRow,
    CalendarDayResponse,
    CellResponse,
    CellSetRequest,
    CellToggleRequest,
    MonthViewResponse,
    NoteRequest,
    NoteResponse,
    TotalsResponse,
    WeekendToggleRequest,
    WeekendToggleResponse,
)
from backoffice.services.attendance_store import SqlAttendanceStore


def open_grid(db: Session, month: str, unlocked: Iterable[str] = ()) -> AttendanceGrid:
    """Session de grille adossée au magasin SQL."""
    return AttendanceGrid(SqlAttendanceStore(db), month, WeekendExceptions(unlocked))


def get_month_view(
    db: Session,
    month: Optional[str] = None,
    unlocked: Iterable[str] = (),
    query: Optional[str] = None,
) -> MonthViewResponse:
    """Vue du mois (mois courant par défaut), filtrée par nom/document si `query`."""
    grid = open_grid(db, month or current_month(), unlocked)
    return _to_view_response(grid.get_month_view(query))


def toggle_cell(db: Session, data: CellToggleRequest) -> CellResponse:
    """Clic sur une cellule : passe au statut suivant et l'enregistre."""
    grid = open_grid(db, data.month, data.unlocked)
    new_status = grid.handle_cell_interaction(data.assistant_id, data.date)

    return CellResponse(
        assistant_id=data.assistant_id,
        date=data.date,
        status=new_status.value,
        locked=new_status is CellLock.NOT_APPLICABLE,
        persisted=not grid.failed_writes,
        totals=_totals(grid.totals_for(data.assistant_id)),
    )


def set_cell(db: Session, data: CellSetRequest) -> CellResponse:
    """Affecte (ou efface) directement le statut d'une cellule éditable."""
    grid = open_grid(db, data.month, data.unlocked)
    status = parse_status(data.status) if data.status is not None else None
    grid.set_day_status(data.assistant_id, data.date, status)

    return CellResponse(
        assistant_id=data.assistant_id,
        date=data.date,
        status=status.value if status else None,
        locked=False,
        persisted=not grid.failed_writes,
        totals=_totals(grid.totals_for(data.assistant_id)),
    )


def toggle_weekend(db: Session, data: WeekendToggleRequest) -> WeekendToggleResponse:
    """Bascule une exception de week-end et renvoie les totaux recalculés de tous les assistants."""
    grid = open_grid(db, data.month, data.unlocked)
    unlocked_now = grid.toggle_weekend_exception(data.date)
    view = grid.get_month_view()

    return WeekendToggleResponse(
        date=data.date,
        unlocked_now=unlocked_now,
        unlocked=view.unlocked,
        totals={pid: _totals(t) for pid, t in view.totals.items()},
    )


def save_note(db: Session, data: NoteRequest) -> NoteResponse:
    """Enregistre la note d'une cellule ; un texte vide la supprime."""
    grid = open_grid(db, data.month, data.unlocked)
    stored = grid.set_note(data.assistant_id, data.date, data.text)

    return NoteResponse(
        assistant_id=data.assistant_id,
        date=data.date,
        text=stored,
        persisted=not grid.failed_writes,
    )


def _totals(totals: Totals) -> TotalsResponse:
    return TotalsResponse(**totals.as_dict())


def _to_view_response(view: MonthView) -> MonthViewResponse:
    return MonthViewResponse(
        month=view.month,
        unlocked=view.unlocked,
        calendar_days=[CalendarDayResponse.model_validate(d) for d in view.calendar_days],
        rows=[
            AssistantRow(
                assistant=AssistantResponse.model_validate(p),
                days=view.day_maps[p.id],
                display=view.display_maps[p.id],
                notes=view.notes[p.id],
                totals=_totals(view.totals[p.id]),
            )
            for p in view.people
        ],
    )

"""
Calcul des totaux mensuels d'une personne.

Fonction pure : (jours, calendrier, exceptions) → totaux. Elle est rappelée à
chaque chargement, écriture et bascule d'exception ; aucun total stocké n'est
considéré comme source de vérité.
"""

from dataclasses import asdict, dataclass
from typing import Container, Iterable, Mapping, Optional

from backoffice.grid.calendar_meta import CalendarDay
from backoffice.grid.status import DayStatus, coerce_stored


@dataclass(frozen=True)
class Totals:
    asistencia: float = 0.0   # ratio présents / laborables, dans [0, 1]
    ausencia: int = 0
    tardanza: int = 0
    justificacion: int = 0
    laborables: int = 0

    def as_dict(self) -> dict:
        return asdict(self)


def compute_totals(
    days: Mapping[str, object],
    calendar_days: Iterable[CalendarDay],
    unlocked: Optional[Container[str]] = None,
) -> Totals:
    """
    Parcourt les jours du mois ; un week-end sans exception est ignoré.
    Un jour compté sans statut augmente `laborables` uniquement.
    """
    unlocked = unlocked if unlocked is not None else ()
    present = absent = late = justified = laborables = 0

    for cal_day in calendar_days:
        if cal_day.is_weekend and cal_day.iso_date not in unlocked:
            continue
        laborables += 1
        status = coerce_stored(days.get(cal_day.iso_date))
        if status is DayStatus.PRESENT:
            present += 1
        elif status is DayStatus.ABSENT:
            absent += 1
        elif status is DayStatus.LATE:
            late += 1
        elif status is DayStatus.JUSTIFIED:
            justified += 1

    return Totals(
        asistencia=present / laborables if laborables else 0.0,
        ausencia=absent,
        tardanza=late,
        justificacion=justified,
        laborables=laborables,
    )

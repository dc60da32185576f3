"""
Modèle d'état d'une cellule de la grille.

Deux familles distinctes :
- DayStatus : états persistés (P, A, T, J). « Non renseigné » = None.
- CellLock  : état d'affichage dérivé (N = non applicable), jamais persisté.
"""

from enum import Enum
from typing import Optional, Union


class DayStatus(str, Enum):
    PRESENT = "P"
    ABSENT = "A"
    LATE = "T"
    JUSTIFIED = "J"


class CellLock(str, Enum):
    """Cellule de week-end verrouillée. Valeur d'affichage uniquement."""
    NOT_APPLICABLE = "N"


CellValue = Union[DayStatus, CellLock]

STATUS_CYCLE = [DayStatus.PRESENT, DayStatus.ABSENT, DayStatus.LATE, DayStatus.JUSTIFIED]


def next_status(
    current: Optional[DayStatus],
    is_weekend: bool,
    exception_active: bool,
) -> CellValue:
    """
    Statut suivant après un clic sur une cellule.

    Week-end sans exception → NOT_APPLICABLE (aucune écriture à faire).
    Sinon P → A → T → J → P ; non renseigné ou inconnu → P.
    """
    if is_weekend and not exception_active:
        return CellLock.NOT_APPLICABLE
    if current not in STATUS_CYCLE:
        return DayStatus.PRESENT
    i = STATUS_CYCLE.index(current)
    return STATUS_CYCLE[(i + 1) % len(STATUS_CYCLE)]


def parse_status(value) -> DayStatus:
    """Convertit une valeur reçue (ex. 'P') en DayStatus. Lève ValueError si inconnue."""
    if isinstance(value, DayStatus):
        return value
    if isinstance(value, CellLock):
        raise ValueError("Une cellule verrouillée (N) ne peut pas être enregistrée.")
    try:
        return DayStatus(str(value).strip().upper())
    except ValueError:
        accepted = ", ".join(s.value for s in DayStatus)
        raise ValueError(f"Statut invalide : '{value}'. Valeurs acceptées : {accepted}")


def coerce_stored(value) -> Optional[DayStatus]:
    """Lecture tolérante d'un statut stocké : valeur inconnue → None."""
    try:
        return DayStatus(value)
    except ValueError:
        return None

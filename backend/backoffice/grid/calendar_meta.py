"""
Métadonnées calendaires d'un mois (grille d'assistance).

Numérotation des jours de la semaine : 0 = dimanche … 6 = samedi.
Les deux extrémités (0 et 6) forment le week-end.
"""

import calendar
import re
from dataclasses import dataclass
from datetime import date
from typing import List, Optional, Tuple

MONTH_RE = re.compile(r"^(\d{4})-(\d{2})$")

# Lettres affichées sous le numéro du jour (D = domingo … S = sábado)
WEEKDAY_LETTERS = ("D", "L", "M", "M", "J", "V", "S")
WEEKEND_INDEXES = (0, 6)


@dataclass(frozen=True)
class CalendarDay:
    """Une colonne de la grille mensuelle."""
    day: int
    iso_date: str
    weekday_index: int
    letter: str
    is_weekend: bool


def parse_month(month: str) -> Tuple[int, int]:
    """
    Valide une clé de mois `YYYY-MM` et retourne (année, mois).
    Lève ValueError si le format ou le mois est invalide.
    """
    match = MONTH_RE.match(str(month or "").strip())
    if match is None:
        raise ValueError(f"Mois invalide : '{month}' (format attendu YYYY-MM).")
    year, month_num = int(match.group(1)), int(match.group(2))
    if not 1 <= month_num <= 12 or year < 1:
        raise ValueError(f"Mois invalide : '{month}' (format attendu YYYY-MM).")
    return year, month_num


def current_month(today: Optional[date] = None) -> str:
    """Clé `YYYY-MM` du mois courant."""
    today = today or date.today()
    return f"{today.year:04d}-{today.month:02d}"


def month_meta(month: str) -> List[CalendarDay]:
    """Retourne les jours 1..N du mois, dans l'ordre."""
    year, month_num = parse_month(month)
    total = calendar.monthrange(year, month_num)[1]

    days = []
    for day in range(1, total + 1):
        d = date(year, month_num, day)
        # date.weekday() : lundi = 0 ; on ramène dimanche à 0
        weekday_index = (d.weekday() + 1) % 7
        days.append(
            CalendarDay(
                day=day,
                iso_date=d.isoformat(),
                weekday_index=weekday_index,
                letter=WEEKDAY_LETTERS[weekday_index],
                is_weekend=weekday_index in WEEKEND_INDEXES,
            )
        )
    return days


def ensure_date_in_month(iso_date: str, month: str) -> date:
    """
    Vérifie qu'une date ISO `YYYY-MM-DD` appartient au mois donné.
    Lève ValueError sinon.
    """
    year, month_num = parse_month(month)
    try:
        d = date.fromisoformat(str(iso_date).strip())
    except ValueError:
        raise ValueError(f"Date invalide : '{iso_date}' (format attendu YYYY-MM-DD).")
    if (d.year, d.month) != (year, month_num):
        raise ValueError(f"La date {iso_date} n'appartient pas au mois {month}.")
    return d

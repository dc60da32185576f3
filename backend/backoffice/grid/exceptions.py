"""
Registre des exceptions de week-end.

Une exception déverrouille une colonne samedi/dimanche : la cellule devient
éditable et le jour compte dans les jours ouvrables. L'état appartient à la
session de grille et n'est pas persisté.
"""

from typing import Dict, FrozenSet, Iterable, Optional


class WeekendExceptions:
    def __init__(self, unlocked: Optional[Iterable[str]] = None):
        self._flags: Dict[str, bool] = {}
        for iso in unlocked or ():
            self._flags[str(iso)] = True

    def is_unlocked(self, iso_date: str) -> bool:
        return self._flags.get(iso_date, False)

    def toggle(self, iso_date: str) -> bool:
        """Inverse le drapeau de cette date et retourne la nouvelle valeur."""
        self._flags[iso_date] = not self._flags.get(iso_date, False)
        return self._flags[iso_date]

    def unlocked(self) -> FrozenSet[str]:
        return frozenset(iso for iso, on in self._flags.items() if on)

    def __contains__(self, iso_date: str) -> bool:
        return self.is_unlocked(iso_date)

    def __repr__(self) -> str:
        return f"WeekendExceptions({sorted(self.unlocked())!r})"

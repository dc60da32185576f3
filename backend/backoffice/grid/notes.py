"""
Registre des notes libres par (personne, date).

Indépendant des statuts : une note peut exister sur un jour sans statut.
Un texte vide ou composé d'espaces équivaut à une suppression ; la clé
absente est la seule représentation de « pas de note ».
"""

from typing import Dict, Mapping, Optional


def normalize_note(text: Optional[str]) -> Optional[str]:
    """Texte nettoyé, ou None si la note doit être supprimée."""
    if text is None:
        return None
    text = str(text).strip()
    return text or None


class NoteLedger:
    def __init__(self, notes: Optional[Mapping[str, Mapping[str, str]]] = None):
        self._notes: Dict[str, Dict[str, str]] = {}
        for person_id, per_day in (notes or {}).items():
            for iso_date, text in per_day.items():
                self.set(person_id, iso_date, text)

    def get(self, person_id: str, iso_date: str) -> Optional[str]:
        return self._notes.get(person_id, {}).get(iso_date)

    def set(self, person_id: str, iso_date: str, text: Optional[str]) -> Optional[str]:
        """Enregistre la note (ou la supprime si vide). Retourne la valeur stockée."""
        cleaned = normalize_note(text)
        if cleaned is None:
            self.clear(person_id, iso_date)
            return None
        self._notes.setdefault(person_id, {})[iso_date] = cleaned
        return cleaned

    def clear(self, person_id: str, iso_date: str) -> None:
        per_day = self._notes.get(person_id)
        if not per_day:
            return
        per_day.pop(iso_date, None)
        if not per_day:
            del self._notes[person_id]

    def for_person(self, person_id: str) -> Dict[str, str]:
        return dict(self._notes.get(person_id, {}))

    def drop_person(self, person_id: str) -> None:
        self._notes.pop(person_id, None)

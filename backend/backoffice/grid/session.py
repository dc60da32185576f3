"""
Session de grille d'assistance mensuelle.

Une instance = un opérateur regardant un mois. Toutes les mutations sont
appliquées d'abord à la vue locale (mise à jour optimiste), puis l'écriture
correspondante est confiée au `dispatch` (exécution immédiate par défaut,
ou `executor.submit` / `BackgroundTasks.add_task` pour de l'asynchrone).

Un échec d'écriture est journalisé et conservé dans `failed_writes` ; la vue
locale n'est pas annulée et rien n'est retenté. `reload()` réaligne la vue
sur le magasin.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from backoffice.grid.calendar_meta import CalendarDay, month_meta, parse_month
from backoffice.grid.exceptions import WeekendExceptions
from backoffice.grid.notes import NoteLedger
from backoffice.grid.status import CellLock, CellValue, DayStatus, coerce_stored, next_status
from backoffice.grid.store import AttendanceStore, AttendanceStoreError, Person
from backoffice.grid.totals import Totals, compute_totals

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FailedWrite:
    operation: str
    person_id: str
    iso_date: Optional[str]
    error: str


@dataclass
class MonthView:
    month: str
    calendar_days: List[CalendarDay]
    unlocked: List[str]
    people: List[Person]
    day_maps: Dict[str, Dict[str, str]]
    display_maps: Dict[str, Dict[str, str]]
    notes: Dict[str, Dict[str, str]]
    totals: Dict[str, Totals]


def _run_inline(fn, *args):
    fn(*args)


class AttendanceGrid:
    def __init__(
        self,
        store: AttendanceStore,
        month: str,
        exceptions: Optional[WeekendExceptions] = None,
        dispatch: Optional[Callable] = None,
    ):
        parse_month(month)
        self.month = month
        self.calendar_days = month_meta(month)
        self._days_by_iso = {d.iso_date: d for d in self.calendar_days}
        self.exceptions = exceptions if exceptions is not None else WeekendExceptions()
        for iso_date in sorted(self.exceptions.unlocked()):
            if not self._calendar_day(iso_date).is_weekend:
                raise ValueError(f"Le {iso_date} n'est pas un jour de week-end.")
        self.failed_writes: List[FailedWrite] = []

        self._store = store
        self._dispatch = dispatch or _run_inline
        self._people: Dict[str, Person] = {}
        self._day_maps: Dict[str, Dict[str, DayStatus]] = {}
        self._notes = NoteLedger()
        self._totals: Dict[str, Totals] = {}

        self.reload()

    # ------------------------------------------------------------------
    # Chargement
    # ------------------------------------------------------------------

    def reload(self) -> None:
        """Recharge personnes et documents du mois depuis le magasin."""
        snapshot = self._store.load_month(self.month)

        self._people = {p.id: p for p in snapshot.people}
        self._day_maps = {pid: {} for pid in self._people}
        self._notes = NoteLedger()

        for record in snapshot.records:
            if record.person_id not in self._people or record.month != self.month:
                continue
            day_map = self._day_maps[record.person_id]
            for iso_date, raw in (record.days or {}).items():
                status = coerce_stored(raw)
                # Un statut hors du mois ou inconnu n'est pas affiché
                if status is not None and iso_date in self._days_by_iso:
                    day_map[iso_date] = status
            for iso_date, text in (record.notes or {}).items():
                if iso_date in self._days_by_iso:
                    self._notes.set(record.person_id, iso_date, text)

        self._recompute_all()
        logger.debug(
            "Grille %s chargée : %d personnes, %d documents",
            self.month, len(self._people), len(snapshot.records),
        )

    # ------------------------------------------------------------------
    # Lecture
    # ------------------------------------------------------------------

    def get_month_view(self, query: Optional[str] = None) -> MonthView:
        """
        Vue complète du mois. `query` filtre par nom ou numéro de document
        (sous-chaîne, insensible à la casse).
        """
        people = list(self._people.values())
        term = (query or "").strip().lower()
        if term:
            people = [
                p for p in people
                if term in p.full_name.lower() or term in (p.document_number or "").lower()
            ]

        return MonthView(
            month=self.month,
            calendar_days=list(self.calendar_days),
            unlocked=sorted(self.exceptions.unlocked()),
            people=people,
            day_maps={p.id: {d: s.value for d, s in self._day_maps[p.id].items()} for p in people},
            display_maps={p.id: self.display_map(p.id) for p in people},
            notes={p.id: self._notes.for_person(p.id) for p in people},
            totals={p.id: self._totals[p.id] for p in people},
        )

    def totals_for(self, person_id: str) -> Totals:
        self._require_person(person_id)
        return self._totals[person_id]

    def status_at(self, person_id: str, iso_date: str) -> Optional[DayStatus]:
        self._require_person(person_id)
        return self._day_maps[person_id].get(iso_date)

    def display_value(self, person_id: str, iso_date: str) -> Optional[CellValue]:
        """Valeur affichée : NOT_APPLICABLE pour un week-end verrouillé, quel que soit le stockage."""
        cal_day = self._calendar_day(iso_date)
        if self._is_locked(cal_day):
            return CellLock.NOT_APPLICABLE
        return self.status_at(person_id, iso_date)

    def display_map(self, person_id: str) -> Dict[str, str]:
        """Valeurs affichées de tout le mois (N sur chaque week-end verrouillé)."""
        self._require_person(person_id)
        shown = {}
        for cal_day in self.calendar_days:
            value = self.display_value(person_id, cal_day.iso_date)
            if value is not None:
                shown[cal_day.iso_date] = value.value
        return shown

    def note_at(self, person_id: str, iso_date: str) -> Optional[str]:
        return self._notes.get(person_id, iso_date)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def handle_cell_interaction(self, person_id: str, iso_date: str) -> CellValue:
        """
        Clic sur une cellule : statut suivant du cycle P → A → T → J.
        Une cellule de week-end verrouillée retourne NOT_APPLICABLE sans rien écrire.
        """
        cal_day = self._calendar_day(iso_date)
        self._require_person(person_id)

        current = self._day_maps[person_id].get(iso_date)
        new_status = next_status(
            current,
            cal_day.is_weekend,
            self.exceptions.is_unlocked(iso_date),
        )
        if new_status is CellLock.NOT_APPLICABLE:
            return new_status

        self._apply_status(person_id, iso_date, new_status)
        return new_status

    def set_day_status(self, person_id: str, iso_date: str, status: Optional[DayStatus]) -> None:
        """Fixe (ou efface avec None) le statut d'une cellule éditable."""
        cal_day = self._calendar_day(iso_date)
        self._require_person(person_id)
        if self._is_locked(cal_day):
            raise ValueError(f"La colonne du {iso_date} (week-end) est verrouillée.")
        if status is not None and not isinstance(status, DayStatus):
            raise ValueError(f"Statut non persistable : '{status}'.")
        self._apply_status(person_id, iso_date, status)

    def toggle_weekend_exception(self, iso_date: str) -> bool:
        """Déverrouille/verrouille une colonne de week-end et recalcule tous les totaux."""
        cal_day = self._calendar_day(iso_date)
        if not cal_day.is_weekend:
            raise ValueError(f"Le {iso_date} n'est pas un jour de week-end.")

        unlocked = self.exceptions.toggle(iso_date)
        self._recompute_all()
        logger.info("Exception week-end %s : %s", iso_date, "ouverte" if unlocked else "fermée")
        return unlocked

    def set_note(self, person_id: str, iso_date: str, text: Optional[str]) -> Optional[str]:
        """Enregistre ou supprime (texte vide) la note d'une cellule."""
        self._calendar_day(iso_date)
        self._require_person(person_id)

        stored = self._notes.set(person_id, iso_date, text)
        self._submit("write_note", person_id, iso_date, self._store.write_note,
                     person_id, iso_date, self.month, stored)
        return stored

    def create_person(self, full_name: str, document_number: str, created_by: str = "") -> Person:
        """Crée la personne via le magasin puis l'ajoute à la vue."""
        person = self._store.create_person(full_name, document_number, created_by)
        self._people[person.id] = person
        self._people = dict(sorted(self._people.items(), key=lambda kv: kv[1].full_name.lower()))
        self._day_maps[person.id] = {}
        self._recompute(person.id)
        return person

    def delete_person(self, person_id: str) -> None:
        """Retire la personne de la vue et demande la suppression en cascade."""
        self._require_person(person_id)

        del self._people[person_id]
        del self._day_maps[person_id]
        del self._totals[person_id]
        self._notes.drop_person(person_id)
        self._submit("delete_person", person_id, None, self._store.delete_person, person_id)

    # ------------------------------------------------------------------
    # Interne
    # ------------------------------------------------------------------

    def _apply_status(self, person_id: str, iso_date: str, status: Optional[DayStatus]) -> None:
        day_map = self._day_maps[person_id]
        if status is None:
            day_map.pop(iso_date, None)
        else:
            day_map[iso_date] = status
        self._recompute(person_id)
        self._submit("write_day_status", person_id, iso_date, self._store.write_day_status,
                     person_id, iso_date, self.month, status)

    def _submit(self, operation: str, person_id: str, iso_date: Optional[str], write, *args) -> None:
        self._dispatch(self._guarded_write, operation, person_id, iso_date, write, *args)

    def _guarded_write(self, operation: str, person_id: str, iso_date: Optional[str], write, *args) -> None:
        try:
            write(*args)
        except (AttendanceStoreError, ValueError) as exc:
            # ValueError : personne supprimée par une autre session entre-temps.
            # Pas de rollback : la vue locale peut diverger jusqu'au prochain reload()
            logger.error(
                "Écriture %s échouée (personne=%s, date=%s) : %s",
                operation, person_id, iso_date or "-", exc,
            )
            self.failed_writes.append(FailedWrite(operation, person_id, iso_date, str(exc)))

    def _recompute(self, person_id: str) -> None:
        self._totals[person_id] = compute_totals(
            self._day_maps[person_id], self.calendar_days, self.exceptions
        )

    def _recompute_all(self) -> None:
        self._totals = {}
        for person_id in self._people:
            self._recompute(person_id)

    def _is_locked(self, cal_day: CalendarDay) -> bool:
        return cal_day.is_weekend and not self.exceptions.is_unlocked(cal_day.iso_date)

    def _calendar_day(self, iso_date: str) -> CalendarDay:
        cal_day = self._days_by_iso.get(iso_date)
        if cal_day is None:
            raise ValueError(f"La date {iso_date} n'appartient pas au mois {self.month}.")
        return cal_day

    def _require_person(self, person_id: str) -> None:
        if person_id not in self._people:
            raise ValueError(f"Assistant {person_id} introuvable.")

"""
Tests unitaires du modèle d'état des cellules.
Couverture : cycle P → A → T → J, verrou de week-end, parsing.
"""

import pytest

from backoffice.grid.status import (
    STATUS_CYCLE,
    CellLock,
    DayStatus,
    coerce_stored,
    next_status,
    parse_status,
)


def test_non_renseigne_donne_present():
    assert next_status(None, is_weekend=False, exception_active=False) is DayStatus.PRESENT


def test_cycle_complet():
    assert next_status(DayStatus.PRESENT, False, False) is DayStatus.ABSENT
    assert next_status(DayStatus.ABSENT, False, False) is DayStatus.LATE
    assert next_status(DayStatus.LATE, False, False) is DayStatus.JUSTIFIED
    assert next_status(DayStatus.JUSTIFIED, False, False) is DayStatus.PRESENT


def test_quatre_clics_depuis_present_reviennent_a_present():
    status = next_status(None, False, False)
    for _ in range(4):
        status = next_status(status, False, False)
    assert status is DayStatus.PRESENT


@pytest.mark.parametrize("current", [None, *STATUS_CYCLE])
def test_week_end_verrouille_toujours_non_applicable(current):
    assert next_status(current, is_weekend=True, exception_active=False) is CellLock.NOT_APPLICABLE


def test_week_end_deverrouille_suit_le_cycle():
    assert next_status(None, is_weekend=True, exception_active=True) is DayStatus.PRESENT
    assert next_status(DayStatus.LATE, is_weekend=True, exception_active=True) is DayStatus.JUSTIFIED


def test_valeur_inconnue_repart_a_present():
    assert next_status("X", False, False) is DayStatus.PRESENT


def test_non_applicable_ne_fait_pas_partie_des_statuts_persistes():
    assert "N" not in {s.value for s in DayStatus}
    assert not isinstance(CellLock.NOT_APPLICABLE, DayStatus)


# ============================================================
# parse_status / coerce_stored
# ============================================================

def test_parse_status_accepte_minuscules():
    assert parse_status(" t ") is DayStatus.LATE


def test_parse_status_inconnu():
    with pytest.raises(ValueError, match="Statut invalide"):
        parse_status("Z")


def test_parse_status_refuse_le_verrou():
    with pytest.raises(ValueError, match="verrouillée"):
        parse_status(CellLock.NOT_APPLICABLE)
    with pytest.raises(ValueError):
        parse_status("N")


def test_coerce_stored_tolerant():
    assert coerce_stored("J") is DayStatus.JUSTIFIED
    assert coerce_stored("N") is None
    assert coerce_stored(None) is None

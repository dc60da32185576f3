"""
Tests d'intégration API pour la grille d'assistance.
Testent GET  /api/v1/assistance
      POST /api/v1/assistance/cells/toggle
      PUT  /api/v1/assistance/cells
      POST /api/v1/assistance/weekend/toggle
      PUT  /api/v1/assistance/notes
"""

from unittest.mock import patch

from backoffice.schemas.assistance import (
    CellResponse,
    MonthViewResponse,
    NoteResponse,
    TotalsResponse,
    WeekendToggleResponse,
)


# --- Helpers ---

def make_totals(**kwargs) -> TotalsResponse:
    return TotalsResponse(
        asistencia=kwargs.get("asistencia", 0.0),
        ausencia=kwargs.get("ausencia", 0),
        tardanza=kwargs.get("tardanza", 0),
        justificacion=kwargs.get("justificacion", 0),
        laborables=kwargs.get("laborables", 22),
    )


def make_cell_response(**kwargs) -> CellResponse:
    return CellResponse(
        assistant_id=kwargs.get("assistant_id", "44556677"),
        date=kwargs.get("date", "2025-04-07"),
        status=kwargs.get("status", "P"),
        locked=kwargs.get("locked", False),
        persisted=kwargs.get("persisted", True),
        totals=kwargs.get("totals", make_totals(asistencia=1 / 22)),
    )


def cell_payload(**kwargs) -> dict:
    return {
        "assistant_id": kwargs.get("assistant_id", "44556677"),
        "date": kwargs.get("date", "2025-04-07"),
        "month": kwargs.get("month", "2025-04"),
        "unlocked": kwargs.get("unlocked", []),
    }


# ============================================================
# GET /api/v1/assistance
# ============================================================

def test_vue_du_mois(client, admin_headers):
    with patch("backoffice.routers.assistance.assistance_service.get_month_view") as mock:
        mock.return_value = MonthViewResponse(month="2025-04", unlocked=[], calendar_days=[], rows=[])

        response = client.get(
            "/api/v1/assistance",
            params={"month": "2025-04", "unlocked": ["2025-04-05", "2025-04-06"], "q": "ana"},
            headers=admin_headers,
        )

    assert response.status_code == 200
    assert response.json()["month"] == "2025-04"
    args = mock.call_args.args
    assert args[1] == "2025-04"
    assert args[2] == ["2025-04-05", "2025-04-06"]
    assert args[3] == "ana"


def test_vue_sans_role_refusee(client):
    response = client.get("/api/v1/assistance", params={"month": "2025-04"})
    assert response.status_code == 403


def test_vue_lecture_permise_pour_tout_role(client):
    with patch("backoffice.routers.assistance.assistance_service.get_month_view") as mock:
        mock.return_value = MonthViewResponse(month="2025-04", unlocked=[], calendar_days=[], rows=[])
        response = client.get(
            "/api/v1/assistance",
            params={"month": "2025-04"},
            headers={"X-User-Role": "supervisor"},
        )
    assert response.status_code == 200


def test_vue_mois_invalide(client, admin_headers):
    with patch("backoffice.routers.assistance.assistance_service.get_month_view") as mock:
        mock.side_effect = ValueError("Mois invalide : '2025-13' (format attendu YYYY-MM).")
        response = client.get("/api/v1/assistance", params={"month": "2025-13"}, headers=admin_headers)

    assert response.status_code == 400
    assert "Mois invalide" in response.json()["detail"]


def test_vue_exception_mal_formee(client, admin_headers):
    with patch("backoffice.routers.assistance.assistance_service.get_month_view") as mock:
        response = client.get(
            "/api/v1/assistance",
            params={"month": "2025-04", "unlocked": ["05/04/2025"]},
            headers=admin_headers,
        )

    assert response.status_code == 400
    assert "Date invalide" in response.json()["detail"]
    mock.assert_not_called()


# ============================================================
# POST /api/v1/assistance/cells/toggle
# ============================================================

def test_clic_cellule(client, admin_headers):
    with patch("backoffice.routers.assistance.assistance_service.toggle_cell") as mock:
        mock.return_value = make_cell_response(status="P")
        response = client.post("/api/v1/assistance/cells/toggle", json=cell_payload(), headers=admin_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "P"
    assert data["locked"] is False
    assert data["totals"]["laborables"] == 22


def test_clic_cellule_verrouillee(client, admin_headers):
    with patch("backoffice.routers.assistance.assistance_service.toggle_cell") as mock:
        mock.return_value = make_cell_response(status="N", locked=True)
        response = client.post(
            "/api/v1/assistance/cells/toggle",
            json=cell_payload(date="2025-04-05"),
            headers=admin_headers,
        )

    assert response.status_code == 200
    assert response.json()["locked"] is True


def test_clic_role_non_admin_refuse(client):
    response = client.post(
        "/api/v1/assistance/cells/toggle",
        json=cell_payload(),
        headers={"X-User-Role": "supervisor"},
    )
    assert response.status_code == 403


def test_clic_assistant_introuvable(client, admin_headers):
    with patch("backoffice.routers.assistance.assistance_service.toggle_cell") as mock:
        mock.side_effect = ValueError("Assistant 00000000 introuvable.")
        response = client.post(
            "/api/v1/assistance/cells/toggle",
            json=cell_payload(assistant_id="00000000"),
            headers=admin_headers,
        )

    assert response.status_code == 404


def test_clic_date_hors_mois(client, admin_headers):
    with patch("backoffice.routers.assistance.assistance_service.toggle_cell") as mock:
        mock.side_effect = ValueError("La date 2025-05-02 n'appartient pas au mois 2025-04.")
        response = client.post(
            "/api/v1/assistance/cells/toggle",
            json=cell_payload(date="2025-05-02"),
            headers=admin_headers,
        )

    assert response.status_code == 400


def test_clic_date_mal_formee(client, admin_headers):
    response = client.post(
        "/api/v1/assistance/cells/toggle",
        json=cell_payload(date="07/04/2025"),
        headers=admin_headers,
    )
    assert response.status_code == 422


def test_clic_mois_mal_forme(client, admin_headers):
    response = client.post(
        "/api/v1/assistance/cells/toggle",
        json=cell_payload(month="2025-4"),
        headers=admin_headers,
    )
    assert response.status_code == 422


def test_clic_exception_mal_formee(client, admin_headers):
    response = client.post(
        "/api/v1/assistance/cells/toggle",
        json=cell_payload(date="2025-04-05", unlocked=["2025-04-5x"]),
        headers=admin_headers,
    )
    assert response.status_code == 422


# ============================================================
# PUT /api/v1/assistance/cells
# ============================================================

def test_set_cellule(client, admin_headers):
    with patch("backoffice.routers.assistance.assistance_service.set_cell") as mock:
        mock.return_value = make_cell_response(status="J")
        response = client.put(
            "/api/v1/assistance/cells",
            json={**cell_payload(), "status": "j"},
            headers=admin_headers,
        )

    assert response.status_code == 200
    assert mock.call_args.args[1].status == "J"


def test_set_cellule_statut_inconnu(client, admin_headers):
    response = client.put(
        "/api/v1/assistance/cells",
        json={**cell_payload(), "status": "X"},
        headers=admin_headers,
    )
    assert response.status_code == 422


def test_set_cellule_non_applicable_refuse(client, admin_headers):
    response = client.put(
        "/api/v1/assistance/cells",
        json={**cell_payload(), "status": "N"},
        headers=admin_headers,
    )
    assert response.status_code == 422


def test_set_cellule_verrouillee(client, admin_headers):
    with patch("backoffice.routers.assistance.assistance_service.set_cell") as mock:
        mock.side_effect = ValueError("La colonne du 2025-04-05 (week-end) est verrouillée.")
        response = client.put(
            "/api/v1/assistance/cells",
            json={**cell_payload(date="2025-04-05"), "status": "P"},
            headers=admin_headers,
        )

    assert response.status_code == 400


# ============================================================
# POST /api/v1/assistance/weekend/toggle
# ============================================================

def test_bascule_week_end(client, admin_headers):
    with patch("backoffice.routers.assistance.assistance_service.toggle_weekend") as mock:
        mock.return_value = WeekendToggleResponse(
            date="2025-04-05",
            unlocked_now=True,
            unlocked=["2025-04-05"],
            totals={"44556677": make_totals(laborables=23)},
        )
        response = client.post(
            "/api/v1/assistance/weekend/toggle",
            json={"month": "2025-04", "date": "2025-04-05", "unlocked": []},
            headers=admin_headers,
        )

    assert response.status_code == 200
    data = response.json()
    assert data["unlocked"] == ["2025-04-05"]
    assert data["totals"]["44556677"]["laborables"] == 23


def test_bascule_week_end_exception_mal_formee(client, admin_headers):
    response = client.post(
        "/api/v1/assistance/weekend/toggle",
        json={"month": "2025-04", "date": "2025-04-05", "unlocked": ["samedi"]},
        headers=admin_headers,
    )
    assert response.status_code == 422


# ============================================================
# PUT /api/v1/assistance/notes
# ============================================================

def test_note(client, admin_headers):
    with patch("backoffice.routers.assistance.assistance_service.save_note") as mock:
        mock.return_value = NoteResponse(assistant_id="44556677", date="2025-04-07", text="Permiso", persisted=True)
        response = client.put(
            "/api/v1/assistance/notes",
            json={**cell_payload(), "text": "Permiso"},
            headers=admin_headers,
        )

    assert response.status_code == 200
    assert response.json()["text"] == "Permiso"


def test_note_vide(client, admin_headers):
    with patch("backoffice.routers.assistance.assistance_service.save_note") as mock:
        mock.return_value = NoteResponse(assistant_id="44556677", date="2025-04-07", text=None, persisted=True)
        response = client.put(
            "/api/v1/assistance/notes",
            json={**cell_payload(), "text": "   "},
            headers=admin_headers,
        )

    assert response.status_code == 200
    assert response.json()["text"] is None

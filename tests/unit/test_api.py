"""
API tests with FastAPI TestClient

The real lifespan runs: offline store chain (local store in memory) and a
local-only coach, since DATABASE_URL and GEMINI_API_KEY are unset.
"""

import httpx
import pytest
from fastapi.testclient import TestClient

from sprint_lab.main import app, get_sync
from sprint_lab.sync import PartnerApiClient, SyncOrchestrator

pytestmark = pytest.mark.unit

ADMIN_LOGIN = {"identifier": "admin@allin.com", "password": "admin-secret"}


@pytest.fixture
def client(monkeypatch):
    monkeypatch.setenv("ADMIN_IDENTIFIER", ADMIN_LOGIN["identifier"])
    monkeypatch.setenv("ADMIN_PASSWORD", ADMIN_LOGIN["password"])
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def _register(client, name="Ana", whatsapp="11911111111"):
    response = client.post("/v1/auth/register", json={"name": name, "whatsapp": whatsapp, "password": "segredo1"})
    assert response.status_code == 201, response.text
    body = response.json()
    return body["user"], {"Authorization": f"Bearer {body['token']}"}


class TestService:

    def test_root(self, client):
        assert client.get("/").json()["service"] == "Sprint Lab API"

    def test_health(self, client):
        body = client.get("/health").json()
        assert body["status"] == "healthy"
        assert body["coach_providers"] == ["local"]


class TestAuthRoutes:

    def test_register_and_login(self, client):
        user, _ = _register(client)
        assert user["whatsapp"] == "11911111111"

        response = client.post("/v1/auth/login", json={"identifier": "(11) 91111-1111", "password": "segredo1"})
        assert response.status_code == 200
        assert response.json()["user"]["id"] == user["id"]

    def test_register_validation(self, client):
        response = client.post("/v1/auth/register", json={"name": "Ana", "whatsapp": "123", "password": "segredo1"})
        assert response.status_code == 400
        assert response.json()["detail"] == "Número de telefone inválido"

    def test_bad_login(self, client):
        response = client.post("/v1/auth/login", json={"identifier": "11911111111", "password": "nope"})
        assert response.status_code == 401
        assert response.json()["detail"] == "Credenciais inválidas"

    def test_logs_require_session(self, client):
        assert client.get("/v1/logs").status_code == 401


class TestLogsAndDashboard:

    def test_submit_and_list(self, client):
        _, headers = _register(client)
        response = client.post("/v1/logs", headers=headers, json={
            "date": "09/12/2025", "pairs_sold": 3, "prospects_contacted": 10, "activations": 2, "type": "presential",
        })
        assert response.status_code == 201
        assert response.json()["pairs_sold"] == 3

        logs = client.get("/v1/logs", headers=headers).json()
        assert [log["date"] for log in logs] == ["09/12/2025"]

        dashboard = client.get("/v1/dashboard", headers=headers).json()
        assert dashboard["total_pairs"] == 3
        assert dashboard["estimated_profit"] == 733.5
        assert dashboard["chart"] == [{"name": "09/12", "sales": 3}]

    def test_invalid_log(self, client):
        _, headers = _register(client)
        response = client.post("/v1/logs", headers=headers, json={"pairs_sold": 500})
        assert response.status_code == 400
        assert response.json()["detail"] == "Número de pares vendidos inválido"


class TestAdminAndLeaderboard:

    def test_official_sale_requires_admin(self, client):
        user, headers = _register(client)
        payload = {"distributor_id": user["id"], "quantity": 2}

        assert client.post("/v1/official-sales", json=payload).status_code == 401
        assert client.post("/v1/official-sales", json=payload, headers=headers).status_code == 403
        assert client.post("/v1/official-sales", json=payload, headers={"X-Admin-Key": "wrong"}).status_code == 401

    def test_leaderboard_ranks_official_sales(self, client, admin_headers):
        ana, ana_headers = _register(client, "Ana", "11911111111")
        bia, _ = _register(client, "Bia", "11922222222")

        client.post("/v1/logs", headers=ana_headers, json={"date": "09/12/2025", "pairs_sold": 9})
        response = client.post("/v1/official-sales", headers=admin_headers, json={"distributor_id": bia["id"], "quantity": 4})
        assert response.status_code == 201

        board = client.get("/v1/leaderboard", headers=ana_headers).json()
        assert [m["name"] for m in board] == ["Bia", "Ana"]
        assert board[0]["score"] == 4
        assert board[1]["self_reported_sales"] == 9
        assert board[1]["is_current_user"] is True

        anonymous = client.get("/v1/leaderboard").json()
        assert not any(m["is_current_user"] for m in anonymous)

    def test_invalid_sale_quantity(self, client, admin_headers):
        response = client.post("/v1/official-sales", headers=admin_headers, json={"distributor_id": "u1", "quantity": 0})
        assert response.status_code == 400
        assert response.json()["detail"] == "Quantidade inválida"

    def test_admin_session_lists_users(self, client):
        _register(client)
        token = client.post("/v1/auth/login", json=ADMIN_LOGIN).json()["token"]
        response = client.get("/v1/users", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 200
        assert [u["name"] for u in response.json()] == ["Ana"]


class TestChatRoutes:

    def test_chat_local_answer(self, client):
        response = client.post("/v1/chat", json={"message": "Quais são os 4 pilares?"})
        body = response.json()
        assert body["is_local"] is True
        assert body["text"].startswith("**OS 4 PILARES DA VENDA**")

    def test_diagnostic(self, client):
        body = client.post("/v1/chat", json={"message": "/test"}).json()
        assert body["provider"] == "diagnostic"

    def test_quick_actions(self, client):
        actions = client.get("/v1/chat/quick-actions").json()
        assert [a["label"] for a in actions] == ["Potencial de Lucro", "Estratégia Presencial", "Minha Rotina", "Os 4 Pilares"]

        first = client.post("/v1/chat/quick-actions/0").json()
        second = client.post("/v1/chat/quick-actions/0").json()
        assert first["label"] == "Potencial de Lucro"
        assert first["answer"]["text"] != second["answer"]["text"]

    def test_unknown_quick_action(self, client):
        assert client.post("/v1/chat/quick-actions/99").status_code == 404

    def test_calculator(self, client):
        body = client.get("/v1/calculator", params={"pairs_per_day": 3, "days": 14}).json()
        assert body["total_potential"] == 10269.0
        assert body["profit_per_pair"] == 244.5


class TestSyncRoute:

    def _override(self, handler):
        partner = PartnerApiClient(
            base_url="https://partner.test/api/v1",
            client_id="id",
            client_secret="secret",
            transport=httpx.MockTransport(handler),
        )
        app.dependency_overrides[get_sync] = lambda: SyncOrchestrator(partner)

    def test_sync_returns_sale_candidates(self, client, admin_headers):
        def handler(request):
            path = request.url.path
            if path.endswith("/auth/token"):
                return httpx.Response(200, json={"access_token": "tok"})
            if path.endswith("/distribuidores"):
                return httpx.Response(200, json={"distribuidores": []})
            return httpx.Response(200, json={"pedidos": [{
                "id": "7",
                "pagamento_confirmado": "1",
                "distribuidor_indicador_id": "42",
                "data_adicionado": "2025-12-10 09:00:00",
                "itens": [{"quantidade": "3"}],
            }]})

        self._override(handler)
        body = client.post("/v1/sync", headers=admin_headers).json()

        assert body["success"] is True
        assert body["official_sales"][0]["distributor_id"] == "42"
        assert body["official_sales"][0]["quantity"] == 3

    def test_sync_failure_is_bad_gateway(self, client, admin_headers):
        self._override(lambda request: httpx.Response(500, text="down"))
        response = client.post("/v1/sync", headers=admin_headers)
        assert response.status_code == 502

    def test_sync_requires_admin(self, client):
        assert client.post("/v1/sync").status_code == 401

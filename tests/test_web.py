"""
End-to-end tests of the HTTP surface with in-memory backends.

The client does not follow redirects so that 302s can be asserted.
"""

import pytest
from fastapi.testclient import TestClient

from finance_tracker.services.sessions import InMemorySessionStore, SessionError
from finance_tracker.services.storage import InMemoryTransactionStorage, PersistenceError
from finance_tracker.web import create_app


class BrokenLogoutStore(InMemorySessionStore):
    async def destroy(self, token: str) -> None:
        raise SessionError("session store unavailable")


class BrokenTransactionStorage(InMemoryTransactionStorage):
    async def list_transactions(self, *args, **kwargs):
        raise PersistenceError("database unavailable")

    async def totals_by_month(self, user_id):
        raise PersistenceError("database unavailable")


def add_transaction(client, **overrides):
    form = {
        "type": "expense",
        "amount": "20",
        "category": "Food",
        "note": "",
        "date": "2024-03-05",
    }
    form.update(overrides)
    return client.post("/addTransaction", data=form)


class TestPages:
    """Tests for the HTML pages."""

    @pytest.mark.parametrize("path", ["/", "/signup"])
    def test_public_pages(self, client, path):
        response = client.get(path)
        assert response.status_code == 200
        assert "text/html" in response.headers["content-type"]

    @pytest.mark.parametrize("path", ["/addTransaction", "/overview", "/charts"])
    def test_protected_pages_redirect_anonymous(self, client, path):
        response = client.get(path)
        assert response.status_code == 302
        assert response.headers["location"] == "/"

    @pytest.mark.parametrize("path", ["/addTransaction", "/overview", "/charts"])
    def test_protected_pages_served_when_logged_in(self, client, log_in, path):
        log_in(client)
        response = client.get(path)
        assert response.status_code == 200

    def test_static_assets(self, client):
        response = client.get("/static/style.css")
        assert response.status_code == 200

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "ok"}


class TestAuthRoutes:
    """Tests for signup, login and logout."""

    def test_signup_redirects_to_login(self, client):
        response = client.post("/signup", data={"email": "a@x.com", "password": "pw"})
        assert response.status_code == 302
        assert response.headers["location"] == "/"

    def test_signup_missing_password(self, client):
        response = client.post("/signup", data={"email": "a@x.com"})
        assert response.status_code == 500
        assert response.text == "Error during user registration"

    def test_signup_email_too_long(self, client):
        email = "a" * 330 + "@x.com"
        response = client.post("/signup", data={"email": email, "password": "pw"})
        assert response.status_code == 500
        assert response.text == "Error during user registration"

    @pytest.mark.parametrize("path,message", [
        ("/signup", "Error during user registration"),
        ("/login", "Error during login"),
    ])
    def test_unreadable_credentials_body(self, client, path, message):
        malformed = client.post(
            path,
            content="{not json",
            headers={"content-type": "application/json"},
        )
        nested = client.post(path, json={"email": {"address": "a@x.com"}, "password": "pw"})

        for response in (malformed, nested):
            assert response.status_code == 500
            assert response.text == message

    def test_login_sets_cookie_and_redirects(self, client, components, log_in):
        response = log_in(client)
        assert response.headers["location"] == "/overview"
        assert components.sessions.cookie_name in response.cookies

    def test_login_accepts_json(self, client):
        client.post("/signup", data={"email": "a@x.com", "password": "pw"})
        response = client.post("/login", json={"email": "a@x.com", "password": "pw"})
        assert response.status_code == 302

    def test_login_wrong_password(self, client):
        client.post("/signup", data={"email": "a@x.com", "password": "pw"})
        response = client.post("/login", data={"email": "a@x.com", "password": "bad"})
        assert response.status_code == 401
        assert response.text == "Invalid email or password"
        assert "set-cookie" not in response.headers

    def test_login_unknown_email(self, client):
        response = client.post("/login", data={"email": "b@x.com", "password": "pw"})
        assert response.status_code == 401

    def test_logout_ends_session(self, client, log_in):
        log_in(client)
        response = client.get("/logout")
        assert response.status_code == 302
        assert response.headers["location"] == "/"

        assert client.get("/overview-data").status_code == 401

    def test_logout_without_session(self, client):
        response = client.get("/logout")
        assert response.status_code == 302

    def test_logout_failure(self, make_components, clock, log_in):
        components = make_components(session_store=BrokenLogoutStore(clock=clock))
        with TestClient(create_app(components=components), follow_redirects=False) as client:
            log_in(client)
            response = client.get("/logout")
        assert response.status_code == 500
        assert response.text == "Error logging out"


class TestTransactionRoutes:
    """Tests for POST /addTransaction."""

    def test_requires_login(self, client):
        response = add_transaction(client)
        assert response.status_code == 401
        assert response.text == "Unauthorized"

    def test_redirects_with_alert(self, client, log_in):
        log_in(client)
        response = add_transaction(client)
        assert response.status_code == 302
        assert response.headers["location"] == (
            "/addTransaction?alert=Transaction%20added%20successfully!"
        )

    @pytest.mark.parametrize("overrides", [
        {"amount": "abc"},
        {"amount": "1e30"},
        {"type": "transfer"},
        {"category": ""},
        {"date": "yesterday"},
    ])
    def test_invalid_submission(self, client, log_in, overrides):
        log_in(client)
        response = add_transaction(client, **overrides)
        assert response.status_code == 500
        assert response.text == "Error during transaction submission"

        assert client.get("/overview-data").json()["transactions"] == []

    @pytest.mark.parametrize("body", ["{not json", "[1, 2]"])
    def test_unreadable_body(self, client, log_in, body):
        log_in(client)
        response = client.post(
            "/addTransaction",
            content=body,
            headers={"content-type": "application/json"},
        )
        assert response.status_code == 500
        assert response.text == "Error during transaction submission"


class TestDataRoutes:
    """Tests for the JSON endpoints."""

    @pytest.mark.parametrize("path", ["/overview-data", "/chart", "/monthly-overview"])
    def test_require_login(self, client, path):
        response = client.get(path)
        assert response.status_code == 401
        assert response.text == "Unauthorized"

    def test_overview_flow(self, client, log_in):
        log_in(client)
        add_transaction(client, amount="20", category="Food", date="2024-03-05")

        data = client.get("/overview-data").json()

        assert data["totalIncome"] == "0.00"
        assert data["totalExpenses"] == "20.00"
        assert data["netTotal"] == "-20.00"
        assert data["transactions"] == [{
            "date": "2024-03-05",
            "type": "expense",
            "amount": "20.00",
            "category": "Food",
            "note": None,
        }]

    def test_users_see_only_their_own_data(self, client, log_in):
        log_in(client, email="a@x.com")
        add_transaction(client)
        client.get("/logout")

        log_in(client, email="b@x.com")
        data = client.get("/overview-data").json()
        assert data["transactions"] == []
        assert client.get("/monthly-overview").json() == []

    def test_chart_by_month(self, client, log_in):
        log_in(client)
        add_transaction(client, amount="20", category="Food", date="2024-02-05")
        add_transaction(client, amount="7.5", category="Food", date="2024-02-06")
        add_transaction(client, amount="100", category="Rent", date="2024-02-29")

        response = client.get("/chart", params={"month": "2024-02"})

        assert response.status_code == 200
        # 2024-02-29 is the last day of the month and falls outside the chart
        assert response.json() == [{"category": "Food", "amount": 27.5}]

    def test_chart_defaults_to_current_month(self, client, log_in):
        log_in(client)
        add_transaction(client, amount="20", category="Food", date="2024-03-05")
        assert client.get("/chart").json() == [{"category": "Food", "amount": 20.0}]

    def test_chart_invalid_month(self, client, log_in):
        log_in(client)
        response = client.get("/chart", params={"month": "garbage"})
        assert response.status_code == 500
        assert response.json() == {"error": "Error fetching expenses by category"}

    def test_monthly_overview(self, client, log_in):
        log_in(client)
        add_transaction(client, type="income", amount="100", category="Salary", date="2024-01-10")
        add_transaction(client, amount="20", date="2024-03-05")

        assert client.get("/monthly-overview").json() == [
            {"_id": "2024-03", "totalIncome": 0.0, "totalExpenses": 20.0},
            {"_id": "2024-01", "totalIncome": 100.0, "totalExpenses": 0.0},
        ]

    def test_storage_failures(self, make_components, log_in):
        components = make_components(transaction_storage=BrokenTransactionStorage())

        with TestClient(create_app(components=components), follow_redirects=False) as client:
            log_in(client)
            overview = client.get("/overview-data")
            monthly = client.get("/monthly-overview")

        assert overview.status_code == 500
        assert overview.json() == {"error": "Error fetching overview"}
        assert monthly.status_code == 500
        assert monthly.json() == {"error": "Error fetching monthly overview"}

"""End-to-end tests for the authentication flow."""

from urllib.parse import parse_qs, urlparse

import pytest
from fastapi.testclient import TestClient

from splitbill.interface.api.app import create_app
from tests.di import build_test_container

PASSWORD = "longenough1"


@pytest.fixture
def users_file(tmp_path, monkeypatch):
    """Point the users store at a fresh file."""
    path = tmp_path / "users.json"
    monkeypatch.setenv("STORE__PATH", str(path))
    return path


@pytest.fixture
def client(users_file):
    """Test client with a real users file and the mock Google client."""
    app_instance = create_app(build_test_container(unmock={"persistence"}))
    with TestClient(app_instance) as test_client:
        yield test_client


def _sign_up(client: TestClient, **overrides):
    body = {
        "name": "Ann",
        "email": "ann@x.com",
        "password": PASSWORD,
        "confirm": PASSWORD,
        "agreeToTerms": True,
    }
    body.update(overrides)
    return client.post("/api/auth/signup", json=body)


def _start_google_login(client: TestClient) -> str:
    start = client.get("/auth/google", follow_redirects=False)
    assert start.status_code == 302
    return parse_qs(urlparse(start.headers["location"]).query)["state"][0]


def _google_callback(client: TestClient, state: str):
    return client.get(
        "/auth/google/callback",
        params={"code": "mock-code", "state": state},
        follow_redirects=False,
    )


def _google_login(client: TestClient):
    return _google_callback(client, _start_google_login(client))


class TestSignUp:
    """End-to-end tests for local registration."""

    def test_sign_up_creates_account(self, client, users_file):
        """Should store the account and return it without secrets."""
        response = _sign_up(client)

        assert response.status_code == 201
        data = response.json()
        assert data["message"] == "User created successfully"
        assert data["user"]["email"] == "ann@x.com"
        assert data["user"]["hasLocalPassword"] is True
        assert PASSWORD not in response.text
        assert "passwordHash" not in response.text

        stored = users_file.read_text()
        assert "ann@x.com" in stored
        assert PASSWORD not in stored

    def test_duplicate_email_conflicts(self, client):
        """Should answer 409 for an email already registered in any case."""
        _sign_up(client)

        response = _sign_up(client, email="ANN@X.COM")

        assert response.status_code == 409
        assert response.json() == {"error": "Email already registered"}

    def test_invalid_fields_are_reported(self, client):
        """Should answer 400 listing every bad field."""
        response = _sign_up(
            client, email="not-an-email", password="short", confirm="short"
        )

        assert response.status_code == 400
        fields = {f["field"] for f in response.json()["fields"]}
        assert fields == {"email", "password"}

    def test_malformed_body_is_a_field_error(self, client):
        """Unparseable values get the same error shape."""
        response = _sign_up(client, agreeToTerms="perhaps")

        assert response.status_code == 400
        assert response.json()["fields"][0]["field"] == "agreeToTerms"


class TestSignIn:
    """End-to-end tests for sign-in and sessions."""

    def test_sign_in_sets_session_cookie(self, client):
        """Should set an HttpOnly browser-session cookie."""
        _sign_up(client)

        response = client.post(
            "/api/auth/signin", json={"email": "ann@x.com", "password": PASSWORD}
        )

        assert response.status_code == 200
        assert response.json()["persistence"] == "ephemeral"
        cookie = response.headers["set-cookie"]
        assert cookie.startswith("splitbill_session=")
        assert "HttpOnly" in cookie
        assert "Max-Age" not in cookie

    def test_remember_me_sets_persistent_cookie(self, client):
        """Remembered sessions survive a browser restart."""
        _sign_up(client)

        response = client.post(
            "/api/auth/signin",
            json={"identifier": "ann@x.com", "password": PASSWORD, "rememberMe": True},
        )

        assert response.json()["persistence"] == "remember"
        assert "Max-Age=86400" in response.headers["set-cookie"]

    def test_credential_failures_look_identical(self, client):
        """Unknown account and wrong passwords give the same answer."""
        _sign_up(client)
        attempts = [
            {"identifier": "ann@x.com", "password": f"wrong-password-{n}"}
            for n in range(5)
        ]
        attempts.append({"identifier": "nobody@x.com", "password": PASSWORD})

        responses = [client.post("/api/auth/signin", json=a) for a in attempts]

        assert {r.status_code for r in responses} == {401}
        assert {r.text for r in responses} == {'{"error":"Invalid credentials"}'}
        assert "set-cookie" not in {h for r in responses for h in r.headers}

    def test_session_lifecycle(self, client):
        """Session is visible after sign-in and gone after sign-out."""
        assert client.get("/api/auth/session").status_code == 401

        _sign_up(client)
        client.post("/api/auth/signin", json={"email": "ann@x.com", "password": PASSWORD})
        session = client.get("/api/auth/session")

        assert session.status_code == 200
        assert session.json()["authenticated"] is True
        assert session.json()["user"]["email"] == "ann@x.com"

        signed_out = client.post("/api/auth/signout")
        assert signed_out.json() == {"success": True, "redirect": "/"}
        assert client.get("/api/auth/session").status_code == 401

    def test_sign_out_is_idempotent(self, client):
        """Signing out without a session still succeeds."""
        assert client.post("/api/auth/signout").status_code == 200

        response = client.get("/logout", follow_redirects=False)

        assert response.status_code == 302
        assert response.headers["location"] == "/"

    def test_sign_in_replaces_previous_session(self, client):
        """Signing in again ends the session the browser already had."""
        _sign_up(client)
        first = client.post(
            "/api/auth/signin", json={"email": "ann@x.com", "password": PASSWORD}
        )
        first_token = first.cookies["splitbill_session"]

        client.post("/api/auth/signin", json={"email": "ann@x.com", "password": PASSWORD})
        assert client.get("/api/auth/session").status_code == 200

        client.cookies.clear()
        client.cookies.set("splitbill_session", first_token)
        assert client.get("/api/auth/session").status_code == 401

    def test_forged_cookie_is_not_a_session(self, client):
        """Should reject a cookie the server did not sign."""
        client.cookies.set("splitbill_session", "forged.token.value")

        assert client.get("/api/auth/session").status_code == 401


class TestGoogleSignIn:
    """End-to-end tests for the Google redirect flow."""

    def test_google_login_creates_user_and_session(self, client):
        """Callback stores the profile and signs the browser in."""
        response = _google_login(client)

        assert response.status_code == 302
        assert response.headers["location"] == "/dashboard"
        assert "Max-Age=86400" in response.headers["set-cookie"]
        session = client.get("/api/auth/session").json()
        assert session["user"]["email"] == "mock@gmail.com"
        assert session["user"]["hasLocalPassword"] is False

    def test_google_login_merges_with_local_account(self, client):
        """Same email in another case reuses the local account."""
        created = _sign_up(client, name="Ann", email="MOCK@gmail.com").json()["user"]

        _google_login(client)
        _google_login(client)

        users = client.get("/api/users").json()
        assert len(users) == 1
        assert users[0]["id"] == created["id"]
        assert users[0]["hasLocalPassword"] is True
        assert users[0]["displayName"] == "Mock Google User"

        password_login = client.post(
            "/api/auth/signin",
            json={"identifier": "MOCK@gmail.com", "password": PASSWORD},
        )
        assert password_login.status_code == 200

    def test_state_cookie_is_cleared_after_login(self, client):
        """The one-time state does not outlive the flow it belongs to."""
        _google_login(client)

        assert client.cookies.get("splitbill_oauth_state") is None

    def test_callback_from_another_browser_is_rejected(self, client):
        """A callback URL opened in a browser that never started the flow fails."""
        state = _start_google_login(client)
        client.cookies.clear()

        response = _google_callback(client, state)

        assert response.status_code == 302
        assert response.headers["location"] == "/?error=auth_failed"
        assert not any(
            c.startswith("splitbill_session=")
            for c in response.headers.get_list("set-cookie")
        )
        assert client.get("/api/auth/session").status_code == 401
        assert client.get("/api/users").json() == []

    def test_callback_for_another_flow_is_rejected(self, client):
        """The state must be the one this browser was given last."""
        earlier_state = _start_google_login(client)
        _start_google_login(client)

        response = _google_callback(client, earlier_state)

        assert response.headers["location"] == "/?error=auth_failed"
        assert client.get("/api/users").json() == []

    def test_unknown_state_redirects_with_error(self, client):
        """A forged callback is sent back to the landing page."""
        response = client.get(
            "/auth/google/callback",
            params={"code": "mock-code", "state": "forged"},
            follow_redirects=False,
        )

        assert response.status_code == 302
        assert response.headers["location"] == "/?error=auth_failed"
        assert client.get("/api/users").json() == []

    def test_denied_consent_redirects_with_error(self, client):
        """User declining at Google is not an error page."""
        response = client.get(
            "/auth/google/callback",
            params={"error": "access_denied"},
            follow_redirects=False,
        )

        assert response.headers["location"] == "/?error=access_denied"


class TestGoogleDisabled:
    """Local accounts work when Google is not configured."""

    @pytest.fixture
    def client(self, users_file, monkeypatch):
        """Test client with production Google wiring and no credentials."""
        for name in (
            "GOOGLE__CLIENT_ID",
            "GOOGLE__CLIENT_SECRET",
            "GOOGLE__CREDENTIALS_FILE",
        ):
            monkeypatch.delenv(name, raising=False)
        app_instance = create_app(
            build_test_container(unmock={"persistence", "google"})
        )
        with TestClient(app_instance) as test_client:
            yield test_client

    def test_google_login_unavailable(self, client):
        """Should answer 503 instead of redirecting."""
        response = client.get("/auth/google", follow_redirects=False)

        assert response.status_code == 503
        assert client.get("/health").json()["google_sign_in"] is False

    def test_local_sign_up_still_works(self, client):
        """Local registration does not depend on Google."""
        assert _sign_up(client).status_code == 201

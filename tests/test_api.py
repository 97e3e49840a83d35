"""Tests for the HTTP endpoints, exercised through FastAPI's TestClient."""

from fastapi.testclient import TestClient

from shortener.core.rate_limit import limiter
from shortener.core.setting import EnvSettingsOptions, Settings, StoreBackend
from shortener.main import create_app
from shortener.services.qr_code import build_qr_code_link

EXAMPLE_URL = "https://example.com"
JSON_HEADERS = {"Content-Type": "application/json"}


def shorten(client, url=EXAMPLE_URL, path="/shorten"):
    return client.post(path, json={"url": url})


class TestHealth:

    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}
        assert "X-Process-Time" in response.headers


class TestShortenEndpoint:

    def test_shorten(self, client):
        response = shorten(client)

        assert response.status_code == 201
        body = response.json()
        assert set(body) == {"token", "target_url", "qr_code"}
        assert len(body["token"]) == 6
        assert body["target_url"] == EXAMPLE_URL
        assert body["qr_code"] == build_qr_code_link(EXAMPLE_URL)

    def test_lengthen(self, client):
        response = shorten(client, path="/lengthen")

        assert response.status_code == 201
        assert len(response.json()["token"]) == 42

    def test_invalid_url(self, client):
        response = shorten(client, url="example.com")

        assert response.status_code == 400
        body = response.json()
        assert body["type"] == "BAD_REQUEST"
        assert body["code"] == "invalid-url"
        assert body["message"] == "The provided URL (example.com) is invalid."

    def test_wrong_content_type(self, client):
        response = client.post(
            "/shorten",
            content=f'{{"url": "{EXAMPLE_URL}"}}',
            headers={"Content-Type": "text/plain"},
        )

        assert response.status_code == 415
        body = response.json()
        assert body["type"] == "UNSUPPORTED"
        assert body["code"] == "incorrect-content-header"
        assert body["action"] == 'Ensure the Content-Type header is "application/json".'

    def test_content_type_with_charset(self, client):
        response = client.post(
            "/shorten",
            content=f'{{"url": "{EXAMPLE_URL}"}}',
            headers={"Content-Type": "application/json; charset=utf-8"},
        )
        assert response.status_code == 201

    def test_unknown_field(self, client):
        response = client.post("/shorten", json={"url": EXAMPLE_URL, "bad_field": "x"})

        assert response.status_code == 400
        body = response.json()
        assert body["code"] == "unknown-field"
        assert "bad_field" in body["message"]

    def test_malformed_json(self, client):
        response = client.post("/shorten", content='{"url":', headers=JSON_HEADERS)

        assert response.status_code == 400
        assert response.json()["code"] == "json-syntax-error"

    def test_empty_body(self, client):
        response = client.post("/shorten", content="", headers=JSON_HEADERS)

        assert response.status_code == 400
        assert response.json()["code"] == "no-empty-requests"

    def test_missing_url_field(self, client):
        response = client.post("/shorten", json={})

        assert response.status_code == 400
        assert response.json()["code"] == "missing-field"

    def test_non_string_url(self, client):
        response = client.post("/shorten", json={"url": 42})

        assert response.status_code == 400
        assert response.json()["code"] == "invalid-field-value"

    def test_payload_too_large(self, client):
        huge_url = EXAMPLE_URL + "/" + "a" * (1_048_576 + 1)
        response = shorten(client, url=huge_url)

        assert response.status_code == 413
        body = response.json()
        assert body["type"] == "PAYLOAD_TOO_LARGE"
        assert body["code"] == "request-payload-too-large"


class TestRedirectEndpoint:

    def test_redirect_counts_visit(self, client):
        token = shorten(client).json()["token"]

        response = client.get(f"/{token}", follow_redirects=False)

        assert response.status_code == 301
        assert response.headers["location"] == EXAMPLE_URL
        assert client.get(f"/{token}/visits").json() == {"visits": 1}

    def test_redirect_long_token(self, client):
        token = shorten(client, path="/lengthen").json()["token"]

        response = client.get(f"/{token}", follow_redirects=False)

        assert response.status_code == 301
        assert response.headers["location"] == EXAMPLE_URL

    def test_unknown_token(self, client):
        response = client.get("/abcdef", follow_redirects=False)

        assert response.status_code == 404
        assert response.json() == {
            "type": "NOT_FOUND",
            "code": "url-not-found",
            "message": "Couldn't find URL with token (abcdef).",
        }

    def test_malformed_token(self, client):
        response = client.get("/favicon.ico", follow_redirects=False)
        assert response.status_code == 404
        assert response.json()["code"] == "url-not-found"


class TestVisitsEndpoint:

    def test_new_link_has_no_visits(self, client):
        token = shorten(client).json()["token"]

        response = client.get(f"/{token}/visits")

        assert response.status_code == 200
        assert response.json() == {"visits": 0}

    def test_visits_accumulate(self, client):
        token = shorten(client).json()["token"]
        for _ in range(3):
            client.get(f"/{token}", follow_redirects=False)

        assert client.get(f"/{token}/visits").json() == {"visits": 3}

    def test_unknown_token(self, client):
        response = client.get("/zzzzzz/visits")
        assert response.status_code == 404
        assert response.json()["type"] == "NOT_FOUND"


class TestDebugEndpoint:

    def test_lists_links_in_development(self, client):
        first = shorten(client).json()["token"]
        second = shorten(client, url="http://example.org/x").json()["token"]
        client.get(f"/{first}", follow_redirects=False)

        response = client.get("/debug/links")

        assert response.status_code == 200
        links = {link["token"]: link for link in response.json()}
        assert set(links) == {first, second}
        assert links[first]["visits"] == 1
        assert links[second]["target_url"] == "http://example.org/x"

    def test_hidden_in_production(self):
        production = Settings(
            ENV_SETTING=EnvSettingsOptions.production,
            STORE_BACKEND=StoreBackend.memory,
            RATE_LIMIT_ENABLED=False,
        )
        with TestClient(create_app(production)) as client:
            response = client.get("/debug/links")

        assert response.status_code == 404
        assert response.json()["type"] == "NOT_FOUND"


class TestRateLimiting:

    def test_app_settings_switch_limiter_off(self, client):
        assert limiter.enabled is False
        statuses = {shorten(client).status_code for _ in range(12)}
        assert statuses == {201}

    def test_limit_exceeded(self):
        limited = Settings(
            ENV_SETTING=EnvSettingsOptions.development,
            STORE_BACKEND=StoreBackend.memory,
            RATE_LIMIT_ENABLED=True,
        )
        limiter.reset()
        try:
            with TestClient(create_app(limited)) as client:
                assert limiter.enabled is True
                responses = [shorten(client) for _ in range(11)]
        finally:
            limiter.enabled = False
            limiter.reset()

        assert [response.status_code for response in responses] == [201] * 10 + [429]
        body = responses[-1].json()
        assert body["type"] == "TOO_MANY_REQUESTS"
        assert body["code"] == "rate-limit-exceeded"


def test_sql_backend_end_to_end(tmp_path):
    settings = Settings(
        STORE_BACKEND=StoreBackend.sql,
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'api.db'}",
        RATE_LIMIT_ENABLED=False,
    )
    with TestClient(create_app(settings)) as client:
        token = shorten(client).json()["token"]
        assert client.get(f"/{token}", follow_redirects=False).status_code == 301
        assert client.get(f"/{token}/visits").json() == {"visits": 1}

"""Smoke tests ensuring the admin app imports and answers liveness checks."""

from fastapi.testclient import TestClient

from dex_admin.services.admin.main import app


def test_ping_endpoint() -> None:
    """Ping should return the quoted pong string as JSON."""

    client = TestClient(app)
    response = client.get("/ping")
    assert response.status_code == 200
    assert response.headers["content-type"] == "application/json; charset=utf-8"
    assert response.text == '"pong"\n'


def test_ping_is_constant(client: TestClient) -> None:
    """Repeated pings return the same payload regardless of market state."""

    bodies = {client.get("/ping").text for _ in range(3)}
    assert bodies == {'"pong"\n'}


def test_ping_needs_no_credentials_when_reads_are_protected(make_client) -> None:
    """The liveness check stays open under the protected-reads policy."""

    client = make_client(ADMIN_PROTECT_READS=True)
    assert client.get("/ping").status_code == 200


def test_unknown_route_is_plain_text(client: TestClient) -> None:
    """Framework errors are rendered as plain text."""

    response = client.get("/nope")
    assert response.status_code == 404
    assert response.headers["content-type"].startswith("text/plain")

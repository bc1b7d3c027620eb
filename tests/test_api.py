import pytest

from api.deps import clean_username


def test_health(client) -> None:
    assert client.get("/health").json() == {"status": "healthy"}


def test_missing_access_code_is_rejected(client) -> None:
    client.cookies.clear()
    response = client.get("/api/counter")
    assert response.status_code == 401


def test_invalid_access_code_is_rejected(client) -> None:
    response = client.get("/api/counter", params={"access": "bad code!"})
    assert response.status_code == 401


def test_get_counter_creates_room(client, store) -> None:
    response = client.get("/api/counter")

    assert response.status_code == 200
    body = response.json()
    assert body["accessCode"] == "room-a"
    assert body["count"] == 0
    assert body["log"] == []
    assert body["lastIncrementTime"] == 0
    assert store.exists("room-a")


def test_increment_then_rate_limited(client) -> None:
    first = client.post("/api/increment")
    assert first.status_code == 200
    body = first.json()
    assert body["count"] == 1
    assert body["log"][0]["username"] == "Alice"
    assert body["log"][0]["count"] == 1

    second = client.post("/api/increment")
    assert second.status_code == 429
    limited = second.json()
    assert limited["error"] == "Rate limited"
    assert 1 <= limited["remainingTime"] <= 20
    assert limited["message"] == (
        f"Please wait {limited['remainingTime']} seconds before the next snack!"
    )

    assert client.get("/api/counter").json()["count"] == 1


def test_button_state_after_increment(client) -> None:
    assert client.get("/api/button-state").json() == {
        "isEnabled": True,
        "remainingTime": 0,
        "lastIncrementTime": 0,
    }

    client.post("/api/increment")
    state = client.get("/api/button-state").json()

    assert state["isEnabled"] is False
    assert state["remainingTime"] > 0
    assert state["lastIncrementTime"] > 0


def test_query_parameter_selects_room(client) -> None:
    client.post("/api/increment", params={"access": "room-b"})

    assert client.get("/api/counter", params={"access": "room-b"}).json()["count"] == 1
    assert client.get("/api/counter").json()["count"] == 0


def test_delete_log_entry(client) -> None:
    entry_id = client.post("/api/increment").json()["log"][0]["id"]

    response = client.delete(f"/api/log/{entry_id}")

    assert response.status_code == 200
    assert response.json()["count"] == 0
    assert response.json()["lastIncrementTime"] == 0


def test_delete_unknown_log_entry(client) -> None:
    client.post("/api/increment")

    response = client.delete("/api/log/42")

    assert response.status_code == 404
    assert response.json() == {"error": "Log entry not found"}
    assert client.get("/api/counter").json()["count"] == 1


def test_export_data(client) -> None:
    client.post("/api/increment")

    response = client.get("/api/export-data")

    assert response.status_code == 200
    assert "snack-counter-data.json" in response.headers["content-disposition"]
    assert response.json()["count"] == 1


def test_import_data_coerces_fields(client) -> None:
    response = client.post(
        "/api/import-data", json={"count": "5", "log": None, "theme": "dark"}
    )

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "message": "Imported 0 snacks and 0 log entries",
    }
    body = client.get("/api/counter").json()
    assert body["count"] == 0
    assert body["lastIncrementTime"] == 0
    assert body["theme"] == "dark"


def test_import_data_rejects_non_object(client) -> None:
    response = client.post("/api/import-data", json=[1, 2, 3])

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid data format"}


def test_subscribe_stores_subscription(client, store) -> None:
    subscription = {"endpoint": "https://push.example/abc", "keys": {"p256dh": "k", "auth": "a"}}

    response = client.post("/api/subscribe", json=subscription)

    assert response.status_code == 201
    stored = store.load("room-a").push_subscriptions
    assert stored[0]["endpoint"] == "https://push.example/abc"
    assert stored[0]["keys"] == {"p256dh": "k", "auth": "a"}


def test_vapid_public_key(client) -> None:
    assert "publicKey" in client.get("/api/vapid-public-key").json()


def test_user_info(client) -> None:
    assert client.get("/api/user-info").json() == {"username": "Alice"}


def test_persist_failure_returns_500(client, monkeypatch) -> None:
    client.get("/api/counter")

    def boom(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr("core.state_store.os.replace", boom)
    response = client.post("/api/increment")
    monkeypatch.undo()

    assert response.status_code == 500
    assert client.get("/api/counter").json()["count"] == 0


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("  Alice  ", "Alice"),
        ("<b>Bob</b>", "bBob/b"),
        ("x" * 80, "x" * 50),
        ("<>&", None),
        ("", None),
        (None, None),
    ],
)
def test_clean_username(raw, expected) -> None:
    assert clean_username(raw) == expected


@pytest.mark.parametrize(
    "body",
    ['{"lastIncrementTime": 1e400}', '{"count": 1e400, "log": []}'],
)
def test_import_data_resets_overflowing_numbers(client, body: str) -> None:
    response = client.post(
        "/api/import-data",
        content=body,
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 200
    state = client.get("/api/counter").json()
    assert state["count"] == 0
    assert state["lastIncrementTime"] == 0

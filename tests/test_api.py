"""HTTP surface over the state manager, exercised with FastAPI's TestClient."""

import pytest
from fastapi.testclient import TestClient

from familyhome.main import create_app

API = "/api/v1"


@pytest.fixture
def client(settings):
    with TestClient(create_app(settings)) as c:
        yield c


def sign_up(client, name="Ann", email="ann@x.com"):
    r = client.post(f"{API}/auth/signup", json={"name": name, "email": email, "password": "pw"})
    assert r.status_code == 200, r.text
    return r.json()["user"]


def test_root_and_health(client):
    r = client.get("/")
    assert r.status_code == 200
    assert r.json()["mode"] == "simulated"
    assert client.get(f"{API}/health").json() == {"status": "ok"}


def test_session_starts_in_onboarding(client):
    data = client.get(f"{API}/session").json()
    assert data["phase"] == "onboarding"
    assert data["user"] is None
    assert not data["is_authenticated"]


def test_sign_up_and_profile(client):
    user = sign_up(client)
    assert user["name"] == "Ann"

    session = client.get(f"{API}/session").json()
    assert session["is_authenticated"]
    assert session["phase"] == "authenticated_no_family"

    me = client.get(f"{API}/me").json()
    assert me["email"] == "ann@x.com"


def test_sign_in_returns_demo_user(client):
    r = client.post(f"{API}/auth/signin", json={"email": "bob@x.com", "password": "pw"})
    assert r.status_code == 200
    body = r.json()
    assert body["user"]["name"] == "Demo User"
    assert body["offline_fallback"] is False


def test_create_family_without_user_conflicts(client):
    r = client.post(f"{API}/family", json={"name": "Smiths"})
    assert r.status_code == 409
    assert r.json()["detail"] == "no signed-in user"
    assert client.get(f"{API}/family").status_code == 404


def test_family_and_pet_flow(client):
    sign_up(client)
    family = client.post(f"{API}/family", json={"name": "Smiths"}).json()
    assert family["name"] == "Smiths"
    assert len(family["invite_code"]) == 6

    # no pet yet
    assert client.post(f"{API}/family/pet/feed").status_code == 409

    pet = client.post(f"{API}/family/pet", json={"name": "Rex", "type": "Dog"}).json()
    assert pet["favorite_food"] == "Dog Treats"

    fed = client.post(f"{API}/family/pet/feed").json()
    assert fed["hunger"] == pytest.approx(0.8)

    played = client.post(f"{API}/family/pet/play").json()
    assert played["happiness"] == pytest.approx(0.8)

    assert client.post(f"{API}/family/pet/age").json()["age"] == 1
    assert client.post(f"{API}/family/pet/tick").status_code == 200
    assert client.post(f"{API}/family/pet/tick").status_code == 409
    assert client.post(f"{API}/family/pet/dance").status_code == 422

    notifications = client.get(f"{API}/notifications").json()
    assert [n["title"] for n in notifications] == ["Pet Fed!", "Play Time!"]


def test_house_endpoints(client):
    sign_up(client)
    client.post(f"{API}/family", json={"name": "Smiths"})
    r = client.post(f"{API}/family/house/rooms", json={"name": "Kitchen", "type": "Kitchen"})
    assert r.status_code == 200
    r = client.post(f"{API}/family/house/furniture", json={"name": "Table", "type": "Dining Table"})
    assert r.status_code == 200
    r = client.post(f"{API}/family/activities", json={"type": "Movie Night", "title": "Friday film"})
    assert r.status_code == 200

    family = client.get(f"{API}/family").json()
    assert family["house"]["rooms"][-1]["name"] == "Kitchen"
    assert family["activities"][0]["type"] == "Movie Night"


def test_location_and_messages(client):
    sign_up(client)
    loc = {"latitude": 52.5, "longitude": 13.4, "name": "Park"}
    assert client.put(f"{API}/me/location", json=loc).status_code == 200
    assert client.put(f"{API}/me/activity", json={"type": "Shopping", "title": "Shopping"}).status_code == 200
    r = client.post(f"{API}/messages", json={"content": "Home soon"})
    assert r.status_code == 200

    contents = [m["content"] for m in client.get(f"{API}/messages").json()]
    assert contents == ["I'm at Park", "I'm shopping", "Home soon"]


def test_notifications_mark_read(client):
    sign_up(client)
    n = client.post(f"{API}/notifications", json={"title": "Hi", "body": "there", "type": "Arrival"}).json()

    for _ in range(2):
        r = client.post(f"{API}/notifications/{n['id']}/read")
        assert r.status_code == 200
        assert r.json()["is_read"]

    notifications = client.get(f"{API}/notifications").json()
    assert len(notifications) == 1
    assert client.get(f"{API}/session").json()["unread_notifications"] == 0
    assert client.post(f"{API}/notifications/ntf_missing/read").status_code == 404


def test_avatar_endpoints(client, settings):
    sign_up(client)
    avatar = client.patch(f"{API}/me/avatar", json={"pose": "sitting", "outfit": "formal"}).json()
    assert avatar["pose"] == "sitting"
    assert avatar["outfit"] == "formal"
    assert avatar["expression"] == "happy"

    waving = client.post(f"{API}/me/avatar/animation", json={"animation": "wave"}).json()
    assert waving["is_waving"]

    r = client.post(f"{API}/me/avatar/image", content=b"\x89PNG")
    assert r.json()["url"] == settings.placeholder_avatar_url
    assert client.post(f"{API}/me/avatar/image", content=b"").status_code == 400


def test_sign_out_clears_session(client):
    sign_up(client)
    client.post(f"{API}/family", json={"name": "Smiths"})
    assert client.post(f"{API}/auth/signout").status_code == 204

    session = client.get(f"{API}/session").json()
    assert session["user"] is None
    assert session["phase"] == "onboarding"


def test_state_survives_restart(settings):
    with TestClient(create_app(settings)) as first:
        sign_up(first)
        first.post(f"{API}/family", json={"name": "Smiths"})

    with TestClient(create_app(settings)) as second:
        session = second.get(f"{API}/session").json()
        assert session["phase"] == "authenticated_with_family"
        assert session["user"]["name"] == "Ann"
        assert session["family"]["name"] == "Smiths"

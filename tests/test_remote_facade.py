"""Remote access facade: simulation mode and delegation to the backend."""

import json
import re

import httpx
import pytest

from familyhome.exceptions import RemoteOperationError
from familyhome.models.message import Message, MessageType
from familyhome.models.user import Avatar, User
from familyhome.services.backend_client import BackendClient
from familyhome.services.remote_facade import (
    DelegatingFacade,
    SimulatedFacade,
    create_facade,
)
from familyhome.utils.security import generate_invite_code


class FakeBackend:
    """In-memory auth + document + blob backend served through httpx.MockTransport."""

    def __init__(self):
        self.collections: dict[str, dict[str, dict]] = {}
        self.requests: list[httpx.Request] = []
        self.fail_status = None
        self.counter = 0

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.fail_status:
            return httpx.Response(self.fail_status, json={"error": "boom"})

        path = request.url.path
        if path in ("/auth/signup", "/auth/signin"):
            body = json.loads(request.content)
            uid = "uid_" + body["email"].split("@")[0]
            return httpx.Response(200, json={"uid": uid, "email": body["email"], "idToken": "tok"})
        if path == "/auth/signout":
            return httpx.Response(204)
        if path.startswith("/storage/"):
            return httpx.Response(200, json={"url": f"https://blobs.example{path}"})

        collection, _, doc_id = path[len("/collections/"):].partition("/documents")
        doc_id = doc_id.lstrip("/")
        docs = self.collections.setdefault(collection, {})

        if request.method == "POST":
            body = json.loads(request.content)
            self.counter += 1
            new_id = body.get("id") or f"doc{self.counter}"
            fields = {**body["fields"], "createdAt": "2024-01-01T00:00:00Z"}
            docs[new_id] = fields
            return httpx.Response(200, json={"id": new_id, "fields": fields})
        if request.method == "GET" and doc_id:
            if doc_id not in docs:
                return httpx.Response(404, json={"error": "not found"})
            return httpx.Response(200, json={"id": doc_id, "fields": docs[doc_id]})
        if request.method == "GET":
            field, value = request.url.params["field"], request.url.params["value"]
            found = [{"id": k, "fields": v} for k, v in docs.items() if v.get(field) == value]
            return httpx.Response(200, json={"documents": found})
        if request.method == "PATCH":
            docs[doc_id].update(json.loads(request.content)["fields"])
            return httpx.Response(200, json={"id": doc_id, "fields": docs[doc_id]})
        return httpx.Response(405)


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def remote_settings(settings):
    settings.backend_url = "https://backend.example"
    return settings


@pytest.fixture
async def delegating(remote_settings, backend):
    facade = create_facade(remote_settings, transport=backend.transport())
    yield facade
    await facade.close()


# --- Invite codes ---

def test_invite_code_format():
    for _ in range(200):
        assert re.fullmatch(r"[A-Z0-9]{6}", generate_invite_code())


# --- Simulation ---

def test_create_facade_without_backend_is_simulated(settings):
    assert isinstance(create_facade(settings), SimulatedFacade)


async def test_simulated_sign_up_and_session(facade):
    user = await facade.sign_up("Ann", "ann@x.com", "pw", Avatar(hair_color="red"))
    assert user.name == "Ann"
    assert user.avatar.hair_color == "red"

    identity = await facade.get_current_user()
    assert identity.uid == user.id
    assert identity.email == "ann@x.com"

    await facade.sign_out()
    assert await facade.get_current_user() is None


async def test_simulated_sign_in_fabricates_demo_user(facade):
    user = await facade.sign_in("bob@x.com", "pw")
    assert user.name == "Demo User"
    assert user.email == "bob@x.com"


async def test_simulated_session_with_bad_token_is_dropped(facade, settings):
    await facade.sign_in("bob@x.com", "pw")
    settings.session_secret = "rotated"
    assert await facade.get_current_user() is None


async def test_simulated_family_lifecycle(facade):
    owner = User(name="Ann", email="ann@x.com")
    family = await facade.create_family("Smiths", owner)
    assert family.members == [owner]
    assert family.created_by == owner.id
    assert re.fullmatch(r"[A-Z0-9]{6}", family.invite_code)
    assert (await facade.fetch_family(family.id)).name == "Smiths"

    joined = await facade.join_family("XYZ789", owner)
    assert joined.name == "Demo Family"
    assert joined.invite_code == "XYZ789"

    with pytest.raises(RemoteOperationError):
        await facade.fetch_family("fam_unknown")


async def test_simulated_avatar_upload(facade, settings):
    assert await facade.upload_avatar("usr_1", b"img") == settings.placeholder_avatar_url


# --- Delegation ---

async def test_create_facade_with_backend_delegates(delegating):
    assert isinstance(delegating, DelegatingFacade)


async def test_sign_up_writes_user_document(delegating, backend):
    user = await delegating.sign_up("Ann", "ann@x.com", "pw", Avatar(eye_color="green"))
    assert user.id == "uid_ann"
    doc = backend.collections["users"]["uid_ann"]
    assert doc["name"] == "Ann"
    assert doc["email"] == "ann@x.com"
    assert doc["id"] == "uid_ann"
    assert doc["avatar"]["eye_color"] == "green"

    identity = await delegating.get_current_user()
    assert identity.uid == "uid_ann"
    assert identity.token == "tok"


async def test_sign_in_reads_user_document(delegating, backend):
    await delegating.sign_up("Ann", "ann@x.com", "pw", Avatar(eye_color="green"))
    await delegating.sign_out()
    assert await delegating.get_current_user() is None

    user = await delegating.sign_in("ann@x.com", "pw")
    assert user.name == "Ann"
    assert user.avatar.eye_color == "green"
    assert backend.requests[-1].headers["Authorization"] == "Bearer tok"


async def test_create_family_uses_remote_field_names(delegating, backend):
    owner = await delegating.sign_up("Ann", "ann@x.com", "pw", Avatar())
    family = await delegating.create_family("Smiths", owner)

    fields = backend.collections["families"][family.id]
    assert fields["name"] == "Smiths"
    assert fields["createdBy"] == owner.id
    assert fields["members"] == [owner.id]
    assert fields["inviteCode"] == family.invite_code
    assert family.created_at.year == 2024
    assert [m.id for m in family.members] == [owner.id]


async def test_join_family_by_invite_code(delegating, backend):
    owner = await delegating.sign_up("Ann", "ann@x.com", "pw", Avatar())
    family = await delegating.create_family("Smiths", owner)
    bob = await delegating.sign_up("Bob", "bob@x.com", "pw", Avatar())

    joined = await delegating.join_family(family.invite_code, bob)
    assert joined.id == family.id
    assert {m.name for m in joined.members} == {"Ann", "Bob"}
    assert backend.collections["families"][family.id]["members"] == [owner.id, bob.id]

    refreshed = await delegating.fetch_family(family.id)
    assert {m.id for m in refreshed.members} == {owner.id, bob.id}


async def test_join_family_with_unknown_code(delegating):
    bob = await delegating.sign_up("Bob", "bob@x.com", "pw", Avatar())
    with pytest.raises(RemoteOperationError) as exc:
        await delegating.join_family("NOPE00", bob)
    assert exc.value.status_code == 404


async def test_send_message_document(delegating, backend):
    sender = await delegating.sign_up("Ann", "ann@x.com", "pw", Avatar())
    message = Message(sender=sender, content="Dinner!", type=MessageType.TEXT)
    await delegating.send_message("fam_1", message)

    fields = backend.collections["families/fam_1/messages"][message.id]
    assert fields["senderId"] == sender.id
    assert fields["content"] == "Dinner!"
    assert fields["type"] == "Text"
    assert fields["isRead"] is False
    assert "timestamp" in fields


async def test_send_message_needs_family(delegating):
    sender = User(name="Ann", email="ann@x.com")
    with pytest.raises(RemoteOperationError):
        await delegating.send_message(None, Message(sender=sender, content="hi"))


async def test_upload_avatar_returns_url(delegating, backend):
    url = await delegating.upload_avatar("uid_ann", b"\x89PNG")
    assert url == "https://blobs.example/storage/avatars/uid_ann.jpg"
    assert backend.requests[-1].headers["Content-Type"] == "image/jpeg"


async def test_http_error_maps_to_remote_error(delegating, backend):
    backend.fail_status = 500
    with pytest.raises(RemoteOperationError) as exc:
        await delegating.sign_in("ann@x.com", "pw")
    assert exc.value.status_code == 500
    assert exc.value.message == "boom"


async def test_transport_error_maps_to_remote_error():
    def refuse(request):
        raise httpx.ConnectError("connection refused", request=request)

    client = BackendClient("https://backend.example", transport=httpx.MockTransport(refuse))
    with pytest.raises(RemoteOperationError) as exc:
        await client.sign_in("ann@x.com", "pw")
    assert exc.value.status_code is None
    await client.close()


# --- Malformed backend responses ---

def answering(status_code, body=None, auth_ok=False):
    """Transport answering every call with one canned response.

    With ``auth_ok`` the auth endpoints still hand out a valid session.
    """
    def handle(request):
        if auth_ok and request.url.path.startswith("/auth/"):
            return httpx.Response(200, json={"uid": "uid_ann", "email": "ann@x.com", "idToken": "tok"})
        if body is None:
            return httpx.Response(status_code)
        return httpx.Response(status_code, json=body)

    return httpx.MockTransport(handle)


@pytest.mark.parametrize("status_code, body", [(200, {}), (204, None), (200, ["not", "a", "session"])])
async def test_malformed_auth_response_is_remote_error(remote_settings, status_code, body):
    facade = create_facade(remote_settings, transport=answering(status_code, body))
    with pytest.raises(RemoteOperationError):
        await facade.sign_in("ann@x.com", "pw")
    assert await facade.get_current_user() is None
    await facade.close()


async def test_empty_family_document_is_remote_error(remote_settings):
    facade = create_facade(remote_settings, transport=answering(204, auth_ok=True))
    user = await facade.sign_up("Ann", "ann@x.com", "pw", Avatar())
    with pytest.raises(RemoteOperationError):
        await facade.create_family("Smiths", user)
    with pytest.raises(RemoteOperationError):
        await facade.fetch_family("fam_1")
    await facade.close()


async def test_family_document_with_bad_fields_is_remote_error(remote_settings):
    body = {"id": "fam_1", "fields": {"members": "not-a-list"}}
    facade = create_facade(remote_settings, transport=answering(200, body, auth_ok=True))
    with pytest.raises(RemoteOperationError):
        await facade.fetch_family("fam_1")
    await facade.close()


async def test_user_document_with_bad_fields_is_remote_error(remote_settings):
    body = {"id": "uid_ann", "fields": {"name": ["Ann"]}}
    facade = create_facade(remote_settings, transport=answering(200, body, auth_ok=True))
    with pytest.raises(RemoteOperationError):
        await facade.sign_in("ann@x.com", "pw")
    await facade.close()


async def test_malformed_query_response_is_remote_error(remote_settings):
    facade = create_facade(remote_settings, transport=answering(200, {"documents": "nope"}, auth_ok=True))
    user = await facade.sign_up("Ann", "ann@x.com", "pw", Avatar())
    with pytest.raises(RemoteOperationError):
        await facade.join_family("ABC123", user)
    await facade.close()


async def test_upload_without_url_is_remote_error(remote_settings):
    facade = create_facade(remote_settings, transport=answering(204))
    with pytest.raises(RemoteOperationError):
        await facade.upload_avatar("uid_ann", b"\x89PNG")
    await facade.close()

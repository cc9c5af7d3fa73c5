import asyncio
import threading

import pytest

from tasky.core.config import settings
from tasky.services import credential_store, profile_service
from helpers import auth_headers

PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


def _upload(client, headers, data=PNG, content_type="image/png", name="me.png"):
    return client.post(
        "/api/user/avatar",
        files={"avatar": (name, data, content_type)},
        headers=headers,
    )


def test_get_me(client, alice):
    res = client.get("/api/user", headers=alice)

    assert res.status_code == 200
    user = res.json()["user"]
    assert user["username"] == "alice"
    assert user["lastProfileUpdate"] is None
    assert "passwordHash" not in user


def test_update_profile_partial(client, alice):
    res = client.patch("/api/user", json={"firstName": "Ally"}, headers=alice)

    assert res.status_code == 200
    body = res.json()
    assert body["message"] == "Profile updated successfully"
    assert body["user"]["firstName"] == "Ally"
    assert body["user"]["lastName"] == "Liddell"
    assert body["user"]["lastProfileUpdate"] is not None


def test_update_profile_duplicate(client, alice):
    auth_headers(client, "bob")

    res = client.patch("/api/user", json={"username": "bob"}, headers=alice)

    assert res.status_code == 400
    assert res.json() == {"message": "Username or email already exists"}
    assert client.get("/api/user", headers=alice).json()["user"]["username"] == "alice"


@pytest.mark.parametrize(
    "body",
    [{"firstName": "  "}, {"username": ""}, {"emailAddress": "nope"}],
)
def test_update_profile_validation(client, alice, body):
    res = client.patch("/api/user", json=body, headers=alice)

    assert res.status_code == 400
    assert res.json()["message"] == "Validation failed"


def test_upload_avatar(client, alice, asset_host):
    res = _upload(client, alice)

    assert res.status_code == 200
    user = res.json()["user"]
    assert user["avatar"].endswith("tasky-avatars/avatar1.png")
    assert user["lastProfileUpdate"] is not None
    assert asset_host.uploads == [("me.png", len(PNG), "image/png")]
    assert asset_host.destroyed == []


def test_replacing_avatar_deletes_the_old_asset(client, alice, asset_host):
    _upload(client, alice)

    res = _upload(client, alice, content_type="image/jpeg", name="new.jpg")

    assert res.status_code == 200
    assert res.json()["user"]["avatar"].endswith("tasky-avatars/avatar2.png")
    assert asset_host.destroyed == ["tasky-avatars/avatar1"]


def test_old_asset_cleanup_failure_is_not_fatal(client, alice, asset_host):
    _upload(client, alice)
    asset_host.fail_destroy = True

    res = _upload(client, alice)

    assert res.status_code == 200
    assert res.json()["user"]["avatar"].endswith("avatar2.png")


def test_oversized_avatar_is_rejected_without_side_effects(client, alice, asset_host):
    before = client.get("/api/user", headers=alice).json()["user"]
    too_big = b"\x00" * (settings.avatar_max_bytes + 1)

    res = _upload(client, alice, data=too_big)

    assert res.status_code == 400
    assert "message" in res.json()
    assert asset_host.uploads == []
    assert client.get("/api/user", headers=alice).json()["user"] == before


def test_avatar_at_exact_limit_is_accepted(client, alice, asset_host):
    res = _upload(client, alice, data=b"\x00" * settings.avatar_max_bytes)

    assert res.status_code == 200


@pytest.mark.parametrize("content_type", ["application/pdf", "text/plain", "image/svg+xml"])
def test_non_image_avatar_is_rejected(client, alice, asset_host, content_type):
    res = _upload(client, alice, content_type=content_type, name="x.bin")

    assert res.status_code == 400
    assert res.json() == {"message": "Only image files are allowed!"}
    assert asset_host.uploads == []


def test_empty_avatar_is_rejected(client, alice, asset_host):
    res = _upload(client, alice, data=b"")

    assert res.status_code == 400
    assert asset_host.uploads == []


def test_upload_failure_keeps_previous_avatar(client, alice, asset_host):
    first = _upload(client, alice).json()["user"]["avatar"]
    asset_host.fail_upload = True

    res = _upload(client, alice)

    assert res.status_code == 502
    assert client.get("/api/user", headers=alice).json()["user"]["avatar"] == first
    assert asset_host.destroyed == []


def test_remove_avatar(client, alice, asset_host):
    _upload(client, alice)

    res = client.delete("/api/user/avatar", headers=alice)

    assert res.status_code == 200
    assert res.json()["message"] == "Avatar removed successfully"
    assert res.json()["user"]["avatar"] == ""
    assert asset_host.destroyed == ["tasky-avatars/avatar1"]


def test_remove_avatar_clears_even_if_remote_delete_fails(client, alice, asset_host):
    _upload(client, alice)
    asset_host.fail_destroy = True

    res = client.delete("/api/user/avatar", headers=alice)

    assert res.status_code == 200
    assert res.json()["user"]["avatar"] == ""


def test_remove_avatar_without_one(client, alice, asset_host):
    res = client.delete("/api/user/avatar", headers=alice)

    assert res.status_code == 200
    assert asset_host.destroyed == []


def test_avatar_db_writes_run_off_the_event_loop(db, asset_host, monkeypatch):
    user = credential_store.create_user(
        db,
        {
            "first_name": "Dana",
            "last_name": "Test",
            "username": "dana",
            "email_address": "dana@example.com",
            "password": "secret123",
        },
    )
    threads = []
    store = profile_service._store_avatar

    def recording_store(*args):
        threads.append(threading.get_ident())
        return store(*args)

    monkeypatch.setattr(profile_service, "_store_avatar", recording_store)

    async def run():
        loop_thread = threading.get_ident()
        await profile_service.upload_avatar(db, asset_host, user.id, PNG, "image/png")
        await profile_service.remove_avatar(db, asset_host, user.id)
        return loop_thread

    loop_thread = asyncio.run(run())

    assert len(threads) == 2
    assert loop_thread not in threads
    assert credential_store.get_active_user(db, user.id).avatar == ""

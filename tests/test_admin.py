from app.models.api_call import ApiCall
from app.models.profile import Profile
from app.services import admin as admin_service
from app.services import ledger as ledger_service


async def _profile(user_id) -> Profile:
    return await Profile.find_one(Profile.user_id == user_id)


async def test_non_admin_forbidden(make_client, make_user):
    target, _ = await make_user("target@example.com")
    _, session = await make_user("user@example.com")
    client = make_client(session)

    for method, path, body in [
        ("GET", "/v1/admin/users", None),
        ("GET", "/v1/admin/stats", None),
        ("GET", "/v1/admin/calls", None),
        ("POST", f"/v1/admin/users/{target.id}/credits", {"amount": 5}),
        ("PUT", f"/v1/admin/users/{target.id}/credits", {"amount": 5}),
        ("POST", f"/v1/admin/users/{target.id}/admin", None),
    ]:
        r = await client.request(method, path, json=body)
        assert r.status_code == 403, path
        assert r.json()["error"]["code"] == "FORBIDDEN"

    assert (await _profile(target.id)).credits == 0


async def test_list_users(make_client, make_user):
    _, session = await make_user("admin@example.com", is_admin=True)
    await make_user("a@example.com")
    await make_user("b@example.com")

    r = await make_client(session).get("/v1/admin/users")

    assert r.status_code == 200
    emails = {u["email"] for u in r.json()["users"]}
    assert emails == {"admin@example.com", "a@example.com", "b@example.com"}


async def test_add_and_set_credits(make_client, make_user):
    _, session = await make_user("admin@example.com", is_admin=True)
    target, _ = await make_user("t@example.com", credits=2)
    client = make_client(session)

    r = await client.post(f"/v1/admin/users/{target.id}/credits", json={"amount": 5})
    assert r.status_code == 200
    assert r.json()["credits"] == 7

    r = await client.put(f"/v1/admin/users/{target.id}/credits", json={"amount": 1})
    assert r.json()["credits"] == 1

    r = await client.put(f"/v1/admin/users/{target.id}/credits", json={"amount": 0})
    assert r.json()["credits"] == 0
    assert (await _profile(target.id)).credits == 0


async def test_credit_input_rejected(make_client, make_user):
    _, session = await make_user("admin@example.com", is_admin=True)
    target, _ = await make_user("t@example.com", credits=2)
    client = make_client(session)

    r = await client.post(f"/v1/admin/users/{target.id}/credits", json={"amount": 0})
    assert r.status_code == 400
    r = await client.post(f"/v1/admin/users/{target.id}/credits", json={"amount": -3})
    assert r.status_code == 400
    r = await client.put(f"/v1/admin/users/{target.id}/credits", json={"amount": -1})
    assert r.status_code == 400
    assert r.json()["error"]["message"] == "Credits cannot be negative"

    assert (await _profile(target.id)).credits == 2


async def test_unknown_target(make_client, make_user):
    _, session = await make_user("admin@example.com", is_admin=True)
    ghost, _ = await make_user("ghost@example.com", with_profile=False)

    r = await make_client(session).post(f"/v1/admin/users/{ghost.id}/credits", json={"amount": 1})

    assert r.status_code == 404
    assert r.json()["error"]["message"] == "User not found"


async def test_toggle_admin(make_client, make_user):
    admin, session = await make_user("admin@example.com", is_admin=True)
    target, target_session = await make_user("t@example.com")
    client = make_client(session)

    r = await client.post(f"/v1/admin/users/{target.id}/admin")
    assert r.json()["is_admin"] is True
    assert (await make_client(target_session).get("/v1/admin/stats")).status_code == 200

    r = await client.post(f"/v1/admin/users/{target.id}/admin")
    assert r.json()["is_admin"] is False
    assert (await make_client(target_session).get("/v1/admin/stats")).status_code == 403


async def test_cannot_toggle_self(make_client, make_user):
    admin, session = await make_user("admin@example.com", is_admin=True)

    r = await make_client(session).post(f"/v1/admin/users/{admin.id}/admin")

    assert r.status_code == 400
    assert (await _profile(admin.id)).is_admin is True


async def test_service_toggle_does_not_guard_self(make_user):
    admin, _ = await make_user("admin@example.com", is_admin=True)
    profile = await admin_service.toggle_admin(admin.id, admin.id)
    assert profile.is_admin is False


async def test_stats_fold_all_calls(make_client, make_user, generator, generator_client):
    _, session = await make_user("admin@example.com", is_admin=True)
    alice, _ = await make_user("alice@example.com", credits=5)
    bob, _ = await make_user("bob@example.com", credits=5)

    await ledger_service.spend_credit_and_call(alice, generator_client, "401658", 1)
    await ledger_service.spend_credit_and_call(bob, generator_client, "401658", 1)
    generator.respond(500, {"error": "down"})
    await ledger_service.spend_credit_and_call(bob, generator_client, "401658", 1)

    r = await make_client(session).get("/v1/admin/stats")

    assert r.json() == {
        "total_calls": 3,
        "successful_calls": 2,
        "failed_calls": 1,
        "total_credits_used": 3,
    }


async def test_stats_empty(make_user):
    assert await admin_service.call_stats() == {
        "total_calls": 0,
        "successful_calls": 0,
        "failed_calls": 0,
        "total_credits_used": 0,
    }


async def test_call_visibility(make_client, make_user, generator_client):
    admin, session = await make_user("admin@example.com", is_admin=True)
    alice, _ = await make_user("alice@example.com", credits=5)
    bob, _ = await make_user("bob@example.com", credits=5)
    await ledger_service.spend_credit_and_call(alice, generator_client, "401658", 1)
    await ledger_service.spend_credit_and_call(bob, generator_client, "555555", 2)

    own = await ledger_service.list_visible_calls(alice.id)
    assert [c.user_id for c in own] == [alice.id]
    # a non-admin filtering on someone else sees nothing
    assert await ledger_service.list_visible_calls(alice.id, user_id=bob.id) == []

    r = await make_client(session).get("/v1/admin/calls")
    assert len(r.json()["calls"]) == 2
    r = await make_client(session).get("/v1/admin/calls", params={"user_id": str(bob.id)})
    calls = r.json()["calls"]
    assert len(calls) == 1
    assert calls[0]["bin"] == "555555"
    assert await ApiCall.find_all().count() == 2

CREDENTIAL_KEYS = {"password", "hashedPassword", "hashed_password"}


async def test_me_returns_current_user(client, alice, headers_for):
    res = await client.get("/users/me", headers=await headers_for(alice))
    assert res.status_code == 200
    assert res.json()["username"] == "alice"
    assert res.json()["email"] == "alice@example.com"


async def test_update_me_changes_only_given_fields(client, alice, headers_for):
    headers = await headers_for(alice)
    res = await client.patch("/users/me", json={"bio": "Writer", "firstName": "Alice"}, headers=headers)
    assert res.status_code == 200
    body = res.json()
    assert body["bio"] == "Writer"
    assert body["firstName"] == "Alice"
    assert body["username"] == "alice"


async def test_update_me_to_taken_identity_conflicts(client, alice, bob, headers_for):
    headers = await headers_for(alice)
    assert (await client.patch("/users/me", json={"username": "bob"}, headers=headers)).status_code == 409
    assert (await client.patch("/users/me", json={"email": "bob@example.com"}, headers=headers)).status_code == 409

    # 자기 자신의 값으로 다시 저장하는 것은 허용
    res = await client.patch("/users/me", json={"username": "alice", "email": "alice@example.com"}, headers=headers)
    assert res.status_code == 200


async def test_update_me_rejects_unknown_fields(client, alice, headers_for):
    res = await client.patch("/users/me", json={"hashedPassword": "x"}, headers=await headers_for(alice))
    assert res.status_code == 422


async def test_user_detail_includes_posts(client, alice, headers_for):
    headers = await headers_for(alice)
    await client.post("/posts", json={"title": "Draft", "content": "x"}, headers=headers)
    await client.post("/posts", json={"title": "Live", "content": "x", "isPublished": True}, headers=headers)

    res = await client.get(f"/users/{alice.id}")
    assert res.status_code == 200
    body = res.json()
    assert sorted(p["title"] for p in body["posts"]) == ["Draft", "Live"]
    assert not CREDENTIAL_KEYS & set(body)


async def test_user_list_hides_credentials(client, alice, bob):
    res = await client.get("/users")
    assert res.status_code == 200
    users = res.json()
    assert [u["username"] for u in users] == ["alice", "bob"]
    for user in users:
        assert not CREDENTIAL_KEYS & set(user)


async def test_missing_user_is_not_found(client):
    assert (await client.get("/users/999")).status_code == 404


async def test_health(client):
    res = await client.get("/health")
    assert res.status_code == 200
    assert res.json() == {"status": "ok"}


async def test_update_me_ignores_null_for_required_fields(client, alice, headers_for):
    headers = await headers_for(alice)
    res = await client.patch("/users/me", json={"username": None, "email": None, "bio": "Still me"}, headers=headers)
    assert res.status_code == 200
    body = res.json()
    assert body["username"] == "alice"
    assert body["email"] == "alice@example.com"
    assert body["bio"] == "Still me"

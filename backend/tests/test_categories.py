from app.categories.service import NAME_CONFLICT_DETAIL


async def _create(client, headers, name, **extra):
    return await client.post("/categories", json={"name": name, **extra}, headers=headers)


async def test_create_category_derives_slug(client, alice, headers_for):
    res = await _create(client, await headers_for(alice), "Technology", color="#007BFF")
    assert res.status_code == 201
    body = res.json()
    assert body["slug"] == "technology"
    assert body["color"] == "#007BFF"
    assert body["createdAt"] is not None


async def test_duplicate_category_name_conflicts(client, alice, headers_for):
    headers = await headers_for(alice)
    assert (await _create(client, headers, "Technology")).status_code == 201

    res = await _create(client, headers, "Technology")
    assert res.status_code == 409
    assert res.json()["detail"] == NAME_CONFLICT_DETAIL

    # 이름은 달라도 slug가 같으면 충돌
    res = await _create(client, headers, "technology!")
    assert res.status_code == 409


async def test_category_writes_require_authentication(client):
    assert (await client.post("/categories", json={"name": "Food"})).status_code == 401
    assert (await client.patch("/categories/1", json={"name": "Food"})).status_code == 401
    assert (await client.delete("/categories/1")).status_code == 401


async def test_list_categories_is_public_and_sorted(client, alice, headers_for):
    headers = await headers_for(alice)
    for name in ("Travel", "Food", "Lifestyle"):
        await _create(client, headers, name)

    res = await client.get("/categories")
    assert res.status_code == 200
    assert [c["name"] for c in res.json()] == ["Food", "Lifestyle", "Travel"]


async def test_update_category_rechecks_identity(client, alice, headers_for):
    headers = await headers_for(alice)
    await _create(client, headers, "Food")
    travel = (await _create(client, headers, "Travel")).json()

    res = await client.patch(f"/categories/{travel['id']}", json={"name": "Food"}, headers=headers)
    assert res.status_code == 409

    res = await client.patch(f"/categories/{travel['id']}", json={"name": "Travel Tips"}, headers=headers)
    assert res.status_code == 200
    assert res.json()["slug"] == "travel-tips"

    # 이름을 건드리지 않으면 slug 유지
    res = await client.patch(f"/categories/{travel['id']}", json={"description": "Trips"}, headers=headers)
    assert res.status_code == 200
    assert res.json()["slug"] == "travel-tips"
    assert res.json()["description"] == "Trips"


async def test_category_detail_lists_published_posts(client, alice, headers_for):
    headers = await headers_for(alice)
    tech = (await _create(client, headers, "Technology")).json()
    await client.post(
        "/posts",
        json={"title": "Live", "content": "x", "isPublished": True, "categoryIds": [tech["id"]]},
        headers=headers,
    )
    await client.post(
        "/posts",
        json={"title": "Draft", "content": "x", "categoryIds": [tech["id"]]},
        headers=headers,
    )

    res = await client.get(f"/categories/{tech['id']}")
    assert res.status_code == 200
    posts = res.json()["posts"]
    assert [p["title"] for p in posts] == ["Live"]
    assert posts[0]["categories"][0]["slug"] == "technology"


async def test_delete_category_keeps_posts(client, alice, headers_for):
    headers = await headers_for(alice)
    food = (await _create(client, headers, "Food")).json()
    post = (
        await client.post(
            "/posts",
            json={"title": "Pasta", "content": "x", "isPublished": True, "categoryIds": [food["id"]]},
            headers=headers,
        )
    ).json()

    res = await client.delete(f"/categories/{food['id']}", headers=headers)
    assert res.status_code == 204
    assert (await client.get(f"/categories/{food['id']}")).status_code == 404

    res = await client.get(f"/posts/{post['id']}")
    assert res.status_code == 200
    assert res.json()["categories"] == []


async def test_missing_category_is_not_found(client, alice, headers_for):
    assert (await client.get("/categories/42")).status_code == 404
    res = await client.patch("/categories/42", json={"name": "X"}, headers=await headers_for(alice))
    assert res.status_code == 404

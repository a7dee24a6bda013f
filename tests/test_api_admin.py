from app.linkman.core.security import create_user_access_token

ADMIN_ROLE = "ROLE_ADMIN"


def _auth(user_id="admin", roles=(ADMIN_ROLE,)):
    token = create_user_access_token(user_id, roles=list(roles))
    return {"Authorization": f"Bearer {token}"}


def _public_id(client):
    categories = client.get("/api/admin/categories", headers=_auth()).json()["categories"]
    return next(category["id"] for category in categories if category["public"])


def test_admin_routes_require_admin_role(client):
    anonymous = client.get("/api/admin/categories")
    user = client.get("/api/admin/links", headers=_auth("bob", roles=["ROLE_USER"]))

    assert anonymous.status_code == 401
    assert anonymous.json()["code"] == "INVALID_TOKEN"
    assert user.status_code == 403
    assert user.json()["code"] == "PERMISSION_DENIED"


def test_second_public_category_conflict(client):
    response = client.post(
        "/api/admin/categories",
        json={"name": "Everyone", "acl": {"read": {"guest": True}}},
        headers=_auth(),
    )

    assert response.status_code == 400
    payload = response.json()
    assert payload["code"] == "ONLY_ONE_PUBLIC_CATEGORY_IS_ALLOWED"
    assert payload["trace_id"]


def test_category_crud(client):
    created = client.post(
        "/api/admin/categories",
        json={"name": "Team", "order": 3, "translations": {"de-DE": "Mannschaft"}, "acl": {"read": {"roles": ["ROLE_USER"]}}},
        headers=_auth(),
    )
    assert created.status_code == 201
    category = created.json()
    assert category["translations"] == {"de": "Mannschaft"}
    assert category["public"] is False

    updated = client.put(
        f"/api/admin/categories/{category['id']}",
        json={"name": "Crew", "acl": {"read": {"users": ["anna"]}}},
        headers=_auth(),
    )
    assert updated.status_code == 200
    assert updated.json()["name"] == "Crew"
    assert updated.json()["acl"]["read"]["users"] == ["anna"]

    deleted = client.delete(f"/api/admin/categories/{category['id']}", headers=_auth())
    missing = client.get(f"/api/admin/categories/{category['id']}", headers=_auth())
    assert deleted.status_code == 204
    assert missing.status_code == 404
    assert missing.json()["code"] == "CATEGORY_NOT_FOUND"


def test_category_delete_cascades_to_links(client):
    public_id = _public_id(client)
    team = client.post(
        "/api/admin/categories",
        json={"name": "Team", "acl": {"read": {"roles": ["ROLE_USER"]}}},
        headers=_auth(),
    ).json()
    solo = client.post(
        "/api/admin/links",
        json={"href": "https://example.org/solo", "text": "Solo", "category_ids": [team["id"]]},
        headers=_auth(),
    ).json()
    shared = client.post(
        "/api/admin/links",
        json={"href": "https://example.org/shared", "text": "Shared", "category_ids": [team["id"], public_id]},
        headers=_auth(),
    ).json()

    client.delete(f"/api/admin/categories/{team['id']}", headers=_auth())

    assert client.get(f"/api/admin/links/{solo['id']}", headers=_auth()).status_code == 404
    assert client.get(f"/api/admin/links/{shared['id']}", headers=_auth()).json()["category_ids"] == [public_id]


def test_link_validation(client):
    unknown = client.post(
        "/api/admin/links",
        json={"href": "https://example.org", "text": "Wiki", "category_ids": ["nope"]},
        headers=_auth(),
    )
    too_short = client.post(
        "/api/admin/links",
        json={"href": "https://example.org", "text": "W"},
        headers=_auth(),
    )
    blank_href = client.post(
        "/api/admin/links",
        json={"href": "   ", "text": "Wiki"},
        headers=_auth(),
    )

    assert unknown.status_code == 400
    assert unknown.json()["code"] == "CATEGORY_REFERENCE_NOT_FOUND"
    assert unknown.json()["details"] == {"category_ids": ["nope"]}
    assert too_short.status_code == 422
    assert too_short.json()["code"] == "VALIDATION_ERROR"
    assert blank_href.status_code == 422


def test_link_list_filters_by_category(client):
    public_id = _public_id(client)
    client.post(
        "/api/admin/links",
        json={"href": "https://example.org/b", "text": "bravo", "category_ids": [public_id]},
        headers=_auth(),
    )
    client.post(
        "/api/admin/links",
        json={"href": "https://example.org/a", "text": "Alpha", "category_ids": [public_id]},
        headers=_auth(),
    )
    client.post("/api/admin/links", json={"href": "https://example.org/c", "text": "Loose"}, headers=_auth())

    filtered = client.get("/api/admin/links", params={"category_id": public_id}, headers=_auth())
    everything = client.get("/api/admin/links", headers=_auth())

    assert [link["text"] for link in filtered.json()["links"]] == ["Alpha", "bravo"]
    assert len(everything.json()["links"]) == 3

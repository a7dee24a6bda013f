from app.linkman.core.security import create_user_access_token


def _auth(user_id, roles=()):
    token = create_user_access_token(user_id, roles=list(roles))
    return {"Authorization": f"Bearer {token}"}


def _create(client, user_id, name, **extra):
    response = client.post("/api/groups", json={"name": name, **extra}, headers=_auth(user_id))
    assert response.status_code == 201, response.text
    return response.json()


def test_groups_require_authentication(client):
    response = client.get("/api/groups/f/editable")

    assert response.status_code == 401
    assert response.json()["code"] == "INVALID_TOKEN"


def test_group_lifecycle(client):
    group = _create(client, "anna", "Readers", members=["bob"])
    assert group["owners"] == ["anna"]
    assert group["created_by"] == "anna"
    assert group["version"] == 0

    forbidden = client.put(f"/api/groups/{group['id']}", json={"name": "Mine"}, headers=_auth("bob"))
    updated = client.put(
        f"/api/groups/{group['id']}",
        json={"name": "Readers", "members": ["bob", "carl"], "owners": []},
        headers=_auth("anna"),
    )
    assert forbidden.status_code == 403
    assert forbidden.json()["code"] == "PERMISSION_DENIED"
    assert updated.status_code == 200
    assert updated.json()["owners"] == ["anna"]
    assert updated.json()["members"] == ["bob", "carl"]

    fetched = client.get(f"/api/groups/{group['id']}", headers=_auth("carl"))
    assert fetched.json()["name"] == "Readers"

    deleted = client.delete(f"/api/groups/{group['id']}", headers=_auth("anna"))
    missing = client.get(f"/api/groups/{group['id']}", headers=_auth("anna"))
    assert deleted.status_code == 204
    assert missing.status_code == 404
    assert missing.json()["code"] == "GROUP_NOT_FOUND"


def test_group_queries(client):
    owned = _create(client, "anna", "beta")
    joined = _create(client, "bob", "Alpha", members=["anna"])

    editable = client.get("/api/groups/f/editable", headers=_auth("anna")).json()
    usable = client.get("/api/groups/f/usable", headers=_auth("anna")).json()
    membership = client.get("/api/groups/f/membership", headers=_auth("anna")).json()
    membership_ids = client.get("/api/groups/f/membership-ids", headers=_auth("anna")).json()
    status = client.get("/api/groups/f/status", headers=_auth("anna")).json()
    by_ids = client.get("/api/groups", params=[("id", joined["id"]), ("id", owned["id"])], headers=_auth("anna")).json()
    options = client.get("/api/groups/f/options", headers=_auth("anna")).json()

    assert [group["id"] for group in editable["groups"]] == [owned["id"]]
    assert [group["name"] for group in usable["groups"]] == ["Alpha", "beta"]
    assert [group["id"] for group in membership["groups"]] == [joined["id"]]
    assert membership_ids == {"ids": [joined["id"]]}
    assert status == {"owned_group_size": 1, "membership_size": 1, "max_owned_groups": -1}
    assert [group["name"] for group in by_ids["groups"]] == ["Alpha", "beta"]
    assert [option["display_value"] for option in options["options"]] == ["Alpha", "beta"]


def test_role_options_require_admin(client):
    denied = client.get("/api/roles/f/options", headers=_auth("anna"))
    allowed = client.get("/api/roles/f/options", headers=_auth("root", roles=["ROLE_ADMIN"]))

    assert denied.status_code == 403
    assert [option["value"] for option in allowed.json()["options"]] == ["ROLE_USER", "ROLE_ADMIN"]


def test_admin_group_management(client):
    admin = _auth("root", roles=["ROLE_ADMIN"])
    group = _create(client, "anna", "Readers", members=["bob"])

    denied = client.get("/api/admin/groups", headers=_auth("anna"))
    assert denied.status_code == 403
    assert denied.json()["code"] == "PERMISSION_DENIED"

    added = client.post("/api/admin/groups", json={"name": "Staff", "owners": ["carl"]}, headers=admin)
    assert added.status_code == 201, added.text
    assert added.json()["created_by"] == "root"
    assert added.json()["owners"] == ["carl"]

    listed = client.get("/api/admin/groups", headers=admin).json()
    assert [item["name"] for item in listed["groups"]] == ["Readers", "Staff"]

    reassigned = client.put(
        f"/api/admin/groups/{group['id']}",
        json={"name": "Readers", "owners": ["dora"], "created_by": "dora"},
        headers=admin,
    )
    assert reassigned.status_code == 200
    assert reassigned.json()["owners"] == ["dora"]
    assert reassigned.json()["created_by"] == "dora"
    assert reassigned.json()["members"] == []

    by_ids = client.get("/api/admin/groups/f", params=[("id", group["id"])], headers=admin).json()
    assert [item["id"] for item in by_ids["groups"]] == [group["id"]]
    assert client.get(f"/api/admin/groups/{group['id']}", headers=admin).json()["name"] == "Readers"

    deleted = client.delete(f"/api/admin/groups/{group['id']}", headers=admin)
    missing = client.get(f"/api/admin/groups/{group['id']}", headers=admin)
    assert deleted.status_code == 204
    assert missing.status_code == 404
    assert missing.json()["code"] == "GROUP_NOT_FOUND"

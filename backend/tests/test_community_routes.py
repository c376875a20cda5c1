import pytest
from conftest import auth_headers_for, create_user
from myhome.models.house_member import HouseMember


@pytest.fixture
def community_id(client, auth_headers):
    response = client.post("/communities", json={"name": "Green Park", "district": "North"}, headers=auth_headers)
    assert response.status_code == 201
    return response.json()["community_id"]


def add_houses(client, community_id, headers, *names):
    return client.post(
        f"/communities/{community_id}/houses",
        json={"houses": [{"name": name} for name in names]},
        headers=headers,
    )


def test_create_and_read_community(client, auth_headers, community_id):
    details = client.get(f"/communities/{community_id}", headers=auth_headers)
    listing = client.get("/communities", headers=auth_headers)

    assert details.json() == {"community_id": community_id, "name": "Green Park", "district": "North"}
    assert [c["community_id"] for c in listing.json()] == [community_id]


def test_unknown_community_not_found(client, auth_headers):
    assert client.get("/communities/missing", headers=auth_headers).status_code == 404
    assert client.get("/communities/missing/houses", headers=auth_headers).status_code == 404
    assert client.get("/communities/missing/admins", headers=auth_headers).status_code == 404


def test_creator_is_listed_as_admin(client, user, auth_headers, community_id):
    response = client.get(f"/communities/{community_id}/admins", headers=auth_headers)

    assert [a["user_id"] for a in response.json()] == [user.user_id]


def test_admin_can_add_admins(client, db, user, auth_headers, community_id):
    second = create_user(db, email="second@example.com")

    response = client.post(
        f"/communities/{community_id}/admins", json={"admins": [second.user_id]}, headers=auth_headers
    )

    assert response.status_code == 201
    assert set(response.json()["admins"]) == {user.user_id, second.user_id}


def test_non_admin_cannot_add_admins(client, db, community_id):
    outsider = create_user(db, email="outsider@example.com")

    response = client.post(
        f"/communities/{community_id}/admins",
        json={"admins": [outsider.user_id]},
        headers=auth_headers_for(outsider),
    )

    assert response.status_code == 401


def test_add_admins_to_unknown_community_not_found(client, auth_headers):
    response = client.post("/communities/missing/admins", json={"admins": ["x"]}, headers=auth_headers)

    assert response.status_code == 404


def test_remove_admin(client, db, auth_headers, community_id):
    second = create_user(db, email="second@example.com")
    client.post(f"/communities/{community_id}/admins", json={"admins": [second.user_id]}, headers=auth_headers)
    path = f"/communities/{community_id}/admins/{second.user_id}"

    assert client.delete(path, headers=auth_headers).status_code == 204
    assert client.delete(path, headers=auth_headers).status_code == 404


def test_add_and_list_houses(client, auth_headers, community_id):
    response = add_houses(client, community_id, auth_headers, "A1", "B2")

    assert response.status_code == 201
    assert len(response.json()["houses"]) == 2
    houses = client.get(f"/communities/{community_id}/houses", headers=auth_headers).json()
    assert sorted(h["name"] for h in houses) == ["A1", "B2"]


def test_adding_only_existing_houses_is_bad_request(client, auth_headers, community_id):
    add_houses(client, community_id, auth_headers, "A1")

    assert add_houses(client, community_id, auth_headers, "A1").status_code == 400


def test_remove_house_from_community(client, auth_headers, community_id):
    [house_id] = add_houses(client, community_id, auth_headers, "A1").json()["houses"]

    path = f"/communities/{community_id}/houses/{house_id}"
    assert client.delete(path, headers=auth_headers).status_code == 204
    assert client.delete(path, headers=auth_headers).status_code == 404
    assert client.get(f"/houses/{house_id}", headers=auth_headers).status_code == 404


def test_delete_community_cascades_to_houses_and_members(client, db, auth_headers, community_id):
    house_ids = add_houses(client, community_id, auth_headers, "A1", "B2").json()["houses"]
    for house_id in house_ids:
        client.post(f"/houses/{house_id}/members", json={"members": [{"name": "Ann"}, {"name": "Bob"}]},
                    headers=auth_headers)
    assert db.query(HouseMember).count() == 4

    assert client.delete(f"/communities/{community_id}", headers=auth_headers).status_code == 204

    assert client.get(f"/communities/{community_id}", headers=auth_headers).status_code == 404
    for house_id in house_ids:
        assert client.get(f"/houses/{house_id}", headers=auth_headers).status_code == 404
    assert db.query(HouseMember).count() == 0
    assert client.delete(f"/communities/{community_id}", headers=auth_headers).status_code == 404


def test_non_admin_cannot_list_admins(client, db, community_id):
    outsider = create_user(db, email="outsider@example.com")

    response = client.get(f"/communities/{community_id}/admins", headers=auth_headers_for(outsider))

    assert response.status_code == 401


def test_non_admin_cannot_remove_admins(client, db, user, auth_headers, community_id):
    outsider = create_user(db, email="outsider@example.com")

    response = client.delete(
        f"/communities/{community_id}/admins/{user.user_id}", headers=auth_headers_for(outsider)
    )

    assert response.status_code == 401
    admins = client.get(f"/communities/{community_id}/admins", headers=auth_headers).json()
    assert [a["user_id"] for a in admins] == [user.user_id]


def test_removed_admin_loses_admin_routes(client, db, user, auth_headers, community_id):
    second = create_user(db, email="second@example.com")
    client.post(f"/communities/{community_id}/admins", json={"admins": [second.user_id]}, headers=auth_headers)

    assert client.delete(f"/communities/{community_id}/admins/{user.user_id}", headers=auth_headers).status_code == 204

    assert client.get(f"/communities/{community_id}/admins", headers=auth_headers).status_code == 401
    assert client.get(f"/communities/{community_id}/admins", headers=auth_headers_for(second)).status_code == 200

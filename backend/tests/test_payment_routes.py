from decimal import Decimal
import pytest
from conftest import auth_headers_for, create_user


@pytest.fixture
def community(client, auth_headers):
    community_id = client.post(
        "/communities", json={"name": "Green Park", "district": "North"}, headers=auth_headers
    ).json()["community_id"]
    [house_id] = client.post(
        f"/communities/{community_id}/houses", json={"houses": [{"name": "A1"}]}, headers=auth_headers
    ).json()["houses"]
    [member] = client.post(
        f"/houses/{house_id}/members", json={"members": [{"name": "Ann"}]}, headers=auth_headers
    ).json()["members"]
    return {"community_id": community_id, "house_id": house_id, "member_id": member["member_id"]}


def schedule(client, headers, admin_id, member_id, description="Rent"):
    return client.post(
        "/payments",
        json={
            "type": "rent",
            "description": description,
            "recurring": True,
            "charge": "250.00",
            "due_date": "2026-11-01",
            "admin_id": admin_id,
            "member_id": member_id,
        },
        headers=headers,
    )


def test_admin_schedules_payment_for_member(client, user, auth_headers, community):
    response = schedule(client, auth_headers, user.user_id, community["member_id"])

    assert response.status_code == 201
    body = response.json()
    assert body["admin_id"] == user.user_id
    assert body["member_id"] == community["member_id"]
    assert Decimal(body["charge"]) == Decimal("250")
    assert body["due_date"] == "2026-11-01"

    details = client.get(f"/payments/{body['payment_id']}", headers=auth_headers)
    assert details.json()["description"] == "Rent"


def test_non_admin_cannot_schedule_payment(client, db, community):
    outsider = create_user(db, email="outsider@example.com")

    response = schedule(client, auth_headers_for(outsider), outsider.user_id, community["member_id"])

    assert response.status_code == 404


def test_unknown_member_cannot_be_charged(client, user, auth_headers, community):
    assert schedule(client, auth_headers, user.user_id, "missing").status_code == 404


def test_unknown_payment_not_found(client, auth_headers):
    assert client.get("/payments/missing", headers=auth_headers).status_code == 404


def test_member_payments(client, user, auth_headers, community):
    schedule(client, auth_headers, user.user_id, community["member_id"], "June")
    schedule(client, auth_headers, user.user_id, community["member_id"], "July")

    response = client.get(f"/members/{community['member_id']}/payments", headers=auth_headers)

    assert [p["description"] for p in response.json()["payments"]] == ["June", "July"]
    assert client.get("/members/missing/payments", headers=auth_headers).status_code == 404


def test_admin_payments_are_paged(client, user, auth_headers, community):
    for month in ["June", "July", "August"]:
        schedule(client, auth_headers, user.user_id, community["member_id"], month)
    path = f"/communities/{community['community_id']}/admins/{user.user_id}/payments"

    first = client.get(f"{path}?page=0&size=2", headers=auth_headers).json()
    second = client.get(f"{path}?page=1&size=2", headers=auth_headers).json()

    assert [p["description"] for p in first["payments"]] == ["June", "July"]
    assert [p["description"] for p in second["payments"]] == ["August"]
    assert first["page_info"] == {"current_page": 0, "page_limit": 2, "total_pages": 2, "total_elements": 3}


def test_admin_payments_of_non_admin_not_found(client, db, auth_headers, community):
    outsider = create_user(db, email="outsider@example.com")
    path = f"/communities/{community['community_id']}/admins/{outsider.user_id}/payments"

    assert client.get(path, headers=auth_headers).status_code == 404
    assert client.get(f"/communities/missing/admins/{outsider.user_id}/payments", headers=auth_headers).status_code == 404


def test_non_admin_cannot_read_admin_payments(client, db, user, auth_headers, community):
    schedule(client, auth_headers, user.user_id, community["member_id"])
    outsider = create_user(db, email="outsider@example.com")
    path = f"/communities/{community['community_id']}/admins/{user.user_id}/payments"

    assert client.get(path, headers=auth_headers_for(outsider)).status_code == 401

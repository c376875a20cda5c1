from decimal import Decimal
import pytest
from conftest import create_user
from myhome.models.community import Community
from myhome.models.house import CommunityHouse
from myhome.models.house_member import HouseMember
from myhome.models.payment import Payment
from myhome.services.community_service import community_service
from myhome.services.house_service import house_service


@pytest.fixture
def admin(db):
    return create_user(db, email="admin@example.com", name="Admin")


def make_community(db, admin, house_names=(), members_per_house=0):
    community = community_service.create_community(db, "Green Park", "North", admin.user_id)
    community_service.add_houses_to_community(db, community.community_id, house_names)
    for house in db.query(CommunityHouse).all():
        house_service.add_house_members(db, house.house_id, [f"member {i}" for i in range(members_per_house)])
    return community


def test_create_community_makes_caller_admin(db, admin):
    community = community_service.create_community(db, "Green Park", "North", admin.user_id)

    assert [a.user_id for a in community.admins] == [admin.user_id]
    assert community_service.is_community_admin(db, community.community_id, admin.user_id) is True


def test_is_community_admin_distinguishes_unknown_community(db, admin):
    other = create_user(db, email="other@example.com")
    community = community_service.create_community(db, "Green Park", "North", admin.user_id)

    assert community_service.is_community_admin(db, community.community_id, other.user_id) is False
    assert community_service.is_community_admin(db, "missing", admin.user_id) is None


def test_add_houses_skips_duplicate_and_empty_names(db, admin):
    community = make_community(db, admin, ["A1"])

    added = community_service.add_houses_to_community(db, community.community_id, ["A1", "B2", "", "B2", "C3"])

    assert len(added) == 2
    names = sorted(h.name for h in community_service.find_community_houses_by_id(db, community.community_id, 0, 50))
    assert names == ["A1", "B2", "C3"]


def test_add_houses_to_unknown_community_adds_nothing(db):
    assert community_service.add_houses_to_community(db, "missing", ["A1"]) == set()
    assert db.query(CommunityHouse).count() == 0


def test_find_community_houses_of_unknown_community_is_none(db):
    assert community_service.find_community_houses_by_id(db, "missing", 0, 10) is None
    assert community_service.find_community_admins_by_id(db, "missing", 0, 10) is None


def test_add_and_remove_admins(db, admin):
    second = create_user(db, email="second@example.com")
    community = community_service.create_community(db, "Green Park", "North", admin.user_id)

    updated = community_service.add_admins_to_community(db, community.community_id, {second.user_id, "ghost"})

    assert {a.user_id for a in updated.admins} == {admin.user_id, second.user_id}
    assert community_service.remove_admin_from_community(db, community.community_id, second.user_id) is True
    assert community_service.remove_admin_from_community(db, community.community_id, second.user_id) is False
    admins = community_service.find_community_admins_by_id(db, community.community_id, 0, 10)
    assert [a.user_id for a in admins] == [admin.user_id]


@pytest.mark.parametrize("house_count", [0, 1, 3])
def test_delete_community_removes_houses_and_members(db, admin, house_count):
    names = [f"house {i}" for i in range(house_count)]
    community = make_community(db, admin, names, members_per_house=2)
    assert db.query(HouseMember).count() == 2 * house_count

    assert community_service.delete_community(db, community.community_id) is True

    assert db.query(Community).count() == 0
    assert db.query(CommunityHouse).count() == 0
    assert db.query(HouseMember).count() == 0
    # Admins are users, they outlive the community
    assert community_service.find_community_admin_by_id(db, admin.user_id) is not None


def test_delete_community_keeps_payments_of_deleted_members(db, admin):
    community = make_community(db, admin, ["A1"], members_per_house=1)
    member = db.query(HouseMember).one()
    db.add(Payment(payment_id="p-1", charge=Decimal("10.00"), type="rent", description="June",
                   recurring=False, admin=admin, member=member))
    db.commit()

    community_service.delete_community(db, community.community_id)

    payment = db.query(Payment).one()
    assert payment.member is None


def test_delete_unknown_community_returns_false(db):
    assert community_service.delete_community(db, "missing") is False


@pytest.mark.parametrize("member_count", [0, 1, 4])
def test_remove_house_deletes_house_and_its_members(db, admin, member_count):
    community = make_community(db, admin, ["A1", "B2"], members_per_house=member_count)
    house = db.query(CommunityHouse).filter(CommunityHouse.name == "A1").one()

    assert community_service.remove_house_from_community_by_house_id(db, community, house.house_id) is True

    assert [h.name for h in db.query(CommunityHouse).all()] == ["B2"]
    assert db.query(HouseMember).count() == member_count
    assert all(m.community_house.name == "B2" for m in db.query(HouseMember).all())


def test_remove_house_of_another_community_is_refused(db, admin):
    first = make_community(db, admin, ["A1"])
    second = community_service.create_community(db, "Blue Lake", "South", admin.user_id)
    house = db.query(CommunityHouse).one()

    assert community_service.remove_house_from_community_by_house_id(db, second, house.house_id) is False
    assert community_service.remove_house_from_community_by_house_id(db, None, house.house_id) is False
    assert db.query(CommunityHouse).count() == 1
    assert first.houses[0].house_id == house.house_id

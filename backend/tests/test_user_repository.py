from conftest import create_user
from myhome.models.community import community_admins
from myhome.models.security_token import SecurityToken
from myhome.repositories.user_repository import user_repository
from myhome.services.community_service import community_service
from myhome.services.security_token_service import security_token_service


def test_find_by_email_and_user_id(db):
    user = create_user(db)

    assert user_repository.find_by_email(db, user.email) is user
    assert user_repository.find_by_user_id(db, user.user_id) is user
    assert user_repository.find_by_email(db, "nobody@example.com") is None


def test_find_all_by_community_id_lists_admins_only(db):
    admin = create_user(db, email="admin@example.com")
    create_user(db, email="other@example.com")
    community = community_service.create_community(db, "Green Park", "North", admin.user_id)

    admins = user_repository.find_all_by_community_id(db, community.community_id, 0, 10)

    assert [a.user_id for a in admins] == [admin.user_id]


def test_delete_removes_user_tokens_and_admin_links(db):
    user = create_user(db)
    security_token_service.create_password_reset_token(db, user)
    community = community_service.create_community(db, "Green Park", "North", user.user_id)

    user_repository.delete(db, user)
    db.commit()

    assert user_repository.find_by_user_id(db, "user-john@example.com") is None
    assert db.query(SecurityToken).count() == 0
    assert db.execute(community_admins.select()).fetchall() == []
    assert community_service.get_community_details_by_id(db, community.community_id) is not None

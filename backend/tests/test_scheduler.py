from datetime import date, timedelta
from unittest.mock import MagicMock, patch
from conftest import create_user
from myhome.core import scheduler as scheduler_module
from myhome.core.config import settings
from myhome.models.security_token import SecurityToken, SecurityTokenType


def add_token(db, owner, value, expiry_date, is_used=False):
    db.add(SecurityToken(
        token_type=SecurityTokenType.RESET,
        token=value,
        creation_date=date.today() - timedelta(days=3),
        expiry_date=expiry_date,
        is_used=is_used,
        token_owner=owner,
    ))
    db.commit()


def test_delete_stale_tokens_removes_used_and_expired_tokens(db):
    owner = create_user(db)
    today = date.today()
    add_token(db, owner, "live", today + timedelta(days=1))
    add_token(db, owner, "used", today + timedelta(days=1), is_used=True)
    add_token(db, owner, "expires-today", today)
    add_token(db, owner, "expired", today - timedelta(days=1))

    deleted = scheduler_module.delete_stale_tokens(db, today=today)

    assert deleted == 3
    assert [t.token for t in db.query(SecurityToken).all()] == ["live"]


def test_cleanup_job_rolls_back_and_closes_session_on_error():
    session = MagicMock()
    with patch.object(scheduler_module, "SessionLocal", return_value=session), \
            patch.object(scheduler_module, "delete_stale_tokens", side_effect=RuntimeError("db down")):
        scheduler_module.cleanup_stale_tokens_job()

    session.rollback.assert_called_once()
    session.close.assert_called_once()


def test_cleanup_job_closes_session_on_success():
    session = MagicMock()
    with patch.object(scheduler_module, "SessionLocal", return_value=session), \
            patch.object(scheduler_module, "delete_stale_tokens", return_value=2) as delete_mock:
        scheduler_module.cleanup_stale_tokens_job()

    delete_mock.assert_called_once_with(session)
    session.rollback.assert_not_called()
    session.close.assert_called_once()


def test_start_scheduler_does_nothing_when_cleanup_disabled(monkeypatch):
    monkeypatch.setattr(settings, "TOKEN_CLEANUP_INTERVAL_HOURS", 0)
    fake_scheduler = MagicMock(running=False)
    monkeypatch.setattr(scheduler_module, "scheduler", fake_scheduler)

    scheduler_module.start_scheduler()

    fake_scheduler.add_job.assert_not_called()
    fake_scheduler.start.assert_not_called()


def test_start_scheduler_registers_cleanup_job(monkeypatch):
    monkeypatch.setattr(settings, "TOKEN_CLEANUP_INTERVAL_HOURS", 6)
    fake_scheduler = MagicMock(running=False)
    monkeypatch.setattr(scheduler_module, "scheduler", fake_scheduler)

    scheduler_module.start_scheduler()

    fake_scheduler.add_job.assert_called_once()
    assert fake_scheduler.add_job.call_args.kwargs["id"] == "cleanup_stale_tokens"
    fake_scheduler.start.assert_called_once()

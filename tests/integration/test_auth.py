"""Integration tests for admin authentication and sessions."""

from datetime import datetime, timedelta

import pytest

from vorsorge_pilot.core import auth
from vorsorge_pilot.core.config import AppConfig, save_config
from vorsorge_pilot.core.exceptions import (
    AuthenticationError,
    NotAuthenticatedError,
    UserNotFoundError,
)
from vorsorge_pilot.core.models import AdminUser
from vorsorge_pilot.data.repositories.sessions_repo import SessionsRepository
from vorsorge_pilot.data.repositories.users_repo import UsersRepository


class TestPasswords:
    def test_hash_and_verify(self, isolated_db):
        user = auth.create_user("anna", "geheim")
        assert auth.is_hashed(user.password_hash)
        assert user.password_hash != "geheim"
        assert auth.verify_password(user, "geheim")
        assert not auth.verify_password(user, "falsch")

    def test_plaintext_upgraded_on_login(self, isolated_db):
        repo = UsersRepository()
        repo.create(AdminUser(username="legacy", password_hash="klartext"))

        session = auth.login("legacy", "klartext")

        assert session.username == "legacy"
        stored = repo.get_by_username("legacy").password_hash
        assert auth.is_hashed(stored)
        # Still works after the upgrade
        auth.login("legacy", "klartext")

    def test_plaintext_wrong_password_not_upgraded(self, isolated_db):
        repo = UsersRepository()
        repo.create(AdminUser(username="legacy", password_hash="klartext"))
        with pytest.raises(AuthenticationError):
            auth.login("legacy", "nope")
        assert repo.get_by_username("legacy").password_hash == "klartext"

    def test_migrate_plaintext_passwords(self, isolated_db):
        repo = UsersRepository()
        repo.create(AdminUser(username="a", password_hash="one"))
        repo.create(AdminUser(username="b", password_hash="two"))
        auth.create_user("c", "three")

        assert auth.migrate_plaintext_passwords() == 2
        assert all(auth.is_hashed(u.password_hash) for u in repo.list_all())
        assert auth.migrate_plaintext_passwords() == 0
        auth.login("a", "one")

    def test_change_password(self, isolated_db):
        auth.create_user("anna", "alt")
        auth.change_password("anna", "neu")
        auth.login("anna", "neu")
        with pytest.raises(AuthenticationError):
            auth.login("anna", "alt")

    def test_change_password_unknown_user(self, isolated_db):
        with pytest.raises(UserNotFoundError):
            auth.change_password("ghost", "x")


class TestDefaultAdmin:
    def test_created_once(self, isolated_db):
        user = auth.ensure_default_admin()
        assert user.username == "admin"
        assert auth.ensure_default_admin() is None
        assert UsersRepository().count() == 1
        auth.login("admin", "admin123")

    def test_uses_config(self, isolated_db):
        save_config(AppConfig(default_admin_user="chef", default_admin_password="pw"))
        auth.ensure_default_admin()
        assert auth.login("chef", "pw").username == "chef"


class TestSessions:
    def test_login_and_current_user(self, isolated_db):
        auth.create_user("anna", "geheim")
        session = auth.login("anna", "geheim")
        assert len(session.token) >= 32
        assert auth.current_user(session.token).username == "anna"

    @pytest.mark.parametrize("username, password", [
        ("anna", "wrong"),
        ("ghost", "geheim"),
        ("", "geheim"),
        ("anna", ""),
    ])
    def test_login_rejected(self, isolated_db, username, password):
        auth.create_user("anna", "geheim")
        with pytest.raises(AuthenticationError):
            auth.login(username, password)

    def test_session_lifetime_from_config(self, isolated_db):
        save_config(AppConfig(session_hours=2))
        auth.create_user("anna", "geheim")
        now = datetime(2025, 6, 1, 12, 0)
        session = auth.login("anna", "geheim", now=now)
        assert session.expires_at == now + timedelta(hours=2)

    def test_expired_session_rejected_and_removed(self, isolated_db):
        auth.create_user("anna", "geheim")
        now = datetime(2025, 6, 1, 12, 0)
        session = auth.login("anna", "geheim", now=now)

        later = now + timedelta(hours=25)
        with pytest.raises(NotAuthenticatedError, match="expired"):
            auth.current_user(session.token, now=later)
        assert SessionsRepository().get_by_token(session.token) is None

    def test_login_purges_expired_sessions(self, isolated_db):
        auth.create_user("anna", "geheim")
        repo = SessionsRepository()
        start = datetime(2025, 6, 1, 12, 0)
        auth.login("anna", "geheim", now=start)
        auth.login("anna", "geheim", now=start + timedelta(hours=1))
        assert repo.count() == 2

        later = start + timedelta(hours=30)
        fresh = auth.login("anna", "geheim", now=later)
        assert repo.count() == 1
        assert repo.get_by_token(fresh.token) is not None

        auth.login("anna", "geheim", now=later + timedelta(hours=30))
        assert repo.count() == 1

    def test_logout(self, isolated_db):
        auth.create_user("anna", "geheim")
        session = auth.login("anna", "geheim")
        assert auth.logout(session.token) is True
        with pytest.raises(NotAuthenticatedError):
            auth.current_user(session.token)

    @pytest.mark.parametrize("token", [None, "", "unknown"])
    def test_no_or_unknown_token(self, isolated_db, token):
        with pytest.raises(NotAuthenticatedError):
            auth.current_user(token)


class TestSessionFile:
    def test_save_load_clear(self, tmp_path):
        assert auth.session_file() == tmp_path / ".vp_session"
        assert auth.load_session_token() is None

        auth.save_session_token("tok123")
        assert auth.load_session_token() == "tok123"
        assert (auth.session_file().stat().st_mode & 0o777) == 0o600

        auth.clear_session_token()
        assert auth.load_session_token() is None
        auth.clear_session_token()

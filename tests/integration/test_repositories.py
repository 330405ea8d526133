"""Integration tests for repository CRUD operations."""

from datetime import datetime, timedelta

import pytest

from vorsorge_pilot.core.models import AdminUser, Lead, LeadFlow, LeadStatus, Session
from vorsorge_pilot.data.repositories.leads_repo import LeadsRepository
from vorsorge_pilot.data.repositories.sessions_repo import SessionsRepository
from vorsorge_pilot.data.repositories.users_repo import UsersRepository


def _lead(flow=LeadFlow.AV, phone="0171", received_at=None, **payload):
    return Lead(
        flow=flow,
        phone=phone,
        payload=payload,
        consent=True,
        received_at=received_at or datetime(2025, 3, 1, 12, 0),
    )


class TestLeadsRepository:
    def test_create_and_get(self, isolated_db):
        repo = LeadsRepository()
        lead = repo.create(_lead(av_firstname="Max", av_income="3000"))

        assert lead.id is not None
        fetched = repo.get_by_id(lead.id)
        assert fetched.flow == LeadFlow.AV
        assert fetched.payload == {"av_firstname": "Max", "av_income": "3000"}
        assert fetched.status == LeadStatus.NEW
        assert fetched.consent is True
        assert fetched.updated_at is None

    def test_list_newest_first_and_filter(self, isolated_db):
        repo = LeadsRepository()
        repo.create(_lead(received_at=datetime(2025, 1, 1)))
        repo.create(_lead(flow=LeadFlow.BU, received_at=datetime(2025, 2, 1)))
        repo.create(_lead(received_at=datetime(2025, 3, 1)))

        all_leads = repo.list_all()
        assert [l.received_at.month for l in all_leads] == [3, 2, 1]
        assert len(repo.list_all(LeadFlow.AV)) == 2
        assert len(repo.list_all(LeadFlow.BU)) == 1
        assert repo.count() == 3
        assert repo.count_by_flow() == {LeadFlow.AV: 2, LeadFlow.BU: 1}

    def test_save_sets_updated_at(self, isolated_db):
        repo = LeadsRepository()
        lead = repo.create(_lead())
        lead.status = LeadStatus.CONTACTED
        lead.updated_by = "admin"
        saved = repo.save(lead)
        assert saved.status == LeadStatus.CONTACTED
        assert saved.updated_by == "admin"
        assert saved.updated_at is not None

    def test_delete(self, isolated_db):
        repo = LeadsRepository()
        lead = repo.create(_lead())
        assert repo.delete(lead.id) is True
        assert repo.get_by_id(lead.id) is None
        assert repo.delete(lead.id) is False

    def test_transaction_rollback(self, isolated_db):
        repo = LeadsRepository()
        with pytest.raises(RuntimeError):
            with isolated_db.transaction():
                repo.create(_lead())
                raise RuntimeError("boom")
        assert repo.count() == 0


class TestUsersRepository:
    def test_create_and_lookup(self, isolated_db):
        repo = UsersRepository()
        user = repo.create(AdminUser(username="admin", password_hash="scrypt:x"))
        assert user.id is not None
        assert user.created_at is not None
        assert repo.get_by_username("admin").password_hash == "scrypt:x"
        assert repo.get_by_username("nobody") is None

    def test_update_password_hash(self, isolated_db):
        repo = UsersRepository()
        user = repo.create(AdminUser(username="admin", password_hash="old"))
        repo.update_password_hash(user.id, "new")
        assert repo.get_by_id(user.id).password_hash == "new"


class TestSessionsRepository:
    def _user(self):
        return UsersRepository().create(AdminUser(username="admin", password_hash="x"))

    def test_create_and_get_by_token(self, isolated_db):
        self._user()
        repo = SessionsRepository()
        expires = datetime(2030, 1, 1, 12, 0)
        repo.create(Session(token="abc", username="admin", expires_at=expires))
        s = repo.get_by_token("abc")
        assert s.username == "admin"
        assert s.expires_at == expires
        assert repo.delete_by_token("abc") is True
        assert repo.get_by_token("abc") is None

    def test_purge_expired(self, isolated_db):
        self._user()
        repo = SessionsRepository()
        now = datetime(2025, 6, 1, 12, 0)
        repo.create(Session(token="old", username="admin", expires_at=now - timedelta(hours=1)))
        repo.create(Session(token="new", username="admin", expires_at=now + timedelta(hours=1)))
        assert repo.purge_expired(now) == 1
        assert repo.get_by_token("new") is not None

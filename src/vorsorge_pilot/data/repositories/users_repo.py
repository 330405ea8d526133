"""Repository for admin user accounts."""

from typing import Optional

from ...core.models import AdminUser
from ..query import BaseRepository, RowMapper


class UsersRepository(BaseRepository[AdminUser]):
    _table = "admin_users"
    _mapper = RowMapper(AdminUser)

    def create(self, user: AdminUser) -> AdminUser:
        return self._insert(user)

    def get_by_username(self, username: str) -> Optional[AdminUser]:
        row = self._query().where("username = ?", username).fetch_one(self._db().conn)
        return self._mapper.map(row) if row else None

    def list_all(self) -> list[AdminUser]:
        rows = self._query().order_by("username").fetch_all(self._db().conn)
        return self._mapper.map_all(rows)

    def update_password_hash(self, user_id: int, password_hash: str) -> None:
        db = self._db()
        db.conn.execute(
            "UPDATE admin_users SET password_hash = ? WHERE id = ?",
            (password_hash, user_id),
        )
        self._commit(db)

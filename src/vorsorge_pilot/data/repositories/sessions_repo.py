"""Repository for admin login sessions."""

from datetime import datetime
from typing import Optional

from ...core.models import Session
from ..query import BaseRepository, RowMapper


class SessionsRepository(BaseRepository[Session]):
    _table = "sessions"
    _mapper = RowMapper(Session)

    def create(self, session: Session) -> Session:
        return self._insert(session)

    def get_by_token(self, token: str) -> Optional[Session]:
        row = self._query().where("token = ?", token).fetch_one(self._db().conn)
        return self._mapper.map(row) if row else None

    def delete_by_token(self, token: str) -> bool:
        db = self._db()
        cursor = db.conn.execute("DELETE FROM sessions WHERE token = ?", (token,))
        self._commit(db)
        return cursor.rowcount > 0

    def purge_expired(self, now: Optional[datetime] = None) -> int:
        """Delete all expired sessions. Returns count deleted."""
        db = self._db()
        cursor = db.conn.execute(
            "DELETE FROM sessions WHERE expires_at <= ?",
            ((now or datetime.now()).isoformat(),),
        )
        self._commit(db)
        return cursor.rowcount

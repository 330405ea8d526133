"""Repository for lead CRUD operations."""

from typing import Optional

from ...core.models import Lead, LeadFlow
from ..query import BaseRepository, RowMapper


class LeadsRepository(BaseRepository[Lead]):
    _table = "leads"
    _mapper = RowMapper(Lead)
    _insert_skip = frozenset({"id", "updated_at"})

    def create(self, lead: Lead) -> Lead:
        return self._insert(lead)

    def list_all(self, flow: Optional[LeadFlow] = None) -> list[Lead]:
        q = self._query().order_by("received_at DESC, id DESC")
        if flow is not None:
            q = q.where("flow = ?", flow.value)
        return self._mapper.map_all(q.fetch_all(self._db().conn))

    def count_by_flow(self) -> dict[LeadFlow, int]:
        rows = self._db().conn.execute(
            "SELECT flow, COUNT(*) AS n FROM leads GROUP BY flow"
        ).fetchall()
        return {LeadFlow(r["flow"]): int(r["n"]) for r in rows}

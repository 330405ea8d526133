"""Lead intake and administration.

A lead is the flat key/value record the AV or BU form posts after the last
wizard step. Required on intake:
  flow            — "av" or "bu"
  <flow>_phone    — callback number
  <flow>_consent  — DSGVO consent checkbox (unless disabled in config.json)

Everything else with the flow prefix (names, income, health answers, …)
is kept verbatim in the lead's payload.
"""

import logging
from collections.abc import Mapping
from datetime import datetime
from typing import Any, Optional

from .exceptions import InvalidLeadError, LeadNotFoundError
from .models import Lead, LeadFlow, LeadStatus

logger = logging.getLogger(__name__)

#: Keys the client sends that are stored in dedicated columns, not the payload
_ENVELOPE_KEYS = frozenset({"flow", "timestamp"})

#: Keys an admin update may never change
_PROTECTED_KEYS = frozenset({"id", "flow", "received_at", "receivedAt", "source_ip", "ip"})

_TRUTHY = frozenset({"1", "true", "on", "yes", "ja", "y"})

#: Landing-page segment → av_status prefill
SEGMENT_PREFILL: dict[str, str] = {
    "Angestellte": "Angestellt",
    "Akademiker": "Angestellt",
    "Selbständig": "Selbständig",
}


def _repo():
    from ..data.repositories.leads_repo import LeadsRepository
    return LeadsRepository()


def is_truthy(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).strip().lower() in _TRUTHY


def prefill_status(segment: Optional[str]) -> str:
    """Status label suggested for a landing-page segment ("" if none)."""
    return SEGMENT_PREFILL.get(segment or "", "")


def collect_flow_fields(flow: LeadFlow, form: Mapping) -> dict:
    """Keep only the form fields belonging to one flow (prefix "av_" / "bu_")."""
    prefix = f"{flow.value}_"
    return {k: v for k, v in form.items() if k.startswith(prefix)}


def parse_flow(raw: Any) -> LeadFlow:
    if not raw:
        raise InvalidLeadError("Missing required field: flow")
    try:
        return LeadFlow(str(raw).strip().lower())
    except ValueError:
        raise InvalidLeadError(f"Unknown flow: {raw!r}") from None


def _parse_client_timestamp(raw: Any) -> Optional[datetime]:
    if not raw:
        return None
    try:
        return datetime.fromisoformat(str(raw).replace("Z", "+00:00"))
    except ValueError:
        logger.warning("Ignoring unparseable client timestamp %r", raw)
        return None


def validate_lead(payload: Mapping, require_consent: bool = True) -> LeadFlow:
    """Check the required fields of a lead payload.

    Returns:
        The parsed LeadFlow.

    Raises:
        InvalidLeadError: flow missing/unknown, phone missing, or no consent.
    """
    flow = parse_flow(payload.get("flow"))
    phone_field = f"{flow.value}_phone"
    if not str(payload.get(phone_field) or "").strip():
        raise InvalidLeadError(f"Missing required field: {phone_field}")
    consent_field = f"{flow.value}_consent"
    if require_consent and not is_truthy(payload.get(consent_field)):
        raise InvalidLeadError(f"Missing consent: {consent_field}")
    return flow


def submit_lead(
    payload: Mapping,
    source_ip: Optional[str] = None,
    require_consent: Optional[bool] = None,
) -> Lead:
    """Validate and store a submitted lead.

    Args:
        payload: Flat key/value record from the form, including "flow" and
            optionally the client "timestamp".
        source_ip: Address the lead was received from, if known.
        require_consent: Override the config.json require_consent setting.

    Returns:
        The stored Lead with its generated id.

    Raises:
        InvalidLeadError: see validate_lead.
    """
    if require_consent is None:
        from .config import get_config
        require_consent = get_config().require_consent

    try:
        flow = validate_lead(payload, require_consent=require_consent)
    except InvalidLeadError as e:
        logger.warning("Rejected lead: %s", e)
        raise

    prefix = flow.value
    lead = Lead(
        flow=flow,
        phone=str(payload[f"{prefix}_phone"]).strip(),
        payload={k: v for k, v in payload.items() if k not in _ENVELOPE_KEYS},
        consent=is_truthy(payload.get(f"{prefix}_consent")),
        submitted_at=_parse_client_timestamp(payload.get("timestamp")),
        received_at=datetime.now(),
        source_ip=source_ip or "",
    )
    saved = _repo().create(lead)
    logger.info("New %s lead saved (id=%s)", flow.value.upper(), saved.id)
    return saved


def list_leads(flow: Optional[LeadFlow] = None) -> list[Lead]:
    return _repo().list_all(flow)


def count_by_flow() -> dict[LeadFlow, int]:
    """Number of stored leads per flow (flows without leads are omitted)."""
    return _repo().count_by_flow()


def get_lead(lead_id: int) -> Lead:
    lead = _repo().get_by_id(lead_id)
    if lead is None:
        raise LeadNotFoundError(f"Lead {lead_id} not found")
    return lead


def update_lead(lead_id: int, updates: Mapping, username: str) -> Lead:
    """Merge admin changes into a stored lead.

    "status" and "notes" update their columns; the flow's phone field also
    updates the phone column; every other key is merged into the payload.

    Raises:
        LeadNotFoundError: no lead with this id.
        InvalidLeadError: status is not a known LeadStatus.
    """
    repo = _repo()
    lead = get_lead(lead_id)
    phone_field = f"{lead.flow.value}_phone"
    payload = dict(lead.payload)

    for key, value in updates.items():
        if key in _PROTECTED_KEYS:
            continue
        if key == "status":
            try:
                lead.status = LeadStatus(str(value))
            except ValueError:
                raise InvalidLeadError(f"Unknown status: {value!r}") from None
        elif key == "notes":
            lead.notes = str(value)
        else:
            payload[key] = value
            if key == phone_field:
                lead.phone = str(value).strip()

    lead.payload = payload
    lead.updated_by = username
    saved = repo.save(lead)
    logger.info("Lead %s updated by %s", lead_id, username)
    return saved


def delete_lead(lead_id: int, username: str) -> None:
    if not _repo().delete(lead_id):
        raise LeadNotFoundError(f"Lead {lead_id} not found")
    logger.info("Lead %s deleted by %s", lead_id, username)

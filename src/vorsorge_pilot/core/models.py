"""Data models for Vorsorge-Pilot."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Optional

EURO = Decimal("1")
ZERO = Decimal("0")


def round_euro(amount: Decimal) -> Decimal:
    """Round to whole euros, halves away from zero (1234.5 → 1235)."""
    return amount.quantize(EURO, rounding=ROUND_HALF_UP)


class OccupationClass(str, Enum):
    ANGESTELLT_PRIVAT = "angestellt_privat"
    ANGESTELLT_OED = "angestellt_oed"      # public-sector employee
    BEAMTER = "beamter"                    # civil servant, no social security
    SELBSTSTAENDIG = "selbststaendig"

    @classmethod
    def default(cls) -> "OccupationClass":
        """Fallback for status labels the form does not know.

        Unknown labels are treated as private-sector employees rather than
        rejected, so every submitted form still gets an estimate.
        """
        return cls.ANGESTELLT_PRIVAT


class MaritalStatus(str, Enum):
    SINGLE = "single"
    VERHEIRATET = "verheiratet"


class LeadFlow(str, Enum):
    AV = "av"   # Altersvorsorge
    BU = "bu"   # Berufsunfähigkeit


class LeadStatus(str, Enum):
    NEW = "new"
    CONTACTED = "contacted"
    QUALIFIED = "qualified"
    CLOSED = "closed"
    LOST = "lost"


@dataclass(frozen=True)
class PersonProfile:
    """Normalized calculation input — built once per request, never stored."""
    occupation: OccupationClass
    marital_status: MaritalStatus
    annual_gross_income: Decimal
    riester_eligible: bool
    children_before_2008: int = 0
    children_from_2008: int = 0
    marginal_tax_rate: Decimal = ZERO
    sv_rate: Decimal = ZERO
    other_pension_contributions: Decimal = ZERO


@dataclass(frozen=True)
class BenefitResult:
    """Contribution and funding advantage for one pension vehicle."""
    max_contribution: Decimal = ZERO
    funding_advantage: Decimal = ZERO
    own_cost: Decimal = ZERO

    @classmethod
    def zero(cls) -> "BenefitResult":
        return cls()

    @classmethod
    def rounded(
        cls,
        max_contribution: Decimal,
        funding_advantage: Decimal,
        own_cost: Decimal,
    ) -> "BenefitResult":
        return cls(
            max_contribution=round_euro(max_contribution),
            funding_advantage=round_euro(funding_advantage),
            own_cost=round_euro(own_cost),
        )

    @property
    def applicable(self) -> bool:
        return self.own_cost > 0 or self.funding_advantage > 0

    def to_dict(self) -> dict:
        return {
            "max_beitrag": int(self.max_contribution),
            "foerdervorteil": int(self.funding_advantage),
        }


@dataclass(frozen=True)
class FundingTotals:
    own_cost: Decimal = ZERO
    funding_advantage: Decimal = ZERO
    funding_ratio: Decimal = ZERO   # percent, one decimal place

    def to_dict(self) -> dict:
        return {
            "eigener_aufwand": int(self.own_cost),
            "foerdervorteil": int(self.funding_advantage),
            "foerderquote": float(self.funding_ratio),
        }


@dataclass(frozen=True)
class FundingResult:
    """Complete Förderrechner output: three vehicles plus the aggregate."""
    bav: BenefitResult
    riester: BenefitResult
    basisrente: BenefitResult
    total: FundingTotals
    profile: Optional[PersonProfile] = None

    def to_dict(self) -> dict:
        return {
            "bav": self.bav.to_dict(),
            "riester": self.riester.to_dict(),
            "basisrente": self.basisrente.to_dict(),
            "gesamt": self.total.to_dict(),
        }


@dataclass
class Lead:
    """A submitted lead-capture form (AV or BU flow)."""
    flow: LeadFlow
    phone: str
    payload: dict = field(default_factory=dict)
    status: LeadStatus = LeadStatus.NEW
    notes: str = ""
    consent: bool = False
    submitted_at: Optional[datetime] = None   # client-side timestamp
    received_at: Optional[datetime] = None
    source_ip: str = ""
    updated_by: str = ""
    id: Optional[int] = None
    updated_at: Optional[datetime] = None

    @property
    def display_name(self) -> str:
        prefix = self.flow.value
        first = self.payload.get(f"{prefix}_firstname", "")
        last = self.payload.get(f"{prefix}_lastname", "")
        return f"{first} {last}".strip()


@dataclass
class AdminUser:
    username: str
    password_hash: str
    role: str = "admin"
    id: Optional[int] = None
    created_at: Optional[datetime] = None


@dataclass
class Session:
    token: str
    username: str
    expires_at: datetime
    id: Optional[int] = None
    created_at: Optional[datetime] = None

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        return (now or datetime.now()) >= self.expires_at

"""Statutory constants for the 2025 Förderrechner.

bAV (§ 3 Nr. 63 EStG, § 1 Abs. 1 Nr. 9 SvEV):
  - 4% of the Beitragsbemessungsgrenze RV (€96,600) social-security free
  - 8% of the BBG RV tax free

Riester (§§ 83–86 EStG):
  - Grundzulage €175, Kinderzulage €185 (born before 2008) / €300 (from 2008)
  - Höchstbetrag incl. Zulagen €2,100, Sockelbetrag €60
  - Mindesteigenbeitrag 4% of prior-year income, minus Zulagen

Basisrente / Rürup (§ 10 Abs. 3 EStG):
  - Höchstbetrag €29,344 single / €58,688 jointly assessed

Only this single constant set is modelled.
"""

from dataclasses import dataclass, fields
from decimal import Decimal

_PERCENT_FIELDS = frozenset({
    "bav_svfrei_prozent",
    "bav_steuerfrei_prozent",
    "riester_mindesteigenbeitrag_prozent",
    "basisrente_sparquote_max",
})


@dataclass(frozen=True)
class FoerderKonstanten:
    """Immutable parameter set for one fiscal year."""

    year: int
    bbg_rv: Decimal                          #: Beitragsbemessungsgrenze RV (West)
    bav_svfrei_prozent: Decimal
    bav_steuerfrei_prozent: Decimal
    bav_svfrei_betrag: Decimal               #: 4% × BBG RV
    bav_steuerfrei_betrag: Decimal           #: 8% × BBG RV
    riester_grundzulage: Decimal
    riester_kinderzulage_vor_2008: Decimal
    riester_kinderzulage_ab_2008: Decimal
    riester_hoechstbetrag: Decimal
    riester_mindestbeitrag: Decimal          #: Sockelbetrag
    riester_mindesteigenbeitrag_prozent: Decimal
    basisrente_limit_single: Decimal
    basisrente_limit_verheiratet: Decimal
    basisrente_sparquote_max: Decimal        #: max. share of gross income saved

    def __post_init__(self):
        for f in fields(self):
            if f.name == "year":
                continue
            value = getattr(self, f.name)
            if value < 0:
                raise ValueError(f"{f.name} must be non-negative, got {value}")
            if f.name in _PERCENT_FIELDS and value > 1:
                raise ValueError(f"{f.name} must be a fraction in [0, 1], got {value}")


KONSTANTEN_2025 = FoerderKonstanten(
    year=2025,
    bbg_rv=Decimal("96600"),
    bav_svfrei_prozent=Decimal("0.04"),
    bav_steuerfrei_prozent=Decimal("0.08"),
    bav_svfrei_betrag=Decimal("3864"),
    bav_steuerfrei_betrag=Decimal("7728"),
    riester_grundzulage=Decimal("175"),
    riester_kinderzulage_vor_2008=Decimal("185"),
    riester_kinderzulage_ab_2008=Decimal("300"),
    riester_hoechstbetrag=Decimal("2100"),
    riester_mindestbeitrag=Decimal("60"),
    riester_mindesteigenbeitrag_prozent=Decimal("0.04"),
    basisrente_limit_single=Decimal("29344"),
    basisrente_limit_verheiratet=Decimal("58688"),
    basisrente_sparquote_max=Decimal("0.20"),
)

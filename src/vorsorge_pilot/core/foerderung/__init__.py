"""Förderrechner — state funding for German private pension provision.

High-level entry point:
    from vorsorge_pilot.core.foerderung import calculate_foerderung

Pipeline for one AV form submission:
  1. profile          — raw form values → PersonProfile (monthly × 12,
                        occupation, marital status, children, tax rate)
  2. bav / riester / basisrente — three independent calculators
  3. summary          — total own cost, total advantage, Förderquote

Sub-modules (importable individually for testing or reuse):
    konstanten      — statutory limits and allowances (2025)
    grenzsteuersatz — stepped marginal tax rate
    profile         — form vocabulary → normalized profile
    bav             — betriebliche Altersversorgung (§ 3 Nr. 63 EStG)
    riester         — Riester-Zulagen + Günstigerprüfung (§§ 10a, 83 ff. EStG)
    basisrente      — Rürup deduction (§ 10 Abs. 3 EStG)
    summary         — aggregation and Förderquote
"""

from collections.abc import Mapping
from decimal import Decimal
from typing import Optional

from ..models import FundingResult, PersonProfile
from .basisrente import basisrente_contribution, basisrente_limit, calculate_basisrente
from .bav import bav_ceilings, calculate_bav
from .grenzsteuersatz import TAX_BRACKETS, TOP_RATE, marginal_tax_rate
from .konstanten import KONSTANTEN_2025, FoerderKonstanten
from .profile import (
    build_profile,
    estimate_children,
    is_riester_eligible,
    map_marital_status,
    map_occupation,
    parse_monthly_income,
)
from .riester import calculate_riester, riester_allowance, riester_own_contribution
from .summary import funding_ratio, summarize

__all__ = [
    "calculate_foerderung",
    "calculate_for_profile",
    # konstanten
    "FoerderKonstanten",
    "KONSTANTEN_2025",
    # grenzsteuersatz
    "TAX_BRACKETS",
    "TOP_RATE",
    "marginal_tax_rate",
    # profile
    "build_profile",
    "estimate_children",
    "is_riester_eligible",
    "map_marital_status",
    "map_occupation",
    "parse_monthly_income",
    # calculators
    "bav_ceilings",
    "calculate_bav",
    "calculate_riester",
    "riester_allowance",
    "riester_own_contribution",
    "basisrente_contribution",
    "basisrente_limit",
    "calculate_basisrente",
    # summary
    "funding_ratio",
    "summarize",
]


def calculate_for_profile(
    profile: PersonProfile,
    konstanten: FoerderKonstanten = KONSTANTEN_2025,
) -> FundingResult:
    """Run the three calculators and the aggregation for a ready profile."""
    bav = calculate_bav(profile, konstanten)
    riester = calculate_riester(profile, konstanten)
    basisrente = calculate_basisrente(profile, konstanten)
    return FundingResult(
        bav=bav,
        riester=riester,
        basisrente=basisrente,
        total=summarize(bav, riester, basisrente),
        profile=profile,
    )


def calculate_foerderung(
    form_data: Mapping,
    konstanten: FoerderKonstanten = KONSTANTEN_2025,
    sv_rate: Optional[Decimal] = None,
    other_pension_contributions: Optional[Decimal] = None,
) -> FundingResult:
    """Calculate the maximum state funding for all three pension vehicles.

    Never raises for user input: missing or unparseable income counts as 0,
    unknown status labels count as private-sector employment, and a vehicle
    that does not apply simply contributes zeros.

    Args:
        form_data: Raw AV form values (av_income monthly, av_status, av_family).
        konstanten: Statutory constant set. Defaults to 2025.
        sv_rate: Employee social-security rate. Reads from config.json if
            not provided (default 20%).
        other_pension_contributions: Existing pension contributions counted
            against the Basisrente limit. Reads from config.json if not
            provided (default 0).

    Returns:
        FundingResult; use .to_dict() for the bav/riester/basisrente/gesamt
        structure rendered by the form.
    """
    if sv_rate is None or other_pension_contributions is None:
        from ..config import get_config
        cfg = get_config()
        sv_rate = cfg.sv_rate if sv_rate is None else sv_rate
        if other_pension_contributions is None:
            other_pension_contributions = cfg.other_pension_contributions

    profile = build_profile(
        form_data,
        sv_rate=sv_rate,
        other_pension_contributions=other_pension_contributions,
    )
    return calculate_for_profile(profile, konstanten)

"""Riester-Rente — state-subsidized private pension.

§§ 83–86 EStG: eligible savers receive fixed Zulagen (allowances):
  - Grundzulage                         €175
  - Kinderzulage, child born < 2008     €185 per child
  - Kinderzulage, child born ≥ 2008     €300 per child

To receive the full Zulagen the saver must pay a Mindesteigenbeitrag of 4%
of the prior-year income minus the Zulagen, at least the Sockelbetrag of €60.
Own contribution plus Zulagen may not exceed the Höchstbetrag of €2,100.

§ 10a EStG (Günstigerprüfung): the total contribution is also deductible.
The tax saving only counts where it exceeds the Zulagen already received.

Eligibility is restricted to employees and civil servants (§ 10a Abs. 1).
"""

from decimal import Decimal

from ..models import BenefitResult, PersonProfile
from .konstanten import KONSTANTEN_2025, FoerderKonstanten


def riester_allowance(
    children_before_2008: int,
    children_from_2008: int,
    konstanten: FoerderKonstanten = KONSTANTEN_2025,
) -> Decimal:
    """Total Zulagen: Grundzulage plus Kinderzulagen for both tiers.

    Examples:
        (0, 0) → 175
        (1, 2) → 175 + 185 + 600 = 960
    """
    return (
        konstanten.riester_grundzulage
        + children_before_2008 * konstanten.riester_kinderzulage_vor_2008
        + children_from_2008 * konstanten.riester_kinderzulage_ab_2008
    )


def riester_own_contribution(
    annual_gross_income: Decimal,
    allowance: Decimal,
    konstanten: FoerderKonstanten = KONSTANTEN_2025,
) -> Decimal:
    """Own contribution required for the full Zulagen, capped by the Höchstbetrag.

    Examples:
        income=36000, allowance=175 → 4% = 1440 − 175 = 1265
        income=10000, allowance=775 → max(400 − 775, 60) = 60
        income=90000, allowance=175 → min(3425, 2100 − 175) = 1925
    """
    theoretical_minimum = konstanten.riester_mindesteigenbeitrag_prozent * annual_gross_income
    minimum = max(theoretical_minimum - allowance, konstanten.riester_mindestbeitrag)
    ceiling = max(Decimal("0"), konstanten.riester_hoechstbetrag - allowance)
    return min(max(minimum, Decimal("0")), ceiling)


def calculate_riester(
    profile: PersonProfile,
    konstanten: FoerderKonstanten = KONSTANTEN_2025,
) -> BenefitResult:
    """Calculate the Riester funding advantage (Zulagen + additional tax bonus).

    Returns zero when the profile is not eligible or has no income — without
    earned income there is no Mindesteigenbeitrag to pay into the contract.
    """
    if not profile.riester_eligible or profile.annual_gross_income <= 0:
        return BenefitResult.zero()

    allowance = riester_allowance(
        profile.children_before_2008, profile.children_from_2008, konstanten
    )
    contribution = riester_own_contribution(
        profile.annual_gross_income, allowance, konstanten
    )

    gross_relief = (contribution + allowance) * profile.marginal_tax_rate
    tax_bonus = max(Decimal("0"), gross_relief - allowance)

    return BenefitResult.rounded(
        max_contribution=contribution,
        funding_advantage=allowance + tax_bonus,
        own_cost=contribution,
    )

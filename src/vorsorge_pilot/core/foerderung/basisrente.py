"""Basisrente (Rürup-Rente).

§ 10 Abs. 3 EStG: contributions are deductible as Sonderausgaben up to the
Höchstbetrag of the knappschaftliche Rentenversicherung:
  - €29,344 single
  - €58,688 jointly assessed couples

Other pension contributions (statutory pension, Versorgungswerk) use up the
same limit. The Förderrechner additionally caps the contribution at a
realistic savings rate of 20% of gross income.
"""

from decimal import Decimal

from ..models import BenefitResult, MaritalStatus, PersonProfile
from .konstanten import KONSTANTEN_2025, FoerderKonstanten


def basisrente_limit(
    marital_status: MaritalStatus,
    konstanten: FoerderKonstanten = KONSTANTEN_2025,
) -> Decimal:
    if marital_status == MaritalStatus.VERHEIRATET:
        return konstanten.basisrente_limit_verheiratet
    return konstanten.basisrente_limit_single


def basisrente_contribution(
    profile: PersonProfile,
    konstanten: FoerderKonstanten = KONSTANTEN_2025,
) -> Decimal:
    """Deductible contribution: whichever of headroom and savings rate binds first."""
    headroom = max(
        Decimal("0"),
        basisrente_limit(profile.marital_status, konstanten)
        - profile.other_pension_contributions,
    )
    income_ceiling = profile.annual_gross_income * konstanten.basisrente_sparquote_max
    return min(headroom, income_ceiling)


def calculate_basisrente(
    profile: PersonProfile,
    konstanten: FoerderKonstanten = KONSTANTEN_2025,
) -> BenefitResult:
    """Straight tax deduction: advantage = contribution × marginal tax rate."""
    contribution = basisrente_contribution(profile, konstanten)
    return BenefitResult.rounded(
        max_contribution=contribution,
        funding_advantage=contribution * profile.marginal_tax_rate,
        own_cost=contribution,
    )

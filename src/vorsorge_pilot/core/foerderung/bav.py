"""Betriebliche Altersversorgung (bAV) — deferred compensation.

§ 3 Nr. 63 EStG: employer pension contributions are tax free up to 8% of the
Beitragsbemessungsgrenze RV. § 1 Abs. 1 Nr. 9 SvEV: the first 4% of the BBG
are additionally free of social-security contributions.

The contribution is split into two layers:
  svfrei          = min(4% × BBG, 4% × income)          — tax + SV free
  nur_steuerfrei  = min(8% × BBG, 8% × income) − svfrei — tax free only

Self-employed persons have no employer and cannot use the bAV. Civil
servants pay no social-security contributions, so only the tax saving counts.
"""

from decimal import Decimal

from ..models import BenefitResult, OccupationClass, PersonProfile
from .konstanten import KONSTANTEN_2025, FoerderKonstanten


def bav_ceilings(
    annual_gross_income: Decimal,
    konstanten: FoerderKonstanten = KONSTANTEN_2025,
) -> tuple[Decimal, Decimal]:
    """Split the maximum bAV contribution into its two layers.

    Returns:
        Tuple of (svfrei, nur_steuerfrei).

    Examples:
        income=36000  → (1440, 1440)   — income-capped
        income=120000 → (3864, 3864)   — BBG-capped
    """
    svfrei = min(
        konstanten.bav_svfrei_betrag,
        konstanten.bav_svfrei_prozent * annual_gross_income,
    )
    steuerfrei = min(
        konstanten.bav_steuerfrei_betrag,
        konstanten.bav_steuerfrei_prozent * annual_gross_income,
    )
    nur_steuerfrei = max(Decimal("0"), steuerfrei - svfrei)
    return svfrei, nur_steuerfrei


def calculate_bav(
    profile: PersonProfile,
    konstanten: FoerderKonstanten = KONSTANTEN_2025,
) -> BenefitResult:
    """Calculate the bAV funding advantage for a fully used contribution room.

    Returns:
        BenefitResult rounded to whole euros; zero for the self-employed.
    """
    if profile.occupation == OccupationClass.SELBSTSTAENDIG:
        return BenefitResult.zero()

    svfrei, nur_steuerfrei = bav_ceilings(profile.annual_gross_income, konstanten)
    rate = profile.marginal_tax_rate

    tax_saving_svfrei = svfrei * rate
    tax_saving_nur_steuerfrei = nur_steuerfrei * rate
    if profile.occupation == OccupationClass.BEAMTER:
        sv_saving = Decimal("0")
    else:
        sv_saving = svfrei * profile.sv_rate

    contribution = svfrei + nur_steuerfrei
    return BenefitResult.rounded(
        max_contribution=contribution,
        funding_advantage=tax_saving_svfrei + tax_saving_nur_steuerfrei + sv_saving,
        own_cost=contribution,
    )

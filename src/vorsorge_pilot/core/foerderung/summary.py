"""Aggregate the per-vehicle results into the headline Förderquote."""

from decimal import ROUND_HALF_UP, Decimal

from ..models import BenefitResult, FundingTotals, round_euro

RATIO_PLACES = Decimal("0.1")


def funding_ratio(funding_advantage: Decimal, own_cost: Decimal) -> Decimal:
    """Förderquote in percent, one decimal place; 0 when nothing is paid in."""
    if own_cost <= 0:
        return Decimal("0")
    return (funding_advantage / own_cost * 100).quantize(RATIO_PLACES, rounding=ROUND_HALF_UP)


def summarize(*results: BenefitResult) -> FundingTotals:
    own_cost = sum((r.own_cost for r in results), Decimal("0"))
    funding_advantage = sum((r.funding_advantage for r in results), Decimal("0"))
    return FundingTotals(
        own_cost=round_euro(own_cost),
        funding_advantage=round_euro(funding_advantage),
        funding_ratio=funding_ratio(funding_advantage, own_cost),
    )

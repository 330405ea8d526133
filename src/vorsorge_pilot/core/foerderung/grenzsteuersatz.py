"""Simplified marginal income tax rate (Grenzsteuersatz).

The real § 32a EStG tariff is a piecewise polynomial. For a quick estimate
the Förderrechner uses a stepped table instead: the rate of the first bracket
whose inclusive upper bound is ≥ the annual gross income.

  ≤ €11,604   →  0%   (Grundfreibetrag 2024)
  ≤ €20,000   → 14%
  ≤ €30,000   → 24%
  ≤ €50,000   → 30%
  ≤ €70,000   → 35%
  ≤ €100,000  → 40%
  above       → 42%   (Spitzensteuersatz)
"""

from decimal import Decimal

#: (inclusive upper bound, rate), ascending
TAX_BRACKETS: list[tuple[Decimal, Decimal]] = [
    (Decimal("11604"), Decimal("0")),
    (Decimal("20000"), Decimal("0.14")),
    (Decimal("30000"), Decimal("0.24")),
    (Decimal("50000"), Decimal("0.30")),
    (Decimal("70000"), Decimal("0.35")),
    (Decimal("100000"), Decimal("0.40")),
]

#: Spitzensteuersatz above the last bracket
TOP_RATE = Decimal("0.42")


def marginal_tax_rate(annual_gross_income: Decimal) -> Decimal:
    """Look up the stepped marginal tax rate for an annual gross income.

    Examples:
        11604 → 0       (boundary is inclusive)
        36000 → 0.30
        150000 → 0.42
    """
    for upper_bound, rate in TAX_BRACKETS:
        if annual_gross_income <= upper_bound:
            return rate
    return TOP_RATE

"""Translate raw form values into a normalized PersonProfile.

This is the only module that looks at the form's free text. The three
calculators see the categorical profile, never the raw strings, so a change
in the form's wording only has to be reflected here.

Form vocabulary (AV flow):
  av_income  — gross monthly income in EUR
  av_status  — "Angestellt" | "Beamter" | "Selbständig" | "Freiberufler"
  av_family  — e.g. "ledig", "verheiratet", "verheiratet, mit Kindern"
"""

from collections.abc import Mapping
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from ..models import MaritalStatus, OccupationClass, PersonProfile
from .grenzsteuersatz import marginal_tax_rate

#: Exact status labels offered by the form
OCCUPATION_LABELS: dict[str, OccupationClass] = {
    "Angestellt": OccupationClass.ANGESTELLT_PRIVAT,
    "Beamter": OccupationClass.BEAMTER,
    "Selbständig": OccupationClass.SELBSTSTAENDIG,
    "Freiberufler": OccupationClass.SELBSTSTAENDIG,
}

#: Occupation classes entitled to Riester-Zulagen (§ 10a Abs. 1 EStG)
RIESTER_ELIGIBLE = frozenset({
    OccupationClass.ANGESTELLT_PRIVAT,
    OccupationClass.ANGESTELLT_OED,
    OccupationClass.BEAMTER,
})

MARRIED_MARKER = "verheiratet"
CHILDREN_MARKER = "Kinder"

DEFAULT_SV_RATE = Decimal("0.20")

#: Monthly incomes of 10^16 EUR and above are treated as unusable input
MAX_INCOME_EXPONENT = 15


def map_occupation(status: Optional[str]) -> OccupationClass:
    """Map the form's status label; unknown labels fall back to the default class."""
    return OCCUPATION_LABELS.get(status or "", OccupationClass.default())


def map_marital_status(family: Optional[str]) -> MaritalStatus:
    if family and MARRIED_MARKER in family:
        return MaritalStatus.VERHEIRATET
    return MaritalStatus.SINGLE


def is_riester_eligible(occupation: OccupationClass) -> bool:
    return occupation in RIESTER_ELIGIBLE


def estimate_children(
    marital_status: MaritalStatus,
    family: Optional[str],
) -> tuple[int, int]:
    """Guess the number of children per Kinderzulage tier.

    The form only says "mit Kindern", not how many. Married households are
    assumed to have two children, singles one, all born 2008 or later.

    Returns:
        Tuple of (children_before_2008, children_from_2008).
    """
    if family and CHILDREN_MARKER in family:
        return 0, 2 if marital_status == MaritalStatus.VERHEIRATET else 1
    return 0, 0


def parse_monthly_income(raw: Any) -> Decimal:
    """Parse the monthly income field; anything unusable counts as 0.

    Accepts numbers and strings with a comma or dot decimal separator.
    Missing, unparseable, negative, non-finite or absurdly large values
    yield Decimal("0").
    """
    if raw is None or isinstance(raw, bool):
        return Decimal("0")
    text = str(raw).strip().replace("€", "").replace(" ", "").replace(",", ".")
    try:
        value = Decimal(text)
    except InvalidOperation:
        return Decimal("0")
    if not value.is_finite() or value < 0 or value.adjusted() > MAX_INCOME_EXPONENT:
        return Decimal("0")
    return value


def clamp_rate(rate: Decimal) -> Decimal:
    """Clamp a contribution rate to [0, 1]; non-finite rates count as 0."""
    if not rate.is_finite():
        return Decimal("0")
    return min(max(rate, Decimal("0")), Decimal("1"))


def build_profile(
    form_data: Mapping,
    sv_rate: Decimal = DEFAULT_SV_RATE,
    other_pension_contributions: Decimal = Decimal("0"),
) -> PersonProfile:
    """Build the normalized calculation profile from raw AV form values.

    Args:
        form_data: Mapping with av_income (monthly), av_status, av_family.
        sv_rate: Employee share of social-security contributions. Civil
            servants always get 0.
        other_pension_contributions: Existing contributions counted against
            the Basisrente limit.

    Returns:
        PersonProfile with annual income (monthly × 12) and all derived fields.
    """
    annual_income = parse_monthly_income(form_data.get("av_income")) * 12
    family = form_data.get("av_family") or ""

    occupation = map_occupation(form_data.get("av_status"))
    marital_status = map_marital_status(family)
    before_2008, from_2008 = estimate_children(marital_status, family)

    return PersonProfile(
        occupation=occupation,
        marital_status=marital_status,
        annual_gross_income=annual_income,
        riester_eligible=is_riester_eligible(occupation),
        children_before_2008=before_2008,
        children_from_2008=from_2008,
        marginal_tax_rate=marginal_tax_rate(annual_income),
        sv_rate=Decimal("0") if occupation == OccupationClass.BEAMTER else clamp_rate(sv_rate),
        other_pension_contributions=max(other_pension_contributions, Decimal("0")),
    )

"""Tests for core.foerderung.basisrente.

  contribution = min(max(0, limit − other contributions), 20% × income)
  advantage    = contribution × rate
"""

from decimal import Decimal

from vorsorge_pilot.core.foerderung.basisrente import (
    basisrente_contribution,
    basisrente_limit,
    calculate_basisrente,
)
from vorsorge_pilot.core.models import MaritalStatus, OccupationClass, PersonProfile


def _profile(income, rate, married=False, other="0"):
    return PersonProfile(
        occupation=OccupationClass.SELBSTSTAENDIG,
        marital_status=MaritalStatus.VERHEIRATET if married else MaritalStatus.SINGLE,
        annual_gross_income=Decimal(income),
        riester_eligible=False,
        marginal_tax_rate=Decimal(rate),
        other_pension_contributions=Decimal(other),
    )


class TestLimit:
    def test_single(self):
        assert basisrente_limit(MaritalStatus.SINGLE) == Decimal("29344")

    def test_married(self):
        assert basisrente_limit(MaritalStatus.VERHEIRATET) == Decimal("58688")


class TestContribution:
    def test_income_binds(self):
        # min(29344, 7200)
        assert basisrente_contribution(_profile("36000", "0.30")) == Decimal("7200")

    def test_limit_binds(self):
        # 20% of 200000 = 40000 > 29344
        assert basisrente_contribution(_profile("200000", "0.42")) == Decimal("29344")

    def test_married_limit(self):
        assert basisrente_contribution(_profile("400000", "0.42", married=True)) == Decimal("58688")

    def test_other_contributions_reduce_headroom(self):
        assert basisrente_contribution(_profile("60000", "0.35", other="29000")) == Decimal("344")

    def test_other_contributions_above_limit(self):
        assert basisrente_contribution(_profile("60000", "0.35", other="40000")) == Decimal("0")


class TestCalculateBasisrente:
    def test_straight_deduction(self):
        r = calculate_basisrente(_profile("60000", "0.35", married=True))
        assert r.own_cost == Decimal("12000")
        assert r.max_contribution == Decimal("12000")
        assert r.funding_advantage == Decimal("4200")

    def test_zero_rate(self):
        r = calculate_basisrente(_profile("9600", "0"))
        assert r.own_cost == Decimal("1920")
        assert r.funding_advantage == Decimal("0")

    def test_zero_income(self):
        r = calculate_basisrente(_profile("0", "0"))
        assert r.own_cost == Decimal("0")
        assert r.funding_advantage == Decimal("0")

"""Tests for core.foerderung.bav.

  svfrei          = min(3864, 4% × income)
  nur_steuerfrei  = max(0, min(7728, 8% × income) − svfrei)
  advantage       = (svfrei + nur_steuerfrei) × rate + svfrei × sv_rate
"""

from decimal import Decimal

import pytest

from vorsorge_pilot.core.foerderung.bav import bav_ceilings, calculate_bav
from vorsorge_pilot.core.foerderung.konstanten import KONSTANTEN_2025
from vorsorge_pilot.core.models import (
    BenefitResult,
    MaritalStatus,
    OccupationClass,
    PersonProfile,
)


def _profile(occupation, income, rate, sv_rate="0.20"):
    return PersonProfile(
        occupation=occupation,
        marital_status=MaritalStatus.SINGLE,
        annual_gross_income=Decimal(income),
        riester_eligible=occupation != OccupationClass.SELBSTSTAENDIG,
        marginal_tax_rate=Decimal(rate),
        sv_rate=Decimal(sv_rate),
    )


class TestBavCeilings:
    def test_income_capped(self):
        # 36000: 4% = 1440 < 3864, 8% = 2880 < 7728
        assert bav_ceilings(Decimal("36000")) == (Decimal("1440"), Decimal("1440"))

    def test_bbg_capped(self):
        assert bav_ceilings(Decimal("120000")) == (Decimal("3864"), Decimal("3864"))

    def test_between_caps(self):
        # 4% of 100000 = 4000 → capped 3864; 8% = 8000 → capped 7728
        svfrei, nur = bav_ceilings(Decimal("100000"))
        assert svfrei == Decimal("3864")
        assert nur == Decimal("3864")

    def test_zero_income(self):
        assert bav_ceilings(Decimal("0")) == (Decimal("0"), Decimal("0"))

    def test_bounds_hold_for_all_incomes(self):
        for income in range(0, 200_000, 1000):
            inc = Decimal(income)
            svfrei, nur = bav_ceilings(inc)
            assert 0 <= svfrei <= min(Decimal("3864"), Decimal("0.04") * inc)
            assert 0 <= nur <= max(Decimal("0"), min(Decimal("7728"), Decimal("0.08") * inc) - svfrei)


class TestCalculateBav:
    def test_salaried_36000(self):
        # tax = 2880 × 0.30 = 864, sv = 1440 × 0.20 = 288
        r = calculate_bav(_profile(OccupationClass.ANGESTELLT_PRIVAT, "36000", "0.30"))
        assert r.max_contribution == Decimal("2880")
        assert r.own_cost == Decimal("2880")
        assert r.funding_advantage == Decimal("1152")

    def test_civil_servant_no_sv_saving(self):
        # sv_rate on the profile is ignored for civil servants
        r = calculate_bav(_profile(OccupationClass.BEAMTER, "48000", "0.30", sv_rate="0.20"))
        assert r.own_cost == Decimal("3840")
        assert r.funding_advantage == Decimal("1152")   # 3840 × 0.30

    def test_high_income_rounded(self):
        # 7728 × 0.42 = 3245.76, 3864 × 0.20 = 772.80 → 4018.56 → 4019
        r = calculate_bav(_profile(OccupationClass.ANGESTELLT_PRIVAT, "120000", "0.42"))
        assert r.funding_advantage == Decimal("4019")
        assert r.own_cost == Decimal("7728")

    def test_low_income_only_sv_saving(self):
        # 9600: rate 0, sv = 384 × 0.20 = 76.8 → 77
        r = calculate_bav(_profile(OccupationClass.ANGESTELLT_PRIVAT, "9600", "0"))
        assert r.funding_advantage == Decimal("77")
        assert r.own_cost == Decimal("768")

    @pytest.mark.parametrize("income", ["0", "36000", "250000"])
    def test_self_employed_excluded(self, income):
        r = calculate_bav(_profile(OccupationClass.SELBSTSTAENDIG, income, "0.42"))
        assert r == BenefitResult.zero()

    def test_custom_constants(self):
        import dataclasses
        k = dataclasses.replace(KONSTANTEN_2025, bav_svfrei_betrag=Decimal("1000"))
        r = calculate_bav(_profile(OccupationClass.ANGESTELLT_PRIVAT, "36000", "0.30"), k)
        # svfrei = 1000, nur_steuerfrei = 2880 − 1000 = 1880
        assert r.own_cost == Decimal("2880")
        assert r.funding_advantage == Decimal("1064")   # 864 + 200

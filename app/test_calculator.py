"""Unit tests for the emissions calculator and factor tables."""

import pytest

from calculator import calculate_emissions
from carbon_models import CHART_LABELS, Comparison, Region, UsageInput
from emission_factors import (
    LBS_PER_METRIC_TON,
    REGION_AVERAGES,
    REGION_FACTORS,
    annual_tons,
    get_region_factor,
    get_regional_average,
)


# ---------------------------------------------------------------------------
# emission_factors
# ---------------------------------------------------------------------------

class TestAnnualTons:

    def test_electricity_monthly(self):
        assert annual_tons("electricity", 900) == pytest.approx(
            900 * 0.92 * 12 / LBS_PER_METRIC_TON
        )

    def test_waste_weekly(self):
        assert annual_tons("waste", 10) == pytest.approx(10 * 1.9 * 52 / LBS_PER_METRIC_TON)

    def test_transportation_uses_mpg(self):
        assert annual_tons("transportation", 250) == pytest.approx(
            250 * (19.6 / 25) * 52 / LBS_PER_METRIC_TON
        )

    def test_zero_quantity(self):
        assert annual_tons("natural_gas", 0) == 0.0

    def test_unknown_type_raises(self):
        with pytest.raises(ValueError, match="Unknown usage type"):
            annual_tons("coal", 1)


class TestRegionLookups:

    def test_every_region_has_factor_and_average(self):
        for region in Region:
            assert region in REGION_FACTORS
            assert region in REGION_AVERAGES

    def test_case_insensitive(self):
        assert get_region_factor("Midwest") == 1.2
        assert get_regional_average("  PACIFIC ") == 8

    def test_unknown_region_uses_other(self):
        assert get_region_factor("atlantis") == 1.0
        assert get_regional_average(None) == 10

    def test_parse(self):
        assert Region.parse("South") is Region.SOUTH
        assert Region.parse("") is Region.OTHER
        assert Region.parse(Region.WEST) is Region.WEST


# ---------------------------------------------------------------------------
# calculate_emissions
# ---------------------------------------------------------------------------

class TestCalculateEmissions:

    def test_zero_usage_is_better(self):
        result = calculate_emissions(UsageInput())
        assert result.total_emission == 0.0
        assert result.per_person_emission == 0.0
        assert result.comparison_percentage == -100.0
        assert result.comparison == Comparison.BETTER
        assert result.regional_average == 10

    def test_electricity_only(self):
        result = calculate_emissions(UsageInput(electricity=900))
        # 900 * 0.92 * 12 / 2204.62 = 4.5069
        assert result.energy_emission == pytest.approx(4.51)
        assert result.total_emission == pytest.approx(4.51)
        assert result.transportation_emission == 0.0
        assert result.comparison == Comparison.BETTER

    def test_energy_includes_natural_gas(self):
        result = calculate_emissions(UsageInput(electricity=900, natural_gas=50))
        expected = (900 * 0.92 * 12 + 50 * 11.7 * 12) / LBS_PER_METRIC_TON
        assert result.energy_emission == pytest.approx(round(expected, 2))

    def test_region_factor_applied_to_every_category(self):
        usage = UsageInput(
            electricity=900, natural_gas=50, water=3000, waste=30,
            transportation=250, region=Region.MIDWEST,
        )
        base = calculate_emissions(
            UsageInput(
                electricity=900, natural_gas=50, water=3000, waste=30,
                transportation=250, region=Region.WEST,
            )
        )
        adjusted = calculate_emissions(usage)
        for name, value in adjusted.category_emissions.items():
            assert value == pytest.approx(base.category_emissions[name] * 1.2, abs=0.02)
        assert adjusted.regional_average == 12

    def test_total_matches_category_sum(self):
        usage = UsageInput(
            electricity=650, natural_gas=40, water=2500, waste=25, transportation=180,
            region=Region.NORTHEAST,
        )
        result = calculate_emissions(usage)
        assert result.total_emission == pytest.approx(
            sum(result.category_emissions.values()), abs=0.03
        )

    def test_per_person_split(self):
        usage = UsageInput(electricity=900, transportation=300, household_size=4)
        result = calculate_emissions(usage)
        assert result.per_person_emission == pytest.approx(result.total_emission / 4, abs=0.01)

    def test_single_person_household(self):
        result = calculate_emissions(UsageInput(electricity=900, household_size=1))
        assert result.per_person_emission == result.total_emission

    def test_worse_than_average(self):
        result = calculate_emissions(UsageInput(electricity=2000, transportation=400))
        assert result.comparison == Comparison.WORSE
        assert result.comparison_percentage > 10

    def test_average_band(self):
        # ~10 t in region OTHER: 2000 kWh/month gives 10.02 t
        result = calculate_emissions(UsageInput(electricity=2000))
        assert -10 <= result.comparison_percentage <= 10
        assert result.comparison == Comparison.AVERAGE

    def test_comparison_rounded_to_one_decimal(self):
        result = calculate_emissions(UsageInput(electricity=777, waste=13))
        assert result.comparison_percentage == round(result.comparison_percentage, 1)

    def test_chart_data_order(self):
        usage = UsageInput(electricity=100, transportation=200, waste=30, water=4000)
        result = calculate_emissions(usage)
        assert result.chart_data.labels == CHART_LABELS
        assert result.chart_data.data == (
            result.energy_emission,
            result.transportation_emission,
            result.waste_emission,
            result.water_emission,
        )

    def test_deterministic(self):
        usage = UsageInput(electricity=512.5, natural_gas=33, region=Region.SOUTH)
        assert calculate_emissions(usage) == calculate_emissions(usage)

    def test_to_dict_keys(self):
        data = calculate_emissions(UsageInput(electricity=900)).to_dict()
        assert data["comparison"] == "Better"
        assert data["chartData"]["labels"] == list(CHART_LABELS)
        assert data["regionalAverage"] == 10

    def test_huge_finite_input(self):
        result = calculate_emissions(UsageInput(electricity=1e30, household_size=2))
        assert result.total_emission == pytest.approx(1e30 * 0.92 * 12 / LBS_PER_METRIC_TON)
        assert result.per_person_emission == pytest.approx(result.total_emission / 2)
        assert result.comparison == Comparison.WORSE

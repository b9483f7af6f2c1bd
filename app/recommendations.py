"""Reduction advice keyed to the dominant emission category."""
from __future__ import annotations

from types import MappingProxyType

from carbon_models import CATEGORY_ORDER, Comparison, EmissionResult
from common.formatters import fixed


CATEGORY_TIPS = MappingProxyType({
    "energy": (
        "Switch to LED light bulbs to reduce electricity usage by up to 75%.",
        "Install a programmable thermostat to optimize heating and cooling.",
        "Consider switching to renewable energy through your utility provider.",
        "Seal air leaks around windows and doors to improve energy efficiency.",
    ),
    "transportation": (
        "Consider carpooling or using public transportation when possible.",
        "Combine errands to reduce the number of trips you take.",
        "Consider an electric or hybrid vehicle for your next car purchase.",
        "Maintain proper tire pressure to improve fuel efficiency.",
    ),
    "waste": (
        "Start composting food scraps to reduce landfill waste.",
        "Recycle properly and learn what materials are accepted in your area.",
        "Reduce single-use plastics by using reusable alternatives.",
        "Buy products with minimal packaging or bulk items.",
    ),
    "water": (
        "Fix leaky faucets and toilets promptly.",
        "Install low-flow showerheads and faucet aerators.",
        "Collect rainwater for garden irrigation.",
        "Run dishwashers and washing machines only when full.",
    ),
})


def rank_categories(result: EmissionResult) -> list[tuple[str, float]]:
    """Categories by emission, highest first.

    Exact ties keep the energy, transportation, waste, water order:
    ``sorted`` is stable and the input is built in that order.
    """
    emissions = result.category_emissions
    ranked = [(name, emissions[name]) for name in CATEGORY_ORDER]
    return sorted(ranked, key=lambda item: item[1], reverse=True)


def _summary_sentence(result: EmissionResult, highest: str) -> str:
    pct = fixed(abs(result.comparison_percentage), 0)
    if result.comparison == Comparison.WORSE:
        return (
            f"Your carbon footprint is {pct}% higher than the average in your region. "
            f"Focus on reducing your {highest} usage for the biggest impact."
        )
    if result.comparison == Comparison.BETTER:
        return (
            f"Great job! Your carbon footprint is {pct}% lower than the average in your "
            f"region. You can still improve by focusing on {highest}."
        )
    return (
        "Your carbon footprint is about average for your region. You can make the "
        f"biggest impact by reducing your {highest} usage."
    )


def generate_recommendations(result: EmissionResult) -> list[str]:
    """One summary sentence followed by the four tips for the top category."""
    highest = rank_categories(result)[0][0]
    return [_summary_sentence(result, highest), *CATEGORY_TIPS[highest]]

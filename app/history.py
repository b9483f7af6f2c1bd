"""
Historical usage analysis: anomaly detection and a short-range forecast.

Anomaly: the current electricity reading is more than 20% above the mean of
all prior readings.

Forecast: over the last three readings, slope = (last - first) / 2, and the
next month is projected as current + slope. The middle reading only enters
through the divisor.
"""
from __future__ import annotations

import logging
from typing import Sequence

from carbon_models import Forecast, HistoricalEntry, HistoryAnalysis, Trend, UsageInput
from common.formatters import fixed, format_number, round_to

log = logging.getLogger(__name__)

ANOMALY_THRESHOLD = 1.2
FORECAST_WINDOW = 3
ASSUMED_RATE_PER_KWH = 0.15

ONBOARDING_INSIGHT = (
    "Start tracking your usage over time to receive personalized insights and forecasts."
)


def _kwh(entry: HistoricalEntry) -> float:
    return entry.electricity or 0.0


def _forecast(history: Sequence[HistoricalEntry], current_kwh: float) -> Forecast:
    first, _, last = history[-FORECAST_WINDOW:]
    trend = (_kwh(last) - _kwh(first)) / 2
    next_month = current_kwh + trend
    if current_kwh:
        percent_change = round_to(abs(trend) / current_kwh * 100, 1)
    else:
        # No current reading to scale against.
        percent_change = 0.0
    return Forecast(
        next_month=round_to(next_month, 2),
        trend=Trend.INCREASING if trend > 0 else Trend.DECREASING,
        percent_change=percent_change,
    )


def analyze_history(
    history: Sequence[HistoricalEntry],
    current: UsageInput,
) -> HistoryAnalysis:
    """Compare the current reading against prior readings.

    Args:
        history: Prior readings, oldest first. Not modified.
        current: The usage being evaluated now.

    Returns:
        HistoryAnalysis with anomaly flag, optional forecast, and insight text.
    """
    if not history:
        return HistoryAnalysis(
            has_anomaly=False, forecast=None, insights=(ONBOARDING_INSIGHT,),
        )

    insights: list[str] = []
    current_kwh = current.electricity

    readings = [_kwh(entry) for entry in history]
    average = sum(readings) / len(readings)

    has_anomaly = current_kwh > average * ANOMALY_THRESHOLD
    if has_anomaly:
        if average:
            increase = fixed((current_kwh - average) / average * 100, 0)
        else:
            increase = "100"
        log.debug(
            "Anomaly: current %.2f kWh vs historical mean %.2f kWh",
            current_kwh, average,
        )
        insights.append(
            f"Your electricity usage is {increase}% higher than your historical average. "
            "Check for appliances that might be using more energy than usual."
        )

    forecast = None
    if len(history) >= FORECAST_WINDOW:
        forecast = _forecast(history, current_kwh)
        change = format_number(forecast.percent_change)
        if forecast.trend == Trend.INCREASING:
            insights.append(
                "Your electricity usage is trending upward. At this rate, expect about "
                f"{change}% higher usage next month."
            )
        else:
            insights.append(
                "Good job! Your electricity usage is trending downward. At this rate, "
                f"expect about {change}% lower usage next month."
            )

    if has_anomaly:
        savings = fixed((current_kwh - average) * ASSUMED_RATE_PER_KWH, 2)
        insights.append(
            f"Reducing your electricity to your usual levels could save approximately "
            f"${savings} on your next bill."
        )

    return HistoryAnalysis(
        has_anomaly=has_anomaly, forecast=forecast, insights=tuple(insights),
    )

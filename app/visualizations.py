"""
Chart builders for footprint results.

All charts use Plotly and share one layout template so they render
consistently wherever the host app embeds them.
"""
from __future__ import annotations

from datetime import date, timedelta
from typing import Optional, Sequence

import plotly.graph_objects as go

from carbon_models import EmissionResult, HistoricalEntry, HistoryAnalysis, Trend


COLORS = {
    'energy': '#f59e0b',         # Amber
    'transportation': '#3b82f6', # Blue
    'waste': '#a3a3a3',          # Grey
    'water': '#06b6d4',          # Cyan
    'primary': '#4ade80',        # Green accent
    'better': '#22c55e',
    'average': '#f59e0b',
    'worse': '#ef4444',
    'grid': '#2d4a40',
    'text': '#94a3b8',
    'text_primary': '#f1f5f9',
}

CATEGORY_COLORS = [
    COLORS['energy'], COLORS['transportation'], COLORS['waste'], COLORS['water'],
]

LAYOUT_TEMPLATE = dict(
    paper_bgcolor='rgba(0,0,0,0)',
    plot_bgcolor='rgba(0,0,0,0)',
    font=dict(
        family='DM Sans, -apple-system, BlinkMacSystemFont, sans-serif',
        color=COLORS['text'],
        size=12
    ),
    title=dict(
        font=dict(size=16, color=COLORS['text_primary']),
        x=0,
        xanchor='left'
    ),
    xaxis=dict(
        gridcolor=COLORS['grid'],
        linecolor=COLORS['grid'],
        tickfont=dict(color=COLORS['text']),
    ),
    yaxis=dict(
        gridcolor=COLORS['grid'],
        linecolor=COLORS['grid'],
        tickfont=dict(color=COLORS['text']),
    ),
    legend=dict(bgcolor='rgba(0,0,0,0)', font=dict(color=COLORS['text'])),
    margin=dict(l=0, r=20, t=40, b=0)
)


def apply_theme(fig: go.Figure) -> go.Figure:
    """Apply the shared layout template to a figure."""
    fig.update_layout(**LAYOUT_TEMPLATE)
    return fig


def create_emissions_breakdown_chart(result: EmissionResult) -> go.Figure:
    """Bar chart of the four categories in chartData order."""
    chart = result.chart_data
    fig = go.Figure(go.Bar(
        x=list(chart.labels),
        y=list(chart.data),
        marker_color=CATEGORY_COLORS,
        text=[f"{v:.2f}" for v in chart.data],
        textposition='outside',
        hovertemplate='%{x}: %{y:.2f} t CO2e/yr<extra></extra>',
    ))
    fig.update_layout(
        title='Annual Emissions by Category',
        yaxis_title='t CO2e / year',
        showlegend=False,
    )
    return apply_theme(fig)


def create_regional_comparison_chart(result: EmissionResult) -> go.Figure:
    """Household total next to the regional average."""
    color = COLORS[result.comparison.value.lower()]
    fig = go.Figure(go.Bar(
        x=['Your household', 'Regional average'],
        y=[result.total_emission, result.regional_average],
        marker_color=[color, COLORS['grid']],
        hovertemplate='%{x}: %{y:.2f} t CO2e/yr<extra></extra>',
    ))
    fig.update_layout(
        title=f"{result.comparison.value} ({result.comparison_percentage:+.1f}% vs regional average)",
        yaxis_title='t CO2e / year',
        showlegend=False,
    )
    return apply_theme(fig)


def create_usage_history_chart(
    history: Sequence[HistoricalEntry],
    analysis: Optional[HistoryAnalysis] = None,
) -> go.Figure:
    """Electricity readings over time, with the forecast point if present.

    Entries without a date are plotted by position.
    """
    if history and all(e.date is not None for e in history):
        x = [e.date for e in history]
    else:
        x = list(range(1, len(history) + 1))
    y = [e.electricity or 0.0 for e in history]

    fig = go.Figure(go.Scatter(
        x=x,
        y=y,
        mode='lines+markers',
        name='Electricity',
        line=dict(color=COLORS['primary'], width=2),
        hovertemplate='%{y:,.0f} kWh<extra></extra>',
    ))

    if history and analysis is not None and analysis.forecast is not None:
        forecast = analysis.forecast
        if isinstance(x[-1], date):
            next_x = x[-1] + timedelta(days=30)
        else:
            next_x = len(history) + 1
        color = COLORS['worse'] if forecast.trend == Trend.INCREASING else COLORS['better']
        fig.add_trace(go.Scatter(
            x=[next_x],
            y=[forecast.next_month],
            mode='markers',
            name=f'Forecast ({forecast.trend.value})',
            marker=dict(color=color, size=12, symbol='diamond'),
            hovertemplate='Forecast: %{y:,.0f} kWh<extra></extra>',
        ))

    fig.update_layout(title='Electricity Usage History', yaxis_title='kWh / month')
    return apply_theme(fig)

"""
Opportunity Scanner - Text Reports.

Human-readable rendering of analyses and scan results for
the CLI.
"""

from typing import List, Optional, Sequence

from market_cycle.types import AdjustedAnalysis, DominanceState


_SUFFIXES = (
    (1e12, "T"),
    (1e9, "B"),
    (1e6, "M"),
    (1e3, "K"),
)

_SCORE_BANDS = (
    (8.0, "Exceptional opportunity"),
    (6.0, "Very good opportunity"),
    (4.0, "Solid opportunity"),
    (2.0, "Speculative opportunity"),
)


def format_number(value: float, decimals: int = 2) -> str:
    """
    Abbreviate large numbers with T/B/M/K suffixes.

    Examples:
        format_number(1_234_000_000)  -> "1.23B"
        format_number(123.456, 3)     -> "123.456"
    """
    magnitude = abs(value)
    for threshold, suffix in _SUFFIXES:
        if magnitude >= threshold:
            return f"{value / threshold:.{decimals}f}{suffix}"
    return f"{value:.{decimals}f}"


def format_percent(value: Optional[float]) -> str:
    if value is None:
        return "n/a"
    return f"{value:+.2f}%"


def interpret_investment_score(score: float) -> str:
    """Verbal band for a 1-10 investment score."""
    for threshold, label in _SCORE_BANDS:
        if score >= threshold:
            return label
    return "High risk - avoid"


def format_dominance(state: DominanceState) -> str:
    lines = [
        f"BTC Dominance: {state.current_dominance:.2f}%",
        f"Phase: {state.phase.name.value} ({state.phase.strength.value})",
        f"  {state.phase.description}",
        f"Impact: BTC x{state.impact.btc_impact:g} | Altcoins x{state.impact.altcoin_impact:g}",
        f"Recommendation: {state.recommendation.type} - {state.recommendation.action} "
        f"(confidence: {state.recommendation.confidence})",
    ]
    return "\n".join(lines)


def format_analysis_details(analysis: AdjustedAnalysis) -> str:
    """Multi-line report of one adjusted analysis."""
    base = analysis.base
    metrics = base.metrics
    perf = base.performance

    lines = [
        f"{base.name} ({base.symbol})",
        "=" * 60,
        f"Price: ${base.price:.8f}",
        f"Market Cap: ${format_number(base.market_cap)}",
        f"Volume 24h: ${format_number(base.volume_24h)}",
        f"Change 1h: {format_percent(perf.change_1h)} | 24h: {format_percent(perf.change_24h)} | "
        f"7d: {format_percent(perf.change_7d)} | 30d: {format_percent(perf.change_30d)}",
        f"Listed on exchange: {'yes' if base.is_on_exchange else 'no'}",
        "",
        "Metrics:",
        f"  Market maturity: {metrics.market_maturity.score:.1f} ({metrics.market_maturity.category})",
        f"  Volume health:   {metrics.volume_health.score:.2f} ({metrics.volume_health.category}, "
        f"ratio {metrics.volume_health.ratio:.3f})",
        f"  Momentum:        {metrics.momentum:.2f}",
        f"  Volatility:      {metrics.volatility.score:.2f} ({metrics.volatility.category}, "
        f"std {metrics.volatility.std_dev:.2f})",
        "",
        f"Investment score: {base.investment_score:.2f}/10 - {interpret_investment_score(base.investment_score)}",
        f"Adjusted score:   {analysis.adjusted_score:.2f} (x{analysis.impact:g}, "
        f"{analysis.dominance.phase.name.value})",
        f"Risk: {base.risk.level.value} ({base.risk.score:.2f})",
        f"Estimated potential return: {base.potential_return:.1f}x",
    ]
    return "\n".join(lines)


def format_ranking(analyses: Sequence[AdjustedAnalysis]) -> str:
    """One line per ranked asset."""
    if not analyses:
        return "No opportunities matched the criteria."

    lines: List[str] = [
        f"{'#':>3}  {'Symbol':<8} {'Adj.':>6} {'Score':>6} {'Risk':<7} {'MCap':>9} {'Vol 24h':>9} {'Return':>7}",
    ]
    for i, a in enumerate(analyses, 1):
        base = a.base
        lines.append(
            f"{i:>3}  {base.symbol:<8} {a.adjusted_score:>6.2f} {base.investment_score:>6.2f} "
            f"{base.risk.level.value:<7} {format_number(base.market_cap):>9} "
            f"{format_number(base.volume_24h):>9} {base.potential_return:>6.1f}x"
        )
    return "\n".join(lines)

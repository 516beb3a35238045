"""
Opportunity Scanner - Package.

============================================================
PURPOSE
============================================================
Application layer: scans market data, scores each asset,
adjusts for the market cycle and ranks the results.

============================================================
USAGE
============================================================
    from opportunity_scanner import OpportunityScanner, rank_opportunities

    top = rank_opportunities(snapshots, dominance_state, k=10)

============================================================
"""

from .config import ListingFilter, ScannerConfig
from .monitor import PriceMonitor, PriceTick
from .ranker import DEFAULT_TOP_K, OpportunityRanker, rank_opportunities
from .report import (
    format_analysis_details,
    format_dominance,
    format_number,
    format_ranking,
    interpret_investment_score,
)
from .scanner import OpportunityScanner, passes_liquidity_filter


__all__ = [
    # Config
    "ScannerConfig",
    "ListingFilter",

    # Ranking
    "OpportunityRanker",
    "rank_opportunities",
    "DEFAULT_TOP_K",

    # Pipeline
    "OpportunityScanner",
    "passes_liquidity_filter",

    # Monitor
    "PriceMonitor",
    "PriceTick",

    # Reports
    "format_number",
    "format_dominance",
    "format_analysis_details",
    "format_ranking",
    "interpret_investment_score",
]

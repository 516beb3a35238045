"""
Opportunity Scanner - CLI.

============================================================
RESPONSIBILITY
============================================================
Command-line interface for the scanner.

- Loads configuration from .env, environment and flags
- Sets up console and daily file logging
- Runs one command and exits (monitor runs until Ctrl-C)

============================================================
USAGE
============================================================
python -m opportunity_scanner.cli scan --top 10
python -m opportunity_scanner.cli analyze SOL
python -m opportunity_scanner.cli monitor BTC ETH --interval 30
python -m opportunity_scanner.cli dominance

============================================================
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from core.clock import ClockProtocol, SystemClock
from core.exceptions import ConfigurationError, ScannerException
from data_sources.providers.coinbase import CoinbaseListingSource
from data_sources.providers.coinmarketcap import CoinMarketCapSource

from .config import ListingFilter, ScannerConfig
from .monitor import PriceMonitor, PriceTick
from .report import format_analysis_details, format_dominance, format_number, format_ranking
from .scanner import OpportunityScanner


logger = logging.getLogger("opportunity_scanner")


# ============================================================
# LOGGING
# ============================================================

def setup_logging(
    level: str = "INFO",
    log_format: str = "text",
    log_dir: Optional[str] = "logs",
    clock: Optional[ClockProtocol] = None,
) -> logging.Logger:
    """
    Set up console and daily file logging.

    Args:
        level: Log level
        log_format: Output format (json or text)
        log_dir: Directory for crypto_YYYY-MM-DD.log, None to disable
        clock: Clock used to name the log file

    Returns:
        Configured logger
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    if log_format == "json":
        formatter = logging.Formatter(
            json.dumps({
                "timestamp": "%(asctime)s",
                "level": "%(levelname)s",
                "logger": "%(name)s",
                "message": "%(message)s",
            })
        )
    else:
        formatter = logging.Formatter("%(asctime)s | %(levelname)-8s | %(name)s | %(message)s")

    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]

    if log_dir:
        clock = clock or SystemClock()
        directory = Path(log_dir)
        directory.mkdir(parents=True, exist_ok=True)
        log_file = directory / f"crypto_{clock.today().isoformat()}.log"
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    for handler in handlers:
        handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers = handlers

    return logger


# ============================================================
# CLI ARGUMENT PARSER
# ============================================================

def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="crypto-scanner",
        description="Crypto opportunity scanner with BTC dominance adjustment",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Commands:
  scan        - Rank the top listings by dominance-adjusted score
  analyze     - Detailed analysis of one token
  monitor     - Poll prices for a set of tokens
  dominance   - Show the current market-cycle phase

Examples:
  %(prog)s scan --top 5 --no-filters
  %(prog)s analyze ETH --json
  %(prog)s monitor BTC ETH SOL --interval 30
        """
    )

    # --------------------------------------------------------
    # Commands
    # --------------------------------------------------------
    subparsers = parser.add_subparsers(dest="command", required=True)

    scan_parser = subparsers.add_parser("scan", help="Rank top opportunities")
    scan_parser.add_argument(
        "--top", "-k",
        type=int,
        metavar="K",
        help="Number of results (default: SCANNER_TOP_K or 10)",
    )
    scan_parser.add_argument(
        "--limit",
        type=int,
        metavar="N",
        help="Listings to fetch (default: SCANNER_LISTINGS_LIMIT or 500)",
    )
    scan_parser.add_argument(
        "--symbols",
        nargs="+",
        metavar="SYMBOL",
        help="Rank these symbols instead of the top listings",
    )
    scan_parser.add_argument(
        "--no-filters",
        action="store_true",
        help="Disable the liquidity pre-filter",
    )
    scan_parser.add_argument("--json", action="store_true", help="Print JSON output")

    analyze_parser = subparsers.add_parser("analyze", help="Analyze one token")
    analyze_parser.add_argument("symbol", help="Token symbol, e.g. ETH")
    analyze_parser.add_argument("--json", action="store_true", help="Print JSON output")

    monitor_parser = subparsers.add_parser("monitor", help="Poll prices")
    monitor_parser.add_argument("symbols", nargs="+", metavar="SYMBOL", help="Token symbols")
    monitor_parser.add_argument(
        "--interval",
        type=float,
        metavar="SECONDS",
        help="Poll interval (default: MONITOR_INTERVAL_SECONDS or 60)",
    )
    monitor_parser.add_argument(
        "--iterations",
        type=int,
        metavar="N",
        help="Stop after N polls (default: run until interrupted)",
    )

    dominance_parser = subparsers.add_parser("dominance", help="Show market-cycle phase")
    dominance_parser.add_argument("--json", action="store_true", help="Print JSON output")

    # --------------------------------------------------------
    # Logging Options
    # --------------------------------------------------------
    logging_group = parser.add_argument_group("Logging Options")

    logging_group.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default: LOG_LEVEL or INFO)",
    )

    logging_group.add_argument(
        "--log-format",
        type=str,
        choices=["json", "text"],
        help="Logging format (default: LOG_FORMAT or text)",
    )

    logging_group.add_argument(
        "--log-dir",
        type=str,
        metavar="PATH",
        help="Directory for daily log files (default: LOG_DIR or logs)",
    )

    logging_group.add_argument(
        "--no-log-file",
        action="store_true",
        help="Log to console only",
    )

    # --------------------------------------------------------
    # Connection Options
    # --------------------------------------------------------
    connection_group = parser.add_argument_group("Connection Options")

    connection_group.add_argument(
        "--timeout",
        type=float,
        metavar="SECONDS",
        help="HTTP request timeout (default: REQUEST_TIMEOUT_SECONDS or 30)",
    )

    connection_group.add_argument(
        "--max-concurrency",
        type=int,
        metavar="N",
        help="Concurrent quote requests (default: SCANNER_MAX_CONCURRENCY or 5)",
    )

    parser.add_argument(
        "--version", "-v",
        action="version",
        version="%(prog)s 2.0.0",
    )

    return parser


# ============================================================
# CLI CONFIGURATION BUILDER
# ============================================================

def build_config(args: argparse.Namespace, base: Optional[ScannerConfig] = None) -> ScannerConfig:
    """
    Apply CLI flags on top of the environment configuration.

    Args:
        args: Parsed arguments
        base: Starting configuration (from_env() if not provided)

    Returns:
        ScannerConfig instance
    """
    config = base or ScannerConfig.from_env()

    listing_filter = None
    if getattr(args, "no_filters", False):
        listing_filter = ListingFilter(
            enabled=False,
            min_market_cap=config.listing_filter.min_market_cap,
            min_volume_24h=config.listing_filter.min_volume_24h,
            min_volume_ratio=config.listing_filter.min_volume_ratio,
        )

    return config.with_overrides(
        top_k=getattr(args, "top", None),
        listings_limit=getattr(args, "limit", None),
        listing_filter=listing_filter,
        monitor_interval_seconds=getattr(args, "interval", None),
        request_timeout_seconds=args.timeout,
        max_concurrency=args.max_concurrency,
        log_level=args.log_level,
        log_format=args.log_format,
        log_dir=args.log_dir,
    )


# ============================================================
# COMMANDS
# ============================================================

def _print_json(data) -> None:
    print(json.dumps(data, indent=2, default=str))


async def run_scan(scanner: OpportunityScanner, args: argparse.Namespace) -> int:
    if args.symbols:
        results = await scanner.scan_symbols(args.symbols)
    else:
        results = await scanner.scan_top_opportunities()

    if args.json:
        _print_json([r.to_dict() for r in results])
        return 0

    if results:
        print(format_dominance(results[0].dominance))
        print()
    print(format_ranking(results))
    for analysis in results:
        print()
        print(format_analysis_details(analysis))
    return 0


async def run_analyze(scanner: OpportunityScanner, args: argparse.Namespace) -> int:
    analysis = await scanner.analyze_token(args.symbol)

    if args.json:
        _print_json(analysis.to_dict())
    else:
        print(format_analysis_details(analysis))
    return 0


async def run_dominance(scanner: OpportunityScanner, args: argparse.Namespace) -> int:
    state = await scanner.fetch_dominance_state()

    if args.json:
        _print_json(state.to_dict())
    else:
        print(format_dominance(state))
    return 0


def _print_ticks(ticks: List[PriceTick]) -> None:
    for tick in ticks:
        change = "" if tick.change_pct_since_last is None else f" ({tick.change_pct_since_last:+.3f}%)"
        print(f"{tick.observed_at:%H:%M:%S} {tick.symbol:<8} ${format_number(tick.price, 4)}{change}")


async def run_monitor(
    scanner: OpportunityScanner,
    config: ScannerConfig,
    args: argparse.Namespace,
) -> int:
    monitor = PriceMonitor(
        scanner.market_data,
        args.symbols,
        interval_seconds=config.monitor_interval_seconds,
        callback=_print_ticks,
        max_iterations=args.iterations,
    )
    monitor.start()
    try:
        await monitor.wait()
    finally:
        await monitor.stop()
    return 0


# ============================================================
# MAIN ENTRY POINT
# ============================================================

async def async_main(args: argparse.Namespace, config: ScannerConfig) -> int:
    """
    Async main entry point.

    Args:
        args: Parsed arguments
        config: Validated configuration

    Returns:
        Exit code
    """
    if not config.cmc_api_key:
        raise ConfigurationError("CMC_API_KEY is not set", config_key="CMC_API_KEY")

    async with CoinMarketCapSource(
        config.cmc_api_key,
        base_url=config.cmc_base_url,
        convert=config.convert,
        timeout=config.request_timeout_seconds,
    ) as market_data, CoinbaseListingSource(
        base_url=config.coinbase_base_url,
        quote_currency=config.convert,
        timeout=config.request_timeout_seconds,
    ) as exchange_listings:
        scanner = OpportunityScanner(market_data, exchange_listings, config=config)

        if args.command == "scan":
            return await run_scan(scanner, args)
        if args.command == "analyze":
            return await run_analyze(scanner, args)
        if args.command == "monitor":
            return await run_monitor(scanner, config, args)
        return await run_dominance(scanner, args)


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main CLI entry point.

    Args:
        argv: Command line arguments (default: sys.argv[1:])

    Returns:
        Exit code
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    load_dotenv()

    try:
        config = build_config(args)
    except ValueError as e:
        print(f"Error: invalid environment value: {e}", file=sys.stderr)
        return 1

    errors = config.validate()
    if errors:
        for error in errors:
            print(f"Error: {error}", file=sys.stderr)
        return 1

    setup_logging(
        level=config.log_level,
        log_format=config.log_format,
        log_dir=None if args.no_log_file else config.log_dir,
    )

    try:
        return asyncio.run(async_main(args, config))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except ScannerException as e:
        logger.error(f"{type(e).__name__}: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())

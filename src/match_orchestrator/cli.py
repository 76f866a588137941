# Area: Runner
"""
match_orchestrator.cli — Command-line interface
===============================================

Usage:
    python -m match_orchestrator                          # Defaults + environment
    python -m match_orchestrator --config config.json     # JSON config file
    python -m match_orchestrator --port 5000 --interval 2

CLI flags override the config file, which overrides defaults.
Environment variables (or a .env file) override the config file.
"""

import argparse
import sys
from typing import Any, Dict, List, Optional

from ._config import load_config, validate_config
from .errors import ConfigError
from .runner import ServiceRunner


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Match Orchestrator - lobby rooms, matchmaking, and ladders",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m match_orchestrator
  python -m match_orchestrator --config config.json
  python -m match_orchestrator --host 0.0.0.0 --port 4004 --interval 5
  LOG_LEVEL=DEBUG python -m match_orchestrator
        """,
    )

    parser.add_argument("--config", type=str, help="Path to JSON config file")
    parser.add_argument("--host", type=str, help="Interface to bind")
    parser.add_argument("--port", type=int, help="Port to listen on")
    parser.add_argument(
        "--interval",
        type=float,
        help="Run a matchmaking pass every N seconds (0 = only on demand)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        help="DEBUG, INFO, WARNING, ERROR or CRITICAL",
    )

    return parser.parse_args(argv)


def apply_overrides(config: Dict[str, Any], args: argparse.Namespace) -> Dict[str, Any]:
    """Apply CLI flags on top of a loaded config."""
    overrides = {
        "host": args.host,
        "port": args.port,
        "matchmaking_interval_seconds": args.interval,
        "log_level": args.log_level,
    }
    for key, value in overrides.items():
        if value is not None:
            config[key] = value
    return config


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    args = parse_args(argv)
    try:
        config = apply_overrides(load_config(args.config), args)
        validate_config(config)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    ServiceRunner(config).run()
    return 0

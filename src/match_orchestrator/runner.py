# Area: Runner
"""
match_orchestrator.runner — Service runner
==========================================

Wires logging, config validation, the orchestrator, and the HTTP app
together, then serves with uvicorn. Optionally runs the pairing pass
on a fixed interval from a background thread that shares the
orchestrator's lock.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Dict, Optional

import uvicorn

from ._config import DEFAULT_CONFIG, validate_config
from ._shared.logging_config import setup_logging
from .http_app import create_app
from .orchestrator import MatchOrchestrator

logger = logging.getLogger("match_orchestrator")


class ServiceRunner:
    """
    Runs the match orchestrator service.

    Args:
        config: Service config (see _config.DEFAULT_CONFIG)
        orchestrator: Optional pre-built orchestrator
    """

    def __init__(
        self,
        config: Dict[str, Any],
        orchestrator: Optional[MatchOrchestrator] = None,
    ):
        self.config = {**DEFAULT_CONFIG, **config}

        setup_logging(
            log_file_path=self.config.get("log_file"),
            level=self.config.get("log_level", "INFO"),
        )
        validate_config(self.config)

        self.orchestrator = orchestrator or MatchOrchestrator()
        self.app = create_app(self.orchestrator, self.config)
        self.interval = float(self.config.get("matchmaking_interval_seconds", 0))
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def start_matchmaking_loop(self) -> bool:
        """Start the background pairing thread. Returns False when disabled."""
        if self.interval <= 0 or self._thread is not None:
            return False
        self._stop.clear()
        self._thread = threading.Thread(
            target=self._matchmaking_loop, name="matchmaking-pass", daemon=True
        )
        self._thread.start()
        return True

    def stop_matchmaking_loop(self, timeout: Optional[float] = None) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None

    def _matchmaking_loop(self) -> None:
        while not self._stop.wait(self.interval):
            try:
                opened = self.orchestrator.run_matchmaking()
                if opened:
                    logger.info(f"Background pass opened {len(opened)} room(s)")
            except Exception as e:
                logger.error(f"Matchmaking loop error: {e}", exc_info=True)

    def run(self) -> None:
        """Serve HTTP until interrupted."""
        self._log_startup()
        self.start_matchmaking_loop()
        try:
            uvicorn.run(
                self.app,
                host=self.config["host"],
                port=self.config["port"],
                log_level=str(self.config.get("log_level", "INFO")).lower(),
            )
        finally:
            self.stop_matchmaking_loop(timeout=self.interval or None)
            logger.info("Match orchestrator stopped.")

    def _log_startup(self) -> None:
        logger.info("=" * 60)
        logger.info("  Match Orchestrator — Starting")
        logger.info(f"  Listen: {self.config['host']}:{self.config['port']}")
        logger.info(f"  Region: {self.config.get('region', 'local')}")
        if self.interval > 0:
            logger.info(f"  Matchmaking: every {self.interval:g}s")
        else:
            logger.info("  Matchmaking: on demand")
        logger.info("=" * 60)

"""
Feed client entry point.

Connects to the feed server, downloads the full stream, backfills gaps and
writes the ordered dataset.

Usage:
    abx-feed --config config/config.yaml
    abx-feed --host 127.0.0.1 --port 3000 --output data/output.json
"""

import argparse
import sys
from typing import List, Optional

from .core.config import FeedConfig
from .core.constants import ExportFormat
from .core.exceptions import FeedClientError, ExportError
from .monitoring.exporter import RecordExporter
from .monitoring.logger import get_logger, setup_logger
from .monitoring.progress import ProgressBar
from .monitoring.report import SessionReporter
from .session.orchestrator import SessionOrchestrator


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="ABX market data feed client")
    parser.add_argument(
        '--config',
        default=None,
        help='YAML configuration file path'
    )
    parser.add_argument('--host', default=None, help='Feed server host')
    parser.add_argument('--port', type=int, default=None, help='Feed server port')
    parser.add_argument('--output', default=None, help='Output file path')
    parser.add_argument(
        '--format',
        choices=[f.value for f in ExportFormat],
        default=None,
        help='Output file format'
    )
    parser.add_argument(
        '--delay-ms',
        type=int,
        default=None,
        help='Pause between backfill requests in milliseconds'
    )
    parser.add_argument(
        '--log-level',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
        default=None,
        help='Logging level'
    )
    parser.add_argument(
        '--no-progress',
        action='store_true',
        help='Do not draw the backfill progress bar'
    )
    return parser


def load_config(args: argparse.Namespace) -> FeedConfig:
    """Load YAML config (if given) and apply command line overrides."""
    config = FeedConfig.from_yaml(args.config) if args.config else FeedConfig()
    return config.with_overrides(
        host=args.host,
        port=args.port,
        output_file=args.output,
        output_format=args.format,
        backfill_delay_ms=args.delay_ms,
        log_level=args.log_level,
    )


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point. Returns the process exit code."""
    args = build_parser().parse_args(argv)
    
    try:
        config = load_config(args)
    except FeedClientError as e:
        setup_logger()
        get_logger(__name__).critical("Configuration error", error=str(e))
        return 1
    
    setup_logger(log_file=config.log_file, level=config.log_level)
    logger = get_logger(__name__)
    
    recovery_progress = None if args.no_progress else ProgressBar().update
    export_progress = None if args.no_progress else ProgressBar().update
    
    orchestrator = SessionOrchestrator(
        config,
        exporter=RecordExporter(config.output_file, config.output_format, on_progress=export_progress),
        reporter=SessionReporter(),
        on_progress=recovery_progress
    )
    
    try:
        result = orchestrator.run()
    except ExportError as e:
        logger.critical("Export failed", error=str(e))
        return 1
    
    if not result.succeeded:
        return 1
    
    logger.info(f"Data saved to {config.output_file}")
    return 0


if __name__ == "__main__":
    sys.exit(main())

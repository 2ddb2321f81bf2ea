"""
Intrusion Monitor - Command Line Entry Point
=============================================

Starts the IntrusionMonitorService, which:
- Reads frames from a camera, stream or video file
- Runs YOLO person detection every tick (default 100 ms)
- Classifies each person against the restricted region (ALERT! / Safe)
- Optionally writes an annotated video and publishes alerts to MQTT

Usage:
    sentinel-monitor --config config/monitor.yaml

Signals:
    - SIGTERM: Graceful shutdown
    - SIGINT (Ctrl+C): Graceful shutdown
"""

import argparse
import logging
import signal
import sys
from pathlib import Path
from typing import List, Optional

from sentinel_processor.config import MonitorConfig
from sentinel_processor.service import IntrusionMonitorService


# ─────────────────────────────────────────────────────────────────────────────
# Logging Setup
# ─────────────────────────────────────────────────────────────────────────────

def setup_logging(log_file: Optional[Path] = None, level: str = "INFO") -> logging.Logger:
    """
    Setup root logging (console + optional file).

    Args:
        log_file: Optional path to log file
        level: Log level name

    Returns:
        Logger instance for the CLI
    """
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(sys.stdout),
            *(
                [logging.FileHandler(log_file)]
                if log_file
                else []
            )
        ]
    )

    return logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────────────────────
# Application
# ─────────────────────────────────────────────────────────────────────────────

class MonitorApp:
    """
    Application wrapper for IntrusionMonitorService.

    Handles configuration loading, signal handling and graceful shutdown.
    """

    def __init__(self, config_path: Path, log_file: Optional[Path] = None, log_level: str = "INFO"):
        self.config_path = config_path
        self.logger = setup_logging(log_file, log_level)

        self.config: Optional[MonitorConfig] = None
        self.service: Optional[IntrusionMonitorService] = None

        self._shutdown_requested = False

    def setup(self):
        self.logger.info("=" * 80)
        self.logger.info("🚀 Sentinel Intrusion Monitor - Starting")
        self.logger.info("=" * 80)

        self.logger.info(f"📄 Loading configuration: {self.config_path}")
        self.config = MonitorConfig.from_yaml(self.config_path)
        self.logger.info(f"✅ Configuration loaded (service_id={self.config.service_id})")
        self.logger.info(f"  - Video source: {self.config.video_source}")
        self.logger.info(f"  - Target class: {self.config.detector.target_class}")
        self.logger.info(f"  - ROI vertices: {len(self.config.roi.vertices)}")

        self.service = IntrusionMonitorService(config=self.config)
        self.service.setup()
        self.logger.info("=" * 80)

    def run(self):
        """Run the monitor. Blocks until shutdown or end of video."""
        if not self.service:
            raise RuntimeError("Service not initialized. Call setup() first.")

        signal.signal(signal.SIGTERM, self._signal_handler)
        signal.signal(signal.SIGINT, self._signal_handler)

        try:
            self.service.start()
            self.logger.info("✅ Monitor started, press Ctrl+C to stop")
            self.service.wait()
        except Exception as e:
            self.logger.error(f"❌ Monitor error: {e}", exc_info=True)
            self.shutdown()
            sys.exit(1)

        self.shutdown()

    def shutdown(self):
        if self._shutdown_requested:
            return
        self._shutdown_requested = True

        self.logger.info("🛑 Shutting down intrusion monitor")
        if self.service:
            try:
                self.service.stop()
                self.logger.info(f"✅ Final stats: {self.service.get_stats()}")
            except Exception as e:
                self.logger.error(f"❌ Error stopping service: {e}")
        self.logger.info("✅ Shutdown complete")

    def _signal_handler(self, signum, frame):
        signal_name = signal.Signals(signum).name
        self.logger.info(f"⚠️  Received signal {signal_name} ({signum})")
        self.shutdown()
        sys.exit(0)


# ─────────────────────────────────────────────────────────────────────────────
# CLI
# ─────────────────────────────────────────────────────────────────────────────

def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Sentinel Intrusion Monitor - YOLO + restricted region + MQTT alerts",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Monitor with the bundled config
  sentinel-monitor --config config/monitor.yaml

  # Also write logs to a file
  sentinel-monitor --config config/monitor.yaml --log-file logs/monitor.log
        """
    )

    parser.add_argument(
        '--config',
        type=Path,
        required=True,
        help='Path to monitor configuration YAML file'
    )

    parser.add_argument(
        '--log-file',
        type=Path,
        default=None,
        help='Optional path to log file (console only by default)'
    )

    parser.add_argument(
        '--log-level',
        default='INFO',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        help='Log level (default: INFO)'
    )

    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None):
    args = parse_args(argv)

    if not args.config.exists():
        print(f"❌ Error: Configuration file not found: {args.config}", file=sys.stderr)
        sys.exit(1)

    app = MonitorApp(
        config_path=args.config,
        log_file=args.log_file,
        log_level=args.log_level,
    )

    try:
        app.setup()
        app.run()
    except Exception as e:
        print(f"❌ Fatal error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == '__main__':
    main()

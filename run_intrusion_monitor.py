#!/usr/bin/env python3
"""
Intrusion Monitor - Entry Point

Usage:
    uv run python run_intrusion_monitor.py --config config/monitor.yaml
"""

from sentinel_processor.cli import main


if __name__ == '__main__':
    main()

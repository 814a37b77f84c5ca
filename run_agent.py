#!/usr/bin/env python3
"""Entry point to run the job hunting agent.

  python run_agent.py --once      single pass (cron / CI)
  python run_agent.py             first pass now, then every CRON_SCHEDULE tick
"""
from __future__ import annotations

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent))

from jobhacker.cli import main

if __name__ == "__main__":
    sys.exit(main())

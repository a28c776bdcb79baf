"""Scheduled sweep entry point.

Requires the elevated credential in SWEEP_DB_USER / SWEEP_DB_PASSWORD.
Prints the number of shifts written; exits non-zero on failure.
"""

from __future__ import annotations

import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from src.shift_attendance.shift_attendance.sweep.cli import main

if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))

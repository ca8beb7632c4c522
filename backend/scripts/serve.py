#!/usr/bin/env python3
"""Run the ImageShare API with uvicorn."""
from __future__ import annotations

import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from uvicorn import run

if __name__ == "__main__":
    port = int(sys.argv[1]) if len(sys.argv) > 1 else 8000
    run("imageshare.main:app", host="0.0.0.0", port=port, log_level="info")

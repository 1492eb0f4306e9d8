#!/usr/bin/env python3
"""
Start the calendar service with uvicorn on HOST:PORT from settings.

Usage: python scripts/run_server.py
"""
import sys
from pathlib import Path

import uvicorn

# Adjust path so imports resolve when running from project root
ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from app.core.config import settings  # noqa: E402


if __name__ == "__main__":
    uvicorn.run("app.main:app", host=settings.HOST, port=settings.PORT, reload=settings.DEBUG)

# config.py
"""Environment driven settings (.env is honoured)."""
import logging
import os
from pathlib import Path
from dotenv import load_dotenv
load_dotenv()

def log_level(name, default="WARNING") -> str:
    name = (name or default).upper()
    # getLevelName maps known names to ints, anything else to "Level <name>"
    return name if isinstance(logging.getLevelName(name), int) else default

KEYS_DIR = Path(os.getenv("RSAVERIFY_KEYS_DIR", "keys"))
STRICT_IDENTIFIER = os.getenv("RSAVERIFY_STRICT_IDENTIFIER", "0").lower() in ("1", "true", "yes", "on")
LOG_LEVEL = log_level(os.getenv("RSAVERIFY_LOG_LEVEL"))

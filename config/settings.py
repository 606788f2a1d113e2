"""
Configuration settings for the review store.

Centralized configuration for the address deriver, record layout,
storage allocation and the CLI.
"""

import os
from pathlib import Path

# Project paths
PROJECT_ROOT = Path(__file__).parent.parent
DATA_ROOT = PROJECT_ROOT / "data"
LEDGER_PATH = Path(os.getenv("REVIEW_LEDGER_PATH", str(DATA_ROOT / "ledger.json")))

# Program identity (owner of every review segment)
PROGRAM_ID = os.getenv(
    "REVIEW_PROGRAM_ID",
    "5c1a4a1e9f3b7d2e8c6a0b4f1d3e5a7c9b2d4f6e8a0c1e3b5d7f9a2c4e6b8d0f",
)

# Record layout
ACCOUNT_LEN = 1000  # Fixed capacity of every review segment, in bytes

# Field constraints
MIN_RATING = 1
MAX_RATING = 10

# Address derivation
MAX_DISAMBIGUATOR = 255  # Attempts run MAX_DISAMBIGUATOR..0
PDA_MARKER = b"ProgramDerivedAddress"

# Rent schedule (minimum balance that keeps a segment live)
LAMPORTS_PER_BYTE_YEAR = 3480
EXEMPTION_THRESHOLD_YEARS = 2.0
ACCOUNT_STORAGE_OVERHEAD = 128

# CLI
DEFAULT_FUNDING = 1_000_000_000  # Balance credited by `fund` when --amount is omitted

# Logging
LOG_LEVEL = os.getenv("REVIEW_LOG_LEVEL", "INFO")  # DEBUG, INFO, WARNING, ERROR
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_FILE = "review_store.log"


# Design Rationale and Trade-offs:
#
# 1. Why environment variables for the program id and ledger path?
#    - Several ledgers or programs can be used without editing code
#    - Trade-off: Changing PROGRAM_ID changes every derived address
#
# 2. Why a fixed ACCOUNT_LEN of 1000 bytes?
#    - Every segment is allocated once and never resized
#    - Trade-off: Title, description and location share 986 bytes after the flag, rating and length prefixes

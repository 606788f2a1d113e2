"""
Account Ledger - Single source of truth for storage segments and balances.

Stands in for the execution host's storage: it resolves addresses to
segments, tracks identity balances, and persists both to disk.
"""

import base64
import json
import os
import shutil
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Optional

from src.models.address import Address

logger = logging.getLogger(__name__)


@dataclass
class StorageSegment:
    """
    A fixed-size writable byte buffer at an address.
    `owner` is the program allowed to write it.
    """
    address: Address
    owner: Address
    lamports: int = 0
    data: bytearray = field(default_factory=bytearray)

    @classmethod
    def from_dict(cls, data: dict) -> "StorageSegment":
        """Create StorageSegment from JSON dict."""
        return cls(
            address=Address.from_hex(data["address"]),
            owner=Address.from_hex(data["owner"]),
            lamports=data.get("lamports", 0),
            data=bytearray(base64.b64decode(data.get("data", ""))),
        )

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict."""
        return {
            "address": str(self.address),
            "owner": str(self.owner),
            "lamports": self.lamports,
            "data": base64.b64encode(bytes(self.data)).decode("ascii"),
        }


class AccountLedger:
    """
    In-memory map of segments and balances with optional JSON persistence.

    Persistence uses a temp file + rename, keeps a `.backup` copy of the
    previous file, and restores from it when the main file is corrupt.
    """

    def __init__(self, ledger_path: Optional[str] = None):
        """
        Initialize ledger from disk or create a new empty one.

        Args:
            ledger_path: Path to ledger JSON file, or None for memory only
        """
        self.ledger_path = ledger_path
        self.segments: Dict[Address, StorageSegment] = {}
        self.balances: Dict[Address, int] = {}
        self.version = "1.0.0"
        self.last_updated = datetime.utcnow().isoformat() + "Z"

        if ledger_path and os.path.exists(ledger_path):
            self._load()
        elif ledger_path:
            logger.info(f"No existing ledger found at {ledger_path}, initializing empty ledger")

    def _load(self, restore_on_error: bool = True) -> None:
        """Load ledger from disk."""
        try:
            with open(self.ledger_path, 'r') as f:
                data = json.load(f)

            self.version = data.get("version", "1.0.0")
            self.last_updated = data.get("last_updated", self.last_updated)

            self.balances = {
                Address.from_hex(key): value
                for key, value in data.get("balances", {}).items()
            }
            self.segments = {}
            for segment_data in data.get("segments", []):
                segment = StorageSegment.from_dict(segment_data)
                self.segments[segment.address] = segment

            logger.info(
                f"Loaded {len(self.segments)} segments and "
                f"{len(self.balances)} balances from ledger"
            )

        except (json.JSONDecodeError, KeyError, ValueError) as e:
            logger.error(f"Failed to load ledger: {e}")
            if not restore_on_error:
                raise
            self._try_restore_from_backup()

    def _try_restore_from_backup(self) -> None:
        """Attempt to restore from backup file if main ledger is corrupted."""
        backup_path = f"{self.ledger_path}.backup"
        if os.path.exists(backup_path):
            logger.warning(f"Attempting to restore from backup: {backup_path}")
            try:
                shutil.copy(backup_path, self.ledger_path)
                self._load(restore_on_error=False)
                logger.info("Successfully restored from backup")
            except (OSError, json.JSONDecodeError, KeyError, ValueError) as e:
                logger.error(f"Backup restoration failed: {e}. Starting with empty ledger.")
                self.segments = {}
                self.balances = {}
        else:
            logger.warning("No backup file found. Starting with empty ledger.")
            self.segments = {}
            self.balances = {}

    def get_segment(self, address: Address) -> Optional[StorageSegment]:
        """Retrieve segment by address. Returns None if not found."""
        return self.segments.get(address)

    def put_segment(self, segment: StorageSegment) -> None:
        self.segments[segment.address] = segment
        logger.debug(f"Stored segment {segment.address} ({len(segment.data)} bytes)")

    def balance(self, address: Address) -> int:
        return self.balances.get(address, 0)

    def credit(self, address: Address, amount: int) -> int:
        """
        Add lamports to an identity balance.

        Returns:
            The new balance
        """
        if amount < 0:
            raise ValueError(f"Invalid credit amount: {amount}. Must be non-negative")
        self.balances[address] = self.balance(address) + amount
        return self.balances[address]

    def debit(self, address: Address, amount: int) -> int:
        """
        Remove lamports from an identity balance.

        Raises:
            ValueError: If the amount is negative or exceeds the balance
        """
        current = self.balance(address)
        if amount < 0 or amount > current:
            raise ValueError(f"Cannot debit {amount} from {address} (balance {current})")
        self.balances[address] = current - amount
        return self.balances[address]

    def save(self) -> None:
        """
        Persist ledger to disk with atomic write pattern.
        Creates backup before write.
        """
        if not self.ledger_path:
            raise ValueError("Ledger has no path to save to")

        self.last_updated = datetime.utcnow().isoformat() + "Z"

        directory = os.path.dirname(self.ledger_path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        if os.path.exists(self.ledger_path):
            backup_path = f"{self.ledger_path}.backup"
            shutil.copy(self.ledger_path, backup_path)
            logger.debug(f"Created backup: {backup_path}")

        data = {
            "version": self.version,
            "last_updated": self.last_updated,
            "balances": {str(address): value for address, value in self.balances.items()},
            "segments": [segment.to_dict() for segment in self.segments.values()],
        }

        temp_path = f"{self.ledger_path}.tmp"
        try:
            with open(temp_path, 'w') as f:
                json.dump(data, f, indent=2)

            os.replace(temp_path, self.ledger_path)
            logger.info(f"Ledger saved: {len(self.segments)} segments")

        except OSError as e:
            logger.error(f"Failed to save ledger: {e}")
            if os.path.exists(temp_path):
                os.remove(temp_path)
            raise


# Design Rationale and Trade-offs:
#
# 1. Why base64 for segment data in JSON?
#    - Segments are raw bytes and JSON has no binary type
#    - Trade-off: About a third larger on disk than the raw bytes
#
# 2. Why temp file + os.replace for save?
#    - A crash mid-write leaves the previous ledger intact
#    - Trade-off: Needs twice the ledger size on disk during a save
#
# 3. Why only one backup level?
#    - Restores from the last good save after a corrupt write
#    - Trade-off: Older states are not kept

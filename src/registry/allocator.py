"""
Storage allocation.

Materializes zeroed segments in the ledger and funds them at the minimum
balance that keeps them live.
"""

import logging
from typing import Optional

import config.settings as settings
from src.models.address import Address
from src.models.errors import AllocationFailure
from src.registry.account_ledger import AccountLedger, StorageSegment

logger = logging.getLogger(__name__)


class RentSchedule:
    """Minimum balance a segment must hold to stay live indefinitely."""

    def __init__(
        self,
        lamports_per_byte_year: int = settings.LAMPORTS_PER_BYTE_YEAR,
        exemption_threshold_years: float = settings.EXEMPTION_THRESHOLD_YEARS,
        storage_overhead: int = settings.ACCOUNT_STORAGE_OVERHEAD
    ):
        self.lamports_per_byte_year = lamports_per_byte_year
        self.exemption_threshold_years = exemption_threshold_years
        self.storage_overhead = storage_overhead

    def minimum_balance(self, size: int) -> int:
        bytes_charged = size + self.storage_overhead
        return int(bytes_charged * self.lamports_per_byte_year * self.exemption_threshold_years)


class StorageAllocator:
    """
    Allocates program-owned segments, charging the payer.

    A segment that already exists at the address with the same owner and
    enough capacity is handed back unchanged, without a second charge.
    """

    def __init__(self, ledger: AccountLedger, rent: Optional[RentSchedule] = None):
        self.ledger = ledger
        self.rent = rent or RentSchedule()

    def allocate(
        self,
        payer: Address,
        address: Address,
        size: int,
        owner: Address
    ) -> StorageSegment:
        """
        Materialize a zeroed segment of `size` bytes at `address`.

        Args:
            payer: Identity charged for the minimum balance
            address: Where the segment lives
            size: Capacity in bytes
            owner: Program that will own the segment

        Returns:
            The allocated (or already existing) segment

        Raises:
            AllocationFailure: If the address is held by another owner or is
                too small, or the payer cannot fund the segment
        """
        existing = self.ledger.get_segment(address)
        if existing is not None:
            if existing.owner != owner:
                raise AllocationFailure(f"Address {address} already in use by {existing.owner}")
            if len(existing.data) < size:
                raise AllocationFailure(
                    f"Address {address} holds {len(existing.data)} bytes, {size} required"
                )
            logger.info(f"Segment {address} already allocated, reusing")
            return existing

        lamports = self.rent.minimum_balance(size)
        available = self.ledger.balance(payer)
        if available < lamports:
            raise AllocationFailure(
                f"Payer {payer} has {available} lamports, {lamports} required"
            )

        self.ledger.debit(payer, lamports)
        segment = StorageSegment(
            address=address,
            owner=owner,
            lamports=lamports,
            data=bytearray(size),
        )
        self.ledger.put_segment(segment)
        logger.info(f"Allocated {size} bytes at {address}, funded with {lamports} lamports")
        return segment

"""
Review Processor.

Runs the create and update lifecycle of review records: address check,
validation, allocation, initialization guard and serialization.
"""

import logging
from dataclasses import replace
from typing import Optional, Sequence

import config.settings as settings
from src.addressing.derivation import AddressDeriver
from src.codec import record_codec
from src.codec.instruction import AddReview, UpdateReview, unpack
from src.models.address import Address, CallerIdentity
from src.models.errors import (
    AlreadyInitialized,
    IllegalOwner,
    InvalidAddress,
    InvalidInstruction,
    NotEnoughAccounts,
    Unauthorized,
    UninitializedAccount,
)
from src.models.review import ReviewRecord
from src.models.validation import validate_rating
from src.registry.account_ledger import AccountLedger
from src.registry.allocator import StorageAllocator

logger = logging.getLogger(__name__)


class ReviewProcessor:
    """
    Lifecycle manager for review records.

    State per record:
        Uninitialized --add_review--> Initialized --update_review--> Initialized

    Every check runs before the segment is written, so a failed call
    leaves storage exactly as it was.
    """

    def __init__(
        self,
        program_id: Address,
        ledger: AccountLedger,
        deriver: Optional[AddressDeriver] = None,
        account_len: int = settings.ACCOUNT_LEN
    ):
        """
        Initialize review processor.

        Args:
            program_id: Address that owns every review segment
            ledger: Host storage resolving addresses to segments
            deriver: Address deriver (defaults to one bound to program_id)
            account_len: Capacity allocated for each review segment
        """
        self.program_id = program_id
        self.ledger = ledger
        self.deriver = deriver or AddressDeriver(program_id)
        self.account_len = account_len

        logger.info(f"Initialized ReviewProcessor for program {program_id}")

    def process_instruction(self, accounts: Sequence, instruction_data: bytes) -> None:
        """
        Decode instruction data and dispatch it.

        Args:
            accounts: [caller, review_address, allocator] for AddReview,
                [caller, review_address] for UpdateReview
            instruction_data: Tagged instruction bytes

        Raises:
            InvalidInstruction: If the data cannot be decoded
            NotEnoughAccounts: If the account list is too short
        """
        instruction = unpack(instruction_data)

        if isinstance(instruction, AddReview):
            caller, target, allocator = _take_accounts(accounts, 3)
            self.add_review(
                caller,
                target,
                allocator,
                instruction.title,
                instruction.rating,
                instruction.description,
                instruction.location
            )
        elif isinstance(instruction, UpdateReview):
            caller, target = _take_accounts(accounts, 2)
            self.update_review(
                caller,
                target,
                instruction.rating,
                instruction.description,
                instruction.location
            )
        else:
            raise InvalidInstruction(f"Unsupported instruction: {instruction!r}")

    def add_review(
        self,
        caller: CallerIdentity,
        target: Address,
        allocator: StorageAllocator,
        title: str,
        rating: int,
        description: str,
        location: str
    ) -> ReviewRecord:
        """
        Create a review at the address derived from (caller, title).

        Returns:
            The stored record

        Raises:
            Unauthorized: If the caller has not signed
            InvalidAddress: If target is not derive(caller, title)
            InvalidRating: If rating is outside 1-10
            RecordTooLarge: If the review does not fit the segment
            AllocationFailure: If the segment cannot be allocated
            AlreadyInitialized: If a review already lives at target
        """
        logger.info("Adding review...")
        logger.info(f"Title: {title}")
        logger.info(f"Rating: {rating}")
        logger.info(f"Description: {description}")
        logger.info(f"Location: {location}")

        if not caller.is_signer:
            logger.warning("Missing required signature")
            raise Unauthorized()

        address, disambiguator = self.deriver.derive(caller.address, title)
        if address != target:
            logger.warning("Invalid seeds for derived address")
            raise InvalidAddress(f"Expected {address}, got {target}")

        validate_rating(rating)

        review = ReviewRecord(
            is_initialized=True,
            title=title,
            rating=rating,
            description=description,
            location=location,
        )
        # Raises RecordTooLarge before anything is allocated
        record_codec.encode(review, capacity=self.account_len)

        segment = allocator.allocate(
            payer=caller.address,
            address=target,
            size=self.account_len,
            owner=self.program_id
        )
        logger.info(f"Derived address ready: {address} (disambiguator {disambiguator})")

        logger.debug("Unpacking state account")
        current = record_codec.decode(segment.data)

        logger.debug("Checking if account is already initialized")
        if current.is_initialized:
            logger.warning("Account already initialized")
            raise AlreadyInitialized(f"Review already exists at {target}")

        record_codec.write_into(review, segment.data)
        logger.info("State account serialized")

        return review

    def update_review(
        self,
        caller: CallerIdentity,
        target: Address,
        rating: int,
        description: str,
        location: str
    ) -> ReviewRecord:
        """
        Update rating, description and location of an existing review.

        The title is never taken from the caller: it is read back from
        storage and used to re-derive and check the address.

        Returns:
            The stored record

        Raises:
            IllegalOwner: If target is not a segment owned by the program
            Unauthorized: If the caller has not signed
            InvalidAddress: If target is not derive(caller, stored title)
            UninitializedAccount: If no review was ever created at target
            InvalidRating: If rating is outside 1-10
            RecordTooLarge: If the updated review does not fit the segment
        """
        logger.info("Updating review...")

        segment = self.ledger.get_segment(target)
        if segment is None or segment.owner != self.program_id:
            raise IllegalOwner(f"Segment {target} is not owned by {self.program_id}")

        if not caller.is_signer:
            logger.warning("Missing required signature")
            raise Unauthorized()

        logger.debug("Unpacking state account")
        current = record_codec.decode(segment.data)
        logger.info(f"Review title: {current.title}")

        if not self.deriver.verify(target, caller.address, current.title):
            logger.warning("Invalid seeds for derived address")
            raise InvalidAddress(f"{target} is not derived from caller and '{current.title}'")

        logger.debug("Checking if account is initialized")
        if not current.is_initialized:
            logger.warning("Account is not initialized")
            raise UninitializedAccount(f"No review created at {target}")

        validate_rating(rating)

        logger.info(f"Review before update: {current.to_dict()}")

        updated = replace(
            current,
            rating=rating,
            description=description,
            location=location,
        )
        # Raises RecordTooLarge while the segment is still untouched
        record_codec.encode(updated, capacity=len(segment.data))

        logger.info(f"Review after update: {updated.to_dict()}")

        record_codec.write_into(updated, segment.data)
        logger.info("State account serialized")

        return updated

    def derive_review_address(self, owner: Address, title: str) -> Address:
        """Address a review by owner and title would live at."""
        address, _ = self.deriver.derive(owner, title)
        return address

    def read_review(self, address: Address) -> ReviewRecord:
        """
        Decode the review at an address.
        Returns an uninitialized record when nothing is stored there.
        """
        segment = self.ledger.get_segment(address)
        if segment is None:
            logger.debug(f"No segment at {address}, returning empty review")
            return ReviewRecord()
        return record_codec.decode(segment.data)


def _take_accounts(accounts: Sequence, count: int) -> list:
    if len(accounts) < count:
        raise NotEnoughAccounts(f"Expected {count} accounts, got {len(accounts)}")
    return list(accounts[:count])


# Design Rationale and Trade-offs:
#
# 1. Why encode once before allocating and again when writing?
#    - The first encode only checks that the review fits the segment
#    - A review that cannot fit is rejected before the payer is charged
#    - Trade-off: Two encodes per call, each well under a kilobyte
#
# 2. Why read the title back from storage on update?
#    - The stored title is the one the address was derived from
#    - A caller cannot move a review under another derived identity
#    - Trade-off: Update needs a decode before the address check
#
# 3. Why check the address before the initialization flag on update?
#    - Matches the order of the create path: identity first, then state
#    - Trade-off: A never-created segment only reaches UninitializedAccount
#      at the address derived from an empty title

"""
Unit and end-to-end tests for the Review Processor.
"""

import pytest

from src.codec import record_codec
from src.codec.instruction import AddReview, UpdateReview, pack
from src.models.address import Address, CallerIdentity
from src.models.errors import (
    AllocationFailure,
    AlreadyInitialized,
    IllegalOwner,
    InvalidAddress,
    InvalidInstruction,
    InvalidRating,
    NotEnoughAccounts,
    RecordTooLarge,
    Unauthorized,
    UninitializedAccount,
)
from src.models.review import ReviewRecord
from src.processor import ReviewProcessor
from src.registry.account_ledger import AccountLedger, StorageSegment
from src.registry.allocator import StorageAllocator

PROGRAM_ID = Address(bytes(range(32)))
ALICE = Address.from_seed_phrase("alice")
BOB = Address.from_seed_phrase("bob")


@pytest.fixture
def ledger():
    ledger = AccountLedger()
    ledger.credit(ALICE, 1_000_000_000)
    ledger.credit(BOB, 1_000_000_000)
    return ledger


@pytest.fixture
def processor(ledger):
    return ReviewProcessor(PROGRAM_ID, ledger)


@pytest.fixture
def allocator(ledger):
    return StorageAllocator(ledger)


def signer(address):
    return CallerIdentity(address=address, is_signer=True)


def create_cafe(processor, allocator, owner=ALICE, rating=8):
    target = processor.derive_review_address(owner, "Cafe")
    processor.add_review(
        signer(owner),
        target,
        allocator,
        "Cafe",
        rating,
        "Great coffee",
        "Downtown"
    )
    return target


def stored_bytes(ledger, address):
    return bytes(ledger.get_segment(address).data)


def test_create_then_decode(processor, allocator, ledger):
    target = create_cafe(processor, allocator)

    review = record_codec.decode(stored_bytes(ledger, target))

    assert review == ReviewRecord(
        is_initialized=True,
        title="Cafe",
        rating=8,
        description="Great coffee",
        location="Downtown"
    )
    assert len(ledger.get_segment(target).data) == processor.account_len
    assert ledger.get_segment(target).owner == PROGRAM_ID


def test_create_twice_fails_with_already_initialized(processor, allocator, ledger):
    target = create_cafe(processor, allocator)
    before = stored_bytes(ledger, target)
    balance = ledger.balance(ALICE)

    with pytest.raises(AlreadyInitialized):
        processor.add_review(signer(ALICE), target, allocator, "Cafe", 3, "Changed", "Uptown")

    assert stored_bytes(ledger, target) == before
    assert ledger.balance(ALICE) == balance


def test_create_requires_signature(processor, allocator, ledger):
    target = processor.derive_review_address(ALICE, "Cafe")

    with pytest.raises(Unauthorized):
        processor.add_review(
            CallerIdentity(address=ALICE, is_signer=False),
            target,
            allocator,
            "Cafe",
            8,
            "",
            ""
        )

    assert ledger.get_segment(target) is None


def test_create_at_wrong_address_fails(processor, allocator, ledger):
    target = processor.derive_review_address(BOB, "Cafe")

    with pytest.raises(InvalidAddress):
        processor.add_review(signer(ALICE), target, allocator, "Cafe", 8, "", "")

    assert ledger.get_segment(target) is None


@pytest.mark.parametrize("rating", [0, 11])
def test_create_with_invalid_rating_leaves_storage_untouched(processor, allocator, ledger, rating):
    target = processor.derive_review_address(ALICE, "Cafe")
    balance = ledger.balance(ALICE)

    with pytest.raises(InvalidRating):
        processor.add_review(signer(ALICE), target, allocator, "Cafe", rating, "", "")

    assert ledger.get_segment(target) is None
    assert ledger.balance(ALICE) == balance


def test_create_too_large_review_fails_before_allocation(processor, allocator, ledger):
    target = processor.derive_review_address(ALICE, "Cafe")
    balance = ledger.balance(ALICE)

    with pytest.raises(RecordTooLarge):
        processor.add_review(signer(ALICE), target, allocator, "Cafe", 8, "x" * 2000, "")

    assert ledger.get_segment(target) is None
    assert ledger.balance(ALICE) == balance


def test_create_without_funds_fails_with_allocation_failure(processor, allocator, ledger):
    carol = Address.from_seed_phrase("carol")
    target = processor.derive_review_address(carol, "Cafe")

    with pytest.raises(AllocationFailure):
        processor.add_review(signer(carol), target, allocator, "Cafe", 8, "", "")

    assert ledger.get_segment(target) is None


def test_update_before_create_fails_with_uninitialized(processor, allocator, ledger):
    """A freshly allocated, zeroed segment decodes with an empty title."""
    target = processor.derive_review_address(ALICE, "")
    allocator.allocate(ALICE, target, processor.account_len, PROGRAM_ID)
    before = stored_bytes(ledger, target)

    with pytest.raises(UninitializedAccount):
        processor.update_review(signer(ALICE), target, 9, "Still great", "Downtown")

    assert stored_bytes(ledger, target) == before


def test_update_of_uninitialized_segment_with_leftover_bytes(processor, allocator, ledger):
    """Leftover bytes behind a false flag still read as a never-created review."""
    target = processor.derive_review_address(ALICE, "")
    segment = allocator.allocate(ALICE, target, processor.account_len, PROGRAM_ID)
    segment.data[1:] = b"\xff" * (processor.account_len - 1)
    before = stored_bytes(ledger, target)

    with pytest.raises(UninitializedAccount):
        processor.update_review(signer(ALICE), target, 9, "Still great", "Downtown")

    assert stored_bytes(ledger, target) == before
    assert processor.read_review(target) == ReviewRecord()


def test_update_of_missing_segment_fails_with_illegal_owner(processor):
    target = processor.derive_review_address(ALICE, "Cafe")

    with pytest.raises(IllegalOwner):
        processor.update_review(signer(ALICE), target, 9, "", "")


def test_update_of_foreign_segment_fails_with_illegal_owner(processor, ledger):
    target = processor.derive_review_address(ALICE, "Cafe")
    ledger.put_segment(StorageSegment(target, Address(bytes(32)), 0, bytearray(1000)))

    with pytest.raises(IllegalOwner):
        processor.update_review(signer(ALICE), target, 9, "", "")


def test_update_requires_signature(processor, allocator, ledger):
    target = create_cafe(processor, allocator)
    before = stored_bytes(ledger, target)

    with pytest.raises(Unauthorized):
        processor.update_review(CallerIdentity(address=ALICE), target, 9, "", "")

    assert stored_bytes(ledger, target) == before


def test_update_by_other_owner_fails_with_invalid_address(processor, allocator, ledger):
    target = create_cafe(processor, allocator)
    before = stored_bytes(ledger, target)

    with pytest.raises(InvalidAddress):
        processor.update_review(signer(BOB), target, 1, "Terrible", "Nowhere")

    assert stored_bytes(ledger, target) == before


@pytest.mark.parametrize("rating", [0, 11])
def test_update_with_invalid_rating_leaves_storage_untouched(processor, allocator, ledger, rating):
    target = create_cafe(processor, allocator)
    before = stored_bytes(ledger, target)

    with pytest.raises(InvalidRating):
        processor.update_review(signer(ALICE), target, rating, "Still great", "Downtown")

    assert stored_bytes(ledger, target) == before


def test_update_too_large_review_leaves_storage_untouched(processor, allocator, ledger):
    target = create_cafe(processor, allocator)
    before = stored_bytes(ledger, target)

    with pytest.raises(RecordTooLarge):
        processor.update_review(signer(ALICE), target, 9, "x" * 2000, "Downtown")

    assert stored_bytes(ledger, target) == before


def test_create_then_update_scenario(processor, allocator, ledger):
    target = create_cafe(processor, allocator)

    updated = processor.update_review(signer(ALICE), target, 9, "Still great", "Downtown")

    review = processor.read_review(target)
    assert review == updated
    assert review.rating == 9
    assert review.description == "Still great"
    assert review.location == "Downtown"
    assert review.title == "Cafe"
    assert review.is_initialized is True


def test_create_with_rating_twelve_scenario(processor, allocator):
    target = processor.derive_review_address(ALICE, "Cafe")

    with pytest.raises(InvalidRating):
        processor.add_review(signer(ALICE), target, allocator, "Cafe", 12, "Great coffee", "Downtown")

    assert processor.read_review(target).is_initialized is False


def test_same_title_for_different_owners_is_independent(processor, allocator):
    alice_target = create_cafe(processor, allocator, owner=ALICE, rating=8)
    bob_target = create_cafe(processor, allocator, owner=BOB, rating=2)

    assert alice_target != bob_target
    assert processor.read_review(alice_target).rating == 8
    assert processor.read_review(bob_target).rating == 2


def test_process_instruction_dispatches_add_and_update(processor, allocator):
    target = processor.derive_review_address(ALICE, "Cafe")

    processor.process_instruction(
        [signer(ALICE), target, allocator],
        pack(AddReview(title="Cafe", rating=8, description="Great coffee", location="Downtown"))
    )
    processor.process_instruction(
        [signer(ALICE), target],
        pack(UpdateReview(rating=9, description="Still great", location="Downtown"))
    )

    review = processor.read_review(target)
    assert review.title == "Cafe"
    assert review.rating == 9


def test_process_instruction_requires_accounts(processor):
    target = processor.derive_review_address(ALICE, "Cafe")
    data = pack(AddReview(title="Cafe", rating=8, description="", location=""))

    with pytest.raises(NotEnoughAccounts):
        processor.process_instruction([signer(ALICE), target], data)


def test_process_instruction_rejects_bad_data(processor):
    with pytest.raises(InvalidInstruction):
        processor.process_instruction([], b"\x09")

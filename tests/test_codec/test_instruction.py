"""
Unit tests for the instruction codec.
"""

import pytest

from src.codec.instruction import AddReview, UpdateReview, pack, unpack
from src.models.errors import InvalidInstruction


def test_add_review_round_trip():
    instruction = AddReview(title="Cafe", rating=8, description="Great coffee", location="Downtown")
    data = pack(instruction)

    assert data[0] == 0
    assert unpack(data) == instruction


def test_update_review_carries_no_title():
    instruction = UpdateReview(rating=9, description="Still great", location="Downtown")
    data = pack(instruction)

    assert data[0] == 1
    assert unpack(data) == instruction


def test_empty_data_is_rejected():
    with pytest.raises(InvalidInstruction):
        unpack(b"")


def test_unknown_variant_is_rejected():
    with pytest.raises(InvalidInstruction, match="Unknown instruction variant"):
        unpack(b"\x07")


def test_truncated_payload_is_rejected():
    data = pack(AddReview(title="Cafe", rating=8, description="Great coffee", location="Downtown"))

    with pytest.raises(InvalidInstruction, match="Malformed"):
        unpack(data[:-3])


def test_trailing_bytes_are_rejected():
    data = pack(UpdateReview(rating=9, description="", location=""))

    with pytest.raises(InvalidInstruction, match="trailing"):
        unpack(data + b"\x00")


def test_pack_rejects_unknown_instruction():
    with pytest.raises(InvalidInstruction):
        pack("AddReview")

"""
Instruction codec.

Instruction data is a one-byte variant tag followed by the wire-encoded
payload:

    0 = AddReview    { title, rating, description, location }
    1 = UpdateReview { rating, description, location }
"""

from dataclasses import dataclass
from typing import Union

from src.codec.wire import WireReader, WireWriter
from src.models.errors import CodecError, InvalidInstruction

ADD_REVIEW = 0
UPDATE_REVIEW = 1


@dataclass
class AddReview:
    title: str
    rating: int
    description: str
    location: str


@dataclass
class UpdateReview:
    rating: int
    description: str
    location: str


ReviewInstruction = Union[AddReview, UpdateReview]


def pack(instruction: ReviewInstruction) -> bytes:
    """Encode an instruction into its tagged wire form."""
    writer = WireWriter()
    if isinstance(instruction, AddReview):
        writer.write_u8(ADD_REVIEW).write_string(instruction.title)
    elif isinstance(instruction, UpdateReview):
        writer.write_u8(UPDATE_REVIEW)
    else:
        raise InvalidInstruction(f"Unknown instruction type: {type(instruction).__name__}")

    return (
        writer.write_u8(instruction.rating)
        .write_string(instruction.description)
        .write_string(instruction.location)
        .getvalue()
    )


def unpack(data: bytes) -> ReviewInstruction:
    """
    Decode tagged instruction data.

    Raises:
        InvalidInstruction: On an empty buffer, unknown tag, truncated
            payload or trailing bytes
    """
    if not data:
        raise InvalidInstruction("Empty instruction data")

    reader = WireReader(data, offset=1)
    variant = data[0]
    try:
        if variant == ADD_REVIEW:
            instruction = AddReview(
                title=reader.read_string(),
                rating=reader.read_u8(),
                description=reader.read_string(),
                location=reader.read_string(),
            )
        elif variant == UPDATE_REVIEW:
            instruction = UpdateReview(
                rating=reader.read_u8(),
                description=reader.read_string(),
                location=reader.read_string(),
            )
        else:
            raise InvalidInstruction(f"Unknown instruction variant: {variant}")
    except CodecError as e:
        raise InvalidInstruction(f"Malformed instruction payload: {e}") from e

    if reader.remaining:
        raise InvalidInstruction(f"{reader.remaining} unexpected trailing bytes")

    return instruction

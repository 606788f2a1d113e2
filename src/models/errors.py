"""
Review store errors.

Every failure surfaced to a caller is a ReviewError subclass with a stable
numeric code, so clients can tell bad input from authorization failures
and state mismatches.
"""


class ReviewError(Exception):
    """Base class for all review store failures."""

    code = 0
    default_message = "Review operation failed"

    def __init__(self, message: str = None):
        super().__init__(message or self.default_message)


class Unauthorized(ReviewError):
    code = 1
    default_message = "Missing required signature"


class InvalidAddress(ReviewError):
    code = 2
    default_message = "Target address does not match the derived address"


class IllegalOwner(ReviewError):
    code = 3
    default_message = "Storage segment is not owned by the review program"


class InvalidRating(ReviewError):
    code = 4
    default_message = "Rating must be between 1 and 10"


class AlreadyInitialized(ReviewError):
    code = 5
    default_message = "Review account already initialized"


class UninitializedAccount(ReviewError):
    code = 6
    default_message = "Review account is not initialized"


class AllocationFailure(ReviewError):
    code = 7
    default_message = "Storage segment could not be allocated"


class InvalidInstruction(ReviewError):
    code = 8
    default_message = "Instruction data could not be decoded"


class NotEnoughAccounts(ReviewError):
    code = 9
    default_message = "Not enough accounts supplied to the instruction"


class RecordTooLarge(ReviewError):
    code = 10
    default_message = "Encoded review exceeds the segment capacity"


class CodecError(ReviewError):
    code = 11
    default_message = "Review data is corrupt"


class AddressDerivationError(ReviewError):
    code = 12
    default_message = "Unable to find a valid derived address"

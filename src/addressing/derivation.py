"""
Address Deriver.

Computes the storage address of a review from (owner, title) so anyone who
knows both can locate it without a lookup table.
"""

import hashlib
import logging
from typing import Sequence, Tuple

import config.settings as settings
from src.addressing.curve import is_on_curve
from src.models.address import Address
from src.models.errors import AddressDerivationError

logger = logging.getLogger(__name__)


class AddressDeriver:
    """
    Derives program-owned addresses.

    address = SHA-256(seeds... || disambiguator || program_id || marker)

    The disambiguator is tried from MAX_DISAMBIGUATOR down to 0 and the
    first candidate that lies off the Ed25519 curve is accepted.
    """

    def __init__(
        self,
        program_id: Address,
        max_disambiguator: int = settings.MAX_DISAMBIGUATOR,
        marker: bytes = settings.PDA_MARKER
    ):
        """
        Initialize address deriver.

        Args:
            program_id: Address of the program that will own derived segments
            max_disambiguator: First disambiguator tried (0-255)
            marker: Domain separator appended to every hash input
        """
        if not 0 <= max_disambiguator <= 255:
            raise ValueError(f"Invalid max_disambiguator: {max_disambiguator}. Must be 0-255")

        self.program_id = program_id
        self.max_disambiguator = max_disambiguator
        self.marker = marker

    @staticmethod
    def review_seeds(owner: Address, title: str) -> Tuple[bytes, bytes]:
        """Seeds for a review: the owner's 32 bytes, then the UTF-8 title."""
        return bytes(owner), title.encode("utf-8")

    def create_address(self, seeds: Sequence[bytes], disambiguator: int) -> Address:
        """
        Hash seeds and one disambiguator into a candidate address.

        Raises:
            AddressDerivationError: If the candidate lies on the curve
        """
        hasher = hashlib.sha256()
        for seed in seeds:
            hasher.update(seed)
        hasher.update(bytes((disambiguator,)))
        hasher.update(bytes(self.program_id))
        hasher.update(self.marker)
        digest = hasher.digest()

        if is_on_curve(digest):
            raise AddressDerivationError(
                f"Candidate for disambiguator {disambiguator} lies on the curve"
            )
        return Address(digest)

    def find_address(self, seeds: Sequence[bytes]) -> Tuple[Address, int]:
        """
        Search disambiguators from high to low for an off-curve address.

        Returns:
            (address, disambiguator) for the first valid candidate

        Raises:
            AddressDerivationError: If every disambiguator lands on the curve
        """
        for disambiguator in range(self.max_disambiguator, -1, -1):
            try:
                return self.create_address(seeds, disambiguator), disambiguator
            except AddressDerivationError:
                logger.debug(f"Disambiguator {disambiguator} rejected, retrying")
        raise AddressDerivationError()

    def derive(self, owner: Address, title: str) -> Tuple[Address, int]:
        """Derive the review address for (owner, title)."""
        return self.find_address(self.review_seeds(owner, title))

    def verify(self, candidate: Address, owner: Address, title: str) -> bool:
        """Recompute the address for (owner, title) and compare with candidate."""
        expected, _ = self.derive(owner, title)
        if expected != candidate:
            logger.warning(f"Address mismatch: expected {expected}, got {candidate}")
            return False
        return True


# Design Rationale and Trade-offs:
#
# 1. Why count the disambiguator down from 255?
#    - The first off-curve candidate is the canonical one, so every
#      deriver agrees on the same address for the same inputs
#    - Trade-off: Each on-curve candidate costs one more hash
#
# 2. Why reject on-curve candidates?
#    - An on-curve address could have a private key behind it
#    - Trade-off: About half of the candidates are discarded
#
# 3. Why plain concatenation of owner and title?
#    - The owner is always 32 bytes, so the split point is fixed
#    - Trade-off: Seed order is part of the address format and cannot change

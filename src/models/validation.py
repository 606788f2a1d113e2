"""
Field validation for review records.
"""

import config.settings as settings
from src.models.errors import InvalidRating


def validate_rating(rating) -> None:
    """
    Check that a rating is an integer in [MIN_RATING, MAX_RATING].

    Raises:
        InvalidRating: If the rating is out of range or not an integer
    """
    if isinstance(rating, bool) or not isinstance(rating, int):
        raise InvalidRating(f"Invalid rating: {rating!r}. Must be an integer")
    if rating < settings.MIN_RATING or rating > settings.MAX_RATING:
        raise InvalidRating(
            f"Invalid rating: {rating}. Must be {settings.MIN_RATING}-{settings.MAX_RATING}"
        )

"""
Review data model.

The record persisted in every review segment.
"""

from dataclasses import dataclass


@dataclass
class ReviewRecord:
    """
    A review stored at the address derived from (owner, title).

    A zeroed segment decodes to the default instance: empty strings,
    rating 0 and is_initialized False. Callers must check
    is_initialized before trusting the other fields.
    """
    is_initialized: bool = False
    title: str = ""  # Write-once, part of the derived address
    rating: int = 0  # 1-10 once initialized
    description: str = ""
    location: str = ""

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict."""
        return {
            "is_initialized": self.is_initialized,
            "title": self.title,
            "rating": self.rating,
            "description": self.description,
            "location": self.location,
        }

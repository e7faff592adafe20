"""flashsprint — flashcard review with a spaced-repetition scheduler and tag index."""

__version__ = "0.1.0"

from flashsprint.models import Card, CardRecord
from flashsprint.errors import FlashsprintError, InconsistentState, NotFound, ValidationError
from flashsprint.app import App
from flashsprint.review_session import ReviewSession

__all__ = ["App", "Card", "CardRecord", "FlashsprintError", "InconsistentState",
           "NotFound", "ReviewSession", "ValidationError"]

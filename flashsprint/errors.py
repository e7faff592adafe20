"""Error types raised by the card store, tag index and schedulers."""


class FlashsprintError(Exception):
    pass


class ValidationError(FlashsprintError, ValueError):
    """Empty question or answer. Raised before any state is touched."""


class NotFound(FlashsprintError, LookupError):
    def __init__(self, card_id):
        super().__init__(f"No card with ID {card_id}")
        self.card_id = card_id


class InconsistentState(FlashsprintError, RuntimeError):
    """An id is known to the index or scheduler but not to the store."""

"""Exceptions raised by the matching core."""


class NotFoundError(Exception):
    """A requested record does not exist in its store."""


class CreatorNotFoundError(NotFoundError):
    """The creator profile could not be retrieved."""

    def __init__(self, creator_id: str, message: str | None = None):
        super().__init__(message or f"Creator profile not found: {creator_id}")
        self.creator_id = creator_id


class MalformedBrandError(ValueError):
    """A raw brand record is too broken to normalize (no usable id)."""

    def __init__(self, message: str, record: object | None = None):
        super().__init__(message)
        self.record = record


class MatchNotFoundError(NotFoundError):
    """No stored match exists for a (creator, brand) pair."""

    def __init__(self, creator_id: str, brand_id: str):
        super().__init__(f"Match not found: {creator_id}-{brand_id}")
        self.creator_id = creator_id
        self.brand_id = brand_id


class InvalidTransitionError(ValueError):
    """A match status change that the lifecycle does not allow."""

class StoreError(Exception):
    """The underlying database failed to open, read, write or delete."""


class DuplicateMessageError(StoreError):
    """A chat message with the same id is already stored."""

    def __init__(self, message_id: str):
        self.message_id = message_id
        super().__init__(f"Chat message {message_id!r} already exists")


class SchemaVersionError(StoreError):
    """The database was written by a newer schema than this build understands."""

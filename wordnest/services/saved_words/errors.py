class SavedWordsError(Exception):
    def __init__(self, message: str, *, word: str | None = None):
        super().__init__(message)
        self.message = message
        self.word = word


class SaveFailed(SavedWordsError):
    """The authoritative backend rejected a save for a reason other than a conflict."""


class RemoveFailed(SavedWordsError):
    """The remote delete was rejected or could not be issued."""


class NotFound(RemoveFailed):
    """The word is absent from the backend that was expected to hold it."""

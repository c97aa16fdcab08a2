import logging
from contextlib import contextmanager
from typing import Dict, Optional

from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


class DirectoryError(Exception):
    """Base class for directory and lead-intake failures."""


class StoreUnavailable(DirectoryError):
    """The backing data store could not be reached or timed out."""

    def __init__(self, operation: str, reason: Optional[str] = None):
        self.operation = operation
        self.reason = reason
        message = f"Store unavailable during {operation}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class ValidationFailed(DirectoryError):
    """A lead submission failed input validation. `errors` maps field -> message."""

    def __init__(self, errors: Dict[str, str]):
        self.errors = dict(errors)
        super().__init__(f"Invalid fields: {', '.join(sorted(self.errors))}")


class SubmissionFailed(DirectoryError):
    """A validated lead could not be handed to the downstream collaborator."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Lead submission failed: {reason}")


@contextmanager
def store_errors(operation: str):
    """Translate SQLAlchemy failures inside the block into StoreUnavailable."""
    try:
        yield
    except SQLAlchemyError as e:
        logger.error(f"Store error during {operation}: {e}")
        raise StoreUnavailable(operation, str(e)) from e

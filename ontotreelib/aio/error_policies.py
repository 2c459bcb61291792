"""
Error handling policies for OntoTreeLib.

This module provides the fault taxonomy of the data-access layer and a
flexible error handling system through the Policy pattern, allowing users
to decide how failures are recorded while fetches keep resolving to
well-typed fallback values.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from ..config import EntityKind

logger = logging.getLogger(__name__)


class OntoTreeError(Exception):
    """Base class for faults raised by hierarchy sources."""


class NotFoundError(OntoTreeError):
    """The requested entity does not exist (terminal, not retryable)."""

    def __init__(self, kind: EntityKind, ident: str):
        super().__init__(f"{kind.key_prefix} {ident!r} not found")
        self.kind = kind
        self.ident = ident


class TransportError(OntoTreeError):
    """Network failure, unexpected status, or unparseable response."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ErrorPolicy(ABC):
    """
    Base class for error handling policies.

    Subclasses implement different strategies for recording faults that
    occur while fetching from the remote hierarchy. Every policy returns
    the fallback value for the entity kind, so no fault ever propagates
    past the fetcher boundary.
    """

    @abstractmethod
    def handle(self, error: Exception, kind: EntityKind, ident: str) -> Any:
        """
        Handle a fault that occurred during a fetch.

        Args:
            error: The exception that was raised
            kind: Entity kind being fetched
            ident: Identifier being fetched

        Returns:
            The fallback value for ``kind``
        """

    @staticmethod
    def _record(error: Exception, kind: EntityKind, ident: str) -> Dict[str, Any]:
        return {
            'kind': kind,
            'ident': ident,
            'error': error,
            'error_type': type(error).__name__,
            'error_message': str(error),
        }


class LoggingErrorPolicy(ErrorPolicy):
    """
    Policy that logs faults and continues with the fallback.

    This is the default behavior.
    """

    def __init__(self, verbose: bool = True):
        self.verbose = verbose
        self.error_count = 0

    def handle(self, error: Exception, kind: EntityKind, ident: str) -> Any:
        self.error_count += 1
        if self.verbose:
            logger.warning("Error fetching %s for %r: %s", kind.key_prefix, ident, error)
        return kind.fallback()


class CollectErrorsPolicy(ErrorPolicy):
    """
    Policy that collects all faults without logging.

    Useful for tests and for presenting a summary at the end of a session.
    """

    def __init__(self):
        self.errors: List[Dict[str, Any]] = []

    def handle(self, error: Exception, kind: EntityKind, ident: str) -> Any:
        self.errors.append(self._record(error, kind, ident))
        return kind.fallback()

    def get_statistics(self) -> dict:
        """
        Get statistics about faults encountered.

        Returns:
            Dictionary with fault counts and details
        """
        by_kind: Dict[str, int] = {}
        for record in self.errors:
            by_kind[record['kind'].key_prefix] = by_kind.get(record['kind'].key_prefix, 0) + 1
        return {
            'total_errors': len(self.errors),
            'by_kind': by_kind,
            'errors': self.errors,
        }


class ThresholdPolicy(ErrorPolicy):
    """
    Policy that tolerates faults up to a threshold, then escalates its
    log level.

    Useful when occasional failures are expected but a burst indicates
    the backend is down. Fallbacks are still returned past the threshold.
    """

    def __init__(self, max_errors: int = 10, verbose: bool = True):
        self.max_errors = max_errors
        self.error_count = 0
        self.verbose = verbose
        self.errors: List[Exception] = []

    @property
    def threshold_exceeded(self) -> bool:
        return self.error_count > self.max_errors

    def handle(self, error: Exception, kind: EntityKind, ident: str) -> Any:
        self.error_count += 1
        self.errors.append(error)

        if self.threshold_exceeded:
            logger.error("Error threshold exceeded (%d errors); last: %s for %r: %s",
                         self.max_errors, kind.key_prefix, ident, error)
        elif self.verbose:
            logger.warning("[%d/%d] Error fetching %s for %r: %s",
                           self.error_count, self.max_errors, kind.key_prefix, ident, error)
        return kind.fallback()

    def reset(self) -> None:
        self.error_count = 0
        self.errors.clear()

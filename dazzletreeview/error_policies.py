"""
Error handling policies for observer callbacks.

Observers (selection, expansion, load-data and blur handlers) are caller
code. When one raises, the ObserverRegistry hands the exception to a
policy that decides whether the engine stops or carries on. State
transitions themselves never go through a policy: a snapshot is already
committed before any observer runs.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)


class HandlerErrorPolicy(ABC):
    """
    Base class for observer error handling policies.
    """

    @abstractmethod
    def handle(self, error: Exception, event_kind: Any, handler: Callable, payload: Any) -> Any:
        """
        Handle an exception raised by an observer.

        Args:
            error: The exception that was raised
            event_kind: Which notification was being delivered
            handler: The observer that failed
            payload: The event object passed to the observer

        Returns:
            A value used in place of the handler's result, or re-raises
            the exception to stop the current cycle.
        """
        pass


def _record(error: Exception, event_kind: Any, handler: Callable, payload: Any) -> Dict[str, Any]:
    element = getattr(payload, 'element', None)
    return {
        'event': getattr(event_kind, 'value', event_kind),
        'handler': getattr(handler, '__qualname__', repr(handler)),
        'node_id': getattr(element, 'id', None),
        'error': error,
        'error_type': type(error).__name__,
        'error_message': str(error),
    }


class FailFastPolicy(HandlerErrorPolicy):
    """
    Policy that immediately re-raises any observer error.

    This is the default behavior - a failing observer surfaces to whoever
    triggered the cycle (dispatch, key handling, update).
    """

    def handle(self, error: Exception, event_kind: Any, handler: Callable, payload: Any) -> Any:
        """Re-raise the error immediately."""
        raise error


class ContinueOnErrorsPolicy(HandlerErrorPolicy):
    """
    Policy that logs observer errors and keeps notifying the rest.

    Errors are collected for later inspection.
    """

    def __init__(self, verbose: bool = True):
        """
        Initialize the policy.

        Args:
            verbose: If True, log a warning for every error
        """
        self.errors: List[Dict[str, Any]] = []
        self.verbose = verbose

    def handle(self, error: Exception, event_kind: Any, handler: Callable, payload: Any) -> Any:
        """Log the error and return None."""
        record = _record(error, event_kind, handler, payload)
        self.errors.append(record)
        if self.verbose:
            logger.warning(
                "Observer %s failed on %s event for node %r: %s",
                record['handler'], record['event'], record['node_id'], error,
            )
        return None

    def get_statistics(self) -> dict:
        """
        Get statistics about errors encountered.

        Returns:
            Dictionary with error counts and details
        """
        by_event: Dict[str, int] = {}
        for record in self.errors:
            by_event[record['event']] = by_event.get(record['event'], 0) + 1
        return {
            'total_errors': len(self.errors),
            'by_event': by_event,
            'errors': self.errors,
        }


class CollectErrorsPolicy(ContinueOnErrorsPolicy):
    """
    Policy that collects all errors without logging.

    Useful in tests and batch jobs that inspect errors at the end.
    """

    def __init__(self):
        """Initialize the policy."""
        super().__init__(verbose=False)


class ThresholdPolicy(HandlerErrorPolicy):
    """
    Policy that tolerates errors up to a threshold, then fails fast.
    """

    def __init__(self, max_errors: int = 10, verbose: bool = True):
        """
        Initialize threshold policy.

        Args:
            max_errors: Maximum errors to tolerate before failing
            verbose: If True, log a warning for tolerated errors
        """
        self.max_errors = max_errors
        self.error_count = 0
        self.verbose = verbose
        self.errors: List[Exception] = []

    def handle(self, error: Exception, event_kind: Any, handler: Callable, payload: Any) -> Any:
        """Tolerate the error if under threshold, otherwise re-raise."""
        self.error_count += 1
        self.errors.append(error)

        if self.error_count > self.max_errors:
            raise RuntimeError(f"Observer error threshold exceeded ({self.max_errors} errors)") from error

        if self.verbose:
            record = _record(error, event_kind, handler, payload)
            logger.warning(
                "[%d/%d] Observer %s failed on %s event: %s",
                self.error_count, self.max_errors, record['handler'], record['event'], error,
            )
        return None

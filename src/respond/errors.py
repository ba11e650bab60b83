"""Classification of application errors into HTTP status/message pairs."""

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any

from respond.capabilities import ErrorWithCode, ErrorWithStatus, ErrorWithStatusCode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FailureDescriptor:
    """The status code and message a failed request should be answered with."""

    status: int
    message: str

    def to_dict(self) -> dict[str, Any]:
        if self.message:
            return {"status": self.status, "message": self.message}

        return {"status": self.status}


UNKNOWN_ERROR = FailureDescriptor(status=500, message="unknown error")

MIN_STATUS = 100
MAX_STATUS = 599

# Tried in this order, each one across the whole chain before moving to the next
_CAPABILITIES = (
    ("status", ErrorWithStatus),
    ("status_code", ErrorWithStatusCode),
    ("code", ErrorWithCode),
)


def first_error(*errs: BaseException | None) -> BaseException | None:
    """Grab the first error that isn't None, or None if there are no errors at all."""
    for err in errs:
        if err is not None:
            return err

    return None


def iter_error_chain(err: BaseException) -> Iterator[BaseException]:
    """Walk an exception and everything it wraps, depth first.

    The error itself comes first, followed by the members of an exception group
    and then the explicit cause set by ``raise ... from``. The implicit context of an
    error raised while handling another one is not followed, the handled error is
    not wrapped by it. Each exception is yielded once, so cycles are safe.
    """
    seen: set[int] = set()
    pending = [err]
    while pending:
        current = pending.pop()
        if id(current) in seen:
            continue

        seen.add(id(current))
        yield current

        wrapped: list[BaseException] = []
        if isinstance(current, BaseExceptionGroup):
            wrapped.extend(current.exceptions)

        if current.__cause__ is not None:
            wrapped.append(current.__cause__)

        pending.extend(reversed(wrapped))


def classify(err: BaseException | None) -> FailureDescriptor:
    """Determine the status code and message to fail with for the given error.

    The error chain is searched for a ``status``, then a ``status_code``, then a
    ``code`` capability. The first one found decides the status and the message is
    the text of the exception that carried it. Errors without any of them are 500s.
    """
    if err is None:
        return UNKNOWN_ERROR

    chain = list(iter_error_chain(err))
    for attribute, capability in _CAPABILITIES:
        for link in chain:
            status = _probe_status(link, attribute, capability)
            if status is not None:
                return FailureDescriptor(status=status, message=_message_of(link))

    return FailureDescriptor(status=500, message=_message_of(err))


def _probe_status(err: BaseException, attribute: str, capability: type) -> int | None:
    try:
        if not isinstance(err, capability):
            return None

        value = getattr(err, attribute)
        if callable(value):
            value = value()

    except Exception:
        logger.debug(f"Ignoring {attribute!r} on {type(err).__name__}, probing it failed", exc_info=True)
        return None

    # bool is an int subclass, but True is not a status code
    if isinstance(value, bool) or not isinstance(value, int):
        return None

    # Parser error codes, websocket close codes and the like aren't HTTP statuses
    if not MIN_STATUS <= value <= MAX_STATUS:
        logger.debug(f"Ignoring {attribute!r} on {type(err).__name__}, {value} is not an HTTP status")
        return None

    return value


def _message_of(err: BaseException) -> str:
    try:
        return str(err)
    except Exception:
        return type(err).__name__

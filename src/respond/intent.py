"""The shapes a reply value can take once its capabilities have been inspected."""

import logging
from dataclasses import dataclass
from typing import Any

from respond.capabilities import Readable, Redirector

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Value:
    """A plain value to be encoded as JSON."""
    payload: Any


@dataclass(frozen=True)
class Redirect:
    """The value asked to redirect to another URL."""
    url: str


@dataclass(frozen=True)
class Raw:
    """A file-like value whose bytes are written as-is."""
    stream: Readable


type ResponseIntent = Value | Redirect | Raw


def resolve_intent(value: Any) -> ResponseIntent:
    """Decide what a reply value should be written as.

    Redirectors win over readable streams, and anything that is neither is a JSON value.
    """
    if isinstance(value, Redirector) and callable(value.redirect):
        url = value.redirect()
        logger.debug(f"{type(value).__name__} resolved to a redirect to {url!r}")
        return Redirect(url)

    if isinstance(value, Readable) and callable(value.read):
        logger.debug(f"{type(value).__name__} resolved to a raw stream")
        return Raw(value)

    logger.debug(f"{type(value).__name__} resolved to a JSON value")
    return Value(value)

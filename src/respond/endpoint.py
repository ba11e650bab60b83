"""Starlette integration for responders."""

import functools
import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from starlette.requests import Request
from starlette.responses import Response

from respond.config import RespondConfig
from respond.responder import Responder
from respond.sink import ResponseSink

logger = logging.getLogger(__name__)

type Handler = Callable[[Request, Responder], Awaitable[Any] | Any]


def responder_endpoint(func: Handler | None = None, *, config: RespondConfig | None = None):
    """Turn a ``handler(request, respond)`` function into a Starlette endpoint.

    The handler may be sync or async. Whatever it writes through the responder becomes
    the response. Exceptions escaping the handler are answered the same way ``fail``
    answers them, unless the handler already committed a status.

    ```python
    @responder_endpoint
    async def get_user(request, respond):
        respond.ok(*await find_user(request.path_params["id"]))

    app = Starlette(routes=[Route("/users/{id}", get_user)])
    ```
    """
    if func is None:
        return functools.partial(responder_endpoint, config=config)

    @functools.wraps(func)
    async def endpoint(request: Request) -> Response:
        sink = ResponseSink()
        responder = Responder(sink, request, config)
        try:
            result = func(request, responder)
            if inspect.isawaitable(result):
                await result

        except Exception as e:
            if sink.committed:
                raise

            logger.debug(f"Unhandled {type(e).__name__} in {func.__qualname__}, failing the request")
            responder.fail(e)

        return sink.to_response()

    return endpoint

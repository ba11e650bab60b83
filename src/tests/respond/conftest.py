import pytest

from respond.responder import Responder
from respond.sink import ResponseSink
from tests.respond.helpers import make_request


@pytest.fixture
def sink() -> ResponseSink:
    return ResponseSink()


@pytest.fixture
def respond(sink: ResponseSink) -> Responder:
    return Responder(sink, make_request())

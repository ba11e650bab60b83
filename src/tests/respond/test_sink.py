import pytest

from respond.exceptions import ResponderPreconditionError
from respond.sink import ResponseSink, Sink, write_redirect
from tests.respond.helpers import make_request


def test_response_sink_is_a_sink():
    assert isinstance(ResponseSink(), Sink)


def test_write_body_commits_implicit_200():
    sink = ResponseSink()
    assert sink.write_body(b"abc") == 3
    assert sink.committed
    assert sink.status_code == 200


def test_only_first_status_is_kept():
    sink = ResponseSink()
    sink.write_status(201)
    sink.write_status(500)
    assert sink.status_code == 201


def test_headers_are_frozen_after_commit():
    sink = ResponseSink()
    sink.set_header("Content-Type", "text/plain")
    sink.write_status(200)
    sink.set_header("Content-Type", "application/json")
    assert sink.headers["content-type"] == "text/plain"


def test_to_response():
    sink = ResponseSink()
    sink.set_header("Content-Type", "application/json")
    sink.write_status(201)
    sink.write_body(b'{"a":1}')

    response = sink.to_response()
    assert response.status_code == 201
    assert response.body == b'{"a":1}'
    assert response.headers["content-type"] == "application/json"


def test_to_response_defaults_to_200():
    assert ResponseSink().to_response().status_code == 200


class TestWriteRedirect:
    def test_requires_request(self):
        with pytest.raises(ResponderPreconditionError):
            write_redirect(ResponseSink(), None, "https://google.com", 307)

    def test_absolute(self):
        sink = ResponseSink()
        write_redirect(sink, make_request(), "https://google.com/search?q=a b", 308)
        assert sink.status_code == 308
        assert sink.headers["Location"] == "https://google.com/search?q=a%20b"

    def test_rooted_path_is_kept(self):
        sink = ResponseSink()
        write_redirect(sink, make_request(path="/a/b"), "/login", 307)
        assert sink.headers["Location"] == "/login"

    def test_relative_path(self):
        sink = ResponseSink()
        write_redirect(sink, make_request(path="/a/b"), "c", 307)
        assert sink.headers["Location"] == "/a/c"

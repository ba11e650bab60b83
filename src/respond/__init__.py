from respond.capabilities import ContentTypeSpecified, ErrorWithCode, ErrorWithStatus, ErrorWithStatusCode, FileNameSpecified, Redirector
from respond.config import RespondConfig
from respond.endpoint import responder_endpoint
from respond.errors import UNKNOWN_ERROR, FailureDescriptor, classify
from respond.exceptions import ErrorResponse, JSONEncodingError, ResponderPreconditionError, RespondException
from respond.responder import Responder, to
from respond.sink import ResponseSink, Sink

__all__ = [
    "ContentTypeSpecified",
    "ErrorResponse",
    "ErrorWithCode",
    "ErrorWithStatus",
    "ErrorWithStatusCode",
    "FailureDescriptor",
    "FileNameSpecified",
    "JSONEncodingError",
    "Redirector",
    "RespondConfig",
    "RespondException",
    "Responder",
    "ResponderPreconditionError",
    "ResponseSink",
    "Sink",
    "UNKNOWN_ERROR",
    "classify",
    "responder_endpoint",
    "to",
]
__version__ = "0.1.0"

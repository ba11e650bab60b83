from bevy import Container
from bevy.hooks import hooks
from starlette.requests import Request
from tramp.optionals import Optional

from respond.config import Config, ConfigModel, RespondConfig
from respond.responder import Responder
from respond.sink import ResponseSink


@hooks.HANDLE_UNSUPPORTED_DEPENDENCY
def handle_config_model_types(container: Container, dependency: type) -> Optional:
    try:
        if not issubclass(dependency, ConfigModel):
            return Optional.Nothing()
    except (TypeError, AttributeError):
        # Not a class
        return Optional.Nothing()

    config = container.get(Config)
    try:
        return Optional.Some(config.get(dependency.__model_key__, dependency))
    except KeyError:
        if dependency is RespondConfig:
            return Optional.Some(RespondConfig())

        return Optional.Nothing()


@hooks.HANDLE_UNSUPPORTED_DEPENDENCY
def handle_responder_types(container: Container, dependency: type) -> Optional:
    """Build a responder for the request and sink that live in the container."""
    if dependency is not Responder:
        return Optional.Nothing()

    return Optional.Some(
        Responder(
            container.get(ResponseSink),
            container.get(Request),
            container.get(RespondConfig),
        )
    )

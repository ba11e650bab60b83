from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, ClassVar, Self

import yaml

from respond.exceptions import RespondConfigurationError


class Config:
    def __init__(self, config: dict | None = None):
        self.config = config or {}

    def get[T](self, key: str, model: type[T] | None = None) -> T:
        """Get a config section, optionally building a model from it."""
        if not model:
            return self.config[key]

        return _build_model(model, self.config[key])

    @classmethod
    def load_config(cls, name: str, directory: str | Path = ".") -> "Config":
        match directory:
            case ".":
                path = Path()

            case str():
                path = Path(directory)

            case Path():
                path = directory

            case _:
                raise ValueError(f"Invalid directory: {directory}")

        file_path = path / name
        with file_path.open("r") as f:
            return Config(yaml.safe_load(f) or {})


class ConfigModel:
    __model_key__: ClassVar[str]

    def __init_subclass__(cls, **kwargs):
        cls.__model_key__ = kwargs.pop("model_key", cls.__name__)
        super().__init_subclass__(**kwargs)


def _build_model(model: type, data: Any):
    if hasattr(model, "from_dict"):
        return model.from_dict(data or {})

    return model(**(data or {}))


@dataclass
class RespondConfig(ConfigModel, model_key="respond"):
    """Configuration for how responders write responses.

    Attributes:
        buffer_raw: Read raw results and rendered templates completely before the status
            is committed. A read failure can then still be answered with a clean error
            response. When disabled, bytes are streamed as they are read and a failure
            halfway through can only be appended after the bytes already sent.
        chunk_size: Number of bytes read from a raw result at a time.
        log_client_errors: Log 4XX failures at INFO rather than DEBUG.
    """
    buffer_raw: bool = True
    chunk_size: int = 32 * 1024
    log_client_errors: bool = False

    def __post_init__(self):
        if isinstance(self.chunk_size, bool) or not isinstance(self.chunk_size, int) or self.chunk_size <= 0:
            raise RespondConfigurationError(
                f"chunk_size must be a positive integer, got {self.chunk_size!r}", "respond.chunk_size"
            )

    @classmethod
    def from_dict(cls, config: dict) -> Self:
        if not isinstance(config, dict):
            raise RespondConfigurationError(
                f"Expected a mapping for the respond configuration, got {type(config).__name__}", "respond"
            )

        known = {field.name for field in fields(cls)}
        unknown = set(config) - known
        if unknown:
            raise RespondConfigurationError(
                f"Unknown respond configuration keys: {', '.join(sorted(unknown))}", "respond"
            )

        return cls(**config)

    @classmethod
    def from_config(cls, config: Config) -> Self:
        """Read the "respond" section of a loaded config, using the defaults when it's missing."""
        try:
            return config.get(cls.__model_key__, cls)
        except KeyError:
            return cls()

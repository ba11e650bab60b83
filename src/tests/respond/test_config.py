import tempfile
from pathlib import Path

import pytest

from respond.config import Config, RespondConfig
from respond.exceptions import RespondConfigurationError


class TestRespondConfig:
    def test_defaults(self):
        config = RespondConfig()
        assert config.buffer_raw is True
        assert config.chunk_size == 32 * 1024
        assert config.log_client_errors is False

    def test_load_from_yaml(self):
        yaml_content = """
respond:
  buffer_raw: false
  chunk_size: 1024
  log_client_errors: true
"""
        with tempfile.TemporaryDirectory() as tmpdir:
            config_file = Path(tmpdir) / "respond.yaml"
            config_file.write_text(yaml_content)

            config = RespondConfig.from_config(Config.load_config("respond.yaml", tmpdir))

        assert config == RespondConfig(buffer_raw=False, chunk_size=1024, log_client_errors=True)

    def test_missing_section_uses_defaults(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            config_file = Path(tmpdir) / "app.yaml"
            config_file.write_text("other:\n  key: value\n")

            config = RespondConfig.from_config(Config.load_config("app.yaml", Path(tmpdir)))

        assert config == RespondConfig()

    def test_empty_file(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            (Path(tmpdir) / "empty.yaml").write_text("")
            assert RespondConfig.from_config(Config.load_config("empty.yaml", tmpdir)) == RespondConfig()

    def test_unknown_keys_fail(self):
        with pytest.raises(RespondConfigurationError, match="buffer_everything"):
            RespondConfig.from_dict({"buffer_everything": True})

    @pytest.mark.parametrize("chunk_size", [0, -1, "big", True])
    def test_invalid_chunk_size(self, chunk_size):
        with pytest.raises(RespondConfigurationError, match="chunk_size"):
            RespondConfig(chunk_size=chunk_size)

    def test_section_must_be_a_mapping(self):
        with pytest.raises(RespondConfigurationError):
            Config({"respond": ["nope"]}).get("respond", RespondConfig)


def test_config_get_raw_section():
    config = Config({"respond": {"chunk_size": 10}})
    assert config.get("respond") == {"chunk_size": 10}


def test_invalid_directory():
    with pytest.raises(ValueError, match="Invalid directory"):
        Config.load_config("respond.yaml", 42)

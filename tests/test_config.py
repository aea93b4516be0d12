import pytest
from pydantic import ValidationError

from jsonstream.core.config import DEFAULT_CHUNK_SIZE, Framing, RunConfig, StreamSettings

ENV_VARS = [
    "JSONSTREAM_FRAMING",
    "JSONSTREAM_CHUNK_SIZE",
    "JSONSTREAM_ENCODING",
    "JSONSTREAM_CLOSE_DESTINATION",
    "JSONSTREAM_LOG_LEVEL",
]


@pytest.fixture
def clean_env(monkeypatch):
    # setenv first so monkeypatch restores the absent state afterwards,
    # including values load_dotenv writes into os.environ.
    for name in ENV_VARS:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    return monkeypatch


class TestRunConfig:
    def test_defaults(self):
        config = RunConfig()
        assert config.get_framing() is Framing.INCREMENTAL
        assert config.chunk_size == DEFAULT_CHUNK_SIZE
        assert config.close_destination is True

    def test_invalid_framing(self):
        with pytest.raises(ValueError, match="Unsupported framing"):
            RunConfig(framing="lines")

    def test_invalid_chunk_size(self):
        with pytest.raises(ValueError):
            RunConfig(chunk_size=0)

    def test_unknown_encoding(self):
        with pytest.raises(ValueError, match="Unknown encoding"):
            RunConfig(encoding="bogus")

    def test_bytes_mode_skips_encoding_check(self):
        assert RunConfig(encoding=None).encoding is None


class TestStreamSettings:
    def test_defaults_from_empty_env(self, clean_env, tmp_path):
        settings = StreamSettings.from_env(tmp_path / "missing.env")
        assert settings.framing == "incremental"
        assert settings.chunk_size == DEFAULT_CHUNK_SIZE
        assert settings.close_destination is True

    def test_reads_environment(self, clean_env, tmp_path):
        clean_env.setenv("JSONSTREAM_FRAMING", "chunk")
        clean_env.setenv("JSONSTREAM_CHUNK_SIZE", "1024")
        clean_env.setenv("JSONSTREAM_CLOSE_DESTINATION", "false")
        clean_env.setenv("JSONSTREAM_LOG_LEVEL", "debug")

        config = StreamSettings.from_env(tmp_path / "missing.env").to_run_config()

        assert config.get_framing() is Framing.CHUNK
        assert config.chunk_size == 1024
        assert config.close_destination is False
        assert config.log_level == "DEBUG"

    def test_reads_dotenv_file(self, clean_env, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("JSONSTREAM_CHUNK_SIZE=512\n", encoding="utf-8")
        settings = StreamSettings.from_env(env_file)
        assert settings.chunk_size == 512

    def test_process_env_wins_over_dotenv(self, clean_env, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("JSONSTREAM_CHUNK_SIZE=512\n", encoding="utf-8")
        clean_env.setenv("JSONSTREAM_CHUNK_SIZE", "2048")
        assert StreamSettings.from_env(env_file).chunk_size == 2048

    @pytest.mark.parametrize(
        "field, value",
        [
            ("framing", "lines"),
            ("chunk_size", -1),
            ("chunk_size", "abc"),
            ("encoding", "bogus"),
        ],
    )
    def test_validation(self, field, value):
        with pytest.raises(ValidationError):
            StreamSettings(**{field: value})

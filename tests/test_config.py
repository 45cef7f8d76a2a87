"""Tests for environment-driven configuration."""

from pathlib import Path

import pytest
from notelist.config import NoteListConfig, config
from notelist.exceptions import ConfigurationError, ErrorCode


class TestNoteListConfig:
    """Tests for NoteListConfig defaults and env overrides."""

    def test_defaults(self, monkeypatch):
        for var in (
            "NOTELIST_DATA_DIR",
            "NOTELIST_DIR_NAME",
            "NOTELIST_JSON_INDENT",
            "NOTELIST_LOG_DIR",
        ):
            monkeypatch.delenv(var, raising=False)

        cfg = NoteListConfig()

        assert cfg.data_dir is None
        assert cfg.dir_name == ".notelist"
        assert cfg.notes_file == "notes.json"
        assert cfg.categories_file == "categories.json"
        assert cfg.json_indent == 2
        assert cfg.log_dir is None

    def test_env_overrides(self, monkeypatch, tmp_path):
        monkeypatch.setenv("NOTELIST_DATA_DIR", str(tmp_path / "data"))
        monkeypatch.setenv("NOTELIST_DIR_NAME", ".elsewhere")
        monkeypatch.setenv("NOTELIST_JSON_INDENT", "4")
        monkeypatch.setenv("NOTELIST_LOG_DIR", str(tmp_path / "logs"))

        cfg = NoteListConfig()

        assert cfg.data_dir == tmp_path / "data"
        assert cfg.dir_name == ".elsewhere"
        assert cfg.json_indent == 4
        assert cfg.log_dir == tmp_path / "logs"

    def test_user_env_file_is_picked_up(self, monkeypatch, tmp_path):
        from dotenv import load_dotenv

        # Register the variable with monkeypatch so the value load_dotenv
        # writes into os.environ is removed afterwards
        monkeypatch.setenv("NOTELIST_DATA_DIR", "placeholder")
        monkeypatch.delenv("NOTELIST_DATA_DIR")
        user_env = tmp_path / ".env"
        user_env.write_text("NOTELIST_DATA_DIR=/tmp/notelist-test\n")
        load_dotenv(user_env)

        assert NoteListConfig().data_dir == Path("/tmp/notelist-test")

    def test_negative_indent_rejected(self):
        with pytest.raises(ConfigurationError) as exc_info:
            NoteListConfig(json_indent=-1)

        assert exc_info.value.code == ErrorCode.CONFIG_INVALID
        assert exc_info.value.details == {"config_key": "json_indent"}

    def test_non_integer_indent_in_env_rejected(self, monkeypatch):
        monkeypatch.setenv("NOTELIST_JSON_INDENT", "wide")

        with pytest.raises(ConfigurationError) as exc_info:
            NoteListConfig()

        assert exc_info.value.config_key == "NOTELIST_JSON_INDENT"
        assert "'wide'" in exc_info.value.message

    @pytest.mark.parametrize("dir_name", ["", "  ", "a/b", "a\\b"])
    def test_invalid_dir_name_rejected(self, dir_name):
        with pytest.raises(ConfigurationError) as exc_info:
            NoteListConfig(dir_name=dir_name)

        assert exc_info.value.config_key == "dir_name"

    def test_assignment_is_validated(self, monkeypatch):
        monkeypatch.setattr(config, "json_indent", 2)

        with pytest.raises(ConfigurationError):
            config.json_indent = -5

"""Tests for configuration loading."""

from focusflow.config import DATA_DIR, Config, load_config


class TestLoadConfig:
    def test_missing_file_gives_defaults(self, tmp_path):
        config = load_config(tmp_path / "missing.conf")
        assert config == Config()
        assert config.tasks_path == DATA_DIR / "tasks.json"

    def test_parses_values(self, tmp_path):
        path = tmp_path / "focusflow.conf"
        path.write_text(
            "# FocusFlow settings\n"
            "\n"
            'TASKS_FILE="/tmp/tasks.json" # main store\n'
            "PREVIEW_COUNT=12\n"
            "DATE_FORMAT='%Y-%m-%d'\n"
        )
        config = load_config(path)
        assert config.tasks_file == "/tmp/tasks.json"
        assert config.preview_count == 12
        assert config.date_format == "%Y-%m-%d"

    def test_strips_inline_comment_from_unquoted_value(self, tmp_path):
        path = tmp_path / "focusflow.conf"
        path.write_text("PREVIEW_COUNT=7 # a week\n")
        assert load_config(path).preview_count == 7

    def test_bad_integer_keeps_default(self, tmp_path, caplog):
        path = tmp_path / "focusflow.conf"
        path.write_text("PREVIEW_COUNT=lots\n")
        config = load_config(path)
        assert config.preview_count == 5
        assert "PREVIEW_COUNT" in caplog.text

    def test_ignores_malformed_and_unknown_lines(self, tmp_path):
        path = tmp_path / "focusflow.conf"
        path.write_text("just some words\nTELEGRAM_TOKEN=abc\n")
        assert load_config(path) == Config()

"""Tests for the configuration manager."""
from pathlib import Path

import pytest

from config import ConfigurationManager, get_config
from src.utils.exceptions import ConfigurationError


def _write(tmp_path, content, name="workshop.yaml"):
    path = tmp_path / name
    path.write_text(content, encoding="utf-8")
    return str(path)


class TestConfigurationManager:
    def test_singleton(self):
        assert ConfigurationManager() is ConfigurationManager()

    def test_dot_notation(self):
        assert get_config("ocr.tesseract.lang") == "eng"
        assert get_config("ocr.workers.max_workers") == 2

    def test_missing_key_returns_default(self):
        assert get_config("ocr.nothing.here", "fallback") == "fallback"
        assert get_config("ocr.tesseract.lang.deeper", 1) == 1

    def test_shipped_extraction_settings(self):
        assert get_config("extraction.required_fields") == [
            "customer_name", "customer_phone", "bike_model",
        ]
        assert get_config("extraction.fields.customer_phone.default") == "No Phone"
        assert "Total" in get_config("extraction.boundary_headers")

    def test_relative_paths_resolved(self):
        assert Path(get_config("paths.output_dir")).is_absolute()

    def test_get_all_is_a_copy(self):
        settings = ConfigurationManager().get_all()
        settings["ocr"]["tesseract"]["psm"] = 11

        assert get_config("ocr.tesseract.psm") == 4


class TestCustomSettings:
    def test_custom_file_layered_over_shipped(self, tmp_path):
        ConfigurationManager(_write(tmp_path, "ocr:\n  tesseract:\n    psm: 6\n"))

        assert get_config("ocr.tesseract.psm") == 6
        assert get_config("ocr.tesseract.lang") == "eng"
        assert get_config("extraction.fields.bike_model.default") == "Unknown Model"

    def test_lists_are_replaced_not_merged(self, tmp_path):
        ConfigurationManager(_write(
            tmp_path, "extraction:\n  boundary_headers:\n    - Signed\n"
        ))
        assert get_config("extraction.boundary_headers") == ["Signed"]

    def test_custom_relative_path_resolved(self, tmp_path):
        ConfigurationManager(_write(tmp_path, "paths:\n  output_dir: scans\n"))
        assert Path(get_config("paths.output_dir")).is_absolute()

    def test_reload_picks_up_changes(self, tmp_path):
        path = _write(tmp_path, "workflow:\n  require_complete: false\n")
        config = ConfigurationManager(path)

        Path(path).write_text("workflow:\n  require_complete: true\n", encoding="utf-8")
        config.reload()

        assert get_config("workflow.require_complete") is True

    def test_empty_file_keeps_shipped_settings(self, tmp_path):
        config = ConfigurationManager(_write(tmp_path, ""))
        assert config.get_all()["ocr"]["tesseract"]["psm"] == 4

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            ConfigurationManager(str(tmp_path / "nope.yaml"))


class TestValidation:
    @pytest.mark.parametrize("content", [
        "ocr:\n  workers:\n    max_workers: 0\n",
        "ocr:\n  workers:\n    max_workers: two\n",
        "ocr:\n  workers:\n    timeout: -1\n",
        "extraction:\n  required_fields: customer_name\n",
        "extraction:\n  fields:\n    - customer_name\n",
        "- just\n- a list\n",
    ])
    def test_malformed_settings_rejected(self, tmp_path, content):
        with pytest.raises(ConfigurationError):
            ConfigurationManager(_write(tmp_path, content))

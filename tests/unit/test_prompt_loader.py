from pathlib import Path

import pytest

from app.extraction.exceptions import ConfigurationError
from app.extraction.prompt_loader import load_extraction_prompt


class TestLoadExtractionPrompt:
    def test_default_prompt_requests_all_sections(self) -> None:
        prompt = load_extraction_prompt()
        assert "===TITLE===" in prompt
        assert "===MAIN_DATA===" in prompt
        assert "===CONTACT_INFO===" in prompt

    def test_default_prompt_keeps_contact_data_out_of_body(self) -> None:
        prompt = load_extraction_prompt()
        assert "NEVER include email addresses or phone numbers" in prompt

    def test_loads_custom_prompt(self, tmp_path: Path) -> None:
        custom = tmp_path / "custom.txt"
        custom.write_text("===TITLE===\n===MAIN_DATA===\n===CONTACT_INFO===\n")
        assert load_extraction_prompt(custom).startswith("===TITLE===")

    def test_prompt_without_markers_is_rejected(self, tmp_path: Path) -> None:
        custom = tmp_path / "custom.txt"
        custom.write_text("Extract the text please")
        with pytest.raises(ConfigurationError, match="missing markers"):
            load_extraction_prompt(custom)

    def test_missing_file_raises_error(self) -> None:
        with pytest.raises(ConfigurationError, match="Failed to load extraction prompt"):
            load_extraction_prompt(Path("/nonexistent/prompt.txt"))

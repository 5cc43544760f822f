from pathlib import Path

from app.extraction.exceptions import ConfigurationError
from app.extraction.parser import CONTACT_INFO_MARKER, MAIN_DATA_MARKER, TITLE_MARKER

_DEFAULT_PROMPT_DIR = Path(__file__).parent / "prompts"


def load_extraction_prompt(path: Path | None = None) -> str:
    """Load the page extraction instruction text.

    Args:
        path: Path to a prompt file.
              Defaults to the bundled page_extraction_prompt.txt.

    Raises:
        ConfigurationError: if the file cannot be read or does not request
            all three sentinel sections.
    """
    if path is None:
        path = _DEFAULT_PROMPT_DIR / "page_extraction_prompt.txt"
    try:
        prompt = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"Failed to load extraction prompt: {exc}") from exc

    missing = [
        marker
        for marker in (TITLE_MARKER, MAIN_DATA_MARKER, CONTACT_INFO_MARKER)
        if marker not in prompt
    ]
    if missing:
        raise ConfigurationError(f"Extraction prompt is missing markers: {missing}")
    return prompt.strip()

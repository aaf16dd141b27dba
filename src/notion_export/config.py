"""Configuration constants and the user credential for notion-export."""

import os
from dataclasses import dataclass
from pathlib import Path

from loguru import logger

from notion_export.errors import ConfigurationError

# API key location. First file found is used; --save-token writes the first entry.
API_TOKEN_FILES: list[Path] = [
    Path("~/.config/notion-export/token.txt").expanduser(),
    Path("~/.config/secret/notion-export-token.txt").expanduser(),
]

# Takes precedence over the token files when set.
API_TOKEN_ENV: str = "NOTION_API_KEY"

# Exported pages land here, one markdown file per page.
OUTPUT_DIRECTORY: Path = Path("output")

# Cache directory, used only when --cache is passed.
API_CACHE_PREFIX: str = "/tmp/notion-export-cache/cache-"

NOTION_API_URL: str = "https://api.notion.com/v1"
NOTION_VERSION: str = "2022-06-28"

# Maximum page size the Notion API accepts.
PAGE_SIZE: int = 100

# Title used for referenced pages that have no title property.
UNKNOWN_TITLE: str = "UNKNOWN_TITLE"


@dataclass(frozen=True)
class AppConfig:
    """User configuration: just the Notion integration key."""

    notion_api_key: str

    @classmethod
    def load_user_config(cls) -> "AppConfig":
        """Load the API key from the environment or the first existing token file.

        Raises:
            ConfigurationError: If no key can be found.
        """
        from_env = os.environ.get(API_TOKEN_ENV, "").strip()
        if from_env:
            logger.debug("Using API key from ${}", API_TOKEN_ENV)
            return cls(notion_api_key=from_env)

        for token_path in API_TOKEN_FILES:
            try:
                api_key = token_path.read_text(encoding="utf-8").strip()
            except FileNotFoundError:
                continue
            if api_key:
                logger.debug("Using API key from {}", token_path)
                return cls(notion_api_key=api_key)

        msg = (
            f"Cannot find Notion API key: set ${API_TOKEN_ENV} or run with --save-token "
            f"(looked at {[str(p) for p in API_TOKEN_FILES]!r})"
        )
        raise ConfigurationError(msg)

    def save_user_config(self) -> Path:
        """Write the API key to the first token file, readable only by the user."""
        token_path = API_TOKEN_FILES[0]
        token_path.parent.mkdir(parents=True, exist_ok=True)
        token_path.write_text(self.notion_api_key.strip() + "\n", encoding="utf-8")
        token_path.chmod(0o600)
        logger.info("Saved API key to {}", token_path)
        return token_path

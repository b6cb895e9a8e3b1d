"""Project settings.

Settings are read from ``.promptstitch/config.yaml`` under the project
directory, then environment variables are applied on top:

- GEMINI_API_KEY -> api_key
- PROMPTSTITCH_MODEL -> model
- PROMPTSTITCH_USER -> user_id
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Mapping

import yaml

from promptstitch.llm.gemini_client import GEMINI_BASE_URL, GEMINI_MODEL
from promptstitch.llm.rate_limiter import RateLimiter

logger = logging.getLogger(__name__)

CONFIG_DIR = ".promptstitch"
CONFIG_FILE = "config.yaml"

ENV_OVERRIDES = {
    "GEMINI_API_KEY": "api_key",
    "PROMPTSTITCH_MODEL": "model",
    "PROMPTSTITCH_USER": "user_id",
}


@dataclass
class Settings:
    """Runtime settings for the CLI and its clients."""

    api_key: str = ""
    model: str = GEMINI_MODEL
    base_url: str = GEMINI_BASE_URL
    max_requests_per_minute: int = 9
    storage_dir: str = f"{CONFIG_DIR}/prompts"
    user_id: str = "local"

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key and self.api_key.strip())

    def storage_path(self, project_dir: Path | str) -> Path:
        """Resolve the storage directory against the project directory."""
        path = Path(self.storage_dir).expanduser()
        if path.is_absolute():
            return path
        return Path(project_dir) / path

    def make_rate_limiter(self) -> RateLimiter:
        return RateLimiter(max_requests=self.max_requests_per_minute)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Settings":
        """Create settings from a mapping, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        kwargs = {k: v for k, v in data.items() if k in known and v is not None}
        if "max_requests_per_minute" in kwargs:
            kwargs["max_requests_per_minute"] = int(kwargs["max_requests_per_minute"])
        return cls(**kwargs)


def load_settings(
    project_dir: Path | str = ".",
    environ: Mapping[str, str] | None = None,
) -> Settings:
    """Load settings for a project.

    A missing config file gives the defaults. A malformed one is logged and
    ignored.

    Args:
        project_dir: Directory containing ``.promptstitch/``.
        environ: Environment to read overrides from. Defaults to os.environ.

    Returns:
        The merged settings.
    """
    environ = os.environ if environ is None else environ
    config_path = Path(project_dir) / CONFIG_DIR / CONFIG_FILE

    data: dict[str, Any] = {}
    if config_path.exists():
        try:
            loaded = yaml.safe_load(config_path.read_text()) or {}
            if isinstance(loaded, dict):
                data = loaded
            else:
                logger.warning("Ignoring %s: expected a mapping", config_path)
        except (yaml.YAMLError, OSError) as e:
            logger.warning("Could not load %s: %s", config_path, e)

    for env_name, key in ENV_OVERRIDES.items():
        value = environ.get(env_name)
        if value:
            data[key] = value

    try:
        return Settings.from_dict(data)
    except (TypeError, ValueError) as e:
        logger.warning("Invalid settings in %s, using defaults: %s", config_path, e)
        return Settings.from_dict(
            {k: v for k, v in data.items() if k in ENV_OVERRIDES.values()}
        )

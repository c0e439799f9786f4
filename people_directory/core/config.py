"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields so the
module can be imported without any environment prepared; only the API
base URL is mandatory at start‑up and is validated by the console
entry point.

For compatibility with existing deployments the base URL can also be
supplied through a JSON settings file of the form::

    {"Api": {"BaseUrl": "https://services.example.com/api/"}}

Environment variables always take precedence over the file.
"""

import json
import logging
import os
from dataclasses import dataclass, replace
from typing import Optional


logger = logging.getLogger(__name__)


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    # Root URL of the OData service; ``People`` is resolved relative to it.
    api_base_url: str = os.getenv("PEOPLE_API_BASE_URL", "")

    # Optional bearer token.  When empty no Authorization header is sent.
    api_key: str = os.getenv("PEOPLE_API_KEY", "")

    # Per‑request timeout in seconds applied to every HTTP call.
    request_timeout: float = float(os.getenv("PEOPLE_API_TIMEOUT", "15"))

    # The console owns stdout, so only warnings and errors reach the
    # terminal by default.  Use LOG_FILE to capture debug output.
    log_level: str = os.getenv("LOG_LEVEL", "WARNING")
    log_file: str = os.getenv("LOG_FILE", "")

    settings_file: str = os.getenv("PEOPLE_SETTINGS_FILE", "appsettings.json")


def read_base_url(path: str) -> Optional[str]:
    """Return ``Api.BaseUrl`` from a JSON settings file, if present."""
    if not path or not os.path.exists(path):
        return None
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.warning("Failed to read settings file %s: %s", path, e)
        return None
    api_section = data.get("Api") if isinstance(data, dict) else None
    if not isinstance(api_section, dict):
        return None
    base_url = api_section.get("BaseUrl")
    return base_url if isinstance(base_url, str) and base_url else None


def load_settings(base: Optional[Settings] = None) -> Settings:
    """Complete ``base`` (or the module settings) from the settings file.

    Returns a new ``Settings`` instance; the input is left untouched.
    """
    current = base or settings
    if current.api_base_url:
        return current
    file_url = read_base_url(current.settings_file)
    if file_url:
        logger.debug("Using API base URL from %s", current.settings_file)
        return replace(current, api_base_url=file_url)
    return current


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Because the dataclass
# computes defaults at class definition time, environment variables
# should be set before importing this module.
settings = Settings()

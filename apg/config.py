"""Runtime settings for the proposal client: endpoint, retry policy, user-facing text.

config.yaml ships with the package and is parsed once at import. The Gemini
API key is the only value taken from the environment (or a project-root
.env), and is looked up lazily so tests and callers can inject their own.
"""

import os
from pathlib import Path

import yaml
from dotenv import load_dotenv

from apg.errors import ConfigError

# A .env beside the checkout may carry GEMINI_API_KEY for local runs
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
load_dotenv(_PROJECT_ROOT / ".env")

CONFIG_PATH = Path(__file__).resolve().parent / "config.yaml"
API_KEY_ENV = "GEMINI_API_KEY"

_config = yaml.safe_load(CONFIG_PATH.read_text())


def get_config() -> dict:
    """Return model, endpoint template, max_attempts, base_delay_ms, request_timeout_s and error_message."""
    return _config


def get_api_key() -> str:
    """Return the deployment-supplied Gemini API key, stripped.

    Raises ConfigError if GEMINI_API_KEY is unset or blank. The value is
    never echoed in the error.
    """
    key = os.getenv(API_KEY_ENV, "").strip()
    if not key:
        raise ConfigError(f"{API_KEY_ENV} is not set.")
    return key

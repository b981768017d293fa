"""Environment variable configuration for E-utilities requests.

Values are loaded in priority order:
  1. Shell environment variables (highest priority)
  2. .env file in current directory
  3. ~/.entrez/.env (persistent config, set via `entrez env set`)

Run `entrez env` to see the effective settings.
Run `entrez env set KEY value` to save a key persistently.

Keys:
    NCBI_API_KEY          ->  optional, raises the rate limit to 10 requests/second
    NCBI_EMAIL            ->  optional, NCBI asks tools to identify a contact address
    NCBI_TOOL             ->  tool name sent with each request (default: entrez-link)
    ENTREZ_TIMEOUT        ->  request timeout in seconds (default: 15)
    ENTREZ_REQUEST_DELAY  ->  minimum seconds between requests
    ENTREZ_BASE_URL       ->  E-utilities base URL
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

ENTREZ_DIR = Path.home() / ".entrez"
PERSISTENT_ENV = ENTREZ_DIR / ".env"

if PERSISTENT_ENV.exists():
    load_dotenv(PERSISTENT_ENV)

load_dotenv()

DEFAULT_BASE_URL = "https://eutils.ncbi.nlm.nih.gov/entrez/eutils"
DEFAULT_TOOL = "entrez-link"
DEFAULT_TIMEOUT = 15

# NCBI allows three requests per second without a key and ten with one.
DELAY_WITHOUT_KEY = 0.33
DELAY_WITH_KEY = 0.1


# --- Persistent config ---

def save_key(name: str, value: str) -> Path:
    """Save a setting to ~/.entrez/.env for persistent use."""
    ENTREZ_DIR.mkdir(parents=True, exist_ok=True)

    lines: list[str] = []
    replaced = False
    if PERSISTENT_ENV.exists():
        for line in PERSISTENT_ENV.read_text().splitlines():
            if line.startswith(f"{name}="):
                lines.append(f"{name}={value}")
                replaced = True
            else:
                lines.append(line)

    if not replaced:
        lines.append(f"{name}={value}")

    PERSISTENT_ENV.write_text("\n".join(lines) + "\n")

    os.environ[name] = value

    return PERSISTENT_ENV


# --- Accessors ---

def get_api_key() -> str | None:
    """API key is optional, returns None if not set."""
    return os.getenv("NCBI_API_KEY") or None


def get_email() -> str | None:
    return os.getenv("NCBI_EMAIL") or None


def get_tool() -> str:
    return os.getenv("NCBI_TOOL") or DEFAULT_TOOL


def get_base_url() -> str:
    return (os.getenv("ENTREZ_BASE_URL") or DEFAULT_BASE_URL).rstrip("/")


def get_timeout() -> float:
    raw = os.getenv("ENTREZ_TIMEOUT", "")
    if not raw:
        return DEFAULT_TIMEOUT
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"ENTREZ_TIMEOUT must be a number of seconds, got {raw!r}")


def get_request_delay() -> float:
    """Minimum pause between two requests, in seconds."""
    raw = os.getenv("ENTREZ_REQUEST_DELAY", "")
    if raw:
        try:
            return float(raw)
        except ValueError:
            raise ValueError(f"ENTREZ_REQUEST_DELAY must be a number of seconds, got {raw!r}")
    return DELAY_WITH_KEY if get_api_key() else DELAY_WITHOUT_KEY


# --- Effective settings ---

VALID_KEYS = {
    "NCBI_API_KEY",
    "NCBI_EMAIL",
    "NCBI_TOOL",
    "ENTREZ_TIMEOUT",
    "ENTREZ_REQUEST_DELAY",
    "ENTREZ_BASE_URL",
}


def _mask(value: str) -> str:
    return value[:4] + "*" * max(len(value) - 4, 4)


def current_settings() -> list[tuple[str, str]]:
    """Return (key, value) for each setting as requests would use it.

    The API key is masked; unset optional values read ``(not set)``.
    """
    api_key = get_api_key()
    return [
        ("NCBI_API_KEY", _mask(api_key) if api_key else "(not set)"),
        ("NCBI_EMAIL", get_email() or "(not set)"),
        ("NCBI_TOOL", get_tool()),
        ("ENTREZ_BASE_URL", get_base_url()),
        ("ENTREZ_TIMEOUT", f"{get_timeout():g}s"),
        ("ENTREZ_REQUEST_DELAY", f"{get_request_delay():g}s"),
    ]

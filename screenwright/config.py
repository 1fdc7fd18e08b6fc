"""Client configuration.

Everything the agents need from the outside world is captured once in an
immutable ``ChatConfig``. ``ChatConfig.from_env()`` is the only function
that looks at environment variables or the onboarding file.
"""

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Mapping, Optional

from dotenv import load_dotenv

from .errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://openrouter.ai/api/v1"
DEFAULT_REQUEST_TIMEOUT = 120.0

# OpenRouter attribution headers
DEFAULT_HEADERS: Dict[str, str] = {
    "HTTP-Referer": "https://github.com/screenwright/screenwright",
    "X-Title": "Screenwright",
}

RECOMMENDED_MODELS: Dict[str, str] = {
    "default": "anthropic/claude-sonnet-4.5",
    "cheap": "anthropic/claude-3-haiku",
    "balanced": "anthropic/claude-3.5-sonnet",
    "gemini_flash": "google/gemini-2.0-flash-exp:free",
    "gemini": "google/gemini-2.5-flash",
}

ONBOARD_CONFIG_PATH = Path.home() / ".screenwright" / "config.json"


@dataclass(frozen=True)
class ChatConfig:
    """Immutable settings threaded into ``ChatClient``."""
    api_key: str
    base_url: str = DEFAULT_BASE_URL
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None
    headers: Mapping[str, str] = field(default_factory=lambda: dict(DEFAULT_HEADERS), hash=False)
    planner_model: str = RECOMMENDED_MODELS["gemini"]
    scriptwriter_model: str = RECOMMENDED_MODELS["gemini"]
    content_model: str = RECOMMENDED_MODELS["default"]

    def __post_init__(self):
        if not self.api_key:
            raise ConfigError("api_key must not be empty")
        if self.request_timeout <= 0:
            raise ConfigError("request_timeout must be positive")

    @classmethod
    def from_env(
        cls,
        env: Optional[Mapping[str, str]] = None,
        onboard_path: Path = ONBOARD_CONFIG_PATH,
    ) -> "ChatConfig":
        """
        Build a config from environment variables, falling back to the onboarding file.

        Priority for the API key: ``OPENROUTER_API_KEY`` > ``openrouterApiKey`` in
        ``~/.screenwright/config.json``. Priority for each model: the agent-specific
        variable > ``OPENROUTER_MODEL`` > built-in default.
        """
        if env is None:
            load_dotenv()
            env = os.environ

        def read(name: str) -> Optional[str]:
            value = (env.get(name) or "").strip()
            return value or None

        api_key = read("OPENROUTER_API_KEY")
        if not api_key:
            onboard = load_onboard_config(onboard_path)
            api_key = (onboard.get("openrouterApiKey") or "").strip() or None
        if not api_key:
            raise ConfigError(
                "OpenRouter API key not found. Please run:\n"
                '  "screenwright onboard" to configure your API keys, or\n'
                "  Set the OPENROUTER_API_KEY environment variable.\n\n"
                "Get your key at: https://openrouter.ai/keys"
            )

        fallback = read("OPENROUTER_MODEL")
        kwargs = {}
        timeout = read("SCREENWRIGHT_REQUEST_TIMEOUT")
        if timeout:
            try:
                kwargs["request_timeout"] = float(timeout)
            except ValueError as e:
                raise ConfigError(f"SCREENWRIGHT_REQUEST_TIMEOUT is not a number: {timeout}") from e

        return cls(
            api_key=api_key,
            base_url=read("OPENROUTER_BASE_URL") or DEFAULT_BASE_URL,
            planner_model=read("PLANNER_MODEL") or fallback or RECOMMENDED_MODELS["gemini"],
            scriptwriter_model=read("SCRIPTWRITER_MODEL") or fallback or RECOMMENDED_MODELS["gemini"],
            content_model=read("CONTENT_CREATOR_MODEL") or fallback or RECOMMENDED_MODELS["default"],
            **kwargs,
        )


def load_onboard_config(path: Path = ONBOARD_CONFIG_PATH) -> Dict[str, str]:
    """Read the onboarding file. A missing or unreadable file yields an empty dict."""
    if not path.exists():
        return {}
    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.warning(f"⚠ Could not read onboarding config {path}: {e}")
        return {}
    return data if isinstance(data, dict) else {}

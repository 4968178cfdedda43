"""
Client Configuration

This module reads the chat client configuration from the process
environment. Only the API key is required; everything else has a default.

Environment:
    OPENAI_API_KEY: Credential for the completion service (required)
    OPENAI_BASE_URL: Optional endpoint override
    GPT_MODEL: Model identifier (default: gpt-3.5-turbo)
    GPT_CHAR_LIMIT: Input box character limit (default: 280)
    GPT_LOG_FILE: Log file path (default: gpt_chat.log)
    GPT_LOG_LEVEL: Log level name (default: WARNING)
    SHELL: Used for the window sub-title only
"""

import logging
import os
import sys
from dataclasses import dataclass
from typing import Mapping, Optional

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-3.5-turbo"
DEFAULT_CHAR_LIMIT = 280
DEFAULT_LOG_FILE = "gpt_chat.log"
DEFAULT_LOG_LEVEL = "WARNING"


@dataclass
class ClientConfig:
    """
    Resolved configuration for one run of the chat client.

    Attributes:
        api_key: Completion service credential
        model: Model identifier sent with every request
        base_url: Optional API endpoint override
        shell: Base name of the user's shell (cosmetic)
        goos: Platform name (cosmetic)
        char_limit: Maximum length of a submitted message
        log_file: Path of the log file
        log_level: Name of the logging level
    """

    api_key: str
    model: str = DEFAULT_MODEL
    base_url: Optional[str] = None
    shell: str = "sh"
    goos: str = sys.platform
    char_limit: int = DEFAULT_CHAR_LIMIT
    log_file: str = DEFAULT_LOG_FILE
    log_level: str = DEFAULT_LOG_LEVEL

    @property
    def environment_label(self) -> str:
        """Short "shell on platform" label shown in the header."""
        return f"{self.shell} on {self.goos}"


def _shell_name(raw: str) -> str:
    if not raw:
        return "sh"
    return os.path.basename(raw.rstrip("/")) or "sh"


def load_config(environ: Optional[Mapping[str, str]] = None) -> ClientConfig:
    """
    Build a ClientConfig from environment variables.

    Args:
        environ: Mapping to read from (defaults to os.environ)

    Returns:
        The resolved ClientConfig

    Raises:
        ValueError: If the API key is missing, or a numeric value or the
                    log level is invalid
    """
    env = os.environ if environ is None else environ

    api_key = env.get("OPENAI_API_KEY", "").strip()
    if not api_key:
        raise ValueError("OPENAI_API_KEY is not set")

    char_limit_raw = env.get("GPT_CHAR_LIMIT", str(DEFAULT_CHAR_LIMIT))
    try:
        char_limit = int(char_limit_raw)
    except ValueError:
        raise ValueError(
            f"GPT_CHAR_LIMIT must be an integer, got {char_limit_raw!r}"
        ) from None
    if char_limit <= 0:
        raise ValueError("GPT_CHAR_LIMIT must be positive")

    log_level = (env.get("GPT_LOG_LEVEL") or DEFAULT_LOG_LEVEL).strip().upper()
    if not isinstance(getattr(logging, log_level, None), int):
        raise ValueError(f"GPT_LOG_LEVEL is not a logging level: {log_level!r}")

    config = ClientConfig(
        api_key=api_key,
        model=env.get("GPT_MODEL", DEFAULT_MODEL) or DEFAULT_MODEL,
        base_url=env.get("OPENAI_BASE_URL") or None,
        shell=_shell_name(env.get("SHELL", "")),
        goos=sys.platform,
        char_limit=char_limit,
        log_file=env.get("GPT_LOG_FILE", DEFAULT_LOG_FILE),
        log_level=log_level,
    )
    logger.debug("Loaded config for model %s", config.model)
    return config

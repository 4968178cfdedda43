#!/usr/bin/env python3
"""
GPT Chat Application

Entry point for the terminal chat client. Provides a terminal-based user
interface using the Textual framework.
"""

import logging
import sys

from .completion import CompletionClient
from .config import load_config
from .state import ChatState
from .ui import ChatApp

logger = logging.getLogger(__name__)


def configure_logging(log_file: str, level: str) -> None:
    """Log to a file so output does not interfere with the UI."""
    level_value = getattr(logging, level.upper(), None)
    if not isinstance(level_value, int):
        level_value = logging.WARNING

    logging.basicConfig(
        level=level_value,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.FileHandler(log_file, mode="a")],
    )


def main():
    """Main entry point for the chat client."""
    try:
        config = load_config()
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)

    configure_logging(config.log_file, config.log_level)
    logger.info("Starting chat client...")

    client = CompletionClient(
        api_key=config.api_key, model=config.model, base_url=config.base_url
    )
    state = ChatState(config=config, client=client)

    try:
        pending = ChatApp(state).run()
    except KeyboardInterrupt:
        print("\nExiting...")
        sys.exit(0)

    # Unsent input goes to stdout once the terminal is restored
    if pending is not None:
        print(pending)


if __name__ == "__main__":
    main()

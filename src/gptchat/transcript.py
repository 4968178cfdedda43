"""
Chat Transcript

This module holds the ordered list of chat lines shown in the scrollback
region. Only the UI event loop mutates it.

Architecture:
    - Append-only list of TranscriptLine records
    - The last line is extended in place while a response streams in
    - Errors are kept as their own lines so they stay visible

Usage:
    transcript = Transcript()
    transcript.begin_exchange("hi")
    transcript.append_fragment("Hel")
    transcript.append_fragment("lo")
    transcript.finish_response()
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from rich.text import Text

logger = logging.getLogger(__name__)

WELCOME_TEXT = (
    "Welcome to the chat room!\nType a message and press Enter to send."
)

AUTHOR_YOU = "you"
AUTHOR_SYSTEM = "system"
AUTHOR_ERROR = "error"

# Prefix and style for each author
_PREFIXES = {
    AUTHOR_YOU: ("You: ", "magenta"),
    AUTHOR_SYSTEM: ("System: ", "magenta"),
    AUTHOR_ERROR: ("Error: ", "bold red"),
}


@dataclass
class TranscriptLine:
    """
    A single displayed line.

    Attributes:
        author: One of "you", "system" or "error"
        text: Line body without the author prefix
    """

    author: str
    text: str = ""

    def render(self) -> Text:
        """Render the line with its styled author prefix."""
        prefix, style = _PREFIXES.get(self.author, ("", ""))
        line = Text()
        if prefix:
            line.append(prefix, style=style)
        if self.author == AUTHOR_ERROR:
            line.append(self.text, style="red")
        else:
            line.append(self.text)
        return line


class Transcript:
    """
    Ordered chat lines plus the state of the current response.

    Attributes:
        lines: Lines in display order
        error: Most recent stream error, or None
        responding: True between begin_exchange and the end of the response
    """

    def __init__(self, welcome: str = WELCOME_TEXT):
        self.welcome = welcome
        self.lines: List[TranscriptLine] = []
        self.error: Optional[BaseException] = None
        self.responding = False

    def __len__(self) -> int:
        return len(self.lines)

    @property
    def last_line(self) -> Optional[TranscriptLine]:
        return self.lines[-1] if self.lines else None

    def begin_exchange(self, message: str) -> None:
        """
        Append the user's line and an empty placeholder for the response.

        Args:
            message: The submitted text
        """
        self.lines.append(TranscriptLine(AUTHOR_YOU, message))
        self.lines.append(TranscriptLine(AUTHOR_SYSTEM, ""))
        self.responding = True
        logger.debug("Began exchange, %d lines", len(self.lines))

    def append_fragment(self, text: str) -> None:
        """
        Extend the last line with a response fragment.

        Args:
            text: Fragment text

        Raises:
            RuntimeError: If no exchange has been started
        """
        if not self.lines:
            raise RuntimeError("No response line to append to")
        self.lines[-1].text += text

    def finish_response(self) -> None:
        """Mark the current response as complete."""
        self.responding = False

    def record_error(self, error: BaseException, message: str) -> None:
        """
        Store the session error and add a visible error line.

        The partial response line is left as it is.

        Args:
            error: The exception that ended the response
            message: One-line description shown to the user
        """
        self.error = error
        self.lines.append(TranscriptLine(AUTHOR_ERROR, message))
        self.responding = False

    def plain_lines(self) -> List[str]:
        """Lines as plain strings, prefixes included."""
        return [line.render().plain for line in self.lines]

    def render(self) -> Text:
        """Render the whole transcript, or the welcome text when empty."""
        if not self.lines:
            return Text(self.welcome)
        return Text("\n").join(line.render() for line in self.lines)

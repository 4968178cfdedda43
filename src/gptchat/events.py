"""
Requester Events

Events sent by the completion requester to the UI over the fragment
channel. The set is closed: every event is one of Fragment, StreamEnded
or StreamFailed.
"""

from dataclasses import dataclass
from typing import Union

# Failure stages
STAGE_REQUEST = "request"
STAGE_STREAM = "stream"


@dataclass(frozen=True)
class Fragment:
    """
    One incremental piece of response text.

    Attributes:
        text: Fragment text, forwarded verbatim
    """

    text: str


@dataclass(frozen=True)
class StreamEnded:
    """The response stream finished cleanly."""


@dataclass(frozen=True)
class StreamFailed:
    """
    The request could not be started or the stream broke mid-response.

    Attributes:
        error: The exception raised by the completion client
        stage: STAGE_REQUEST or STAGE_STREAM
    """

    error: BaseException
    stage: str = STAGE_STREAM

    @property
    def message(self) -> str:
        return describe_error(self.error)


RequesterEvent = Union[Fragment, StreamEnded, StreamFailed]


def describe_error(error: BaseException) -> str:
    """
    Render an exception as a single line for the transcript.

    Args:
        error: The exception to describe

    Returns:
        "<ExceptionName>: <first line of message>" or just the name
    """
    text = str(error).strip().splitlines()
    if text:
        return f"{type(error).__name__}: {text[0]}"
    return type(error).__name__

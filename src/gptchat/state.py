"""
Application State

All state shared by the UI event loop and the completion requester lives
on one ChatState built at startup. The requester only sees the client and
the two channels. The transcript belongs to the UI.
"""

from dataclasses import dataclass, field
from typing import Optional

from .config import ClientConfig
from .events import RequesterEvent
from .handoff import HandoffChannel
from .requester import StreamingClient
from .transcript import Transcript


@dataclass
class ChatState:
    """
    Composite state of a chat session.

    Attributes:
        config: Resolved client configuration
        client: Streaming completion client
        transcript: Displayed chat lines
        inputs: Submitted messages, UI -> requester
        events: Requester events, requester -> UI
        width: Last known terminal width
        height: Last known terminal height
    """

    config: ClientConfig
    client: StreamingClient
    transcript: Transcript = field(default_factory=Transcript)
    inputs: HandoffChannel[str] = field(
        default_factory=lambda: HandoffChannel("inputs")
    )
    events: HandoffChannel[RequesterEvent] = field(
        default_factory=lambda: HandoffChannel("events")
    )
    width: int = 0
    height: int = 0

    @property
    def error(self) -> Optional[BaseException]:
        """Most recent stream error, if any."""
        return self.transcript.error

"""
GPT Chat Package

Terminal chat client that streams completions from the OpenAI API and
renders them incrementally in a Textual UI.

Modules:
    - config: Environment configuration
    - handoff: Rendezvous channels between the requester and the UI
    - events: Events sent by the requester
    - transcript: Displayed chat lines
    - completion: Streaming completion client
    - requester: Background request loop
    - state: Shared application state
"""

from .config import ClientConfig, load_config
from .handoff import ChannelClosed, HandoffChannel
from .events import (
    Fragment,
    RequesterEvent,
    StreamEnded,
    StreamFailed,
    describe_error,
)
from .transcript import Transcript, TranscriptLine
from .completion import CompletionClient, CompletionStream
from .requester import CompletionRequester
from .state import ChatState

__all__ = [
    # Configuration
    "ClientConfig",
    "load_config",
    # Channels
    "ChannelClosed",
    "HandoffChannel",
    # Requester events
    "Fragment",
    "RequesterEvent",
    "StreamEnded",
    "StreamFailed",
    "describe_error",
    # Transcript
    "Transcript",
    "TranscriptLine",
    # Completion service
    "CompletionClient",
    "CompletionStream",
    "CompletionRequester",
    "ChatState",
]

"""
Completion Requester

Background task that turns submitted messages into streaming completion
requests and forwards each fragment to the UI.

Architecture:
    - Receives submitted messages from the input hand-off channel
    - Issues one streaming request per message, strictly one at a time
    - Sends Fragment / StreamEnded / StreamFailed events on the fragment
      hand-off channel; it never touches UI state directly
    - Re-arms for the next message after a failure

Usage:
    requester = CompletionRequester(client, inputs, events)
    task = asyncio.create_task(requester.run())
"""

import logging
from typing import Any, Protocol

from .events import (
    STAGE_REQUEST,
    STAGE_STREAM,
    Fragment,
    RequesterEvent,
    StreamEnded,
    StreamFailed,
)
from .handoff import ChannelClosed, HandoffChannel

logger = logging.getLogger(__name__)


class StreamingClient(Protocol):
    """The part of CompletionClient the requester depends on."""

    async def stream_completion(self, content: str) -> Any:
        ...

    async def close(self) -> None:
        ...


class CompletionRequester:
    """
    Runs the request cycle for the lifetime of the application.

    Attributes:
        client: Client that starts streaming completions
        inputs: Channel carrying submitted messages from the UI
        events: Channel carrying requester events to the UI
        requests_started: Number of requests issued so far
    """

    def __init__(
        self,
        client: StreamingClient,
        inputs: HandoffChannel[str],
        events: HandoffChannel[RequesterEvent],
    ):
        self.client = client
        self.inputs = inputs
        self.events = events
        self.requests_started = 0

    async def run(self) -> None:
        """
        Wait for messages and stream their completions until a channel closes.

        Cancelling the task running this coroutine cancels the in-flight
        request and closes its stream.
        """
        logger.info("Starting completion requester")

        while True:
            try:
                message = await self.inputs.receive()
            except ChannelClosed:
                logger.info("Input channel closed, requester stopping")
                return

            try:
                await self._complete(message)
            except ChannelClosed:
                logger.info("Fragment channel closed, requester stopping")
                return

    async def _complete(self, message: str) -> None:
        """Run one request and forward its outcome as events."""
        self.requests_started += 1

        try:
            stream = await self.client.stream_completion(message)
        except Exception as e:
            logger.error("Completion request failed: %s", e)
            await self.events.send(StreamFailed(e, STAGE_REQUEST))
            return

        fragments = 0
        try:
            try:
                async for text in stream:
                    fragments += 1
                    logger.debug("Forwarding fragment %d", fragments)
                    await self.events.send(Fragment(text))
            except ChannelClosed:
                raise
            except Exception as e:
                logger.error(
                    "Completion stream failed after %d fragments: %s",
                    fragments,
                    e,
                )
                await self.events.send(StreamFailed(e, STAGE_STREAM))
                return
        finally:
            await self._close_stream(stream)

        logger.info("Completion finished with %d fragments", fragments)
        await self.events.send(StreamEnded())

    @staticmethod
    async def _close_stream(stream: Any) -> None:
        close = getattr(stream, "close", None)
        if close is None:
            return
        try:
            await close()
        except Exception as e:
            logger.warning("Failed to close completion stream: %s", e)

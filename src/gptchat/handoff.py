"""
Hand-off Channel

Single-producer single-consumer rendezvous conduit used between the
completion requester and the UI event loop.

A send does not return until the receiver has taken the value, so at most
one value is ever in flight. Values are delivered in FIFO order.

Usage:
    channel = HandoffChannel("input")
    await channel.send("hello")      # in one task
    value = await channel.receive()  # in another
"""

import asyncio
import logging
from typing import Any, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

_CLOSED = object()


class ChannelClosed(RuntimeError):
    """Raised when sending to or receiving from a closed channel."""


class HandoffChannel(Generic[T]):
    """
    Rendezvous channel built on a capacity-1 asyncio.Queue.

    The sender puts the value into the single slot and then waits on
    ``Queue.join()`` until the receiver marks it done.

    Attributes:
        name: Label used in log messages
    """

    def __init__(self, name: str = "handoff"):
        self.name = name
        self._queue: "asyncio.Queue[Any]" = asyncio.Queue(maxsize=1)
        self._send_lock = asyncio.Lock()
        self._closed = False
        self._dropped = False

    @property
    def closed(self) -> bool:
        """Whether close() has been called."""
        return self._closed

    async def send(self, value: T) -> None:
        """
        Send a value and wait until it has been received.

        Args:
            value: The value to hand off

        Raises:
            ChannelClosed: If the channel is closed before the value is taken
        """
        async with self._send_lock:
            if self._closed:
                raise ChannelClosed(f"Channel '{self.name}' is closed")
            await self._queue.put(value)
            await self._queue.join()
            if self._dropped:
                raise ChannelClosed(f"Channel '{self.name}' is closed")

    async def receive(self) -> T:
        """
        Wait for the next value.

        Returns:
            The value handed off by the sender

        Raises:
            ChannelClosed: If the channel is closed while waiting
        """
        value = await self._queue.get()
        self._queue.task_done()
        if value is _CLOSED:
            # Leave the marker in place for the next receive
            self._put_marker()
            raise ChannelClosed(f"Channel '{self.name}' is closed")
        return value

    def close(self) -> None:
        """
        Close the channel.

        A value still waiting in the slot is dropped and its sender gets
        ChannelClosed. Blocked and future receivers get ChannelClosed.
        """
        if self._closed:
            return
        self._closed = True
        logger.debug("Closing channel %s", self.name)

        if not self._queue.empty():
            self._queue.get_nowait()
            self._dropped = True
            self._queue.task_done()
        self._put_marker()

    def _put_marker(self) -> None:
        try:
            self._queue.put_nowait(_CLOSED)
        except asyncio.QueueFull:
            pass

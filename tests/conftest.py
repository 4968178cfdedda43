"""
Shared fakes for the chat client tests.

The fake completion client follows the StreamingClient contract: each
stream_completion() call takes the next scripted response, which is either
an exception (request failure) or a FakeStream.
"""

import asyncio
from collections import deque

import pytest

from gptchat import ChatState, ClientConfig


class FakeStream:
    """Scripted completion stream."""

    def __init__(self, fragments, error=None, hang=False):
        self.fragments = list(fragments)
        self.error = error
        self.hang = hang
        self.closed = False
        self._index = 0

    def __aiter__(self):
        return self

    async def __anext__(self):
        if self._index < len(self.fragments):
            fragment = self.fragments[self._index]
            self._index += 1
            return fragment
        if self.error is not None:
            raise self.error
        if self.hang:
            await asyncio.Event().wait()
        raise StopAsyncIteration

    async def close(self):
        self.closed = True


class FakeCompletionClient:
    """Records requests and replays scripted responses."""

    def __init__(self, responses=None):
        self.responses = deque(responses or [])
        self.requests = []
        self.streams = []
        self.closed = False

    async def stream_completion(self, content):
        self.requests.append(content)
        response = self.responses.popleft() if self.responses else FakeStream(["ok"])
        if isinstance(response, BaseException):
            raise response
        self.streams.append(response)
        return response

    async def close(self):
        self.closed = True


@pytest.fixture
def make_state():
    """Factory for a ChatState around a fake client."""

    def _make(client=None):
        config = ClientConfig(api_key="test-key", shell="zsh", goos="linux")
        return ChatState(config=config, client=client or FakeCompletionClient())

    return _make


@pytest.fixture
def wait_until():
    """Pause a Textual pilot until a condition holds."""

    async def _wait(pilot, predicate, attempts=200):
        for _ in range(attempts):
            if predicate():
                return
            await pilot.pause(0.01)
        raise AssertionError("Condition not met in time")

    return _wait

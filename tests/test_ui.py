"""
Tests for the Chat Client UI

Tests for the Textual-based user interface, driven through the Textual
pilot with a fake completion client.
"""

import pytest
from textual.containers import VerticalScroll
from textual.widgets import Input

from conftest import FakeCompletionClient, FakeStream
from gptchat.ui import ChatApp


class TestChatAppInitialization:
    """Tests for ChatApp initialization."""

    def test_chat_app_initial_state(self, make_state):
        """Test ChatApp initial state."""
        state = make_state()
        app = ChatApp(state)
        assert app.state is state
        assert app.state.transcript.lines == []
        assert app.state.error is None

    def test_chat_app_has_quit_bindings(self, make_state):
        """Test that escape and ctrl+c are bound to quit."""
        app = ChatApp(make_state())
        keys = {binding.key: binding.action for binding in app.BINDINGS}
        assert keys["escape"] == "quit_chat"
        assert keys["ctrl+c"] == "quit_chat"

    @pytest.mark.asyncio
    async def test_mount_focuses_input_and_sets_subtitle(self, make_state):
        """Test the input box setup on mount."""
        app = ChatApp(make_state())
        async with app.run_test():
            message_input = app.query_one("#message-input", Input)
            assert app.focused is message_input
            assert message_input.placeholder == "Type here"
            assert message_input.max_length == 280
            assert app.sub_title == "zsh on linux"


class TestSubmission:
    """Tests for submitting messages."""

    @pytest.mark.asyncio
    async def test_submit_streams_response_into_transcript(
        self, make_state, wait_until
    ):
        """Test that fragments are appended to the response line in order."""
        client = FakeCompletionClient([FakeStream(["Hel", "lo", " world"])])
        app = ChatApp(make_state(client))
        transcript = app.state.transcript

        async with app.run_test() as pilot:
            await pilot.press("h", "i", "enter")
            await wait_until(
                pilot, lambda: len(transcript) == 2 and not transcript.responding
            )

            assert transcript.plain_lines() == ["You: hi", "System: Hello world"]
            assert client.requests == ["hi"]
            assert app.query_one("#message-input", Input).value == ""

    @pytest.mark.asyncio
    async def test_n_submissions_produce_2n_lines(self, make_state, wait_until):
        """Test that each exchange adds one user and one response line."""
        client = FakeCompletionClient(
            [FakeStream(["A", "1"]), FakeStream(["B"]), FakeStream(["C", "3"])]
        )
        app = ChatApp(make_state(client))
        transcript = app.state.transcript

        async with app.run_test() as pilot:
            for index, key in enumerate(["a", "b", "c"], start=1):
                await pilot.press(key, "enter")
                await wait_until(
                    pilot,
                    lambda n=index: len(transcript) == 2 * n
                    and not transcript.responding,
                )

        assert transcript.plain_lines() == [
            "You: a",
            "System: A1",
            "You: b",
            "System: B",
            "You: c",
            "System: C3",
        ]
        assert client.requests == ["a", "b", "c"]

    @pytest.mark.asyncio
    async def test_empty_submission_is_ignored(self, make_state):
        """Test that empty input adds no line and sends no request."""
        client = FakeCompletionClient()
        app = ChatApp(make_state(client))

        async with app.run_test() as pilot:
            await pilot.press("enter")
            await pilot.press("space", "space", "enter")
            await pilot.pause()

            assert app.state.transcript.lines == []
            assert client.requests == []

    @pytest.mark.asyncio
    async def test_submission_sent_verbatim(self, make_state, wait_until):
        """Test that surrounding whitespace is kept in the sent message."""
        client = FakeCompletionClient([FakeStream(["ok"])])
        app = ChatApp(make_state(client))
        transcript = app.state.transcript

        async with app.run_test() as pilot:
            await pilot.press("space", "h", "i", "space", "enter")
            await wait_until(
                pilot, lambda: len(transcript) == 2 and not transcript.responding
            )

        assert client.requests == [" hi "]
        assert transcript.lines[0].text == " hi "

    @pytest.mark.asyncio
    async def test_submission_rejected_while_responding(
        self, make_state, wait_until
    ):
        """Test that a second message waits until the response finishes."""
        client = FakeCompletionClient([FakeStream(["partial"], hang=True)])
        app = ChatApp(make_state(client))
        transcript = app.state.transcript

        async with app.run_test() as pilot:
            await pilot.press("o", "n", "e", "enter")
            await wait_until(pilot, lambda: transcript.last_line.text == "partial")

            await pilot.press("t", "w", "o", "enter")
            await pilot.pause()

            assert len(transcript) == 2
            assert client.requests == ["one"]
            assert app.query_one("#message-input", Input).value == "two"


class TestStreamErrors:
    """Tests for stream failures reaching the UI."""

    @pytest.mark.asyncio
    async def test_error_rendered_and_requester_rearmed(
        self, make_state, wait_until
    ):
        """Test that a failure is shown and later messages still work."""
        error = ConnectionError("connection reset")
        client = FakeCompletionClient(
            [FakeStream(["par"], error=error), FakeStream(["ok"])]
        )
        app = ChatApp(make_state(client))
        transcript = app.state.transcript

        async with app.run_test() as pilot:
            await pilot.press("o", "n", "e", "enter")
            await wait_until(
                pilot, lambda: len(transcript) == 3 and not transcript.responding
            )

            assert transcript.plain_lines() == [
                "You: one",
                "System: par",
                "Error: ConnectionError: connection reset",
            ]
            assert app.state.error is error

            await pilot.press("t", "w", "o", "enter")
            await wait_until(
                pilot, lambda: len(transcript) == 5 and not transcript.responding
            )

            assert transcript.plain_lines()[3:] == ["You: two", "System: ok"]
            assert client.requests == ["one", "two"]


class TestQuit:
    """Tests for quitting the app."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("quit_key", ["escape", "ctrl+c"])
    async def test_quit_returns_pending_input(self, make_state, quit_key):
        """Test that quitting hands back exactly the unsent input."""
        app = ChatApp(make_state())

        async with app.run_test() as pilot:
            await pilot.press("d", "r", "a", "f", "t")
            await pilot.press(quit_key)

        assert app.return_value == "draft"
        assert app.state.transcript.lines == []

    @pytest.mark.asyncio
    async def test_quit_cancels_in_flight_stream(self, make_state, wait_until):
        """Test that quitting mid-response closes the open stream."""
        stream = FakeStream(["partial"], hang=True)
        client = FakeCompletionClient([stream])
        app = ChatApp(make_state(client))
        transcript = app.state.transcript

        async with app.run_test() as pilot:
            await pilot.press("h", "i", "enter")
            await wait_until(pilot, lambda: transcript.last_line.text == "partial")
            await pilot.press("escape")

        assert stream.closed is True
        assert client.closed is True
        assert app.return_value == ""
        assert transcript.plain_lines() == ["You: hi", "System: partial"]


class TestResize:
    """Tests for terminal resize handling."""

    @pytest.mark.asyncio
    async def test_resize_updates_input_width_only(self, make_state, wait_until):
        """Test that a resize changes the input width but not the transcript."""
        app = ChatApp(make_state(FakeCompletionClient([FakeStream(["fine"])])))
        transcript = app.state.transcript

        async with app.run_test(size=(80, 24)) as pilot:
            await pilot.press("h", "i", "enter")
            await wait_until(
                pilot, lambda: len(transcript) == 2 and not transcript.responding
            )
            before = transcript.plain_lines()

            await pilot.resize_terminal(100, 30)
            await pilot.pause()

            assert app.state.width == 100
            assert app.state.height == 30
            message_input = app.query_one("#message-input", Input)
            assert message_input.styles.width.value == 100
            assert transcript.plain_lines() == before

    @pytest.mark.asyncio
    async def test_shrink_keeps_transcript_pinned_to_bottom(
        self, make_state, wait_until
    ):
        """Test that a view at the bottom stays there after shrinking."""
        long_reply = "\n".join(f"line {n}" for n in range(80))
        app = ChatApp(make_state(FakeCompletionClient([FakeStream([long_reply])])))
        transcript = app.state.transcript

        async with app.run_test(size=(60, 20)) as pilot:
            scrollback = app.query_one("#scrollback", VerticalScroll)
            await pilot.press("h", "i", "enter")
            await wait_until(
                pilot,
                lambda: not transcript.responding
                and scrollback.max_scroll_y > 0
                and scrollback.scroll_y == scrollback.max_scroll_y,
            )
            before_max = scrollback.max_scroll_y

            await pilot.resize_terminal(60, 12)
            await wait_until(pilot, lambda: scrollback.max_scroll_y > before_max)
            await pilot.pause()

            assert scrollback.scroll_y == scrollback.max_scroll_y


class TestTranscriptScrolling:
    """Tests for scrolling the transcript from the keyboard."""

    @pytest.mark.asyncio
    async def test_scroll_keys_reach_transcript_while_typing(
        self, make_state, wait_until
    ):
        """Test that paging keys scroll the transcript with the input focused."""
        long_reply = "\n".join(f"line {n}" for n in range(80))
        app = ChatApp(make_state(FakeCompletionClient([FakeStream([long_reply])])))
        transcript = app.state.transcript

        async with app.run_test(size=(60, 20)) as pilot:
            scrollback = app.query_one("#scrollback", VerticalScroll)
            message_input = app.query_one("#message-input", Input)
            await pilot.press("h", "i", "enter")
            await wait_until(
                pilot,
                lambda: not transcript.responding
                and scrollback.max_scroll_y > 0
                and scrollback.scroll_y == scrollback.max_scroll_y,
            )
            bottom = scrollback.scroll_y

            await pilot.press("pageup")
            await wait_until(pilot, lambda: scrollback.scroll_y < bottom)
            assert app.focused is message_input

            await pilot.press("ctrl+home")
            await wait_until(pilot, lambda: scrollback.scroll_y == 0)

            await pilot.press("pagedown")
            await wait_until(pilot, lambda: scrollback.scroll_y > 0)

            await pilot.press("ctrl+end")
            await wait_until(
                pilot, lambda: scrollback.scroll_y == scrollback.max_scroll_y
            )
            assert app.focused is message_input

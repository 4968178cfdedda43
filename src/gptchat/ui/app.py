"""
Chat Application UI

Main application class for the GPT chat terminal UI.
Built using the Textual framework.

The app is the only writer of the transcript. Requester events arrive
through a worker that waits for exactly one event on the fragment channel,
posts it to the app, and is started again once the event is handled.
"""

import asyncio
import logging
from typing import Optional

from textual import events, on
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import VerticalScroll
from textual.css.query import NoMatches
from textual.message import Message
from textual.widgets import Footer, Header, Input, Static

from ..events import (
    Fragment,
    RequesterEvent,
    StreamEnded,
    StreamFailed,
)
from ..handoff import ChannelClosed
from ..requester import CompletionRequester
from ..state import ChatState

logger = logging.getLogger(__name__)


class RequesterMessage(Message):
    """Carries one requester event into the app's message queue."""

    def __init__(self, event: RequesterEvent) -> None:
        self.event = event
        super().__init__()


class ChatApp(App):
    """Main chat application."""

    CSS = """
    Screen {
        layout: vertical;
    }

    #scrollback {
        height: 1fr;
        padding: 0 1;
    }

    #transcript {
        width: 100%;
    }

    #message-input {
        height: 3;
        border-left: thick $accent;
    }
    """

    TITLE = "GPT Chat"
    AUTO_FOCUS = "#message-input"

    BINDINGS = [
        Binding("escape", "quit_chat", "Quit", show=True, priority=True),
        Binding("ctrl+c", "quit_chat", "Quit", show=False, priority=True),
        Binding(
            "pageup", "scroll_transcript('page_up')", "Page Up", show=False
        ),
        Binding(
            "pagedown", "scroll_transcript('page_down')", "Page Down", show=False
        ),
        Binding(
            "ctrl+home", "scroll_transcript('home')", "Top",
            show=False, priority=True,
        ),
        Binding(
            "ctrl+end", "scroll_transcript('end')", "Bottom",
            show=False, priority=True,
        ),
    ]

    def __init__(self, state: ChatState) -> None:
        """Initialize the chat application."""
        super().__init__()
        self.state = state
        self._requester_task: Optional[asyncio.Task] = None

    def compose(self) -> ComposeResult:
        """Compose the main application layout."""
        yield Header()
        with VerticalScroll(id="scrollback"):
            yield Static(self.state.transcript.render(), id="transcript")
        yield Input(
            placeholder="Type here",
            max_length=self.state.config.char_limit,
            id="message-input",
        )
        yield Footer()

    def on_mount(self) -> None:
        """Start the requester and the first event wait."""
        self.sub_title = self.state.config.environment_label
        self.query_one("#message-input", Input).focus()

        requester = CompletionRequester(
            self.state.client, self.state.inputs, self.state.events
        )
        self._requester_task = asyncio.create_task(requester.run())
        self._arm_event_wait()

    async def on_unmount(self) -> None:
        """Stop the requester if quit did not already."""
        await self._stop_requester()

    def _arm_event_wait(self) -> None:
        """Start a worker that waits for the next requester event."""
        self.run_worker(self._wait_for_event(), group="requester-events")

    async def _wait_for_event(self) -> None:
        try:
            event = await self.state.events.receive()
        except ChannelClosed:
            logger.debug("Event channel closed, no longer waiting")
            return
        self.post_message(RequesterMessage(event))

    async def _stop_requester(self) -> None:
        """Cancel the requester and its request, then close the client."""
        task = self._requester_task
        if task is None:
            return
        self._requester_task = None

        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        self.state.inputs.close()
        self.state.events.close()
        logger.info("Completion requester stopped")

        try:
            await self.state.client.close()
        except Exception as e:
            logger.warning("Failed to close completion client: %s", e)

    @on(RequesterMessage)
    def handle_requester_event(self, message: RequesterMessage) -> None:
        """Apply one requester event to the transcript and redraw."""
        event = message.event
        transcript = self.state.transcript

        if isinstance(event, Fragment):
            transcript.append_fragment(event.text)
        elif isinstance(event, StreamEnded):
            transcript.finish_response()
            logger.info("Response complete")
        elif isinstance(event, StreamFailed):
            logger.error("Response failed (%s): %s", event.stage, event.error)
            transcript.record_error(event.error, event.message)
        else:
            raise TypeError(f"Unknown requester event: {event!r}")

        self._refresh_transcript(scroll_to_bottom=True)
        self._arm_event_wait()

    async def on_input_submitted(self, event: Input.Submitted) -> None:
        """Handle input submit events (Enter key)."""
        content = event.value
        if not content.strip():
            return

        if self.state.transcript.responding:
            self.bell()
            self.notify(
                "Still waiting for the current response", severity="warning"
            )
            return

        self.state.transcript.begin_exchange(content)
        event.input.value = ""
        self._refresh_transcript(scroll_to_bottom=True)

        # Returns once the requester has taken the message
        await self.state.inputs.send(content)

    def on_resize(self, event: events.Resize) -> None:
        """Track terminal size and resize the input to match."""
        self.state.width = event.size.width
        self.state.height = event.size.height

        try:
            scrollback = self.query_one("#scrollback", VerticalScroll)
            message_input = self.query_one("#message-input", Input)
        except NoMatches:
            return

        pinned = scrollback.scroll_y >= scrollback.max_scroll_y
        message_input.styles.width = event.size.width
        if pinned:
            # max_scroll_y is only known once the new layout is applied
            scrollback.call_after_refresh(scrollback.scroll_end, animate=False)

    def action_scroll_transcript(self, where: str) -> None:
        """Scroll the transcript while the input keeps focus."""
        try:
            scrollback = self.query_one("#scrollback", VerticalScroll)
        except NoMatches:
            return

        scroll = {
            "page_up": scrollback.scroll_page_up,
            "page_down": scrollback.scroll_page_down,
            "home": scrollback.scroll_home,
            "end": scrollback.scroll_end,
        }[where]
        scroll(animate=False)

    async def action_quit_chat(self) -> None:
        """Quit, returning the unsent input text as the app result."""
        try:
            pending = self.query_one("#message-input", Input).value
        except NoMatches:
            pending = ""
        await self._stop_requester()
        self.exit(result=pending)

    def _refresh_transcript(self, scroll_to_bottom: bool = False) -> None:
        """Redraw the scrollback from the current transcript."""
        try:
            scrollback = self.query_one("#scrollback", VerticalScroll)
            body = self.query_one("#transcript", Static)
        except NoMatches:
            return

        body.update(self.state.transcript.render())
        if scroll_to_bottom:
            scrollback.scroll_end(animate=False)

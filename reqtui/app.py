from __future__ import annotations

import asyncio
import logging
from functools import partial
from typing import Callable, Iterable, List, Optional

from rich.text import Text
from textual import events
from textual.app import App, ComposeResult
from textual.containers import VerticalScroll
from textual.message import Message
from textual.widgets import Header, Static

from reqtui.config import Settings
from reqtui.fields import LineInput
from reqtui.focus import Focus
from reqtui.formatting import format_summary
from reqtui.http_client import execute_request
from reqtui.models import HTTP_METHODS, Request
from reqtui.state import (
    Command,
    Event,
    LoadRequests,
    Mode,
    OperationFailed,
    Quit,
    RequestCompleted,
    Resized,
    SavedRequestsLoaded,
    SaveRequest,
    SendRequest,
    Session,
)
from reqtui.storage import StorageError, load_requests, save_request

logger = logging.getLogger(__name__)

SPINNER_FRAMES = "⠋⠙⠹⠸⠼⠴⠦⠧⠇⠏"

HELP = {
    Mode.IDLE: "e: Edit request • enter: Send request • l: Load saved • q/esc: Quit",
    Mode.EDITING: "tab/ctrl+n: Next field • ctrl+s: Send • alt+s/ctrl+o: Save • esc: Back",
    Mode.VIEWING_RESPONSE: "↑/↓ pgup/pgdn: Scroll • q/esc: Back • e: Edit request",
    Mode.SAVING: "enter: Save • esc: Cancel",
    Mode.LOADING: "↑/↓: Move • enter: Select • esc: Cancel",
}

TITLES = {
    Mode.IDLE: "HTTP Client",
    Mode.EDITING: "Edit Request",
    Mode.VIEWING_RESPONSE: "Response",
    Mode.SAVING: "Save Request",
    Mode.LOADING: "Load Request",
}


class SessionEvent(Message):
    """Result of background work, delivered back to the event loop."""

    def __init__(self, event: Event) -> None:
        super().__init__()
        self.event = event


class SessionView(Static):
    can_focus = True
    DEFAULT_CSS = """
    SessionView {
        padding: 1 2;
    }
    """

    def on_key(self, event: events.Key) -> None:
        event.stop()
        event.prevent_default()
        self.app.feed_key(event.key, event.character)

    def on_paste(self, event: events.Paste) -> None:
        event.stop()
        self.app.feed_paste(event.text)


class ReqtuiApp(App):
    TITLE = "reqtui"

    CSS = """
    Screen {
        layout: vertical;
    }

    #body {
        height: 1fr;
        border: solid blue;
    }

    #body:focus-within {
        border: solid yellow;
    }

    #status-line {
        height: auto;
        padding: 0 2;
        color: $error;
    }

    #help {
        height: 1;
        padding: 0 2;
        color: $text-muted;
    }
    """

    def __init__(self, settings: Optional[Settings] = None) -> None:
        super().__init__()
        self.settings = settings or Settings()
        self.session = Session()
        self._spinner_frame = 0
        self._storage_lock: Optional[asyncio.Lock] = None

    def compose(self) -> ComposeResult:
        yield Header()
        yield VerticalScroll(SessionView(id="session-view"), id="body")
        yield Static(id="status-line")
        yield Static(id="help")

    def on_mount(self) -> None:
        self._storage_lock = asyncio.Lock()
        logger.info("saved requests live in %s", self.settings.requests_dir)
        self.query_one(SessionView).focus()
        self.set_interval(0.1, self._tick_spinner)
        self._run_commands(self.session.start())

    def on_resize(self, event: events.Resize) -> None:
        # Layout only; textual redraws on its own after a resize.
        self.session.dispatch(Resized(event.size.width, event.size.height))

    def on_session_event(self, message: SessionEvent) -> None:
        self._run_commands(self.session.dispatch(message.event))

    def feed_key(self, key: str, character: Optional[str]) -> None:
        self._run_commands(self.session.handle_key(key, character))

    def feed_paste(self, text: str) -> None:
        self._run_commands(self.session.paste(text))

    def _run_commands(self, commands: Iterable[Command]) -> None:
        for command in commands:
            if isinstance(command, SendRequest):
                self.run_worker(self._send_worker(command.request), group="send")
            elif isinstance(command, SaveRequest):
                self.run_worker(
                    self._storage_worker(
                        partial(save_request, command.request, self.settings.requests_dir)
                    ),
                    group="storage",
                )
            elif isinstance(command, LoadRequests):
                self.run_worker(
                    self._storage_worker(
                        partial(load_requests, self.settings.requests_dir)
                    ),
                    group="storage",
                )
            elif isinstance(command, Quit):
                self.exit()
        self._refresh_view()

    async def _send_worker(self, request: Request) -> None:
        response = await execute_request(request, timeout=self.settings.timeout)
        self.post_message(SessionEvent(RequestCompleted(response)))

    async def _storage_worker(self, operation: Callable[[], List[Request]]) -> None:
        # Disk I/O runs off the loop, one operation at a time, so saved lists
        # arrive in the order they were requested.
        async with self._storage_lock:
            try:
                requests = await asyncio.to_thread(operation)
            except StorageError as exc:
                self.post_message(SessionEvent(OperationFailed(str(exc))))
                return
            except Exception as exc:
                logger.exception("storage operation failed")
                self.post_message(
                    SessionEvent(OperationFailed(f"storage error: {exc!r}"))
                )
                return
        self.post_message(SessionEvent(SavedRequestsLoaded(tuple(requests))))

    def _tick_spinner(self) -> None:
        if not self.session.busy:
            return
        self._spinner_frame = (self._spinner_frame + 1) % len(SPINNER_FRAMES)
        self._refresh_view()

    def _refresh_view(self) -> None:
        session = self.session
        self.query_one(SessionView).update(self._render_session())
        error = f"Error: {session.last_error}" if session.last_error else ""
        self.query_one("#status-line", Static).update(Text(error))
        self.query_one("#help", Static).update(Text(HELP[session.mode]))
        scroll = session.scroll if session.mode is Mode.VIEWING_RESPONSE else 0
        self.query_one("#body", VerticalScroll).scroll_to(y=scroll, animate=False)

    def _render_session(self) -> Text:
        session = self.session
        text = Text(TITLES[session.mode], style="bold")
        text.append("\n\n")
        if session.mode is Mode.IDLE:
            text.append_text(self._render_idle())
        elif session.mode is Mode.EDITING:
            text.append_text(self._render_editing())
        elif session.mode is Mode.VIEWING_RESPONSE:
            text.append(session.response_text)
        elif session.mode is Mode.SAVING:
            text.append("Name:\n", style="bold")
            text.append_text(_render_field(session.name_input, True))
        elif session.mode is Mode.LOADING:
            text.append_text(self._render_saved_list())
        return text

    def _render_idle(self) -> Text:
        session = self.session
        if session.busy:
            frame = SPINNER_FRAMES[self._spinner_frame]
            return Text(f"{frame} Sending request...", style="magenta")
        text = Text("Current Request: ")
        text.append(format_summary(session.request), style="magenta")
        if session.request.name:
            text.append(f"  ({session.request.name})", style="dim")
        if session.last_response is not None:
            text.append(f"\nLast Response: {session.last_response.status}", style="dim")
        return text

    def _render_editing(self) -> Text:
        session = self.session
        text = Text()
        sections = [
            ("URL", Focus.URL, session.url_input),
            ("Method", Focus.METHOD, None),
            ("Headers", Focus.HEADERS, session.headers_input),
            ("Body", Focus.BODY, session.body_input),
        ]
        for label, focus, field in sections:
            focused = session.focus is focus
            text.append(f"{label}:\n", style="bold magenta" if focused else "bold")
            if field is None:
                text.append_text(self._render_methods(focused))
            else:
                text.append_text(_render_field(field, focused))
            text.append("\n\n")
        return text

    def _render_methods(self, focused: bool) -> Text:
        lines: List[Text] = []
        for index, method in enumerate(HTTP_METHODS):
            if index == self.session.method_index:
                style = "reverse" if focused else "bold"
                lines.append(Text(f"> {method}", style=style))
            else:
                lines.append(Text(f"  {method}"))
        return Text("\n").join(lines)

    def _render_saved_list(self) -> Text:
        session = self.session
        if not session.saved_requests:
            return Text("no saved requests", style="dim")
        lines: List[Text] = []
        for index, request in enumerate(session.saved_requests):
            line = Text(f"{request.name}  ")
            line.append(f"{request.method} {request.url}", style="dim")
            if index == session.selection:
                line.stylize("reverse")
            lines.append(line)
        return Text("\n").join(lines)


def _render_field(field: LineInput, focused: bool) -> Text:
    value = field.value
    if not focused:
        if not value:
            return Text(field.placeholder, style="dim")
        return Text(value)
    cursor = field.cursor
    under = value[cursor : cursor + 1]
    text = Text(value[:cursor])
    if under in ("", "\n"):
        text.append(" ", style="reverse")
        text.append(value[cursor:])
    else:
        text.append(under, style="reverse")
        text.append(value[cursor + 1 :])
    return text

"""Interaction state machine.

The session owns every piece of mutable UI state and never performs I/O.
Key presses go in through :meth:`Session.handle_key`, results of background
work come back through :meth:`Session.dispatch`, and both return the commands
the caller has to run (send a request, save, reload the saved list, quit).
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple, Union

from reqtui.fields import LineInput, TextArea
from reqtui.focus import NEXT_KEYS, PREVIOUS_KEYS, Focus, advance, retreat
from reqtui.formatting import format_exchange
from reqtui.headers import format_headers, parse_headers
from reqtui.models import HTTP_METHODS, Request, Response

logger = logging.getLogger(__name__)

QUIT_KEYS = ("ctrl+c",)
SEND_KEY = "ctrl+s"
SAVE_KEYS = ("alt+s", "ctrl+o")
UP_KEYS = ("up", "k")
DOWN_KEYS = ("down", "j")


class Mode(Enum):
    IDLE = "idle"
    EDITING = "editing"
    VIEWING_RESPONSE = "viewing_response"
    SAVING = "saving"
    LOADING = "loading"


@dataclass(frozen=True)
class SendRequest:
    request: Request


@dataclass(frozen=True)
class SaveRequest:
    request: Request


@dataclass(frozen=True)
class LoadRequests:
    pass


@dataclass(frozen=True)
class Quit:
    pass


@dataclass(frozen=True)
class RequestCompleted:
    response: Response


@dataclass(frozen=True)
class SavedRequestsLoaded:
    requests: Tuple[Request, ...]


@dataclass(frozen=True)
class OperationFailed:
    error: str


@dataclass(frozen=True)
class Resized:
    width: int
    height: int


Command = Union[SendRequest, SaveRequest, LoadRequests, Quit]
Event = Union[RequestCompleted, SavedRequestsLoaded, OperationFailed, Resized]
KeyHandler = Callable[[str, Optional[str]], List[Command]]


class Session:
    def __init__(self) -> None:
        self.mode = Mode.IDLE
        self.request = Request()
        self.last_response: Optional[Response] = None
        self.saved_requests: List[Request] = []
        self.focus: Optional[Focus] = None
        self.busy = False
        self.last_error: Optional[str] = None

        self.url_input = LineInput(placeholder="https://example.com/api")
        self.headers_input = TextArea(
            placeholder="Headers (one per line, format: Key: Value)"
        )
        self.body_input = TextArea(placeholder="Request body (JSON, form data, etc.)")
        self.name_input = LineInput(placeholder="Request name")
        self.method_index = 0
        self.selection = 0
        self.response_text = ""
        self.scroll = 0
        self.width = 80
        self.height = 24
        self._edit_focus = Focus.URL

        self._key_handlers: Dict[Mode, KeyHandler] = {
            Mode.IDLE: self._idle_key,
            Mode.EDITING: self._editing_key,
            Mode.VIEWING_RESPONSE: self._viewing_key,
            Mode.SAVING: self._saving_key,
            Mode.LOADING: self._loading_key,
        }
        self._field_handlers: Dict[Focus, Callable[[str, Optional[str]], None]] = {
            Focus.URL: self._edit_url,
            Focus.METHOD: self._edit_method,
            Focus.HEADERS: self._edit_headers,
            Focus.BODY: self._edit_body,
        }

    def start(self) -> List[Command]:
        return [LoadRequests()]

    def handle_key(self, key: str, character: Optional[str] = None) -> List[Command]:
        if key in QUIT_KEYS:
            return [Quit()]
        return self._key_handlers[self.mode](key, character)

    def paste(self, text: str) -> List[Command]:
        """Insert pasted text into the field that owns input, if any."""
        if self.mode is Mode.SAVING:
            self.name_input.paste(text)
        elif self.mode is Mode.EDITING:
            if self.focus is Focus.URL and self.url_input.paste(text):
                self.request.url = self.url_input.value
            elif self.focus is Focus.HEADERS and self.headers_input.paste(text):
                self.request.headers = parse_headers(self.headers_input.value)
            elif self.focus is Focus.BODY and self.body_input.paste(text):
                self.request.body = self.body_input.value
        return []

    def dispatch(self, event: Event) -> List[Command]:
        if isinstance(event, RequestCompleted):
            self._request_completed(event.response)
        elif isinstance(event, SavedRequestsLoaded):
            self.saved_requests = list(event.requests)
            self.selection = min(self.selection, max(0, len(self.saved_requests) - 1))
            self.last_error = None
        elif isinstance(event, OperationFailed):
            logger.warning("operation failed: %s", event.error)
            self.last_error = event.error
        elif isinstance(event, Resized):
            self.width = event.width
            self.height = event.height
            self.scroll = min(self.scroll, self._max_scroll())
        else:
            raise TypeError(f"unknown event: {event!r}")
        return []

    @property
    def page_height(self) -> int:
        return max(1, self.height - 4)

    def _set_mode(self, mode: Mode) -> None:
        if mode is not self.mode:
            logger.debug("mode %s -> %s", self.mode.value, mode.value)
        self.mode = mode

    def _idle_key(self, key: str, character: Optional[str]) -> List[Command]:
        if key in ("q", "escape"):
            return [Quit()]
        if self.busy:
            return []
        if key in ("e", "n"):
            self._enter_editing(Focus.URL)
        elif key == "l":
            self._set_mode(Mode.LOADING)
            return [LoadRequests()]
        elif key == "enter":
            return self._send()
        return []

    def _editing_key(self, key: str, character: Optional[str]) -> List[Command]:
        # Navigation is resolved here so the focused field never sees it.
        if key in NEXT_KEYS:
            self.focus = advance(self.focus)
        elif key in PREVIOUS_KEYS:
            self.focus = retreat(self.focus)
        elif key == "escape":
            self._leave_editing(Mode.IDLE)
        elif key == SEND_KEY:
            return self._send()
        elif key in SAVE_KEYS:
            self._leave_editing(Mode.SAVING)
            self.focus = Focus.NAME
        else:
            self._field_handlers[self.focus](key, character)
        return []

    def _viewing_key(self, key: str, character: Optional[str]) -> List[Command]:
        if key in ("escape", "q"):
            self._set_mode(Mode.IDLE)
        elif key == "e":
            self._enter_editing(self._edit_focus)
        elif key in UP_KEYS:
            self._scroll_to(self.scroll - 1)
        elif key in DOWN_KEYS:
            self._scroll_to(self.scroll + 1)
        elif key == "pageup":
            self._scroll_to(self.scroll - self.page_height)
        elif key == "pagedown":
            self._scroll_to(self.scroll + self.page_height)
        elif key == "home":
            self._scroll_to(0)
        elif key == "end":
            self._scroll_to(self._max_scroll())
        return []

    def _saving_key(self, key: str, character: Optional[str]) -> List[Command]:
        if key == "escape":
            self._enter_editing(self._edit_focus)
        elif key == "enter":
            name = self.name_input.value.strip()
            if not name:
                return []
            self.request.name = name
            self.name_input.reset()
            self._enter_editing(self._edit_focus)
            return [SaveRequest(self.request.copy())]
        else:
            self.name_input.handle_key(key, character)
        return []

    def _loading_key(self, key: str, character: Optional[str]) -> List[Command]:
        if key == "escape":
            self._set_mode(Mode.IDLE)
        elif key in UP_KEYS:
            self.selection = max(0, self.selection - 1)
        elif key in DOWN_KEYS:
            self.selection = min(max(0, len(self.saved_requests) - 1), self.selection + 1)
        elif key == "enter":
            if 0 <= self.selection < len(self.saved_requests):
                self._load(self.saved_requests[self.selection])
                self._set_mode(Mode.IDLE)
        return []

    def _edit_url(self, key: str, character: Optional[str]) -> None:
        if self.url_input.handle_key(key, character):
            self.request.url = self.url_input.value

    def _edit_method(self, key: str, character: Optional[str]) -> None:
        if key == "enter":
            self.focus = advance(Focus.METHOD)
            return
        if key in UP_KEYS:
            self.method_index = max(0, self.method_index - 1)
        elif key in DOWN_KEYS:
            self.method_index = min(len(HTTP_METHODS) - 1, self.method_index + 1)
        else:
            return
        self.request.method = HTTP_METHODS[self.method_index]

    def _edit_headers(self, key: str, character: Optional[str]) -> None:
        if self.headers_input.handle_key(key, character):
            self.request.headers = parse_headers(self.headers_input.value)

    def _edit_body(self, key: str, character: Optional[str]) -> None:
        if self.body_input.handle_key(key, character):
            self.request.body = self.body_input.value

    def _send(self) -> List[Command]:
        if self.busy:
            return []
        if not self.request.url:
            self.last_error = "URL is required"
            return []
        if self.mode is Mode.EDITING:
            self._leave_editing(Mode.IDLE)
        self.busy = True
        return [SendRequest(self.request.copy())]

    def _request_completed(self, response: Response) -> None:
        self.busy = False
        if response.error:
            self.last_error = response.error
            self._set_mode(Mode.IDLE)
            return
        self.last_response = response
        self.last_error = None
        self.response_text = format_exchange(self.request, response)
        self.scroll = 0
        self._set_mode(Mode.VIEWING_RESPONSE)

    def _enter_editing(self, focus: Focus) -> None:
        self._set_mode(Mode.EDITING)
        self.focus = focus

    def _leave_editing(self, mode: Mode) -> None:
        if self.focus is not None:
            self._edit_focus = self.focus
        self.focus = None
        self._set_mode(mode)

    def _load(self, request: Request) -> None:
        self.request = request.copy()
        self.url_input.set_value(self.request.url)
        self.headers_input.set_value(format_headers(self.request.headers))
        self.body_input.set_value(self.request.body)
        self.method_index = HTTP_METHODS.index(self.request.method)
        logger.info("loaded request %r", self.request.name)

    def _scroll_to(self, offset: int) -> None:
        self.scroll = max(0, min(offset, self._max_scroll()))

    def _max_scroll(self) -> int:
        return max(0, len(self.response_text.splitlines()) - self.page_height)

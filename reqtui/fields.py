from __future__ import annotations

from typing import Optional


class LineInput:
    """Single-line text buffer with a cursor."""

    multiline = False

    def __init__(self, value: str = "", placeholder: str = "") -> None:
        self.placeholder = placeholder
        self.value = value
        self.cursor = len(value)

    def set_value(self, value: str) -> None:
        if not self.multiline:
            value = value.replace("\n", " ")
        self.value = value
        self.cursor = len(value)

    def reset(self) -> None:
        self.set_value("")

    def paste(self, text: str) -> bool:
        text = text.replace("\r\n", "\n").replace("\r", "\n")
        if not self.multiline:
            text = text.rstrip("\n").replace("\n", " ")
        if not text:
            return False
        self._insert(text)
        return True

    def handle_key(self, key: str, character: Optional[str] = None) -> bool:
        """Apply a key press. Returns True when the value changed."""
        if key == "left":
            self.cursor = max(0, self.cursor - 1)
        elif key == "right":
            self.cursor = min(len(self.value), self.cursor + 1)
        elif key in ("home", "ctrl+a"):
            self.cursor = self._line_start()
        elif key in ("end", "ctrl+e"):
            self.cursor = self._line_end()
        elif key == "backspace":
            if self.cursor == 0:
                return False
            self.value = self.value[: self.cursor - 1] + self.value[self.cursor :]
            self.cursor -= 1
            return True
        elif key == "delete":
            if self.cursor >= len(self.value):
                return False
            self.value = self.value[: self.cursor] + self.value[self.cursor + 1 :]
            return True
        elif character and character.isprintable():
            self._insert(character)
            return True
        return False

    def _insert(self, text: str) -> None:
        self.value = self.value[: self.cursor] + text + self.value[self.cursor :]
        self.cursor += len(text)

    def _line_start(self) -> int:
        return 0

    def _line_end(self) -> int:
        return len(self.value)


class TextArea(LineInput):
    """Multi-line buffer. Enter breaks the line, up/down move between lines."""

    multiline = True

    def handle_key(self, key: str, character: Optional[str] = None) -> bool:
        if key == "enter":
            self._insert("\n")
            return True
        if key == "up":
            self._move_line(-1)
            return False
        if key == "down":
            self._move_line(1)
            return False
        return super().handle_key(key, character)

    def _line_start(self, position: Optional[int] = None) -> int:
        if position is None:
            position = self.cursor
        return self.value.rfind("\n", 0, position) + 1

    def _line_end(self, position: Optional[int] = None) -> int:
        if position is None:
            position = self.cursor
        end = self.value.find("\n", position)
        return len(self.value) if end == -1 else end

    def _move_line(self, offset: int) -> None:
        start = self._line_start()
        column = self.cursor - start
        if offset < 0:
            if start == 0:
                return
            target_start = self._line_start(start - 1)
        else:
            end = self._line_end()
            if end >= len(self.value):
                return
            target_start = end + 1
        target_end = self._line_end(target_start)
        self.cursor = min(target_start + column, target_end)

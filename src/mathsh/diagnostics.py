"""Shared error base and the caret-annotated error formatter."""

from __future__ import annotations


def format_error(source: str, offset: int, msg: str) -> str:
    """Render msg with the source line containing offset and a caret under it.

    Example for offset 4 in "1 + @":

        unexpected character '@'
        1| 1 + @
               ^
    """
    line_start = source.rfind("\n", 0, offset) + 1
    line_end = source.find("\n", offset)
    if line_end == -1:
        line_end = len(source)
    line_num = source.count("\n", 0, offset) + 1
    line = source[line_start:line_end].rstrip("\r")
    label = str(line_num)
    spaces = " " * (offset - line_start + len(label) + 2)
    return msg + "\n" + label + "| " + line + "\n" + spaces + "^"


class MathshError(Exception):
    """Base error for tokenizing, parsing and evaluation.

    When both offset and source are known the string form of the error is the
    full caret-annotated message; otherwise it is just msg.
    """

    def __init__(self, msg: str, offset: int | None = None, source: str | None = None):
        self.msg: str = msg
        self.offset: int | None = offset
        if offset is not None and source is not None:
            super().__init__(format_error(source, offset, msg))
        else:
            super().__init__(msg)

    def render(self, source: str) -> str:
        """Format against source; errors without a position render as msg."""
        if self.offset is None:
            return self.msg
        return format_error(source, self.offset, self.msg)

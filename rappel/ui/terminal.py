"""
Curses terminal front end.
Draws the controller view and turns curses input into key events.
"""

import asyncio
import curses
import locale
import os
import time
from typing import Optional, Union

from rappel.config.logging_config import get_logger
from rappel.config import settings
from rappel.config.settings import InputField, InputMode, Key
from rappel.core.controller import ControllerView, KeyEvent

logger = get_logger(__name__)

# Color pair ids
ACTIVE_BORDER = 1
TITLE_TEXT = 2
DATE_TEXT = 3
KEY_HELP = 4
SELECTED_FIELD = 5
STATUS_TEXT = 6

FIELD_LABELS = {
    InputField.TITLE: "Title:",
    InputField.BODY: "Body:",
    InputField.DATE: "Date:",
}

KEY_HELP_TEXT = {
    InputMode.NAVIGATION: [
        "Navigate [↑↓]",
        f"Delete [{settings.KEY_DELETE}]",
        f"Add mode [{settings.KEY_ADD}]",
        f"Quit [{settings.KEY_QUIT}]",
    ],
    InputMode.ADD: [
        "Navigate [↑↓]",
        "Add [ENTER]",
        "Cancel [ESCAPE]",
    ],
}


def decode_key(raw: Union[str, int]) -> Optional[KeyEvent]:
    """
    Map a curses get_wch() result to a key event.

    Curses only reports presses. Control characters and function keys
    without a binding decode to None.
    """
    if isinstance(raw, str):
        if raw in ("\n", "\r"):
            return KeyEvent(Key.ENTER)
        if raw == "\x1b":
            return KeyEvent(Key.ESCAPE)
        if raw in ("\x7f", "\b"):
            return KeyEvent(Key.BACKSPACE)
        if raw.isprintable():
            return KeyEvent(raw)
        return None

    if raw == curses.KEY_UP:
        return KeyEvent(Key.UP)
    if raw == curses.KEY_DOWN:
        return KeyEvent(Key.DOWN)
    if raw == curses.KEY_ENTER:
        return KeyEvent(Key.ENTER)
    if raw == curses.KEY_BACKSPACE:
        return KeyEvent(Key.BACKSPACE)
    return None


class TerminalUI:
    """
    Full-screen curses UI.

    Use as a context manager: the terminal is restored on exit, including
    when the control loop raises.
    """

    def __init__(self):
        self.stdscr = None

    def __enter__(self) -> "TerminalUI":
        locale.setlocale(locale.LC_ALL, "")
        os.environ.setdefault("ESCDELAY", "25")
        self.stdscr = curses.initscr()
        curses.noecho()
        curses.cbreak()
        self.stdscr.keypad(True)
        self.stdscr.nodelay(True)
        try:
            curses.curs_set(0)
        except curses.error:
            pass
        self._init_colors()
        logger.debug("Terminal initialized")
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if self.stdscr is not None:
            self.stdscr.keypad(False)
            curses.nocbreak()
            curses.echo()
            curses.endwin()
            self.stdscr = None
            logger.debug("Terminal restored")

    def _init_colors(self) -> None:
        if not curses.has_colors():
            return
        curses.start_color()
        curses.use_default_colors()
        curses.init_pair(ACTIVE_BORDER, curses.COLOR_CYAN, -1)
        curses.init_pair(TITLE_TEXT, curses.COLOR_RED, -1)
        curses.init_pair(DATE_TEXT, curses.COLOR_BLUE, -1)
        curses.init_pair(KEY_HELP, curses.COLOR_WHITE, curses.COLOR_BLUE)
        curses.init_pair(SELECTED_FIELD, curses.COLOR_BLACK, curses.COLOR_WHITE)
        curses.init_pair(STATUS_TEXT, curses.COLOR_YELLOW, -1)

    async def next_key(self, timeout: float) -> Optional[KeyEvent]:
        """
        Wait up to timeout seconds for a key the controller understands.

        Args:
            timeout: Upper bound on the wait

        Returns:
            Key event, or None if nothing arrived in time
        """
        deadline = time.monotonic() + timeout
        while True:
            try:
                raw = self.stdscr.get_wch()
            except curses.error:
                raw = None

            if raw is not None:
                if raw == curses.KEY_RESIZE:
                    return None
                event = decode_key(raw)
                if event is not None:
                    return event
                continue

            remaining = deadline - time.monotonic()
            if remaining <= 0:
                return None
            await asyncio.sleep(min(settings.INPUT_POLL_INTERVAL, remaining))

    def draw(self, view: ControllerView) -> None:
        """Redraw the whole screen from a controller view."""
        stdscr = self.stdscr
        stdscr.erase()
        height, width = stdscr.getmaxyx()

        top = 1
        inner_height = height - 2
        inner_width = width - 2
        if inner_height < 8 or inner_width < 20:
            self._put(0, 0, "Terminal too small", 0)
            stdscr.refresh()
            return

        sync_height = max(3, inner_height // 10)
        help_height = max(2, inner_height // 10)
        list_height = inner_height - sync_height - help_height
        half = inner_width // 2

        self._draw_sync(view, top, 1, sync_height, inner_width)
        self._draw_list(view, top + sync_height, 1, list_height, half)
        self._draw_form(view, top + sync_height, 1 + half, list_height, inner_width - half)
        self._draw_help(view, top + sync_height + list_height, 1, inner_width)

        stdscr.refresh()

    def _draw_sync(self, view: ControllerView, y: int, x: int, h: int, w: int) -> None:
        self._box(y, x, h, w, "Last synchronization", 0)
        if view.last_sync_time is not None:
            text = view.last_sync_time.strftime(settings.SYNC_TIME_FORMAT)
            self._put(y + 1, x + 1, text, 0, w - 2)

    def _draw_list(self, view: ControllerView, y: int, x: int, h: int, w: int) -> None:
        active = view.input_mode is InputMode.NAVIGATION
        self._box(y, x, h, w, "Reminders", self._border_attr(active))

        rows = h - 2
        # Keep the selection visible when the list is longer than the box
        offset = 0
        if view.selection is not None and view.selection >= rows:
            offset = view.selection - rows + 1

        for row, reminder in enumerate(view.reminders[offset:offset + rows]):
            index = offset + row
            selected = index == view.selection
            extra = curses.A_BOLD if selected else 0
            cx = x + 1
            limit = x + w - 1
            parts = [
                ("> " if selected else "  ", extra),
                (reminder.title, curses.color_pair(TITLE_TEXT) | extra),
                (" ", extra),
                (reminder.body, extra),
                (" ", extra),
                (reminder.fire_at.strftime(settings.LIST_DATE_FORMAT),
                 curses.color_pair(DATE_TEXT) | extra),
            ]
            for text, attr in parts:
                if cx >= limit:
                    break
                self._put(y + 1 + row, cx, text, attr, limit - cx)
                cx += len(text)

    def _draw_form(self, view: ControllerView, y: int, x: int, h: int, w: int) -> None:
        active = view.input_mode is InputMode.ADD
        self._box(y, x, h, w, "Add reminder", self._border_attr(active))

        label_width = max(len(label) for label in FIELD_LABELS.values()) + 2
        row = y + 1
        for input_field in InputField:
            if row >= y + h - 1:
                return
            attr = curses.A_BOLD | curses.A_UNDERLINE
            if input_field is view.input_field:
                attr |= curses.color_pair(SELECTED_FIELD)
            self._put(row, x + 1, FIELD_LABELS[input_field], attr)
            self._put(row, x + 1 + label_width, view.draft_values.get(input_field, ""),
                      0, w - label_width - 2)
            row += 2

        if row < y + h - 1:
            self._put(row, x + 1, f"Date format: {settings.DATE_INPUT_EXAMPLE}", curses.A_DIM, w - 2)

    def _draw_help(self, view: ControllerView, y: int, x: int, w: int) -> None:
        cx = x
        for label in KEY_HELP_TEXT[view.input_mode]:
            self._put(y, cx, label, curses.color_pair(KEY_HELP), x + w - cx)
            cx += len(label) + 1
        if view.status:
            self._put(y + 1, x, view.status, curses.color_pair(STATUS_TEXT) | curses.A_BOLD, w)

    def _border_attr(self, active: bool) -> int:
        return curses.color_pair(ACTIVE_BORDER) if active else curses.A_DIM

    def _box(self, y: int, x: int, h: int, w: int, title: str, attr: int) -> None:
        try:
            win = self.stdscr.derwin(h, w, y, x)
            win.attron(attr)
            win.box()
            win.attroff(attr)
        except curses.error:
            return
        self._put(y, x + 1, title, attr | curses.A_BOLD, w - 2)

    def _put(self, y: int, x: int, text: str, attr: int, limit: int = None) -> None:
        width = self.stdscr.getmaxyx()[1] - x
        if limit is not None:
            width = min(width, limit)
        if width <= 0:
            return
        try:
            self.stdscr.addnstr(y, x, text, width, attr)
        except curses.error:
            pass

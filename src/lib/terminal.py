"""
Curses screen

Draws Frames built by the renderer and reads one key at a time. Key codes
are turned into the key names used by KeyMap ("right", "space", "q", ...).
"""

import curses
from typing import Dict, Optional, Tuple, Union

from .toolkit import Color, Frame
from .log import LOG


COLOR_NAMES: Dict[str, int] = {
    "black": curses.COLOR_BLACK,
    "red": curses.COLOR_RED,
    "green": curses.COLOR_GREEN,
    "yellow": curses.COLOR_YELLOW,
    "blue": curses.COLOR_BLUE,
    "magenta": curses.COLOR_MAGENTA,
    "cyan": curses.COLOR_CYAN,
    "white": curses.COLOR_WHITE,
}

SPECIAL_KEYS: Dict[int, str] = {
    curses.KEY_RIGHT: "right",
    curses.KEY_LEFT: "left",
    curses.KEY_UP: "up",
    curses.KEY_DOWN: "down",
    curses.KEY_NPAGE: "pagedown",
    curses.KEY_PPAGE: "pageup",
    curses.KEY_HOME: "home",
    curses.KEY_END: "end",
    curses.KEY_BACKSPACE: "backspace",
    curses.KEY_ENTER: "enter",
    curses.KEY_RESIZE: "resize",
}

CHARACTER_KEYS: Dict[str, str] = {
    "\x1b": "escape",
    " ": "space",
    "\n": "enter",
    "\r": "enter",
    "\t": "tab",
    "\x7f": "backspace",
    "\b": "backspace",
}


def key_name(key: Union[int, str]) -> str:
    """
    Name of a key as returned by get_wch().

    Example:
        >>> key_name(" "), key_name("q"), key_name(curses.KEY_RIGHT)
        ('space', 'q', 'right')
    """
    if isinstance(key, int):
        return SPECIAL_KEYS.get(key, f"key{key}")
    return CHARACTER_KEYS.get(key, key)


class Screen:
    """
    Wrapper around the curses standard screen

    Color pairs are allocated on first use and cached; when the terminal
    runs out of pairs the default pair is used.
    """

    def __init__(self, stdscr: "curses.window") -> None:
        self.stdscr = stdscr
        self.pairs: Dict[Tuple[int, int], int] = {}
        self.next_pair = 1

        try:
            curses.curs_set(0)
        except curses.error:
            pass
        if curses.has_colors():
            curses.start_color()
            curses.use_default_colors()
        self.stdscr.keypad(True)

    def size(self) -> Tuple[int, int]:
        """(width, height) of the terminal"""
        height, width = self.stdscr.getmaxyx()
        return width, height

    def color_number(self, color: Optional[Color]) -> int:
        if color is None:
            return -1
        if isinstance(color, int):
            return color if color < curses.COLORS else -1
        number = COLOR_NAMES.get(color.lower())
        if number is None:
            LOG(f"unknown color '{color}', using the terminal default", level=2)
            return -1
        return number

    def pair_get(self, fg: Optional[Color], bg: Optional[Color]) -> int:
        """curses attribute for a foreground/background combination"""
        if not curses.has_colors():
            return curses.A_NORMAL
        key = (self.color_number(fg), self.color_number(bg))
        if key == (-1, -1):
            return curses.A_NORMAL
        if key not in self.pairs:
            if self.next_pair < curses.COLOR_PAIRS:
                curses.init_pair(self.next_pair, *key)
                self.pairs[key] = self.next_pair
                self.next_pair += 1
            else:
                self.pairs[key] = 0
        return curses.color_pair(self.pairs[key])

    def attrs_get(self, names: frozenset) -> int:
        attr = curses.A_NORMAL
        for name in names:
            attr |= {
                "bold": curses.A_BOLD,
                "dim": curses.A_DIM,
                "underline": curses.A_UNDERLINE,
                "reverse": curses.A_REVERSE,
                "italic": getattr(curses, "A_ITALIC", curses.A_NORMAL),
            }.get(name, curses.A_NORMAL)
        return attr

    def frame_draw(self, frame: Frame) -> None:
        """Replace the screen content with a frame, clipped to the window"""
        width, height = self.size()
        self.stdscr.bkgd(" ", self.pair_get(None, frame.background))
        self.stdscr.erase()
        for y, line in enumerate(frame.lines[:height]):
            x = 0
            for run in line:
                if x >= width:
                    break
                if not run.text:
                    continue
                chunk = run.text[:width - x]
                attr = self.pair_get(run.fg, run.bg if run.bg is not None else frame.background)
                try:
                    self.stdscr.addstr(y, x, chunk, attr | self.attrs_get(run.attrs))
                except curses.error:
                    # Writing the bottom-right cell moves the cursor off screen
                    pass
                x += len(chunk)
        self.stdscr.refresh()

    def key_read(self) -> str:
        """Block until a key is pressed and return its name"""
        return key_name(self.stdscr.get_wch())

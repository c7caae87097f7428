"""
Presenter

Runs a deck in the terminal: build the frame for the current state, draw
it, wait for one key, apply the transition, repeat until the state machine
reaches EXITED. All layout work for the next frame happens before the
blocking key read.

Log output is held back while curses owns the screen and written to stderr
once the terminal is restored.
"""

import curses
from typing import List, Optional

from ..models.navigation import Action, Mode, NavigationState
from ..models.slide import Deck
from .classifier import ClassificationError, slide_classify
from .navigation import KeyMap, state_transition
from .renderer import SlideRenderer
from .segments import images_locate
from .terminal import Screen
from .toolkit import Frame, ImageUnavailable
from .log import LOG, log_buffer


class Presenter:
    """
    Interactive presentation of one deck

    Attributes:
        deck: Parsed deck
        keymap: Key name -> Action bindings
        state: Current navigation state
        renderer: Renderer for the current terminal size
    """

    def __init__(self, deck: Deck, keymap: Optional[KeyMap] = None) -> None:
        self.deck = deck
        self.keymap = keymap or KeyMap.from_settings()
        self.state = NavigationState()
        self.renderer: Optional[SlideRenderer] = None
        self.totals = deck.bullets_totals

    def renderer_get(self, width: int, height: int) -> SlideRenderer:
        """Renderer for the given size; the image cache survives resizes"""
        renderer = self.renderer
        if renderer is None or (renderer.width, renderer.height) != (width, height):
            LOG(f"terminal size {width}x{height}", level=2)
            resized = SlideRenderer(self.deck.settings, width, height, self.deck.base_dir)
            if renderer is not None:
                resized.images = renderer.images
            self.renderer = renderer = resized
        return renderer

    def frame_build(self, width: int, height: int) -> Frame:
        """
        Frame for the current state.

        Raises:
            ClassificationError: The current slide violates its render path
        """
        renderer = self.renderer_get(width, height)
        if self.state.mode == Mode.HELP:
            return renderer.message_frame("Help", self.help_lines())
        if self.state.mode == Mode.END or not self.deck.slides:
            previous = self.keys_describe(Action.PREVIOUS)
            leave = self.keys_describe(Action.EXIT)
            return renderer.message_frame("The End", [f"{previous}: back to the last slide", f"{leave}: quit"])

        slide = self.deck.slides[self.state.index]
        return renderer.frame_build(slide, self.state.reveal, len(self.deck.slides))

    def help_lines(self) -> List[str]:
        return [
            f"{self.keys_describe(Action.NEXT)}: next bullet or slide",
            f"{self.keys_describe(Action.PREVIOUS)}: previous bullet or slide",
            f"{self.keys_describe(Action.HELP)}: this help",
            f"{self.keys_describe(Action.EXIT)}: quit",
            "",
            "any key returns to the presentation",
        ]

    def keys_describe(self, action: Action) -> str:
        keys = self.keymap.keys_get(action)
        return ", ".join(keys[:4]) if keys else "(unbound)"

    def key_handle(self, key: str) -> NavigationState:
        """
        Apply one key to the navigation state.

        A terminal resize only causes a redraw.
        """
        if key == "resize":
            return self.state
        self.state = state_transition(self.state, self.keymap.action_get(key), self.totals)
        return self.state

    def loop(self, screen: Screen) -> None:
        while not self.state.exit_requested:
            width, height = screen.size()
            screen.frame_draw(self.frame_build(width, height))
            self.key_handle(screen.key_read())

    def run(self) -> NavigationState:
        """
        Present the deck until the user quits.

        Returns:
            The final navigation state

        Raises:
            ClassificationError: A slide violates its render path (the
                                 terminal is restored first)
        """
        with log_buffer():
            try:
                curses.wrapper(lambda stdscr: self.loop(Screen(stdscr)))
            except KeyboardInterrupt:
                LOG("presentation interrupted", level=2)
        return self.state


def deck_validate(deck: Deck, width: int, height: int) -> List[str]:
    """
    Check every slide against a viewport before presenting.

    Collects classification errors, slides taller than the space inside the
    border, and images that cannot be loaded.

    Args:
        deck: Parsed deck
        width: Terminal columns
        height: Terminal rows

    Returns:
        One message per problem; empty when the deck can be shown
    """
    renderer = SlideRenderer(deck.settings, width, height, deck.base_dir)
    issues: List[str] = []

    for slide in deck.slides:
        where = f"slide {slide.number} (line {slide.line_number})"
        try:
            slide_classify(slide)
        except ClassificationError as e:
            issues.append(str(e))
            continue

        for match in images_locate(slide.content):
            try:
                renderer.image_get(match.group(2))
            except ImageUnavailable as e:
                issues.append(f"{where}: image not available: {e}")

        settings = slide.settings_effective(deck.settings)
        interior_width, interior_height = renderer.interior_size(settings)
        measurements = slide.measurements_get(
            lambda s: renderer.slide_measure(s, settings, interior_width, interior_height)
        )
        if measurements.height > interior_height:
            issues.append(
                f"{where}: content is {measurements.height} lines tall, "
                f"the viewport has room for {interior_height}"
            )

    LOG(f"validated {len(deck.slides)} slides at {width}x{height}: {len(issues)} issue(s)", level=2)
    return issues

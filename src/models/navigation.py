"""
Navigation state models

NavigationState is the only mutable state of a running presentation. The
navigation engine never changes an instance in place: every transition
returns a new value built from a copy.
"""

from enum import Enum
from dataclasses import dataclass, field
from typing import Dict


class Action(Enum):
    """Logical actions, independent of the physical key that produced them"""
    NEXT = "next"
    PREVIOUS = "previous"
    EXIT = "exit"
    HELP = "help"
    NONE = "none"


class Mode(Enum):
    """States of the navigation state machine"""
    VIEWING = "viewing"
    HELP = "help"
    END = "end"
    EXITED = "exited"


@dataclass
class NavigationState:
    """
    Position within a running presentation

    Attributes:
        mode: Current state machine state
        index: 0-based index of the current slide (kept while in HELP so the
               overlay can return to it)
        reveals: Slide index -> number of progressive bullets revealed

    Example:
        >>> state = NavigationState()
        >>> state.mode, state.index, state.reveal
        (<Mode.VIEWING: 'viewing'>, 0, 0)
    """
    mode: Mode = Mode.VIEWING
    index: int = 0
    reveals: Dict[int, int] = field(default_factory=dict)

    @property
    def reveal(self) -> int:
        """Revealed bullet count of the current slide"""
        return self.reveals.get(self.index, 0)

    @property
    def exit_requested(self) -> bool:
        return self.mode == Mode.EXITED

    def copy(self) -> "NavigationState":
        """
        Creates a copy whose reveal mapping can be changed independently.

        Returns:
            A new NavigationState instance.
        """
        return NavigationState(mode=self.mode, index=self.index, reveals=dict(self.reveals))

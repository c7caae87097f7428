"""
Navigation engine

Maps key names to logical actions and moves the NavigationState through the
presentation state machine:

    VIEWING --HELP--> HELP --any key--> VIEWING
    VIEWING --NEXT on last slide, all bullets shown--> END
    END --PREVIOUS--> VIEWING (last slide, all bullets shown)
    VIEWING / END --EXIT--> EXITED

state_transition() is pure: it neither draws nor reads keys, and it returns a
new state instead of changing the one it was given.
"""

from typing import Dict, Iterable, List, Optional

from ..config import AppSettings, appsettings
from ..models.navigation import Action, Mode, NavigationState
from .log import LOG


class KeyMap:
    """
    Key name -> Action lookup

    Key names are the ones lib.terminal produces: printable characters as
    themselves, special keys by name ("right", "pagedown", "escape", ...).

    Example:
        >>> keymap = KeyMap({"q": Action.EXIT})
        >>> keymap.action_get("q"), keymap.action_get("x")
        (<Action.EXIT: 'exit'>, <Action.NONE: 'none'>)
    """

    def __init__(self, bindings: Optional[Dict[str, Action]] = None) -> None:
        self.bindings: Dict[str, Action] = dict(bindings or {})

    @classmethod
    def from_settings(cls, settings: Optional[AppSettings] = None) -> "KeyMap":
        """Build the key map from the configured key lists"""
        settings = settings or appsettings
        keymap = cls()
        for action in (Action.NEXT, Action.PREVIOUS, Action.EXIT, Action.HELP):
            keymap.bind(settings.keys_list(action.value), action)
        return keymap

    def bind(self, keys: Iterable[str], action: Action) -> None:
        for key in keys:
            self.bindings[key] = action

    def action_get(self, key: Optional[str]) -> Action:
        """Action bound to a key; Action.NONE for anything unbound"""
        if key is None:
            return Action.NONE
        action = self.bindings.get(key)
        if action is None and len(key) > 1:
            action = self.bindings.get(key.lower())
        return action or Action.NONE

    def keys_get(self, action: Action) -> List[str]:
        """Keys bound to an action, in binding order (for the help overlay)"""
        return [key for key, bound in self.bindings.items() if bound == action]


def state_transition(state: NavigationState, action: Action, totals: List[int]) -> NavigationState:
    """
    Apply one action to the navigation state.

    Args:
        state: Current state (left unchanged)
        action: Logical action from the key map
        totals: Progressive bullet total of every slide, by index

    Returns:
        The next state

    Example:
        >>> state = state_transition(NavigationState(), Action.NEXT, [1, 0])
        >>> state.index, state.reveal
        (0, 1)
        >>> state = state_transition(state, Action.NEXT, [1, 0])
        >>> state.index, state.reveal
        (1, 0)
    """
    if state.mode == Mode.EXITED:
        return state

    new = state.copy()
    last = len(totals) - 1

    if state.mode == Mode.HELP:
        new.mode = Mode.VIEWING

    elif state.mode == Mode.END:
        if action == Action.PREVIOUS and last >= 0:
            new.mode = Mode.VIEWING
            new.index = last
            new.reveals[last] = totals[last]
        elif action == Action.EXIT:
            new.mode = Mode.EXITED

    elif action == Action.NEXT:
        total = totals[state.index] if 0 <= state.index <= last else 0
        if state.reveal < total:
            new.reveals[state.index] = state.reveal + 1
        elif state.index < last:
            new.index = state.index + 1
            new.reveals[new.index] = 0
        else:
            new.mode = Mode.END

    elif action == Action.PREVIOUS:
        if state.reveal > 0:
            new.reveals[state.index] = state.reveal - 1
        elif state.index > 0:
            new.index = state.index - 1
            new.reveals[new.index] = totals[new.index]

    elif action == Action.EXIT:
        new.mode = Mode.EXITED

    elif action == Action.HELP:
        new.mode = Mode.HELP

    if new.mode != state.mode or new.index != state.index:
        LOG(f"navigation: {state.mode.value}[{state.index}] --{action.value}--> {new.mode.value}[{new.index}]", level=3)
    return new

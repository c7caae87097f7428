"""
Navigation engine tests

Tests key bindings and the presentation state machine: bullet reveal,
slide changes, the end screen, the help overlay and exiting.
"""

import random

from termdown.config import AppSettings
from termdown.lib.navigation import KeyMap, state_transition
from termdown.models import Action, Mode, NavigationState


def run(actions, totals, state=None):
    state = state or NavigationState()
    for action in actions:
        state = state_transition(state, action, totals)
    return state


class TestKeyMap:
    """Test key name to action lookup"""

    def test_default_bindings(self):
        keymap = KeyMap.from_settings(AppSettings())
        assert keymap.action_get("right") == Action.NEXT
        assert keymap.action_get("space") == Action.NEXT
        assert keymap.action_get("left") == Action.PREVIOUS
        assert keymap.action_get("q") == Action.EXIT
        assert keymap.action_get("escape") == Action.EXIT
        assert keymap.action_get("?") == Action.HELP

    def test_unbound_key(self):
        keymap = KeyMap.from_settings(AppSettings())
        assert keymap.action_get("x") == Action.NONE
        assert keymap.action_get(None) == Action.NONE

    def test_special_key_names_ignore_case(self):
        keymap = KeyMap.from_settings(AppSettings())
        assert keymap.action_get("RIGHT") == Action.NEXT

    def test_custom_bindings(self):
        keymap = KeyMap.from_settings(AppSettings(keys_exit="x, Escape"))
        assert keymap.action_get("x") == Action.EXIT
        assert keymap.action_get("q") == Action.NONE
        assert keymap.keys_get(Action.EXIT) == ["x", "escape"]


class TestReveal:
    """Test bullet reveal within a slide"""

    def test_next_reveals_before_advancing(self):
        state = run([Action.NEXT], [2, 0])
        assert (state.index, state.reveal) == (0, 1)

        state = run([Action.NEXT] * 3, [2, 0])
        assert (state.index, state.reveal) == (1, 0)

    def test_previous_hides_bullet(self):
        state = run([Action.NEXT, Action.NEXT, Action.PREVIOUS], [2, 0])
        assert (state.index, state.reveal) == (0, 1)

    def test_previous_on_first_slide_is_noop(self):
        state = state_transition(NavigationState(), Action.PREVIOUS, [2, 1])
        assert state == NavigationState()

    def test_previous_shows_all_bullets_of_previous_slide(self):
        state = NavigationState(index=1)
        state = state_transition(state, Action.PREVIOUS, [3, 0])
        assert (state.mode, state.index, state.reveal) == (Mode.VIEWING, 0, 3)

    def test_reveal_stays_bounded(self):
        """Any action sequence keeps 0 <= reveal <= total"""
        totals = [3, 0, 2, 1]
        actions = [Action.NEXT, Action.PREVIOUS, Action.HELP, Action.NONE]
        rng = random.Random(7)
        state = NavigationState()
        for _ in range(500):
            state = state_transition(state, rng.choice(actions), totals)
            assert 0 <= state.index < len(totals)
            assert 0 <= state.reveal <= totals[state.index]

    def test_transition_does_not_change_input(self):
        state = NavigationState()
        state_transition(state, Action.NEXT, [2])
        assert state.reveals == {}
        assert state.reveal == 0


class TestEndAndHelp:
    """Test the end screen, help overlay and exit"""

    def test_next_on_last_slide_ends(self):
        state = run([Action.NEXT] * 3, [1, 1])
        assert state.mode == Mode.VIEWING
        state = run([Action.NEXT] * 4, [1, 1])
        assert state.mode == Mode.END

    def test_end_ignores_next(self):
        state = run([Action.NEXT] * 6, [0, 0])
        assert state.mode == Mode.END

    def test_previous_from_end_returns_fully_revealed(self):
        state = run([Action.NEXT] * 3, [0, 2], NavigationState(index=1))
        assert state.mode == Mode.END
        state = state_transition(state, Action.PREVIOUS, [0, 2])
        assert (state.mode, state.index, state.reveal) == (Mode.VIEWING, 1, 2)

    def test_exit(self):
        assert run([Action.EXIT], [1]).mode == Mode.EXITED
        assert run([Action.NEXT, Action.NEXT, Action.EXIT], [1]).mode == Mode.EXITED

    def test_exited_is_terminal(self):
        state = run([Action.EXIT, Action.PREVIOUS, Action.NEXT], [1, 1])
        assert state.exit_requested

    def test_help_returns_to_same_position(self):
        start = run([Action.NEXT, Action.NEXT], [1, 2])
        state = state_transition(start, Action.HELP, [1, 2])
        assert state.mode == Mode.HELP

        state = state_transition(state, Action.EXIT, [1, 2])
        assert state.mode == Mode.VIEWING
        assert (state.index, state.reveal) == (start.index, start.reveal)

    def test_help_ignores_next(self):
        state = run([Action.HELP, Action.NEXT], [2])
        assert (state.mode, state.index, state.reveal) == (Mode.VIEWING, 0, 0)

    def test_none_is_noop(self):
        start = run([Action.NEXT], [2])
        assert state_transition(start, Action.NONE, [2]) == start

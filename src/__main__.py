#!/usr/bin/env python3
"""
termdown - Markdown presentations in the terminal

Presents a markdown document as a full-screen slide deck in the terminal,
with figlet headings, progressive bullets, syntax-colored code, multi-column
slides and half-block images.

Philosophy:
    - Text-first: the deck is a plain markdown file that reads well as-is
    - Terminal-native: no browser, no export step, works over ssh
    - Forgiving: unknown settings and missing images are warnings, not errors

Key Features:
    - Frontmatter settings and per-slide <!-- key: value --> overrides
    - Progressive bullet reveal (* bullets)
    - Multi-column (|||) and text + image slides
    - Documents and images from local paths or http(s) URLs
    - Strict pre-flight validation of every slide against the terminal

Usage:
    termdown talk.md

Examples:
    # Present a local deck
    termdown talk.md

    # Present a remote deck with a theme and an override
    termdown https://example.org/talk.md --theme dark.yaml --set pagination_mode=bar

    # Check every slide fits the terminal before presenting
    termdown talk.md --strict -vv
"""

import shutil
import sys
from pathlib import Path
from argparse import ArgumentParser, ArgumentDefaultsHelpFormatter
from typing import Any, Dict, List, NoReturn, Optional

from . import __version__
from .config import appsettings
from .lib import LOG, WARN, presenter, state_connectToLogger
from .lib.classifier import ClassificationError
from .lib.options import registry
from .lib.parser import Parser, ParseError
from .lib.source import SourceError, source_open, source_read
from .lib.theme import Theme, ThemeError
from .models import ProgramState, pipeline
from .models.options import OptionCategory
from .models.source import DocumentSource


DISPLAY_TITLE = r"""
  _                        _
 | |_ ___ _ __ _ __ ___   __| | _____      ___ __
 | __/ _ \ '__| '_ ` _ \ / _` |/ _ \ \ /\ / / '_ \
 | ||  __/ |  | | | | | | (_| | (_) \ V  V /| | | |
  \__\___|_|  |_| |_| |_|\__,_|\___/ \_/\_/ |_| |_|

  Markdown presentations in the terminal
"""

# Define CLI arguments
parser = ArgumentParser(
    prog="termdown",
    description="termdown - Markdown presentations in the terminal",
    formatter_class=ArgumentDefaultsHelpFormatter,
)

parser.add_argument(
    "source", nargs="?", default=None, type=str, help="Markdown deck: file path or http(s) URL"
)

parser.add_argument(
    "--theme", default=None, type=str, help="YAML file of presentation option defaults"
)

parser.add_argument("--background", default=None, type=str, help="Override the background color")

parser.add_argument("--color", default=None, type=str, help="Override the body text color")

parser.add_argument(
    "--border-color", dest="borderColor", default=None, type=str, help="Override the border color"
)

parser.add_argument(
    "--set",
    dest="settingOverrides",
    action="append",
    default=[],
    metavar="KEY=VALUE",
    help="Override any presentation option (repeatable)",
)

parser.add_argument(
    "--strict",
    action="store_true",
    default=False,
    help="Validate every slide against the terminal size and abort on any issue",
)

parser.add_argument(
    "--list-options",
    dest="listOptions",
    action="store_true",
    default=False,
    help="List the known presentation options and exit",
)

parser.add_argument(
    "-v",
    "--verbosity",
    action="count",
    default=1,
    help="Increase output verbosity (can be repeated: -v, -vv, -vvv)",
)

parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")


def fail(message: str, state: Optional[ProgramState] = None, error: Optional[BaseException] = None) -> NoReturn:
    """Print a single-line error and exit with status 1"""
    print(f"Error: {message}", file=sys.stderr)
    if error is not None and ((state is not None and state.verbosity >= 3) or appsettings.debug_mode):
        import traceback

        traceback.print_exception(type(error), error, error.__traceback__)
    sys.exit(1)


def options_list() -> None:
    """Print the known presentation options grouped by category"""
    for category in OptionCategory:
        specs = registry.options_listByCategory(category)
        if not specs:
            continue
        print(f"{category.value}:")
        for spec in specs:
            line = f"  {spec.name:<18} {spec.description}"
            if spec.choices:
                line += f" (one of: {', '.join(spec.choices)})"
            if spec.default is not None:
                default = str(spec.default).lower() if isinstance(spec.default, bool) else spec.default
                line += f" [default: {default}]"
            if spec.aliases:
                line += f" [aliases: {', '.join(spec.aliases)}]"
            print(line)


def overrides_collect(state: ProgramState) -> Dict[str, Any]:
    """
    Command line option overrides, applied after the frontmatter.

    Rejected entries are reported and skipped.
    """
    raw: List[tuple] = [
        ("background", state.background),
        ("color", state.color),
        ("border_color", state.borderColor),
    ]
    for entry in state.settingOverrides:
        key, sep, value = entry.partition("=")
        if not sep:
            WARN(f"--set {entry}: expected KEY=VALUE, ignored")
            continue
        raw.append((key, value))

    overrides: Dict[str, Any] = {}
    for key, value in raw:
        if value is None:
            continue
        result = registry.option_resolve(key, value)
        if not result.ok:
            WARN(f"command line: {result.warning}, ignored")
            continue
        overrides[result.key] = result.value
    return overrides


def env_check(inputstate: ProgramState) -> ProgramState:
    """
    Validate the environment.

    Verifies that the document and the optional theme file exist.

    Args:
        inputstate: Program state with the resolved document source

    Returns:
        ProgramState with envOK set

    Exits:
        1 if the document or the theme file is missing
    """

    state = inputstate.copy()

    if state.verbosity >= 2:
        LOG(DISPLAY_TITLE, level=2)

    LOG("Checking environment...", level=2)

    if not state.sourceFile.is_file():
        state.envOK = False
        fail(f"Document not found: {state.sourceLabel}", state)
    LOG(f"Document: {state.sourceLabel}", level=2)
    LOG(f"Images resolve against: {state.baseDir}", level=3)

    if state.theme and not Path(state.theme).expanduser().is_file():
        state.envOK = False
        fail(f"Theme file not found: {state.theme}", state)
    state.strict = state.strict or appsettings.strict_mode

    state.envOK = True
    return state


def source_parse(inputstate: ProgramState) -> ProgramState:
    """
    Read and parse the document into a Deck.

    Settings are layered: built-in defaults (or the theme), then the
    frontmatter, then command line overrides.

    Args:
        inputstate: Program state with sourceFile set

    Returns:
        ProgramState with added field:
            - deck: Deck with resolved settings and numbered slides

    Exits:
        1 if the file cannot be read, the theme is invalid, parsing fails,
        or the document has no slides
    """

    state = inputstate.copy()

    LOG("Reading document...", level=1)
    try:
        text = source_read(DocumentSource(path=state.sourceFile, label=state.sourceLabel, base_dir=state.baseDir))
    except SourceError as e:
        fail(str(e), state, e)

    base = None
    if state.theme:
        try:
            theme = Theme(state.theme)
            base = theme.settings_get()
            LOG(f"Theme: {theme}", level=2)
        except ThemeError as e:
            fail(str(e), state, e)

    LOG("Parsing document into slides...", level=1)
    try:
        deck = Parser(text, state.sourceLabel, settings=base, base_dir=state.baseDir).parse()
    except ParseError as e:
        fail(str(e), state, e)

    deck.settings = deck.settings.merged(overrides_collect(state))
    if not deck.slides:
        fail(f"{state.sourceLabel}: document contains no slides", state)

    LOG(f"Parsed {len(deck.slides)} slides, {len(deck.warnings)} warning(s)", level=2)
    state.deck = deck
    return state


def deck_validate(inputstate: ProgramState) -> ProgramState:
    """
    Strict mode: check every slide against the terminal before presenting.

    Args:
        inputstate: Program state with deck

    Returns:
        ProgramState with added field:
            - validationIssues: Problems found (empty when not strict)

    Exits:
        1 with an aggregated report if any slide has an issue
    """

    state = inputstate.copy()
    if not state.strict or state.deck is None:
        return state

    width, height = shutil.get_terminal_size()
    LOG(f"Validating {len(state.deck.slides)} slides against {width}x{height}...", level=1)
    state.validationIssues = presenter.deck_validate(state.deck, width, height)
    if state.validationIssues:
        for issue in state.validationIssues:
            print(f"  {state.sourceLabel}: {issue}", file=sys.stderr)
        fail(f"{len(state.validationIssues)} slide issue(s) found in {state.sourceLabel}", state)
    return state


def deck_present(inputstate: ProgramState) -> ProgramState:
    """
    Run the interactive presentation.

    Args:
        inputstate: Program state with deck

    Returns:
        ProgramState with added field:
            - presentResult: Dict containing:
                - slides: int (number of slides)
                - index: int (slide shown when the presentation ended)
                - mode: str (final navigation mode)

    Exits:
        1 without an interactive terminal, or on a slide that violates its
        render path
    """

    state = inputstate.copy()
    if state.deck is None:
        fail("No parsed deck available", state)

    if not (sys.stdin.isatty() and sys.stdout.isatty()):
        fail("termdown needs an interactive terminal", state)

    try:
        final = presenter.Presenter(state.deck).run()
    except ClassificationError as e:
        fail(f"{state.sourceLabel}: {e}", state, e)

    state.presentResult = {
        "slides": len(state.deck.slides),
        "index": final.index,
        "mode": final.mode.value,
    }
    LOG(f"Presentation ended on slide {final.index + 1} ({final.mode.value})", level=2)
    return state


def main(argv: Optional[List[str]] = None) -> None:
    """
    Main entry point - present a markdown deck in the terminal.

    Orchestrates the pipeline inside the document source context, so a
    temporary copy of a remote document is removed however the run ends:
        1. env_check: Validate document and theme
        2. source_parse: Read and parse the document into a Deck
        3. deck_validate: Strict pre-flight of every slide
        4. deck_present: Interactive presentation

    Args:
        argv: Command line arguments (sys.argv[1:] when None)
    """
    options = parser.parse_args(argv)

    if options.listOptions:
        options_list()
        return
    if not options.source:
        parser.error("the following arguments are required: source")

    state: ProgramState = ProgramState.state_createFromNamespace(options)

    # Connect state to logger for entire pipeline
    state_connectToLogger(state)

    try:
        with source_open(state.source) as source:
            state.sourceFile = source.path
            state.sourceLabel = source.label
            state.baseDir = source.base_dir
            pipeline(state, env_check, source_parse, deck_validate, deck_present)
    except SourceError as e:
        fail(str(e), state, e)


if __name__ == "__main__":
    main()

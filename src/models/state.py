"""
Program state model and pipeline helper

Defines ProgramState dataclass for the functional pipeline pattern and
the pipeline() helper for composing transformation stages.
"""

from pathlib import Path
from argparse import Namespace
from typing import Optional, Type, TypeVar, List, Callable, TYPE_CHECKING
from dataclasses import dataclass, field

# Forward reference for type hint - avoid circular import
if TYPE_CHECKING:
    from .slide import Deck


PS = TypeVar("PS", bound="ProgramState")


@dataclass
class ProgramState:
    """
    Central state container for the presentation pipeline (state bus pattern).

    This dataclass carries all program state through the functional pipeline,
    with each stage adding new fields as the run progresses.

    Pipeline stages and their state additions:
        - Initial: source, theme, color flags, settingOverrides, strict, verbosity
        - env_check: sourceFile, sourceLabel, baseDir, envOK
        - source_parse: deck
        - deck_validate: validationIssues
        - deck_present: presentResult

    Attributes:
        source: Document path or http(s) URL as given on the command line
        theme: Optional YAML theme file supplying setting defaults
        background: --background flag value
        color: --color flag value
        borderColor: --border-color flag value
        settingOverrides: Raw KEY=VALUE strings from --set
        strict: Pre-flight every slide and abort on any issue
        verbosity: Logging verbosity level (1-3)
        envOK: Environment validation passed
        sourceFile: Local file holding the document text
        sourceLabel: Path or URL used in messages
        baseDir: Directory or URL relative images resolve against
        deck: Parsed presentation
        validationIssues: Strict-mode findings
        presentResult: Outcome of the interactive run
    """

    # CLI arguments
    source: str = field(default="")
    theme: Optional[str] = field(default=None)
    background: Optional[str] = field(default=None)
    color: Optional[str] = field(default=None)
    borderColor: Optional[str] = field(default=None)
    settingOverrides: List[str] = field(default_factory=list)
    strict: bool = field(default=False)
    verbosity: int = field(default=1)

    # Pipeline state
    envOK: bool = field(default=False)
    sourceFile: Path = field(default=Path("/"))
    sourceLabel: str = field(default="")
    baseDir: str = field(default=".")
    deck: Optional["Deck"] = field(default=None)
    validationIssues: List[str] = field(default_factory=list)
    presentResult: Optional[dict] = field(default=None)

    @classmethod
    def state_createFromNamespace(cls: Type["ProgramState"], options: Namespace) -> "ProgramState":
        """
        Create ProgramState from argparse Namespace.

        Args:
            options: Parsed CLI arguments (source, theme, strict, etc.)

        Returns:
            ProgramState instance with all CLI options as attributes
        """
        # Get the dictionary of all attributes from the Namespace
        options_dict = vars(options)

        # Get the set of valid field names for ProgramState
        import dataclasses
        valid_fields = {f.name for f in dataclasses.fields(cls)}

        # Filter options_dict to only include fields that exist in ProgramState
        filtered_options = {k: v for k, v in options_dict.items() if k in valid_fields and v is not None}

        # Instantiate the dataclass by unpacking the filtered dictionary.
        return cls(**filtered_options)

    def copy(self: PS) -> PS:
        """
        Creates a shallow copy of the ProgramState instance.

        Returns:
            A new ProgramState instance.
        """
        return type(self)(**self.__dict__)


def pipeline(
    initial_state: ProgramState, *stages: Callable[[ProgramState], ProgramState]
) -> ProgramState:
    """
    Execute a functional pipeline of state transformations.

    Each stage is a function (ProgramState) -> ProgramState that receives
    the output of the previous stage and returns a new state.

    Args:
        initial_state: Starting ProgramState
        *stages: Variable number of stage functions to execute in order

    Returns:
        Final ProgramState after all transformations

    Example:
        final_state = pipeline(
            initial_state,
            env_check,
            source_parse,
            deck_validate,
            deck_present
        )

    This is equivalent to:
        deck_present(deck_validate(source_parse(env_check(initial_state))))

    But reads left-to-right instead of inside-out.
    """
    from functools import reduce
    return reduce(lambda state, stage: stage(state), stages, initial_state)

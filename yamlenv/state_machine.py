"""Loader lifecycle state machine."""

from enum import Enum, auto
from typing import ClassVar

from yamlenv.errors import YamlenvError


class LoaderState(Enum):
    """Loader lifecycle states.

    State transitions:
        UNLOADED -> LOADING: Start reading the environment file
        LOADING -> PARSED: File read and parsed into a document
        PARSED -> LOADED: Document flattened and applied to the environment
        LOADED -> LOADING: Reload the same file
        Any -> FAILED: Error occurred at any stage
    """

    UNLOADED = auto()
    LOADING = auto()
    PARSED = auto()
    LOADED = auto()
    FAILED = auto()


class LoaderStateError(YamlenvError):
    """Raised when an invalid state transition is attempted."""

    def __init__(self, from_state: LoaderState, to_state: LoaderState) -> None:
        """Initialize the error.

        Args:
            from_state: The current state.
            to_state: The attempted target state.
        """
        self.from_state = from_state
        self.to_state = to_state
        super().__init__(
            f"Invalid state transition: {from_state.name} -> {to_state.name}"
        )


class LoaderStateMachine:
    """Enforces valid state transitions while a loader reads its file."""

    VALID_TRANSITIONS: ClassVar[dict[LoaderState, set[LoaderState]]] = {
        LoaderState.UNLOADED: {LoaderState.LOADING, LoaderState.FAILED},
        LoaderState.LOADING: {LoaderState.PARSED, LoaderState.FAILED},
        LoaderState.PARSED: {LoaderState.LOADED, LoaderState.FAILED},
        LoaderState.LOADED: {LoaderState.LOADING, LoaderState.FAILED},
        LoaderState.FAILED: set(),  # Terminal state
    }

    def __init__(self) -> None:
        """Initialize the state machine in UNLOADED state."""
        self._state = LoaderState.UNLOADED

    @property
    def state(self) -> LoaderState:
        """Get the current state."""
        return self._state

    def can_transition(self, to_state: LoaderState) -> bool:
        """Check if a transition to the given state is valid.

        Args:
            to_state: The target state.

        Returns:
            True if the transition is valid, False otherwise.
        """
        return to_state in self.VALID_TRANSITIONS.get(self._state, set())

    def transition(self, to_state: LoaderState) -> None:
        """Transition to a new state.

        Args:
            to_state: The target state.

        Raises:
            LoaderStateError: If the transition is invalid.
        """
        if not self.can_transition(to_state):
            raise LoaderStateError(self._state, to_state)
        self._state = to_state

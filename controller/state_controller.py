"""Application state controller owning the event load and filter state."""
import logging
from datetime import date
from typing import Callable, List, Optional, Sequence, Tuple, Union

from processor.event_filter import filter_events
from processor.models import (
    Event,
    EventType,
    FilterState,
    LoadPhase,
    ViewMode,
    resolve_type_filter,
    resolve_view_mode,
)

logger = logging.getLogger(__name__)

LOAD_ERROR_MESSAGE = 'Failed to load events. Please try again later.'

Loader = Callable[[], Sequence[Event]]
Listener = Callable[['ApplicationStateController'], None]


class ApplicationStateController:
    """
    Owns the session state: loaded events, load phase and filter selections.

    The event list is loaded once. The phase goes from LOADING to READY or
    FAILED and never returns to LOADING; a new controller is needed to fetch
    again.
    """

    def __init__(
        self,
        loader: Loader,
        *,
        today_provider: Callable[[], date] = date.today,
        autoload: bool = True
    ):
        """
        Initialize the controller.

        Args:
            loader: Zero-argument callable returning the events
            today_provider: Callable giving the date used as the past-event cutoff
            autoload: Issue the load immediately
        """
        self._loader = loader
        self._today_provider = today_provider
        self._phase = LoadPhase.LOADING
        self._error: Optional[str] = None
        self._events: Tuple[Event, ...] = ()
        self._filter_state = FilterState()
        self._load_issued = False
        self._listeners: List[Listener] = []
        self._cache_key = None
        self._cache: List[Event] = []

        if autoload:
            self.load()

    # ------------------------------------------------------------------ #
    # Lifecycle
    # ------------------------------------------------------------------ #

    def load(self) -> None:
        """
        Issue the one-time load.

        Failures are logged and reported through ``error``; they are never
        raised to the caller. Calls after the first are ignored.
        """
        if self._load_issued:
            logger.warning("Events already requested for this session; ignoring reload")
            return
        self._load_issued = True

        logger.info("Loading events")
        try:
            events = tuple(self._loader())
        except Exception as e:
            logger.error(
                f"Error fetching events: {e}",
                extra={'error_type': type(e).__name__},
                exc_info=True
            )
            self._events = ()
            self._error = LOAD_ERROR_MESSAGE
            self._phase = LoadPhase.FAILED
        else:
            self._events = events
            self._error = None
            self._phase = LoadPhase.READY
            logger.info(f"Loaded {len(events)} events")

        self._cache_key = None
        self._notify()

    @property
    def phase(self) -> LoadPhase:
        return self._phase

    @property
    def loading(self) -> bool:
        return self._phase is LoadPhase.LOADING

    @property
    def error(self) -> Optional[str]:
        return self._error

    @property
    def events(self) -> Tuple[Event, ...]:
        return self._events

    @property
    def filter_state(self) -> FilterState:
        """Copy of the current filter state."""
        return FilterState(
            selected_type=self._filter_state.selected_type,
            search_query=self._filter_state.search_query,
            view_mode=self._filter_state.view_mode
        )

    # ------------------------------------------------------------------ #
    # Derived view
    # ------------------------------------------------------------------ #

    @property
    def visible_events(self) -> List[Event]:
        """
        Events to display for the current filter state.

        Empty while loading or after a failed load.
        """
        if self._phase is not LoadPhase.READY:
            return []

        today = self._today_provider()
        key = (
            self._filter_state.search_query,
            self._filter_state.selected_type,
            today,
        )
        if key != self._cache_key:
            self._cache = filter_events(self._events, self._filter_state, today)
            self._cache_key = key
        return list(self._cache)

    # ------------------------------------------------------------------ #
    # Mutators
    # ------------------------------------------------------------------ #

    def set_search_query(self, query: Optional[str]) -> None:
        self._filter_state.search_query = query or ''
        self._notify()

    def set_selected_type(self, value: Union[EventType, str]) -> None:
        """
        Select the event type filter.

        Args:
            value: EventType, "all", an English type value or a localized label

        Raises:
            ValueError: If the value names no known type filter
        """
        self._filter_state.selected_type = resolve_type_filter(value)
        self._notify()

    def set_view_mode(self, value: Union[ViewMode, str]) -> None:
        """
        Select the view mode.

        Raises:
            ValueError: If the value names no known view mode
        """
        self._filter_state.view_mode = resolve_view_mode(value)
        self._notify()

    # ------------------------------------------------------------------ #
    # Observers
    # ------------------------------------------------------------------ #

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a callback invoked after every state change.

        A listener that raises is logged and skipped; the state change
        and the remaining listeners are unaffected.

        Returns:
            Callable that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception as e:
                logger.error(
                    f"State listener failed: {e}",
                    extra={'error_type': type(e).__name__},
                    exc_info=True
                )

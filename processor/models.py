"""Data models for the event listing."""
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Tuple, Union

from processor.text_normalizer import normalize


ALL_TYPES = 'all'


class EventType(str, Enum):
    """Closed set of event categories."""
    MUSIC = 'music'
    THEATER = 'theater'
    ART = 'art'
    DANCE = 'dance'
    LITERATURE = 'literature'

    @classmethod
    def parse(cls, value: object) -> 'EventType':
        """
        Parse a raw category value into an EventType.

        Matching ignores case and accents and accepts both the English values
        and the Portuguese labels used in the source sheet. Anything else,
        including a missing value, falls back to MUSIC.

        Args:
            value: Raw category cell

        Returns:
            Matching EventType, or EventType.MUSIC
        """
        key = normalize(str(value)).strip() if value is not None else ''
        return _EVENT_TYPE_ALIASES.get(key, cls.MUSIC)


_EVENT_TYPE_ALIASES: Dict[str, EventType] = {
    'music': EventType.MUSIC,
    'musica': EventType.MUSIC,
    'theater': EventType.THEATER,
    'theatre': EventType.THEATER,
    'teatro': EventType.THEATER,
    'art': EventType.ART,
    'arte': EventType.ART,
    'dance': EventType.DANCE,
    'danca': EventType.DANCE,
    'literature': EventType.LITERATURE,
    'literatura': EventType.LITERATURE,
}


class ViewMode(str, Enum):
    """Presentation density; affects layout only."""
    GRID = 'grid'
    COMPACT = 'compact'
    LIST = 'list'


class LoadPhase(str, Enum):
    """Lifecycle of the one-time event load."""
    LOADING = 'loading'
    READY = 'ready'
    FAILED = 'failed'


@dataclass(frozen=True)
class Event:
    """Single calendar entry mapped from a source row."""
    id: str
    title: str
    date: str
    time: str
    location: str
    type: EventType
    url: str
    image: str

    def to_dict(self) -> Dict[str, str]:
        """Return a JSON-serialisable representation."""
        return {
            'id': self.id,
            'title': self.title,
            'date': self.date,
            'time': self.time,
            'location': self.location,
            'type': self.type.value,
            'url': self.url,
            'image': self.image,
        }


# Localized labels shown by the presentation layer
TYPE_FILTERS: Tuple[Tuple[str, str], ...] = (
    ('Todos', ALL_TYPES),
    ('Música', EventType.MUSIC.value),
    ('Teatro', EventType.THEATER.value),
    ('Arte', EventType.ART.value),
    ('Dança', EventType.DANCE.value),
    ('Literatura', EventType.LITERATURE.value),
)

VIEW_MODES: Tuple[Tuple[str, str], ...] = (
    ('Grid', ViewMode.GRID.value),
    ('Compact', ViewMode.COMPACT.value),
    ('List', ViewMode.LIST.value),
)


def resolve_type_filter(value: Union[EventType, str]) -> Union[EventType, str]:
    """
    Resolve a type filter selection.

    Accepts an EventType, "all" in any case, an English type value or a
    localized label. Unlike EventType.parse this does not default: an
    unknown value is an error, since the selection comes from a fixed set
    of buttons.

    Raises:
        ValueError: If the value names no known type filter
    """
    if isinstance(value, EventType):
        return value

    key = normalize(value).strip() if isinstance(value, str) else ''
    for label, type_value in TYPE_FILTERS:
        if key and key in (normalize(label), type_value):
            return ALL_TYPES if type_value == ALL_TYPES else EventType(type_value)
    raise ValueError(f"Unknown event type filter: {value!r}")


def resolve_view_mode(value: Union[ViewMode, str]) -> ViewMode:
    """
    Resolve a view mode selection.

    Raises:
        ValueError: If the value names no known view mode
    """
    if isinstance(value, ViewMode):
        return value

    key = normalize(value).strip() if isinstance(value, str) else ''
    for label, mode_value in VIEW_MODES:
        if key and key in (normalize(label), mode_value):
            return ViewMode(mode_value)
    raise ValueError(f"Unknown view mode: {value!r}")


@dataclass
class FilterState:
    """
    User-controlled filter and view selections for one session.

    Selections are resolved on construction, so "All", "Todos" and "all"
    all mean no type restriction and unknown values raise ValueError.
    """
    selected_type: Union[EventType, str] = ALL_TYPES
    search_query: str = ''
    view_mode: ViewMode = ViewMode.GRID

    def __post_init__(self) -> None:
        self.selected_type = resolve_type_filter(self.selected_type)
        self.view_mode = resolve_view_mode(self.view_mode)
        if self.search_query is None:
            self.search_query = ''

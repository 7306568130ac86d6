"""Filtering of loaded events by date, type and search text."""
import logging
from datetime import date, datetime
from typing import List, Optional, Sequence

from processor.models import ALL_TYPES, Event, FilterState
from processor.text_normalizer import normalize

logger = logging.getLogger(__name__)

DATE_FORMATS = (
    '%Y-%m-%d',      # ISO 8601
    '%m/%d/%Y',      # US format
    '%d/%m/%Y',      # European format
    '%Y/%m/%d',      # Alternative ISO format
    '%m-%d-%Y',      # US format with dashes
    '%B %d, %Y',     # Full month name
    '%b %d, %Y',     # Abbreviated month name
)


def parse_event_date(value: Optional[str]) -> Optional[date]:
    """
    Parse an event date cell, dropping any time of day.

    Args:
        value: Date string in one of the supported formats

    Returns:
        Calendar date, or None if the value cannot be parsed
    """
    if not value or not value.strip():
        return None

    text = value.strip()
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue

    if text.endswith(('Z', 'z')):
        # fromisoformat only accepts a Z suffix from Python 3.11
        text = text[:-1] + '+00:00'
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        return None


def _as_date(today: Optional[date]) -> date:
    if today is None:
        return date.today()
    if isinstance(today, datetime):
        return today.date()
    return today


def filter_events(
    events: Sequence[Event],
    state: FilterState,
    today: Optional[date] = None,
    *,
    match_url: bool = False
) -> List[Event]:
    """
    Compute the visible subset of events.

    An event is kept only if it is not in the past, matches the selected
    type and matches the search query. Input order is preserved and the
    input sequence is never modified.

    Args:
        events: Loaded events
        state: Current filter selections
        today: Cutoff date (defaults to the current date)
        match_url: Also match the search query against event URLs

    Returns:
        New list with the matching events
    """
    cutoff = _as_date(today)
    query = normalize(state.search_query)
    # whitespace-only counts as empty; otherwise the query is matched as typed
    searching = bool(query.strip())

    visible = []
    for event in events:
        event_date = parse_event_date(event.date)
        if event_date is None:
            logger.debug(f"Skipping event '{event.id}' with unparseable date: {event.date!r}")
            continue
        if event_date < cutoff:
            continue
        if not _type_matches(event, state.selected_type):
            continue
        if searching and not _search_matches(event, query, match_url):
            continue
        visible.append(event)

    return visible


def _type_matches(event: Event, selected_type) -> bool:
    return selected_type == ALL_TYPES or event.type == selected_type


def _search_matches(event: Event, query: str, match_url: bool) -> bool:
    if query in normalize(event.title) or query in normalize(event.location):
        return True
    # Superseded behaviour kept behind a flag
    return match_url and query in normalize(event.url)

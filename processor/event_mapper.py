"""Mapper converting raw sheet rows into Event records."""
import logging
from typing import List, Optional, Sequence

from processor.models import Event, EventType

logger = logging.getLogger(__name__)


class EventMapper:
    """Mapper for positional sheet rows."""

    COLUMNS = ('title', 'date', 'time', 'location', 'type', 'url', 'image')
    ID_PREFIX = 'event-'

    def map_rows(self, rows: Optional[Sequence[Sequence[object]]]) -> List[Event]:
        """
        Map raw rows to events.

        Args:
            rows: Data rows from the sheet, header row excluded

        Returns:
            List of Event objects in row order
        """
        if not rows:
            logger.info("No rows to map")
            return []

        events = [
            self._map_single_row(row, position)
            for position, row in enumerate(rows, start=1)
        ]

        logger.info(f"Mapped {len(events)} events from {len(rows)} rows")
        return events

    def rows_from_values(
        self, values: Optional[Sequence[Sequence[object]]]
    ) -> List[Sequence[object]]:
        """
        Strip the header row from a raw values grid.

        Args:
            values: Two-dimensional grid as returned by the sheet endpoint

        Returns:
            Data rows, or an empty list when only a header (or nothing) is present
        """
        if not values or len(values) < 2:
            return []
        return list(values[1:])

    def _map_single_row(self, row: Sequence[object], position: int) -> Event:
        """
        Map a single row.

        Args:
            row: Row cells in column order
            position: 1-based position of the row among data rows

        Returns:
            Event object
        """
        cells = [self._cell(row, index) for index in range(len(self.COLUMNS))]
        title, date, time, location, raw_type, url, image = cells

        event_type = EventType.parse(raw_type)
        if not raw_type or event_type.value != raw_type.strip().lower():
            logger.debug(
                f"Row {position}: type '{raw_type}' mapped to '{event_type.value}'"
            )

        return Event(
            id=self.generate_event_id(position),
            title=title,
            date=date,
            time=time,
            location=location,
            type=event_type,
            url=url,
            image=image
        )

    @staticmethod
    def _cell(row: Sequence[object], index: int) -> str:
        """Return the cell at index as a string, empty if missing."""
        if row is None or index >= len(row):
            return ''
        value = row[index]
        if value is None:
            return ''
        return value if isinstance(value, str) else str(value)

    def generate_event_id(self, position: int) -> str:
        """
        Generate the identifier for a row.

        Identifiers come from the row position, so they are unique within a
        single fetch but shift when rows are inserted or reordered upstream.

        Args:
            position: 1-based row position

        Returns:
            Event ID such as "event-1"
        """
        return f"{self.ID_PREFIX}{position}"

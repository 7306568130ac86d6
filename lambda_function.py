"""AWS Lambda handler serving the Na Pista! event listing."""
import json
import logging
import os
import time
from typing import Dict, Any, Optional

from controller.state_controller import ApplicationStateController
from presentation.event_renderer import render_error_page, render_page
from processor.models import (
    ALL_TYPES,
    TYPE_FILTERS,
    VIEW_MODES,
    LoadPhase,
    ViewMode,
    resolve_type_filter,
    resolve_view_mode,
)
from sheets.google_sheets import (
    DEFAULT_SHEET_ID,
    DEFAULT_SHEET_NAME,
    GoogleSheetsClient,
)


# Attributes every LogRecord has; anything else came in through ``extra``
_RESERVED_RECORD_ATTRS = set(vars(logging.makeLogRecord({}))) | {'message', 'asctime'}


# Configure JSON logging
class JsonFormatter(logging.Formatter):
    """Custom JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON, including fields passed via extra."""
        log_data = {
            'timestamp': self.formatTime(record),
            'level': record.levelname,
            'message': record.getMessage(),
            'logger': record.name
        }

        for key, value in vars(record).items():
            if key not in _RESERVED_RECORD_ATTRS and key not in log_data:
                log_data[key] = value

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str, ensure_ascii=False)


def setup_logging(log_level: str = 'INFO') -> None:
    """
    Configure logging with JSON formatter.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
    """
    root_logger = logging.getLogger()

    # Remove existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    root_logger.addHandler(handler)

    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))


def _json_response(status_code: int, body: Dict[str, Any]) -> Dict[str, Any]:
    return {
        'statusCode': status_code,
        'headers': {'Content-Type': 'application/json; charset=utf-8'},
        'body': json.dumps(body, ensure_ascii=False)
    }


def _html_response(status_code: int, html: str) -> Dict[str, Any]:
    return {
        'statusCode': status_code,
        'headers': {'Content-Type': 'text/html; charset=utf-8'},
        'body': html
    }


def build_controller(
    api_key: Optional[str],
    sheet_id: str,
    sheet_name: str,
    timeout_seconds: int
) -> ApplicationStateController:
    """
    Build the state controller for one session.

    The controller issues its single load while being constructed.
    """
    client = GoogleSheetsClient(
        sheet_id=sheet_id,
        sheet_name=sheet_name,
        api_key=api_key,
        timeout=timeout_seconds
    )
    return ApplicationStateController(client.fetch_events)


def _listing_body(controller: ApplicationStateController) -> Dict[str, Any]:
    state = controller.filter_state
    selected = state.selected_type
    events = controller.visible_events
    return {
        'phase': controller.phase.value,
        'error': controller.error,
        'filters': {
            'type': selected if selected == ALL_TYPES else selected.value,
            'q': state.search_query,
            'view': state.view_mode.value
        },
        'type_filters': [
            {'label': label, 'value': value} for label, value in TYPE_FILTERS
        ],
        'view_modes': [
            {'label': label, 'value': value} for label, value in VIEW_MODES
        ],
        'count': len(events),
        'events': [event.to_dict() for event in events]
    }


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Main Lambda handler function for the event listing.

    Args:
        event: API Gateway proxy event payload
        context: Lambda context object

    Returns:
        Response dict with statusCode, headers and body
    """
    # Read configuration from environment variables
    api_key = os.environ.get('GOOGLE_SHEETS_API_KEY')
    sheet_id = os.environ.get('SHEET_ID', DEFAULT_SHEET_ID)
    sheet_name = os.environ.get('SHEET_NAME', DEFAULT_SHEET_NAME)
    log_level = os.environ.get('LOG_LEVEL', 'INFO')
    timeout_seconds = int(os.environ.get('TIMEOUT_SECONDS', '30'))

    setup_logging(log_level)
    logger = logging.getLogger(__name__)

    start_time = time.time()
    params = (event or {}).get('queryStringParameters') or {}
    output_format = (params.get('format') or 'json').lower()
    logger.info(
        "Listing request started",
        extra={
            'sheet_name': sheet_name,
            'query_parameters': params,
            'timeout_seconds': timeout_seconds
        }
    )

    try:
        # Validate the query string before fetching the sheet
        try:
            selected_type = (
                resolve_type_filter(params['type']) if params.get('type') else ALL_TYPES
            )
            view_mode = (
                resolve_view_mode(params['view']) if params.get('view') else ViewMode.GRID
            )
        except ValueError as e:
            logger.warning(f"Rejected filter parameters: {e}")
            if output_format == 'html':
                return _html_response(
                    400, render_error_page('Invalid filter parameters', str(e))
                )
            return _json_response(400, {
                'message': 'Invalid filter parameters',
                'error': str(e)
            })

        controller = build_controller(api_key, sheet_id, sheet_name, timeout_seconds)
        controller.set_selected_type(selected_type)
        controller.set_view_mode(view_mode)
        controller.set_search_query(params.get('q', ''))

        status_code = 200 if controller.phase is LoadPhase.READY else 502
        duration = time.time() - start_time
        logger.info(
            "Listing request completed",
            extra={
                'phase': controller.phase.value,
                'events_loaded': len(controller.events),
                'events_visible': len(controller.visible_events),
                'duration_seconds': round(duration, 2)
            }
        )

        if output_format == 'html':
            return _html_response(status_code, render_page(controller))
        return _json_response(status_code, _listing_body(controller))

    except Exception as e:
        duration = time.time() - start_time

        logger.error(
            f"Listing request failed: {str(e)}",
            extra={
                'duration_seconds': round(duration, 2),
                'error_type': type(e).__name__
            },
            exc_info=True
        )

        return _json_response(500, {
            'message': 'Listing failed',
            'error': str(e),
            'error_type': type(e).__name__,
            'duration_seconds': round(duration, 2)
        })

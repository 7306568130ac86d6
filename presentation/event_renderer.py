"""HTML rendering of the event listing."""
import logging
from typing import Dict

from bs4 import BeautifulSoup, Tag

from controller.state_controller import ApplicationStateController
from processor.models import ALL_TYPES, TYPE_FILTERS, VIEW_MODES, Event, ViewMode

logger = logging.getLogger(__name__)

APP_TITLE = 'Na Pista!'
SEARCH_PLACEHOLDER = 'Buscar eventos...'
TYPE_FILTER_HEADING = 'Tipo de Evento'
LOADING_MESSAGE = 'Loading events...'
EMPTY_MESSAGE = 'No events found with the selected filters.'

CONTAINER_CLASSES: Dict[ViewMode, str] = {
    ViewMode.GRID: 'events events--grid',
    ViewMode.COMPACT: 'events events--compact',
    ViewMode.LIST: 'events events--list',
}


def _new_soup() -> BeautifulSoup:
    return BeautifulSoup('', 'html.parser')


def _text_tag(soup: BeautifulSoup, name: str, text: str, /, **attrs) -> Tag:
    tag = soup.new_tag(name, attrs=attrs)
    tag.string = text
    return tag


def render_event_card(event: Event, view_mode: ViewMode) -> Tag:
    """
    Render one event as a card.

    List mode lays the image beside the details; compact mode is a smaller
    variant of the grid card.

    Args:
        event: Event to render
        view_mode: Current view mode

    Returns:
        Card element
    """
    soup = _new_soup()
    card = soup.new_tag('article', attrs={
        'class': f"event-card event-card--{view_mode.value}",
        'data-event-id': event.id,
        'data-event-type': event.type.value,
    })

    figure = soup.new_tag('div', attrs={'class': 'event-card__image'})
    figure.append(soup.new_tag('img', attrs={'src': event.image, 'alt': event.title}))
    card.append(figure)

    body = soup.new_tag('div', attrs={'class': 'event-card__body'})
    title = soup.new_tag('h3', attrs={'class': 'event-card__title'})
    if event.url:
        link = _text_tag(soup, 'a', event.title, href=event.url, rel='noopener')
        title.append(link)
    else:
        title.string = event.title
    body.append(title)

    details = soup.new_tag('div', attrs={'class': 'event-card__details'})
    if view_mode is ViewMode.LIST:
        schedule = soup.new_tag('div', attrs={'class': 'event-card__schedule'})
        schedule.append(_text_tag(soup, 'span', event.date, **{'class': 'event-card__date'}))
        schedule.append(_text_tag(soup, 'span', event.time, **{'class': 'event-card__time'}))
        details.append(schedule)
    else:
        details.append(_text_tag(soup, 'div', event.date, **{'class': 'event-card__date'}))
        details.append(_text_tag(soup, 'div', event.time, **{'class': 'event-card__time'}))
    details.append(_text_tag(soup, 'div', event.location, **{'class': 'event-card__location'}))
    body.append(details)

    card.append(body)
    return card


def _render_filters(soup: BeautifulSoup, controller: ApplicationStateController) -> Tag:
    state = controller.filter_state
    selected = state.selected_type
    selected_value = selected if selected == ALL_TYPES else selected.value

    section = soup.new_tag('section', attrs={'class': 'filters'})

    search = soup.new_tag('input', attrs={
        'type': 'text',
        'name': 'q',
        'class': 'filters__search',
        'placeholder': SEARCH_PLACEHOLDER,
        'value': state.search_query,
    })
    section.append(search)

    section.append(_text_tag(soup, 'h3', TYPE_FILTER_HEADING))
    types = soup.new_tag('div', attrs={'class': 'filters__types'})
    for label, value in TYPE_FILTERS:
        classes = 'filter-button'
        if value == selected_value:
            classes += ' filter-button--active'
        types.append(_text_tag(
            soup, 'button', label,
            **{'class': classes, 'name': 'type', 'value': value}
        ))
    section.append(types)

    modes = soup.new_tag('div', attrs={'class': 'filters__views'})
    for label, value in VIEW_MODES:
        classes = 'view-button'
        if value == state.view_mode.value:
            classes += ' view-button--active'
        modes.append(_text_tag(
            soup, 'button', label,
            **{'class': classes, 'name': 'view', 'value': value, 'title': label}
        ))
    section.append(modes)
    return section


def _render_events(soup: BeautifulSoup, controller: ApplicationStateController) -> Tag:
    view_mode = controller.filter_state.view_mode
    wrapper = soup.new_tag('div', attrs={'class': 'results'})

    if controller.loading:
        wrapper.append(_text_tag(soup, 'p', LOADING_MESSAGE, **{'class': 'status status--loading'}))
        return wrapper

    if controller.error:
        wrapper.append(_text_tag(soup, 'p', controller.error, **{'class': 'status status--error'}))
        return wrapper

    events = controller.visible_events
    container = soup.new_tag('div', attrs={'class': CONTAINER_CLASSES[view_mode]})
    for event in events:
        container.append(render_event_card(event, view_mode))
    wrapper.append(container)

    if not events:
        wrapper.append(_text_tag(soup, 'p', EMPTY_MESSAGE, **{'class': 'status status--empty'}))
    return wrapper


def render_page(controller: ApplicationStateController) -> str:
    """
    Render the full listing page for the controller's current state.

    Exactly one of the loading message, the error message or the event
    container is shown.

    Args:
        controller: Session state controller

    Returns:
        HTML document
    """
    soup = _new_soup()
    html = soup.new_tag('html', attrs={'lang': 'pt-BR'})
    soup.append(html)

    head = soup.new_tag('head')
    head.append(soup.new_tag('meta', attrs={'charset': 'utf-8'}))
    head.append(_text_tag(soup, 'title', APP_TITLE))
    html.append(head)

    body = soup.new_tag('body')
    header = soup.new_tag('header', attrs={'class': 'app-header'})
    header.append(_text_tag(soup, 'h1', APP_TITLE))
    body.append(header)

    main = soup.new_tag('main')
    form = soup.new_tag('form', attrs={'method': 'get'})
    form.append(_render_filters(soup, controller))
    main.append(form)
    main.append(_render_events(soup, controller))
    body.append(main)
    html.append(body)

    logger.debug(f"Rendered page in phase '{controller.phase.value}'")
    return '<!DOCTYPE html>\n' + str(soup)


def render_error_page(message: str, detail: str) -> str:
    """Render a minimal page for a rejected request."""
    soup = _new_soup()
    html = soup.new_tag('html', attrs={'lang': 'pt-BR'})
    soup.append(html)

    head = soup.new_tag('head')
    head.append(soup.new_tag('meta', attrs={'charset': 'utf-8'}))
    head.append(_text_tag(soup, 'title', APP_TITLE))
    html.append(head)

    body = soup.new_tag('body')
    body.append(_text_tag(soup, 'h1', APP_TITLE))
    body.append(_text_tag(soup, 'p', message, **{'class': 'status status--error'}))
    body.append(_text_tag(soup, 'p', detail, **{'class': 'status__detail'}))
    html.append(body)
    return '<!DOCTYPE html>\n' + str(soup)

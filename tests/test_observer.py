"""Tests for NavigationObserver."""

import asyncio

import httpx

from mautic_tracking import NavigationObserver, Route, RouteSettings
from mautic_tracking.observer import default_name_extractor, default_path_extractor


def page(name, is_page=True):
    return Route(RouteSettings(name), is_page=is_page)


def drive(observer, steps):
    """Run navigation callbacks inside an event loop, then drain screen views."""

    async def _drive():
        for step in steps:
            step(observer)
        await observer.wait_pending()

    asyncio.run(_drive())


def test_default_extractors():
    settings = RouteSettings("/contact/123")

    assert default_name_extractor(settings) == "123"
    assert default_path_extractor(settings) == "/contact/123"
    assert default_name_extractor(RouteSettings(None)) is None


def test_push_tracks_new_route(recorder, make_tracking):
    observer = NavigationObserver(make_tracking())

    drive(observer, [lambda o: o.did_push(page("/contact/123"), None)])

    params = recorder.last.url.params
    assert params["page_url"] == "/contact/123"
    assert params["page_title"] == "App Navigation: 123"


def test_push_skips_non_page_routes(recorder, make_tracking):
    observer = NavigationObserver(make_tracking())

    drive(observer, [lambda o: o.did_push(page("/dialog", is_page=False), page("/home"))])

    assert recorder.requests == []


def test_unnamed_routes_are_not_tracked(recorder, make_tracking):
    observer = NavigationObserver(make_tracking())

    drive(observer, [lambda o: o.did_push(page(None), None)])

    assert recorder.requests == []


def test_replace_tracks_new_route(recorder, make_tracking):
    observer = NavigationObserver(make_tracking())

    drive(
        observer,
        [
            lambda o: o.did_replace(new_route=page("/settings"), old_route=page("/home")),
            lambda o: o.did_replace(new_route=None, old_route=page("/settings")),
        ],
    )

    assert len(recorder.requests) == 1
    assert recorder.last.url.params["page_url"] == "/settings"


def test_pop_tracks_route_underneath(recorder, make_tracking):
    observer = NavigationObserver(make_tracking())

    drive(observer, [lambda o: o.did_pop(page("/contact/123"), page("/contacts"))])

    assert recorder.last.url.params["page_url"] == "/contacts"


def test_pop_from_dialog_is_ignored(recorder, make_tracking):
    observer = NavigationObserver(make_tracking())

    drive(
        observer,
        [
            lambda o: o.did_pop(page("/dialog", is_page=False), page("/contacts")),
            lambda o: o.did_pop(page("/contacts"), None),
        ],
    )

    assert recorder.requests == []


def test_custom_extractors_and_filter(recorder, make_tracking):
    observer = NavigationObserver(
        make_tracking(),
        name_extractor=lambda settings: settings.name.upper(),
        path_extractor=lambda settings: settings.name.strip("/"),
        route_filter=lambda route: True,
    )

    drive(observer, [lambda o: o.did_push(page("/about", is_page=False), None)])

    params = recorder.last.url.params
    assert params["page_url"] == "about"
    assert params["page_title"] == "App Navigation: /ABOUT"


def test_errors_go_to_handler(recorder, make_tracking):
    recorder.error = httpx.ConnectError("connection refused")
    errors = []
    observer = NavigationObserver(make_tracking(), on_error=errors.append)

    drive(observer, [lambda o: o.did_push(page("/home"), None)])

    assert len(errors) == 1
    assert isinstance(errors[0], httpx.ConnectError)


def test_errors_without_handler_are_logged_not_raised(recorder, make_tracking):
    recorder.error = httpx.ConnectError("connection refused")
    observer = NavigationObserver(make_tracking())

    drive(observer, [lambda o: o.did_push(page("/home"), None)])

    assert len(recorder.requests) == 1


def test_navigation_outside_event_loop_is_reported(recorder, make_tracking):
    errors = []
    observer = NavigationObserver(make_tracking(), on_error=errors.append)

    observer.did_push(page("/home"), None)

    assert len(errors) == 1
    assert isinstance(errors[0], RuntimeError)
    assert recorder.requests == []


def test_navigation_outside_event_loop_without_handler_does_not_raise(recorder, make_tracking):
    observer = NavigationObserver(make_tracking())

    observer.did_push(page("/home"), None)
    observer.did_replace(new_route=page("/settings"))

    assert recorder.requests == []

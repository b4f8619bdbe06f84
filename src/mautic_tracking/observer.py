"""Navigation observer - automatic screen views.

Hook NavigationObserver into whatever drives your app's route stack and
call did_push / did_replace / did_pop as routes change. The newly active
route is sent to Mautic as a screen view:

    observer = NavigationObserver(tracking)
    observer.did_push(Route(RouteSettings("/contact/123")), previous_route=None)

With the default extractors that tracks screen path "/contact/123" named
"123". Route names usually carry ids, so pass a custom name_extractor to
aggregate them into something readable.

The callbacks are synchronous; screen views are scheduled as tasks on the
running event loop. Failures go to on_error if given, otherwise they are
logged. Tracking never raises back into navigation.
"""

import asyncio
from dataclasses import dataclass
from typing import Callable

import logfire

from .client import MauticTracking


@dataclass
class RouteSettings:
    """Route metadata; name is usually a path like "/contact/123"."""

    name: str | None = None


@dataclass
class Route:
    """A navigation route. Only page routes are tracked by default."""

    settings: RouteSettings
    is_page: bool = True


ScreenNameExtractor = Callable[[RouteSettings], str | None]
ScreenPathExtractor = Callable[[RouteSettings], str | None]
RouteFilter = Callable[[Route], bool]
ErrorHandler = Callable[[Exception], None]


def default_name_extractor(settings: RouteSettings) -> str | None:
    """Use the last path segment as the screen name ("/contact/123" -> "123").

    Unnamed routes give None, which means the route isn't tracked.
    """
    if settings.name is None:
        return None
    return settings.name.split("/")[-1]


def default_path_extractor(settings: RouteSettings) -> str | None:
    """Use the full route name as the screen path."""
    return settings.name


def default_route_filter(route: Route) -> bool:
    """Track page routes only; dialogs and popups are skipped."""
    return route.is_page


class NavigationObserver:
    """Sends a screen view to Mautic whenever the active route changes."""

    def __init__(
        self,
        tracking: MauticTracking,
        *,
        name_extractor: ScreenNameExtractor = default_name_extractor,
        path_extractor: ScreenPathExtractor = default_path_extractor,
        route_filter: RouteFilter = default_route_filter,
        on_error: ErrorHandler | None = None,
    ):
        """Initialize the observer.

        Args:
            tracking: Client that receives the screen views
            name_extractor: Screen name from route settings; None skips the route
            path_extractor: Screen path from route settings
            route_filter: Which routes count as screens (default: page routes)
            on_error: Called with tracking failures instead of logging them
        """
        self.tracking = tracking
        self.name_extractor = name_extractor
        self.path_extractor = path_extractor
        self.route_filter = route_filter
        self.on_error = on_error

        self._pending: set[asyncio.Task] = set()

    def did_push(self, route: Route, previous_route: Route | None = None) -> None:
        if self.route_filter(route):
            self._send_screen_view(route)

    def did_replace(self, new_route: Route | None = None, old_route: Route | None = None) -> None:
        if new_route is not None and self.route_filter(new_route):
            self._send_screen_view(new_route)

    def did_pop(self, route: Route, previous_route: Route | None = None) -> None:
        # The route underneath becomes active again
        if previous_route is not None and self.route_filter(previous_route) and self.route_filter(route):
            self._send_screen_view(previous_route)

    async def wait_pending(self) -> None:
        """Wait for every scheduled screen view to finish."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    def _send_screen_view(self, route: Route) -> None:
        screen_name = self.name_extractor(route.settings)
        screen_path = self.path_extractor(route.settings)
        if screen_name is None:
            return

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError as e:
            # Navigation driven from sync code; nothing to schedule on
            self._report(e)
            return

        task = loop.create_task(self.tracking.track_screen(screen_path, screen_name))
        self._pending.add(task)
        task.add_done_callback(self._on_done)

    def _on_done(self, task: asyncio.Task) -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            self._report(error)

    def _report(self, error: Exception) -> None:
        if self.on_error is None:
            logfire.error("Screen view tracking failed", error=str(error))
        else:
            self.on_error(error)

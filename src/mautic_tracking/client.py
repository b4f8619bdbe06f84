"""MauticTracking - the tracking client.

Every public call turns into one GET against Mautic's tracking pixel
(`mtracking.gif`) with the event encoded in the query string:
- page_url:      what happened (screen path, event key, "app_started")
- page_title:    how it reads on the contact timeline
- tags:          tag changes ("-tag" removes)
- userid:        the configured contact user id
- page_referrer: the configured app bundle name

Identity continuity comes from echoing the mtc_* cookies Mautic hands out
(see cookies.py).
"""

from typing import Any, Iterable

import httpx
import logfire

from . import labels
from .config import DEFAULT_TIMEOUT, TrackingConfig
from .cookies import IdentityCookies, parse_set_cookie

TRACKING_PATH = "mtracking.gif"
ACCEPT_LANGUAGE = "de"


def _require(value: str | None, name: str) -> str:
    """Reject missing required arguments before touching the network.

    Only None counts as missing; an empty string is sent as-is.
    """
    if value is None:
        raise ValueError(f"{name} is required")
    return value


class MauticTracking:
    """Async client for Mautic user monitoring and tracking.

    Calls are not serialized. Each response may update the identity
    cookies, so two overlapping calls race on them: await one call before
    issuing the next if the visitor identity has to stay continuous.

    Usage (one connection per request, the default):
        tracking = MauticTracking(
            "https://mautic.example.com",
            app_name="MyApp",
            app_version="1.0.0",
        )
        await tracking.track_app_start()
        await tracking.track_screen("dashboard", "Dashboard")

    Usage (keep the connection open between requests):
        async with MauticTracking(url, close_connection_after_request=False) as tracking:
            await tracking.track_app_start()
            await tracking.add_tag({"beta"})
    """

    def __init__(
        self,
        base_url: str,
        *,
        userid: str | None = None,
        app_name: str | None = None,
        app_version: str | None = None,
        app_bundle_name: str | None = None,
        close_connection_after_request: bool = True,
        timeout: float | None = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the tracking client.

        Args:
            base_url: Mautic base URL (scheme and slashes are stripped)
            userid: Contact user id, sent with every hit
            app_name: App name shown on the contact timeline
            app_version: App version shown on the contact timeline
            app_bundle_name: Bundle id, sent as page_referrer
            close_connection_after_request: Close the connection after every
                request (True) or keep one open until aclose() (False)
            timeout: Request timeout in seconds (None disables it)
            transport: Custom httpx transport, mostly for tests
        """
        self.base_url = base_url
        self.userid = userid
        self.app_name = app_name
        self.app_version = app_version
        self.app_bundle_name = app_bundle_name
        self.close_connection_after_request = close_connection_after_request
        self.timeout = timeout

        self.cookies = IdentityCookies()

        self._transport = transport
        self._http: httpx.AsyncClient | None = None

    @classmethod
    def from_config(cls, config: TrackingConfig, **kwargs: Any) -> "MauticTracking":
        """Build a client from a TrackingConfig. Extra kwargs go to __init__."""
        return cls(
            config.base_url,
            userid=config.userid,
            app_name=config.app_name,
            app_version=config.app_version,
            app_bundle_name=config.app_bundle_name,
            close_connection_after_request=config.close_connection_after_request,
            timeout=config.timeout,
            **kwargs,
        )

    @property
    def host(self) -> str:
        return labels.resolve_host(self.base_url)

    @property
    def tracking_url(self) -> str:
        return f"http://{self.host}/{TRACKING_PATH}"

    @property
    def app_label(self) -> str:
        return labels.app_label(self.app_name, self.app_version)

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    async def aclose(self) -> None:
        """Close the kept-open connection, if any."""
        if self._http is not None:
            await self._http.aclose()
            self._http = None

    async def __aenter__(self) -> "MauticTracking":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    def _new_http_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self._transport)

    def _shared_http_client(self) -> httpx.AsyncClient:
        if self._http is None:
            self._http = self._new_http_client()
        return self._http

    # -------------------------------------------------------------------------
    # Request cycle
    # -------------------------------------------------------------------------

    async def _make_request(self, params: dict[str, str]) -> None:
        """Send one tracking hit and absorb the identity cookies it returns.

        Any HTTP status counts as delivered. Transport failures raise
        httpx.HTTPError subclasses to the caller; there is no retry.
        """
        params = dict(params)
        if self.userid is not None:
            params["userid"] = self.userid
        if self.app_bundle_name is not None:
            params["page_referrer"] = self.app_bundle_name

        headers = {"Accept-Language": ACCEPT_LANGUAGE}
        cookie_header = self.cookies.header_value()
        if cookie_header is not None:
            headers["Cookie"] = cookie_header

        with logfire.span(
            "mautic.request",
            host=self.host,
            page_url=params.get("page_url", ""),
            cookies_attached=cookie_header is not None,
        ) as span:
            if self.close_connection_after_request:
                async with self._new_http_client() as http:
                    response = await http.get(self.tracking_url, params=params, headers=headers)
            else:
                http = self._shared_http_client()
                response = await http.get(self.tracking_url, params=params, headers=headers)
                # Only the identity tokens may ride along on the next request
                http.cookies.clear()

            span.set_attribute("http.status_code", response.status_code)

            # Raw headers, not response.cookies: the jar drops foreign-domain
            # and expired cookies, and Mautic's identity must still be read
            updated = self.cookies.update_from(
                parse_set_cookie(response.headers.get_list("set-cookie"))
            )
            if updated:
                logfire.debug("Identity cookies updated", tokens=updated)

    # -------------------------------------------------------------------------
    # Tracking
    # -------------------------------------------------------------------------

    async def track_app_start(self) -> None:
        """Track the app start.

        Example:
            await tracking.track_app_start()
        """
        await self._make_request(
            {
                "page_url": "app_started",
                "page_title": labels.start_title(self.app_label),
            }
        )

    async def track_screen(self, screen_path: str, screen_name: str | None = None) -> None:
        """Send a screen view.

        Args:
            screen_path: Unique screen route path, e.g. "dashboard"
            screen_name: Screen label for the timeline, e.g. "View Contact Info"
        """
        _require(screen_path, "screen_path")
        await self._make_request(
            {
                "page_url": screen_path,
                "page_title": labels.screen_title(self.app_label, screen_name),
            }
        )

    async def track_event(
        self,
        event_key: str,
        event_name: str,
        screen_path: str,
        screen_name: str | None = None,
    ) -> None:
        """Send an in-app event.

        Args:
            event_key: Unique event key, e.g. "click_total"
            event_name: Event label, e.g. "Click Dashboard Total Button"
            screen_path: Screen route path the event happened on
            screen_name: Screen label for the timeline

        Example:
            await tracking.track_event(
                "change_password", "Change User Password", "user_info", "User Info"
            )
        """
        _require(event_key, "event_key")
        _require(event_name, "event_name")
        _require(screen_path, "screen_path")
        await self._make_request(
            {
                "page_url": labels.event_url(event_key, screen_path),
                "page_title": labels.event_title(self.app_label, event_name, screen_name),
            }
        )

    async def add_tag(self, tags: Iterable[str]) -> None:
        """Add tags to the current contact, e.g. add_tag({"tag1", "tag2"})."""
        await self._change_tag(tags, add=True)

    async def remove_tag(self, tags: Iterable[str]) -> None:
        """Remove tags from the current contact, e.g. remove_tag({"tag1"})."""
        await self._change_tag(tags, add=False)

    async def _change_tag(self, tags: Iterable[str], add: bool = True) -> None:
        if tags is None:
            raise ValueError("tags is required")
        if isinstance(tags, str):
            raise TypeError("tags must be a collection of strings, not a single string")

        tag_list = labels.tag_list(tags, remove=not add)
        await self._make_request(
            {
                "page_title": labels.tags_title(self.app_label, tag_list, remove=not add),
                "tags": ",".join(tag_list),
            }
        )

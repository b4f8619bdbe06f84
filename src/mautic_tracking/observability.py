"""Observability setup - Logfire configuration.

What mautic_tracking emits once configured:
- span "mautic.request" per tracking hit, with host, page_url,
  cookies_attached and http.status_code
- debug "Identity cookies updated" when a response carries mtc_* cookies
- error "Screen view tracking failed" from NavigationObserver when no
  on_error handler is set
- with instrument_httpx, the outgoing GET as a child span of mautic.request

Nothing is sent anywhere unless a Logfire token is present.
"""

import logfire


def configure(service_name: str = "mautic_tracking", debug: bool = False) -> None:
    """Configure Logfire for the tracking client.

    Call once at app startup, before the first tracking hit.

    Args:
        service_name: Name to identify the app in traces.
        debug: If True, also print spans and logs to the console.
    """
    logfire.configure(
        service_name=service_name,
        send_to_logfire="if-token-present",
        console=None if debug else False,
    )
    logfire.instrument_httpx()

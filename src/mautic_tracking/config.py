"""Tracking configuration.

The client is configured through constructor arguments. For apps that
prefer environment configuration, TrackingConfig.from_env reads:

    MAUTIC_URL          - Mautic base URL (required)
    MAUTIC_USERID       - Contact user id / email (optional)
    MAUTIC_APP_NAME     - App name shown on the timeline (optional)
    MAUTIC_APP_VERSION  - App version shown on the timeline (optional)
    MAUTIC_APP_BUNDLE   - Bundle id, sent as page_referrer (optional)
    MAUTIC_KEEP_ALIVE   - "1"/"true"/"yes" to reuse one connection (optional)
    MAUTIC_TIMEOUT      - Request timeout in seconds (optional)
"""

import os
from dataclasses import dataclass
from typing import Mapping

DEFAULT_TIMEOUT = 10.0


@dataclass
class TrackingConfig:
    """Everything needed to build a MauticTracking client."""

    base_url: str
    userid: str | None = None
    app_name: str | None = None
    app_version: str | None = None
    app_bundle_name: str | None = None
    close_connection_after_request: bool = True
    timeout: float | None = DEFAULT_TIMEOUT

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "TrackingConfig":
        """Build a config from MAUTIC_* environment variables.

        Raises:
            ValueError: if MAUTIC_URL is missing or MAUTIC_TIMEOUT isn't a number
        """
        env = os.environ if environ is None else environ

        base_url = env.get("MAUTIC_URL", "").strip()
        if not base_url:
            raise ValueError("MAUTIC_URL is not set")

        keep_alive = env.get("MAUTIC_KEEP_ALIVE", "0").lower() in ("1", "true", "yes")

        timeout = DEFAULT_TIMEOUT
        raw_timeout = env.get("MAUTIC_TIMEOUT")
        if raw_timeout:
            try:
                timeout = float(raw_timeout)
            except ValueError:
                raise ValueError(f"MAUTIC_TIMEOUT must be a number, got {raw_timeout!r}") from None

        return cls(
            base_url=base_url,
            userid=env.get("MAUTIC_USERID") or None,
            app_name=env.get("MAUTIC_APP_NAME") or None,
            app_version=env.get("MAUTIC_APP_VERSION") or None,
            app_bundle_name=env.get("MAUTIC_APP_BUNDLE") or None,
            close_connection_after_request=not keep_alive,
            timeout=timeout,
        )

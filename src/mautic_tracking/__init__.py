"""mautic_tracking - user monitoring and tracking for apps, backed by Mautic.

Architecture:
- MauticTracking sends each event as a GET to the mtracking.gif pixel
- Identity cookies (mtc_id, mtc_sid, mtc_device_id) keep one contact timeline
- NavigationObserver turns route changes into screen views
"""

from .client import MauticTracking
from .config import TrackingConfig
from .cookies import IdentityCookies, IdentityToken
from .labels import app_label, resolve_host
from .observability import configure as configure_observability
from .observer import NavigationObserver, Route, RouteSettings

__all__ = [
    # Main client
    "MauticTracking",
    "TrackingConfig",
    # Identity cookies
    "IdentityCookies",
    "IdentityToken",
    # Navigation
    "NavigationObserver",
    "Route",
    "RouteSettings",
    # Helpers
    "app_label",
    "resolve_host",
    # Observability
    "configure_observability",
]
__version__ = "0.1.0"

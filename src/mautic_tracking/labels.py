"""Formatting helpers - the strings that end up on the contact timeline.

Everything here is pure. The client glues these together into the
`page_url` / `page_title` / `tags` query parameters of each tracking hit.
"""

import re
from typing import Iterable

_SCHEME_RE = re.compile(r"^https?://", re.IGNORECASE)


def resolve_host(base_url: str) -> str:
    """Reduce a base URL to the bare host used for tracking requests.

    Strips a leading http(s):// scheme, removes every '/', lowercases.
    Running it on its own output returns the same string.

    Args:
        base_url: Mautic base URL, e.g. "https://Mautic.Example.com/"

    Returns:
        The host, e.g. "mautic.example.com"
    """
    host = _SCHEME_RE.sub("", base_url.strip())
    return host.replace("/", "").lower().strip()


def app_label(app_name: str | None = None, app_version: str | None = None) -> str:
    """Return the app label prefixed to every page title."""
    if app_name is None:
        return "App" if app_version is None else f"App ({app_version}): "
    return f"{app_name} " if app_version is None else f"{app_name} ({app_version}): "


def start_title(label: str) -> str:
    return f"{label} Started"


def screen_title(label: str, screen_name: str | None = None) -> str:
    if screen_name is None:
        return f"{label} Navigation"
    return f"{label} Navigation: {screen_name}"


def event_url(event_key: str, screen_path: str) -> str:
    return f"screen_{screen_path}_event_{event_key}"


def event_title(label: str, event_name: str, screen_name: str | None = None) -> str:
    if screen_name is None:
        return f"{label} Event: {event_name}"
    return f"{label} Event: {screen_name} / {event_name}"


def tag_list(tags: Iterable[str], remove: bool = False) -> list[str]:
    """Dedupe tags and mark them for removal if asked.

    Mautic removes a tag when it arrives with a leading '-'.
    Sorted so the same set always produces the same query string.
    """
    unique = set(tags)
    if remove:
        unique = {f"-{tag}" for tag in unique}
    return sorted(unique)


def tags_title(label: str, tags: list[str], remove: bool = False) -> str:
    action = "Removed Tags: " if remove else "Added Tags: "
    return f"{label} {action}{','.join(tags)}"

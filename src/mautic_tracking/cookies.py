"""Identity cookies - how Mautic recognizes the same visitor across hits.

Mautic answers the first tracking hit with three cookies: the contact id,
the session id and the device id. Echoing them back on later hits keeps the
events on one contact timeline instead of spawning anonymous visitors.

Nothing is echoed until the server has issued a contact id at least once.
"""

from dataclasses import dataclass, field
from typing import Iterable

CONTACT_COOKIE = "mtc_id"
SESSION_COOKIE = "mtc_sid"
DEVICE_COOKIE = "mtc_device_id"

# Mautic sets the device cookie as "mautic_device_id", not DEVICE_COOKIE.
# Responses are matched on this name; requests still send DEVICE_COOKIE.
DEVICE_COOKIE_MATCH = "mautic_device_id"


def parse_set_cookie(headers: Iterable[str]) -> list[tuple[str, str]]:
    """Pull (name, value) pairs out of raw Set-Cookie header values.

    Attributes (Domain, Path, Max-Age, Expires) are ignored, so foreign-domain
    and expired cookies still count. Headers without "=" are skipped.
    """
    pairs = []
    for header in headers:
        name, sep, value = header.split(";", 1)[0].partition("=")
        if not sep:
            continue
        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] == '"':
            value = value[1:-1]
        pairs.append((name.strip(), value))
    return pairs


@dataclass
class IdentityToken:
    """A single name/value identity cookie."""

    name: str
    value: str = ""
    http_only: bool = True


@dataclass
class IdentityCookies:
    """The three identity tokens owned by one tracking client."""

    contact: IdentityToken = field(default_factory=lambda: IdentityToken(CONTACT_COOKIE))
    session: IdentityToken = field(default_factory=lambda: IdentityToken(SESSION_COOKIE))
    device: IdentityToken = field(default_factory=lambda: IdentityToken(DEVICE_COOKIE))

    @property
    def active(self) -> bool:
        """True once the server has handed out a contact id."""
        return bool(self.contact.value)

    def header_value(self) -> str | None:
        """Build the Cookie header for the next request, or None if inactive."""
        if not self.active:
            return None
        tokens = (self.contact, self.device, self.session)
        return "; ".join(f"{token.name}={token.value}" for token in tokens)

    def update_from(self, cookies: Iterable[tuple[str, str]]) -> list[str]:
        """Pick identity values out of response cookies.

        Names are matched by substring, so prefixed or suffixed variants
        (e.g. "mtc_sid_legacy") still count.

        Args:
            cookies: (name, value) pairs from the response

        Returns:
            Names of the tokens that were updated, in update order
        """
        updated = []
        for name, value in cookies:
            if SESSION_COOKIE in name:
                updated.append(self._set(self.session, value))
            if DEVICE_COOKIE_MATCH in name:
                updated.append(self._set(self.device, value))
            if CONTACT_COOKIE in name:
                updated.append(self._set(self.contact, value))
        return updated

    def clear(self) -> None:
        """Forget the current visitor; the next hit starts a new identity."""
        for token in (self.contact, self.session, self.device):
            token.value = ""
            token.http_only = True

    @staticmethod
    def _set(token: IdentityToken, value: str) -> str:
        token.value = value
        token.http_only = False
        return token.name

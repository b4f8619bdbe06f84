"""Shared fixtures: offline logfire and a recording mock transport."""

import httpx
import logfire
import pytest

from mautic_tracking import MauticTracking

BASE_URL = "https://Mautic.Example.com/"


@pytest.fixture(autouse=True, scope="session")
def _quiet_logfire():
    logfire.configure(send_to_logfire=False, console=False)


class Recorder:
    """Records outgoing requests and replays queued Set-Cookie responses."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self._responses: list[tuple[int, list[str]]] = []
        self.error: Exception | None = None

    def respond(self, *set_cookies: str, status: int = 200) -> None:
        self._responses.append((status, list(set_cookies)))

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        status, set_cookies = self._responses.pop(0) if self._responses else (200, [])
        headers = [("Set-Cookie", cookie) for cookie in set_cookies]
        return httpx.Response(status, headers=headers, content=b"GIF89a")

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def recorder():
    return Recorder()


@pytest.fixture
def make_tracking(recorder):
    def _make(**kwargs):
        return MauticTracking(BASE_URL, transport=recorder.transport(), **kwargs)

    return _make

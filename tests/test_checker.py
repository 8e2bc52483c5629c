"""HeadChecker: one HEAD request, 200 means found, transport errors are absorbed."""

import httpx
import pytest

from outyet.app.checker import HeadChecker, host_of
from outyet.app.stats import Stats


def _checker(handler, settings, stats):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return client, HeadChecker(client, settings, stats)


@pytest.mark.asyncio
async def test_200_is_found(settings):
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200)

    stats = Stats()
    client, checker = _checker(handler, settings, stats)
    async with client:
        assert await checker.check("https://go.test/go/+/go1.4") is True

    assert seen[0].method == "HEAD"
    assert seen[0].headers["User-Agent"] == "outyet-tests/1.0"
    assert stats.poll_count == 1
    assert stats.poll_error_count == 0


@pytest.mark.asyncio
@pytest.mark.parametrize("status", [204, 301, 404, 500])
async def test_other_status_is_not_found_and_not_an_error(status, settings):
    stats = Stats()
    client, checker = _checker(lambda request: httpx.Response(status), settings, stats)
    async with client:
        assert await checker.check("https://go.test/go/+/go1.4") is False

    assert stats.poll_count == 1
    assert stats.poll_error_count == 0
    assert stats.poll_error == ""


@pytest.mark.asyncio
async def test_redirects_are_followed(settings):
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/old":
            return httpx.Response(302, headers={"Location": "https://go.test/new"})
        return httpx.Response(200)

    client, checker = _checker(handler, settings, Stats())
    async with client:
        assert await checker.check("https://go.test/old") is True


@pytest.mark.asyncio
async def test_transport_error_is_recorded_not_raised(settings):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("timed out", request=request)

    stats = Stats()
    client, checker = _checker(handler, settings, stats)
    async with client:
        assert await checker.check("https://go.test/go/+/go1.4") is False
        assert await checker.check("https://go.test/go/+/go1.4") is False

    assert stats.poll_count == 2
    assert stats.poll_error_count == 2
    assert stats.poll_error == "timed out"


@pytest.mark.asyncio
async def test_invalid_url_is_recorded_not_raised(settings):
    stats = Stats()
    client, checker = _checker(lambda request: httpx.Response(200), settings, stats)
    async with client:
        assert await checker.check("http://[::1/x") is False

    assert stats.poll_count == 1
    assert stats.poll_error_count == 1
    assert stats.poll_error != ""


def test_host_of():
    assert host_of("https://go.googlesource.com/go/+/go1.4") == "go.googlesource.com"
    assert host_of("http://[::1/x") == ""

"""Tests for external URL checks."""

import httpx
import pytest

from curriculum_lint.services.external_links import USER_AGENT, UrlStatus, check_urls


def test_url_status_describe():
    assert UrlStatus("https://a.example", status_code=200).ok
    assert not UrlStatus("https://a.example", status_code=503).ok
    assert UrlStatus("https://a.example", status_code=503).describe() == "HTTP 503"
    assert UrlStatus("https://a.example", error="ReadTimeout").describe() == "ReadTimeout"
    assert not UrlStatus("https://a.example").ok


@pytest.mark.asyncio
async def test_check_urls_empty():
    assert await check_urls([]) == {}


@pytest.mark.asyncio
async def test_check_urls():
    agents = set()

    def handler(request: httpx.Request) -> httpx.Response:
        agents.add(request.headers["user-agent"])
        if request.url.path == "/old":
            return httpx.Response(301, headers={"Location": "https://docs.example.com/new"})
        if request.url.path == "/broken":
            return httpx.Response(500)
        if request.url.path == "/slow":
            raise httpx.ReadTimeout("timed out", request=request)
        return httpx.Response(200)

    urls = [
        "https://docs.example.com/old",
        "https://docs.example.com/broken",
        "https://docs.example.com/slow",
        "https://docs.example.com/old",
    ]
    results = await check_urls(urls, concurrency=2, transport=httpx.MockTransport(handler))

    assert sorted(results) == [
        "https://docs.example.com/broken",
        "https://docs.example.com/old",
        "https://docs.example.com/slow",
    ]
    # redirects are followed
    assert results["https://docs.example.com/old"].status_code == 200
    assert results["https://docs.example.com/broken"].status_code == 500
    assert results["https://docs.example.com/slow"].error == "ReadTimeout"
    assert agents == {USER_AGENT}


class UnreadableStream(httpx.AsyncByteStream):
    async def __aiter__(self):
        raise AssertionError("response body was read")
        yield b""  # pragma: no cover


@pytest.mark.asyncio
async def test_get_fallback_does_not_read_body():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.method == "HEAD":
            return httpx.Response(405)
        return httpx.Response(200, stream=UnreadableStream())

    url = "https://video.example.com/lecture.mp4"
    results = await check_urls([url], transport=httpx.MockTransport(handler))

    assert results[url].ok
    assert results[url].status_code == 200

import asyncio
import json

import pytest

from features.common.services.http_client import HttpClient
from features.common.exceptions.pipeline_exceptions import UpstreamFetchError, FetchTimeoutError, ParseError

class FakeResponse:
    def __init__(self, status=200, body=None, error=None, json_error=None):
        self.status = status
        self.body = body
        self.error = error
        self.json_error = json_error

    async def __aenter__(self):
        if self.error:
            raise self.error
        return self

    async def __aexit__(self, *args):
        return False

    async def json(self, content_type=None):
        if self.json_error:
            raise self.json_error
        return self.body

    async def text(self):
        return self.body

class FakeSession:
    def __init__(self, responses):
        self.responses = list(responses)
        self.requests = []

    def get(self, url, params=None, headers=None, timeout=None):
        self.requests.append(url)
        return self.responses.pop(0)

async def test_retries_with_linear_backoff(sleep):
    session = FakeSession([FakeResponse(503), FakeResponse(502), FakeResponse(200, {"ok": True})])
    client = HttpClient(timeout=5, retries=3, backoff=1.0, session=session, sleep=sleep)

    assert await client.get_json("https://example.test/a", source="test") == {"ok": True}
    assert len(session.requests) == 3
    assert sleep.delays == [1.0, 2.0]

async def test_gives_up_after_retries(sleep):
    session = FakeSession([FakeResponse(500), FakeResponse(500)])
    client = HttpClient(timeout=5, retries=2, backoff=1.0, session=session, sleep=sleep)

    with pytest.raises(UpstreamFetchError) as info:
        await client.get_text("https://example.test/b", source="test")
    assert info.value.status == 500
    assert sleep.delays == [1.0]

async def test_timeout_becomes_fetch_timeout(sleep):
    session = FakeSession([FakeResponse(error=asyncio.TimeoutError())])
    client = HttpClient(timeout=5, retries=1, session=session, sleep=sleep)

    with pytest.raises(FetchTimeoutError, match="timed out after 5s"):
        await client.get_text("https://example.test/c", source="test")
    assert sleep.delays == []

async def test_close_leaves_injected_session_open(sleep):
    session = FakeSession([])
    client = HttpClient(session=session, sleep=sleep)
    await client.close()
    assert session.responses == []

async def test_malformed_json_is_a_parse_error(sleep):
    body = "<html>oops</html>"
    broken = json.JSONDecodeError("Expecting value", body, 0)
    session = FakeSession([FakeResponse(200, body, json_error=broken)])
    client = HttpClient(timeout=5, retries=3, session=session, sleep=sleep)

    with pytest.raises(ParseError, match="test: malformed JSON"):
        await client.get_json("https://example.test/d", source="test")
    assert len(session.requests) == 1
    assert sleep.delays == []

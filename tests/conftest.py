import pytest

from gemgate.gemini import GeminiResponse, ResourceURL


class FakeFetch:
    """Stands in for gemini.fetch, answering from a url -> response table."""

    def __init__(self, responses):
        self.responses = responses
        self.calls = []

    def __call__(self, url, timeout=None):
        self.calls.append(str(url))
        response = self.responses[str(url)]
        if isinstance(response, Exception):
            raise response
        status, meta, body = response
        return GeminiResponse(url, status, meta, body)


@pytest.fixture
def fake_fetch():
    return FakeFetch


@pytest.fixture
def url():
    return ResourceURL.parse

import httpx
import pytest

from athena_client.http_client import HttpClient

PRACTICE_ID = "195900"
BASE_URL = "http://athena.test"


@pytest.fixture
def make_http():
    """Factory: HttpClient whose requests are served by `handler(request) -> httpx.Response`."""
    def _make(handler, **kwargs):
        return HttpClient(
            base_url=BASE_URL,
            practice_id=PRACTICE_ID,
            connect_timeout=1,
            read_timeout=1,
            transport=httpx.MockTransport(handler),
            **kwargs,
        )
    return _make

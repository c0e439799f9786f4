from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

import pytest
import requests

from people_api import PeopleDirectoryAPI


BASE_URL = "http://test.com/"


def make_response(status_code: int = 200, body: Any = None, *, text: Optional[str] = None, reason: str = "") -> requests.Response:
    response = requests.Response()
    response.status_code = status_code
    response.reason = reason
    response.encoding = "utf-8"
    if body is not None:
        response._content = json.dumps(body).encode("utf-8")
        response.headers["Content-Type"] = "application/json"
    else:
        response._content = (text or "").encode("utf-8")
    return response


class StubSession:
    """Records outgoing requests and replays canned responses in order."""

    def __init__(self, *responses: Any) -> None:
        self.responses: List[Any] = list(responses)
        self.calls: List[Dict[str, Any]] = []
        self.closed = False

    def request(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        self.calls.append({"method": method, "url": url, **kwargs})
        if not self.responses:
            raise AssertionError(f"unexpected request {method} {url}")
        result = self.responses.pop(0)
        if isinstance(result, Exception):
            raise result
        return result

    def close(self) -> None:
        self.closed = True


@pytest.fixture()
def make_api():
    def _make(*responses: Any, **kwargs: Any):
        session = StubSession(*responses)
        api = PeopleDirectoryAPI(base_url=kwargs.pop("base_url", BASE_URL), session=session, **kwargs)
        return api, session

    return _make

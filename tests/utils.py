"""
Test utilities shared by OpenCage client tests.
"""

from typing import Any, Dict, List, Mapping, Optional
from urllib.parse import parse_qsl, urlsplit

from lib.opencage import TransportResponse

OK_BODY: Dict[str, Any] = {
    "status": {"code": 200, "message": "OK"},
    "total_results": 1,
    "results": [
        {
            "formatted": "Weimar, Thuringia, Germany",
            "geometry": {"lat": 50.9794934, "lng": 11.3235439},
            "components": {"city": "Weimar", "country_code": "de"},
        }
    ],
}


class RecordingTransport:
    """Transport which records requested URLs and returns canned response, dood!"""

    def __init__(self, body: Any = None, statusCode: int = 200, headers: Optional[Dict[str, str]] = None):
        self.response = TransportResponse(statusCode=statusCode, headers=headers or {}, body=body)
        self.urls: List[str] = []

    def get(self, url: str, headers: Mapping[str, str]) -> TransportResponse:
        self.urls.append(url)
        return self.response

    @property
    def lastParams(self) -> Dict[str, str]:
        return dict(parse_qsl(urlsplit(self.urls[-1]).query))

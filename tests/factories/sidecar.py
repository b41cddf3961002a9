import json
from typing import Dict, List, Optional, Tuple

import httpx

from packages.billing.providers.payment.sidecar_payment import SidecarPaymentProvider

SIDECAR_BASE_URL = "http://payments.test"


class FakeSidecar:
    """
    Payments sidecar stand-in served through httpx.MockTransport.

    Responses are keyed by (method, raw escaped path); unknown paths get 404.
    Every request is recorded.
    """

    def __init__(self):
        self.responses: Dict[Tuple[str, str], httpx.Response] = {}
        self.unreachable: set = set()
        self.requests: List[httpx.Request] = []

    def on(
        self,
        method: str,
        path: str,
        status_code: int = 200,
        body: Optional[object] = None,
        text: Optional[str] = None,
    ) -> "FakeSidecar":
        if text is not None:
            response = httpx.Response(status_code, text=text)
        else:
            response = httpx.Response(status_code, json=body if body is not None else {})
        self.responses[(method, path)] = response
        return self

    def fail(self, method: str, path: str) -> "FakeSidecar":
        """Make a path raise a connection error."""
        self.unreachable.add((method, path))
        return self

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = (request.method, request.url.raw_path.split(b"?")[0].decode("ascii"))
        if key in self.unreachable:
            raise httpx.ConnectError("connection refused", request=request)
        response = self.responses.get(key)
        if response is None:
            return httpx.Response(404, json={"error": "not found"})
        return httpx.Response(
            response.status_code,
            headers=response.headers,
            content=response.content,
        )

    def provider(self) -> SidecarPaymentProvider:
        return SidecarPaymentProvider(
            base_url=SIDECAR_BASE_URL, transport=httpx.MockTransport(self.handler)
        )

    def paths(self) -> List[str]:
        return [request.url.raw_path.decode("ascii") for request in self.requests]

    def json_body(self, index: int = -1) -> dict:
        return json.loads(self.requests[index].content)

"""
Policy context shared by every policy in a chain.

PolicyContext holds:
- The request being proxied (optional)
- The response being returned (optional)
- A generic header store for policies with no request/response flow
- Free-form metadata for signalling between policies
"""

from __future__ import annotations

from dataclasses import dataclass
from dataclasses import field
from typing import Any

from mitmproxy import http


@dataclass
class PolicyContext:
    """
    Mutable per-request state passed through a policy chain.

    `request` and `response` are normally mitmproxy messages, but any object
    exposing a `headers` store works. A context is created fresh for each
    request/response cycle and is never shared between concurrent executions.
    """

    request: Any = None
    response: Any = None

    # Generic headers, used by policies whose flow is neither request nor response
    headers: http.Headers | None = None

    metadata: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_flow(cls, flow: http.HTTPFlow) -> PolicyContext:
        """
        Create a PolicyContext from a mitmproxy flow.

        Args:
            flow: mitmproxy HTTP flow object

        Returns:
            PolicyContext wrapping the flow's request and response (if any)
        """
        return cls(request=flow.request, response=flow.response)

    def has_request(self) -> bool:
        return self.request is not None

    def has_response(self) -> bool:
        return self.response is not None

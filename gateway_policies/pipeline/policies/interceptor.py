"""
Interceptor policy.

Delegates header processing to an external HTTP service:
1. Snapshots the target's headers and body (without consuming the body)
2. POSTs the snapshot as JSON to the interceptor service
3. Overlays the headers returned by the service onto the target

Only headers named in the reply are touched; everything else is left as is.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from dataclasses import field
from typing import Any
from typing import TYPE_CHECKING

import requests

from gateway_policies.body import snapshot_body
from gateway_policies.config import config
from gateway_policies.exceptions import ConfigError
from gateway_policies.exceptions import InterceptorCallError
from gateway_policies.exceptions import InterceptorDecodeError
from gateway_policies.exceptions import InterceptorStatusError
from gateway_policies.models import Flow
from gateway_policies.models import InterceptorReply
from gateway_policies.models import InterceptorRequest
from gateway_policies.pipeline.policies.base import Policy

if TYPE_CHECKING:
    from mitmproxy import http

    from gateway_policies.pipeline.context import PolicyContext

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InterceptorPolicy(Policy):
    service_url: str
    flow: Flow = Flow.UNSPECIFIED
    timeout: float = field(default_factory=lambda: config.INTERCEPTOR_TIMEOUT)
    # Optional requests.Session for connection pooling; module-level requests otherwise
    session: requests.Session | None = field(default=None, compare=False, repr=False)

    @property
    def name(self) -> str:
        return "Interceptor"

    def validate(self) -> None:
        if not self.service_url:
            raise ConfigError("service URL cannot be empty")
        timeout = self.timeout
        if isinstance(timeout, bool) or not isinstance(timeout, (int, float)):
            raise ConfigError(f"timeout must be a number, got {timeout!r}")
        if not math.isfinite(timeout) or timeout <= 0:
            raise ConfigError("timeout must be positive")
        self._validate_flow()

    def execute(self, context: PolicyContext) -> None:
        target = self.resolve_target(context)
        headers = self.resolve_headers(context)

        snapshot = InterceptorRequest(
            headers=_headers_to_dict(headers),
            body=snapshot_body(target),
        )
        if self.flow == Flow.REQUEST:
            snapshot.method = getattr(target, "method", None)
            snapshot.path = _strip_query(getattr(target, "path", None))

        reply = self.call_interceptor(snapshot)

        for header_name, values in reply.headers.items():
            headers.set_all(header_name, values)

        if reply.headers:
            logger.debug(
                f"Interceptor {self.service_url} replaced headers: {list(reply.headers)}"
            )

    def call_interceptor(self, snapshot: InterceptorRequest) -> InterceptorReply:
        """
        POST a snapshot to the interceptor service and decode its reply.

        Raises:
            InterceptorCallError: On connection errors or timeout
            InterceptorStatusError: If the service answers with anything but 200
            InterceptorDecodeError: If the reply is not a valid payload
        """
        client: Any = self.session if self.session is not None else requests
        logger.debug(f"Calling interceptor service {self.service_url}")

        try:
            response = client.post(
                self.service_url,
                json=snapshot.to_dict(),
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.warning(f"Interceptor service {self.service_url} unreachable: {e}")
            raise InterceptorCallError(
                f"failed to call interceptor service: {e}"
            ) from e

        if response.status_code != 200:
            logger.warning(
                f"Interceptor service {self.service_url} returned {response.status_code}"
            )
            raise InterceptorStatusError(response.status_code)

        try:
            data = response.json()
        except ValueError as e:
            raise InterceptorDecodeError(f"failed to decode response: {e}") from e

        return InterceptorReply.from_dict(data)


def _headers_to_dict(headers: http.Headers) -> dict[str, list[str]]:
    """All header names (case as first seen) mapped to all of their values."""
    return {name: headers.get_all(name) for name in headers}


def _strip_query(path: str | None) -> str | None:
    if not path:
        return None
    return path.split("?", 1)[0]

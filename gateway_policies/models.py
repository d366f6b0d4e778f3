"""
Core type definitions for gateway policies.

- Flow: which header set a policy targets
- InterceptorRequest / InterceptorReply: payloads exchanged with an
  external interceptor service
"""

from __future__ import annotations

from dataclasses import dataclass
from dataclasses import field
from enum import Enum
from typing import Any

from gateway_policies.exceptions import ConfigError
from gateway_policies.exceptions import InterceptorDecodeError


# =============================================================================
# Flow
# =============================================================================


class Flow(str, Enum):
    """Selects which header set within a PolicyContext a policy operates on."""

    REQUEST = "request"  # before the request reaches the backend
    RESPONSE = "response"  # before the response is returned to the client
    FAULT = "fault"  # when an error occurs; uses the generic header set
    UNSPECIFIED = ""  # generic header set

    @classmethod
    def parse(cls, value: Flow | str | None) -> Flow:
        """Convert a config value to a Flow, raising ConfigError if unknown."""
        if isinstance(value, cls):
            return value
        if value is None:
            return cls.UNSPECIFIED
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise ConfigError(f"unknown flow: {value!r}")

    @property
    def is_generic(self) -> bool:
        return self not in (Flow.REQUEST, Flow.RESPONSE)


# =============================================================================
# Interceptor payloads
# =============================================================================


@dataclass
class InterceptorRequest:
    """Snapshot of a message sent to the interceptor service."""

    headers: dict[str, list[str]] = field(default_factory=dict)
    body: str | None = None
    method: str | None = None
    path: str | None = None

    def to_dict(self) -> dict:
        result: dict[str, Any] = {"headers": self.headers}
        if self.body:
            result["body"] = self.body
        if self.method:
            result["method"] = self.method
        if self.path:
            result["path"] = self.path
        return result


@dataclass
class InterceptorReply:
    """
    Reply from the interceptor service.

    Only headers are applied to the target. Body and status are decoded
    and kept for callers but have no effect on the message.
    """

    headers: dict[str, list[str]] = field(default_factory=dict)
    body: str | None = None
    status: int | None = None

    @classmethod
    def from_dict(cls, data: Any) -> InterceptorReply:
        """
        Build a reply from decoded JSON.

        Raises:
            InterceptorDecodeError: If the payload does not have the reply shape
        """
        if not isinstance(data, dict):
            raise InterceptorDecodeError(
                f"expected a JSON object, got {type(data).__name__}"
            )

        raw_headers = data.get("headers")
        if raw_headers is None:
            raw_headers = {}
        if not isinstance(raw_headers, dict):
            raise InterceptorDecodeError("'headers' must be an object")

        headers: dict[str, list[str]] = {}
        for name, values in raw_headers.items():
            # null decodes to no values, which removes the header
            if values is None:
                values = []
            if not isinstance(values, list) or not all(
                isinstance(v, str) for v in values
            ):
                raise InterceptorDecodeError(
                    f"header {name!r} must map to a list of strings"
                )
            headers[name] = list(values)

        body = data.get("body")
        if body is not None and not isinstance(body, str):
            raise InterceptorDecodeError("'body' must be a string")

        status = data.get("status")
        # bool is an int subclass; reject it explicitly
        if status is not None and (
            not isinstance(status, int) or isinstance(status, bool)
        ):
            raise InterceptorDecodeError("'status' must be an integer")

        return cls(headers=headers, body=body or None, status=status or None)

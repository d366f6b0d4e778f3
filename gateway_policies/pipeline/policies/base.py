"""
The Policy contract every policy variant implements.
"""

from __future__ import annotations

from abc import ABC
from abc import abstractmethod
from typing import TYPE_CHECKING

from gateway_policies.exceptions import ConfigError
from gateway_policies.exceptions import MissingContextError
from gateway_policies.exceptions import MissingTargetError
from gateway_policies.models import Flow

if TYPE_CHECKING:
    from mitmproxy import http

    from gateway_policies.pipeline.context import PolicyContext


class Policy(ABC):
    """
    A named, validated, side-effecting transformation of a PolicyContext.

    Subclasses are frozen dataclasses: configuration is fixed at
    construction, so one instance can run against many contexts at once.
    """

    flow: Flow

    @property
    @abstractmethod
    def name(self) -> str:
        """Stable identifier used in logs and error messages."""

    @abstractmethod
    def validate(self) -> None:
        """
        Check the configuration without doing any I/O.

        Raises:
            ConfigError: If the configuration is invalid
        """

    @abstractmethod
    def execute(self, context: PolicyContext) -> None:
        """
        Apply the policy to `context`.

        Raises:
            ExecutionError: If the policy cannot be applied
        """

    def _validate_flow(self) -> None:
        if not isinstance(self.flow, Flow):
            raise ConfigError(f"flow must be a Flow, got {self.flow!r}")

    def resolve_target(self, context: PolicyContext | None):
        """
        Return the message this policy's flow targets.

        Returns None for generic flows, which have no owning message.
        """
        if context is None:
            raise MissingContextError()

        if self.flow == Flow.REQUEST:
            if context.request is None:
                raise MissingTargetError("request")
            return context.request
        if self.flow == Flow.RESPONSE:
            if context.response is None:
                raise MissingTargetError("response")
            return context.response
        return None

    def resolve_headers(self, context: PolicyContext | None) -> http.Headers:
        """Return the header store this policy's flow targets."""
        target = self.resolve_target(context)
        headers = context.headers if target is None else getattr(target, "headers", None)
        if headers is None:
            raise MissingTargetError("headers")
        return headers

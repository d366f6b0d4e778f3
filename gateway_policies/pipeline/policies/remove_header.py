"""
Remove header policy.

Deletes every value of a header. Removing a header that is not present
is not an error.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from gateway_policies.exceptions import ConfigError
from gateway_policies.models import Flow
from gateway_policies.pipeline.policies.base import Policy

if TYPE_CHECKING:
    from gateway_policies.pipeline.context import PolicyContext

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RemoveHeaderPolicy(Policy):
    header_name: str
    flow: Flow = Flow.UNSPECIFIED

    @property
    def name(self) -> str:
        return "RemoveHeader"

    def validate(self) -> None:
        if not self.header_name:
            raise ConfigError("header name cannot be empty")
        self._validate_flow()

    def execute(self, context: PolicyContext) -> None:
        headers = self.resolve_headers(context)
        if self.header_name in headers:
            del headers[self.header_name]
            logger.debug(f"Removed header {self.header_name}")

"""
Add header policy.

Sets a header on the request, response or generic header set, replacing any
existing values for that name.
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
class AddHeaderPolicy(Policy):
    header_name: str
    header_value: str
    flow: Flow = Flow.UNSPECIFIED

    @property
    def name(self) -> str:
        return "AddHeader"

    def validate(self) -> None:
        if not self.header_name:
            raise ConfigError("header name cannot be empty")
        if not self.header_value:
            raise ConfigError("header value cannot be empty")
        self._validate_flow()

    def execute(self, context: PolicyContext) -> None:
        headers = self.resolve_headers(context)
        headers[self.header_name] = self.header_value
        logger.debug(f"Set header {self.header_name} ({self.flow.value or 'generic'})")

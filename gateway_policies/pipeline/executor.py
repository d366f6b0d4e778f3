"""
Policy executor that runs a chain of policies against one context.

The Executor class:
1. Validates each policy when it is added; invalid policies are rejected
2. Executes policies strictly in insertion order
3. Passes the same PolicyContext through each policy
4. Stops at the first failure, leaving earlier effects in place
"""

from __future__ import annotations

import logging
from typing import Any
from typing import Iterable
from typing import Iterator
from typing import TYPE_CHECKING

from gateway_policies.exceptions import ConfigError
from gateway_policies.exceptions import MissingContextError
from gateway_policies.exceptions import MissingPolicyError
from gateway_policies.exceptions import PolicyExecutionError
from gateway_policies.exceptions import ValidationError
from gateway_policies.pipeline.context import PolicyContext

if TYPE_CHECKING:
    from gateway_policies.pipeline.policies.base import Policy

logger = logging.getLogger(__name__)


class Executor:
    """
    Ordered, validate-on-add chain runner for policies.

    Build the chain from a single owner, then share it: concurrent execute()
    calls are safe once no more policies are added, but add()/clear() while
    another thread executes needs external locking.
    """

    def __init__(self, policies: Iterable[Policy] | None = None):
        self._policies: list[Policy] = []
        for policy in policies or ():
            self.add(policy)

    def add(self, policy: Policy | None) -> None:
        """
        Validate a policy and append it to the chain.

        Raises:
            MissingPolicyError: If policy is None
            ValidationError: If the policy's configuration is invalid
        """
        if policy is None:
            raise MissingPolicyError()

        try:
            policy.validate()
        except ConfigError as e:
            logger.warning(f"Rejected policy {policy.name}: {e}")
            raise ValidationError(policy.name, e) from e

        self._policies.append(policy)
        logger.debug(f"Added policy {policy.name} at position {len(self._policies)}")

    def execute(self, context: PolicyContext | None) -> None:
        """
        Run every policy in order against the context.

        Raises:
            MissingContextError: If context is None
            PolicyExecutionError: If a policy fails; later policies are skipped
        """
        if context is None:
            raise MissingContextError()

        for policy in self._policies:
            try:
                policy.execute(context)
            except Exception as e:
                logger.warning(f"Policy chain stopped at {policy.name}: {e}")
                raise PolicyExecutionError(policy.name, e) from e

    def list(self) -> list[Policy]:
        """Return the registered policies in execution order."""
        return list(self._policies)

    def clear(self) -> None:
        """Remove all policies."""
        self._policies = []

    def __len__(self) -> int:
        return len(self._policies)

    def __iter__(self) -> Iterator[Policy]:
        return iter(list(self._policies))


def execute_policies(
    executor: Executor,
    request: Any,
    response: Any = None,
    metadata: dict[str, Any] | None = None,
) -> PolicyContext:
    """
    Middleware entry point: wrap a request/response pair and run the chain.

    Never writes to any transport; on failure the PolicyExecutionError is
    raised for the caller to turn into an error response.

    Returns:
        The PolicyContext the chain ran against
    """
    context = PolicyContext(
        request=request,
        response=response,
        metadata=dict(metadata) if metadata else {},
    )
    executor.execute(context)
    return context

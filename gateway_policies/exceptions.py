"""
Exception hierarchy for policy configuration and execution.

Every error raised by the policy core derives from PolicyError:

- ConfigError: invalid policy configuration (detected at add time / load time)
- ValidationError: ConfigError surfaced through Executor.add
- MissingPolicyError / MissingContextError: programmer misuse
- ExecutionError and subclasses: failures while a policy runs
- PolicyExecutionError: an ExecutionError surfaced through Executor.execute
"""

from __future__ import annotations


class PolicyError(Exception):
    """Base class for all gateway policy errors."""


class ConfigError(PolicyError):
    """Raised when a policy's configuration is structurally invalid."""


class ValidationError(PolicyError):
    """
    Raised by Executor.add when a policy fails validation.

    The originating ConfigError is available as __cause__.

    Attributes:
        policy_name: Name of the policy that was rejected.
    """

    def __init__(self, policy_name: str, cause: BaseException) -> None:
        self.policy_name = policy_name
        super().__init__(f"policy {policy_name} validation failed: {cause}")


class MissingPolicyError(PolicyError, TypeError):
    """Raised when None is passed where a policy is required."""

    def __init__(self) -> None:
        super().__init__("policy cannot be None")


class MissingContextError(PolicyError, TypeError):
    """Raised when None is passed where a policy context is required."""

    def __init__(self) -> None:
        super().__init__("policy context cannot be None")


class ExecutionError(PolicyError):
    """Base class for failures raised while a policy executes."""


class MissingTargetError(ExecutionError):
    """Raised when a policy's flow selects a header set the context does not carry."""

    def __init__(self, target: str) -> None:
        self.target = target
        super().__init__(f"no {target} available in context")


class BodyReadError(ExecutionError):
    """Raised when a message body stream cannot be drained."""


class InterceptorError(ExecutionError):
    """Base class for interceptor service failures."""


class InterceptorCallError(InterceptorError):
    """Raised on transport failures (connection errors, timeouts) calling the interceptor."""


class InterceptorStatusError(InterceptorError):
    """
    Raised when the interceptor service answers with a non-200 status.

    Attributes:
        status_code: HTTP status returned by the interceptor service.
    """

    def __init__(self, status_code: int) -> None:
        self.status_code = status_code
        super().__init__(f"interceptor service returned status {status_code}")


class InterceptorDecodeError(InterceptorError):
    """Raised when the interceptor reply is not a well-formed payload."""


class PolicyExecutionError(PolicyError):
    """
    Raised by Executor.execute when a policy in the chain fails.

    Policies that ran before the failing one are not rolled back. The
    underlying error is available as __cause__.

    Attributes:
        policy_name: Name of the policy that failed.
    """

    def __init__(self, policy_name: str, cause: BaseException) -> None:
        self.policy_name = policy_name
        super().__init__(f"policy {policy_name} execution failed: {cause}")

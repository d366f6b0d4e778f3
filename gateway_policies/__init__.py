"""
Ordered, validated header policies for an API gateway.

    from gateway_policies import Executor, PolicyContext, Flow
    from gateway_policies import AddHeaderPolicy, RemoveHeaderPolicy

    executor = Executor()
    executor.add(AddHeaderPolicy("X-Request-ID", "12345", Flow.REQUEST))
    executor.add(RemoveHeaderPolicy("X-Internal-Token", Flow.REQUEST))
    executor.execute(PolicyContext(request=flow.request))
"""

from gateway_policies.exceptions import ConfigError
from gateway_policies.exceptions import ExecutionError
from gateway_policies.exceptions import PolicyError
from gateway_policies.exceptions import PolicyExecutionError
from gateway_policies.exceptions import ValidationError
from gateway_policies.models import Flow
from gateway_policies.pipeline import Executor
from gateway_policies.pipeline import PolicyContext
from gateway_policies.pipeline import execute_policies
from gateway_policies.pipeline.policies import AddHeaderPolicy
from gateway_policies.pipeline.policies import InterceptorPolicy
from gateway_policies.pipeline.policies import Policy
from gateway_policies.pipeline.policies import RemoveHeaderPolicy

__all__ = [
    "AddHeaderPolicy",
    "ConfigError",
    "ExecutionError",
    "Executor",
    "Flow",
    "InterceptorPolicy",
    "Policy",
    "PolicyContext",
    "PolicyError",
    "PolicyExecutionError",
    "RemoveHeaderPolicy",
    "ValidationError",
    "execute_policies",
]

"""
Pipeline package for ordered header policy execution.

- context: PolicyContext shared by every policy in a chain
- executor: Executor that validates and runs policies in order
- policies: add_header, remove_header, interceptor
"""

from gateway_policies.pipeline.context import PolicyContext
from gateway_policies.pipeline.executor import Executor
from gateway_policies.pipeline.executor import execute_policies

__all__ = ["Executor", "PolicyContext", "execute_policies"]

"""
Policy variants.

Each policy validates its configuration up front and, when executed,
mutates the header set its flow selects in a PolicyContext.
"""

from gateway_policies.pipeline.policies.add_header import AddHeaderPolicy
from gateway_policies.pipeline.policies.base import Policy
from gateway_policies.pipeline.policies.interceptor import InterceptorPolicy
from gateway_policies.pipeline.policies.remove_header import RemoveHeaderPolicy

__all__ = [
    "Policy",
    "AddHeaderPolicy",
    "RemoveHeaderPolicy",
    "InterceptorPolicy",
]

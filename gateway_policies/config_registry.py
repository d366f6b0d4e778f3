"""
Config registry for building policy chains from config documents.

Loads a policy config (dict or JSON file), validates it against the policy
config schema, builds Policy instances through POLICY_TYPES and hands out
per-flow Executors.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any
from typing import Callable

from gateway_policies.exceptions import ConfigError
from gateway_policies.models import Flow
from gateway_policies.pipeline.executor import Executor
from gateway_policies.pipeline.policies import AddHeaderPolicy
from gateway_policies.pipeline.policies import InterceptorPolicy
from gateway_policies.pipeline.policies import Policy
from gateway_policies.pipeline.policies import RemoveHeaderPolicy
from gateway_policies.schema_validator import validate_policy_config

logger = logging.getLogger(__name__)


def _build_add_header(entry: dict) -> Policy:
    return AddHeaderPolicy(
        header_name=entry.get("header_name", ""),
        header_value=entry.get("header_value", ""),
        flow=Flow.parse(entry.get("flow")),
    )


def _build_remove_header(entry: dict) -> Policy:
    return RemoveHeaderPolicy(
        header_name=entry.get("header_name", ""),
        flow=Flow.parse(entry.get("flow")),
    )


def _build_interceptor(entry: dict) -> Policy:
    kwargs: dict[str, Any] = {
        "service_url": entry.get("service_url", ""),
        "flow": Flow.parse(entry.get("flow")),
    }
    if "timeout" in entry:
        kwargs["timeout"] = float(entry["timeout"])
    return InterceptorPolicy(**kwargs)


# Policy registry: config "type" -> builder
POLICY_TYPES: dict[str, Callable[[dict], Policy]] = {
    "add_header": _build_add_header,
    "remove_header": _build_remove_header,
    "interceptor": _build_interceptor,
}


def build_policy(entry: dict) -> Policy:
    """
    Build a single policy from its config dict.

    Raises:
        ConfigError: If the type is unknown or the flow is invalid
    """
    policy_type = entry.get("type")
    builder = POLICY_TYPES.get(policy_type) if isinstance(policy_type, str) else None
    if builder is None:
        raise ConfigError(f"unknown policy type: {policy_type!r}")
    return builder(entry)


class PolicyRegistry:
    """
    Registry of configured policies.

    Policies keep the order they have in the config document; that order is
    the execution order of every Executor built from the registry.
    """

    def __init__(self):
        self._policies: list[Policy] = []
        self.source: str | None = None

    @property
    def policies(self) -> list[Policy]:
        return list(self._policies)

    def load_from_dict(self, document: dict, source: str = "") -> None:
        """
        Load policies from a decoded config document.

        Args:
            document: Parsed config with a 'policies' list
            source: Optional name for error messages (e.g., the file name)

        Raises:
            ConfigError: If the document fails schema validation or names
                an unknown policy type
        """
        validate_policy_config(document, source)

        policies = [build_policy(entry) for entry in document.get("policies", [])]
        # Validate all before replacing the current policies
        for policy in policies:
            policy.validate()

        self._policies = policies
        self.source = source or None
        logger.info(f"Loaded {len(policies)} policies from {source or 'config'}")

    def load_from_file(self, path: Path | str) -> None:
        """
        Load policies from a JSON config file.

        Raises:
            ConfigError: If the file cannot be read or parsed, or is invalid
        """
        path = Path(path).expanduser()
        try:
            with open(path) as f:
                document = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            raise ConfigError(f"Failed to load policy config {path}: {e}") from e

        self.load_from_dict(document, path.name)

    def policies_for(self, flow: Flow) -> list[Policy]:
        return [p for p in self._policies if p.flow == flow]

    def executor_for(self, flow: Flow) -> Executor:
        """Build an Executor holding this registry's policies for one flow."""
        return Executor(self.policies_for(flow))

    def clear(self) -> None:
        self._policies = []
        self.source = None

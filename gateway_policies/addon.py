"""
Gateway policies addon for mitmproxy.

Runs the configured header policy chains on proxied traffic:
request-flow policies in the request hook, response-flow policies in the
response hook. A failing chain turns the flow's response into a 500.
"""

from __future__ import annotations

import asyncio
import logging
import sys

from mitmproxy import ctx
from mitmproxy import exceptions
from mitmproxy import http

from gateway_policies.config import config
from gateway_policies.config_registry import PolicyRegistry
from gateway_policies.exceptions import ConfigError
from gateway_policies.exceptions import PolicyError
from gateway_policies.models import Flow
from gateway_policies.pipeline.context import PolicyContext
from gateway_policies.pipeline.executor import Executor

# Configure logging to output to stderr
logging.basicConfig(
    level=logging.INFO,
    format="[%(levelname)s] %(name)s: %(message)s",
    stream=sys.stderr,
)

logger = logging.getLogger(__name__)

# Metadata key for recording chain failures on flows
POLICY_ERROR_KEY = "gateway_policies_error"

FAILURE_STATUS = 500
FAILURE_BODY = b"Policy execution failed"


def _failure_response() -> http.Response:
    return http.Response.make(
        FAILURE_STATUS,
        FAILURE_BODY,
        {"Content-Type": "text/plain"},
    )


class GatewayPoliciesAddon:
    """
    Mitmproxy addon that applies header policies to proxied flows.

    Usage:
        mitmdump -s path/to/gateway_policies/addon.py \\
            --set gateway_policies_enabled=true \\
            --set gateway_policies_file=policies.json

    Or load programmatically:
        from gateway_policies.addon import GatewayPoliciesAddon
        addons = [GatewayPoliciesAddon()]
    """

    def __init__(self):
        self._request_executor = Executor()
        self._response_executor = Executor()
        self._enabled: bool = False

    def load(self, loader) -> None:
        """Register addon options."""
        loader.add_option(
            name="gateway_policies_enabled",
            typespec=bool,
            default=False,
            help="Apply gateway header policies to proxied traffic",
        )
        loader.add_option(
            name="gateway_policies_file",
            typespec=str,
            default=config.POLICIES_FILE,
            help="JSON file declaring the policy chain",
        )
        loader.add_option(
            name="gateway_policies_verbose",
            typespec=bool,
            default=config.VERBOSE,
            help="Enable debug logging for policy execution",
        )

    def configure(self, updated: set[str]) -> None:
        """Handle configuration changes."""
        if "gateway_policies_verbose" in updated:
            level = logging.DEBUG if ctx.options.gateway_policies_verbose else logging.INFO
            logging.getLogger("gateway_policies").setLevel(level)

        relevant_options = {"gateway_policies_enabled", "gateway_policies_file"}
        if not relevant_options.intersection(updated):
            return

        if not ctx.options.gateway_policies_enabled:
            if self._enabled:
                logger.info("Gateway policies disabled")
            self._cleanup()
            return

        policies_file = ctx.options.gateway_policies_file
        if not policies_file:
            raise exceptions.OptionsError(
                "gateway_policies_file must be set when gateway_policies_enabled is true"
            )

        registry = PolicyRegistry()
        try:
            registry.load_from_file(policies_file)
            self._check_flows(registry)
        except ConfigError as e:
            raise exceptions.OptionsError(f"Invalid policy config: {e}") from e

        # Clear and rebuild, the only reconfiguration the executors support
        self._request_executor.clear()
        self._response_executor.clear()
        for policy in registry.policies_for(Flow.REQUEST):
            self._request_executor.add(policy)
        for policy in registry.policies_for(Flow.RESPONSE):
            self._response_executor.add(policy)

        self._enabled = True
        logger.info(
            f"Gateway policies ready: {len(self._request_executor)} request, "
            f"{len(self._response_executor)} response"
        )

    @staticmethod
    def _check_flows(registry: PolicyRegistry) -> None:
        """Proxied flows carry no generic header set, so every policy needs a flow."""
        generic = [p.name for p in registry.policies if p.flow.is_generic]
        if generic:
            raise ConfigError(
                f"policies without a request/response flow are not supported by the proxy: {generic}"
            )

    async def request(self, flow: http.HTTPFlow) -> None:
        """Run request-flow policies before the request is forwarded."""
        if not self._enabled or not len(self._request_executor):
            return
        # Already answered (e.g. by another addon); nothing will be forwarded
        if flow.response is not None:
            return

        await self._run(self._request_executor, flow)

    async def response(self, flow: http.HTTPFlow) -> None:
        """Run response-flow policies before the response reaches the client."""
        if not self._enabled or not len(self._response_executor):
            return
        if flow.response is None or flow.metadata.get(POLICY_ERROR_KEY):
            return

        await self._run(self._response_executor, flow)

    async def _run(self, executor: Executor, flow: http.HTTPFlow) -> None:
        context = PolicyContext.from_flow(flow)
        try:
            # Interceptor calls block, keep them off the event loop
            await asyncio.to_thread(executor.execute, context)
        except PolicyError as e:
            logger.error(f"Policy chain failed for {flow.request.pretty_url}: {e}")
            flow.metadata[POLICY_ERROR_KEY] = str(e)
            flow.response = _failure_response()

    def done(self) -> None:
        """Clean up on shutdown."""
        self._cleanup()

    def _cleanup(self) -> None:
        self._request_executor.clear()
        self._response_executor.clear()
        self._enabled = False


# For use with `mitmdump -s .../gateway_policies/addon.py`
addons = [GatewayPoliciesAddon()]

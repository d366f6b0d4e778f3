from __future__ import annotations

import dataclasses

import pytest
from mitmproxy import http

from gateway_policies.exceptions import ConfigError
from gateway_policies.exceptions import MissingContextError
from gateway_policies.exceptions import MissingTargetError
from gateway_policies.models import Flow
from gateway_policies.pipeline.context import PolicyContext
from gateway_policies.pipeline.policies import AddHeaderPolicy
from gateway_policies.pipeline.policies import RemoveHeaderPolicy


class TestAddHeaderPolicy:
    def test_name(self):
        assert AddHeaderPolicy("X-Custom-Header", "v", Flow.REQUEST).name == "AddHeader"

    @pytest.mark.parametrize(
        "header_name, header_value, valid",
        [
            ("X-Custom-Header", "test-value", True),
            ("", "test-value", False),
            ("X-Custom-Header", "", False),
        ],
    )
    def test_validate(self, header_name, header_value, valid):
        policy = AddHeaderPolicy(header_name, header_value, Flow.REQUEST)
        if valid:
            policy.validate()
        else:
            with pytest.raises(ConfigError, match="cannot be empty"):
                policy.validate()

    def test_validate_rejects_raw_flow_string(self):
        with pytest.raises(ConfigError, match="flow"):
            AddHeaderPolicy("X-A", "1", "request").validate()

    def test_is_immutable(self):
        policy = AddHeaderPolicy("X-A", "1", Flow.REQUEST)
        with pytest.raises(dataclasses.FrozenInstanceError):
            policy.header_value = "2"

    def test_execute_request(self, request_msg):
        policy = AddHeaderPolicy("X-Custom-Header", "test-value", Flow.REQUEST)
        policy.execute(PolicyContext(request=request_msg))
        assert request_msg.headers["X-Custom-Header"] == "test-value"

    def test_execute_response(self, response_msg):
        policy = AddHeaderPolicy("X-Custom-Header", "test-value", Flow.RESPONSE)
        policy.execute(PolicyContext(response=response_msg))
        assert response_msg.headers["X-Custom-Header"] == "test-value"

    def test_execute_generic_headers(self):
        headers = http.Headers()
        policy = AddHeaderPolicy("X-Custom-Header", "test-value")
        policy.execute(PolicyContext(headers=headers))
        assert headers["X-Custom-Header"] == "test-value"

    def test_fault_flow_uses_generic_headers(self, request_msg):
        headers = http.Headers()
        policy = AddHeaderPolicy("X-Fault", "1", Flow.FAULT)
        policy.execute(PolicyContext(request=request_msg, headers=headers))
        assert headers["X-Fault"] == "1"
        assert "X-Fault" not in request_msg.headers

    def test_replaces_existing_values(self, request_msg):
        request_msg.headers.add("X-Custom-Header", "old-1")
        request_msg.headers.add("X-Custom-Header", "old-2")
        policy = AddHeaderPolicy("X-Custom-Header", "new", Flow.REQUEST)

        context = PolicyContext(request=request_msg)
        policy.execute(context)
        policy.execute(context)

        assert request_msg.headers.get_all("X-Custom-Header") == ["new"]

    def test_missing_response(self, request_msg):
        policy = AddHeaderPolicy("X-A", "1", Flow.RESPONSE)
        with pytest.raises(MissingTargetError, match="response"):
            policy.execute(PolicyContext(request=request_msg))

    def test_missing_generic_headers(self, request_msg):
        policy = AddHeaderPolicy("X-A", "1")
        with pytest.raises(MissingTargetError, match="headers"):
            policy.execute(PolicyContext(request=request_msg))

    def test_execute_none_context(self):
        policy = AddHeaderPolicy("X-A", "1", Flow.REQUEST)
        with pytest.raises(MissingContextError, match="context cannot be None"):
            policy.execute(None)


class TestRemoveHeaderPolicy:
    def test_name(self):
        assert RemoveHeaderPolicy("X-Remove-Me", Flow.REQUEST).name == "RemoveHeader"

    def test_validate(self):
        RemoveHeaderPolicy("X-Remove-Me", Flow.REQUEST).validate()
        with pytest.raises(ConfigError, match="header name cannot be empty"):
            RemoveHeaderPolicy("", Flow.REQUEST).validate()

    def test_execute_request(self, request_msg):
        request_msg.headers["X-Remove-Me"] = "should-be-removed"
        request_msg.headers["X-Keep-Me"] = "should-stay"

        RemoveHeaderPolicy("X-Remove-Me", Flow.REQUEST).execute(
            PolicyContext(request=request_msg)
        )

        assert "X-Remove-Me" not in request_msg.headers
        assert request_msg.headers["X-Keep-Me"] == "should-stay"

    def test_execute_response_removes_all_values(self, response_msg):
        response_msg.headers.add("Set-Cookie", "a=1")
        response_msg.headers.add("Set-Cookie", "b=2")

        RemoveHeaderPolicy("set-cookie", Flow.RESPONSE).execute(
            PolicyContext(response=response_msg)
        )

        assert response_msg.headers.get_all("Set-Cookie") == []
        assert response_msg.headers["X-Backend"] == "svc-1"

    def test_absent_header_is_noop(self, request_msg):
        before = list(request_msg.headers.fields)
        RemoveHeaderPolicy("X-Not-There", Flow.REQUEST).execute(
            PolicyContext(request=request_msg)
        )
        assert list(request_msg.headers.fields) == before

    def test_missing_request(self, response_msg):
        with pytest.raises(MissingTargetError, match="request"):
            RemoveHeaderPolicy("X-A", Flow.REQUEST).execute(
                PolicyContext(response=response_msg)
            )

    def test_execute_none_context(self):
        with pytest.raises(MissingContextError):
            RemoveHeaderPolicy("X-A", Flow.REQUEST).execute(None)

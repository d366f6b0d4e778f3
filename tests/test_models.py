from __future__ import annotations

import pytest

from gateway_policies.exceptions import ConfigError
from gateway_policies.exceptions import InterceptorDecodeError
from gateway_policies.models import Flow
from gateway_policies.models import InterceptorReply
from gateway_policies.models import InterceptorRequest


class TestFlow:
    @pytest.mark.parametrize(
        "value, expected",
        [
            ("request", Flow.REQUEST),
            ("Response", Flow.RESPONSE),
            (" fault ", Flow.FAULT),
            ("", Flow.UNSPECIFIED),
            (None, Flow.UNSPECIFIED),
            (Flow.RESPONSE, Flow.RESPONSE),
        ],
    )
    def test_parse(self, value, expected):
        assert Flow.parse(value) is expected

    @pytest.mark.parametrize("value", ["upstream", 1, ["request"]])
    def test_parse_rejects_unknown(self, value):
        with pytest.raises(ConfigError, match="unknown flow"):
            Flow.parse(value)

    def test_generic_flows(self):
        assert not Flow.REQUEST.is_generic
        assert not Flow.RESPONSE.is_generic
        assert Flow.FAULT.is_generic
        assert Flow.UNSPECIFIED.is_generic


class TestInterceptorRequest:
    def test_omits_empty_optional_fields(self):
        snapshot = InterceptorRequest(headers={"X-A": ["1"]})
        assert snapshot.to_dict() == {"headers": {"X-A": ["1"]}}

    def test_includes_request_fields(self):
        snapshot = InterceptorRequest(
            headers={}, body="hello", method="POST", path="/api"
        )
        assert snapshot.to_dict() == {
            "headers": {},
            "body": "hello",
            "method": "POST",
            "path": "/api",
        }


class TestInterceptorReply:
    def test_from_dict(self):
        reply = InterceptorReply.from_dict(
            {"headers": {"X-A": ["1", "2"]}, "body": "rewritten", "status": 201}
        )
        assert reply.headers == {"X-A": ["1", "2"]}
        assert reply.body == "rewritten"
        assert reply.status == 201

    def test_missing_headers_is_empty_overlay(self):
        reply = InterceptorReply.from_dict({})
        assert reply.headers == {}
        assert reply.body is None
        assert reply.status is None

    def test_null_headers_is_empty_overlay(self):
        assert InterceptorReply.from_dict({"headers": None}).headers == {}

    def test_null_header_values_mean_remove(self):
        reply = InterceptorReply.from_dict({"headers": {"X-A": None, "X-B": ["2"]}})
        assert reply.headers == {"X-A": [], "X-B": ["2"]}

    @pytest.mark.parametrize(
        "payload",
        [
            [],
            "headers",
            {"headers": []},
            {"headers": ""},
            {"headers": 0},
            {"headers": False},
            {"headers": ["X-A"]},
            {"headers": {"X-A": "1"}},
            {"headers": {"X-A": [1]}},
            {"headers": {}, "body": 42},
            {"headers": {}, "status": "200"},
            {"headers": {}, "status": True},
        ],
    )
    def test_rejects_malformed(self, payload):
        with pytest.raises(InterceptorDecodeError):
            InterceptorReply.from_dict(payload)

#!/usr/bin/env python3
"""
Basic usage of gateway policies outside of a running proxy.

Builds mitmproxy request/response objects directly and applies:
1. A single add header policy
2. A single remove header policy
3. A chain of policies through an Executor
4. The middleware entry point, turning a failure into a 500
"""

from __future__ import annotations

from mitmproxy import http

from gateway_policies import AddHeaderPolicy
from gateway_policies import Executor
from gateway_policies import Flow
from gateway_policies import PolicyContext
from gateway_policies import PolicyExecutionError
from gateway_policies import RemoveHeaderPolicy
from gateway_policies import execute_policies


def _show(label: str, headers: http.Headers) -> None:
    print(f"{label}: {dict(headers)}")


def add_header_example() -> None:
    policy = AddHeaderPolicy("X-API-Version", "v1.0", Flow.REQUEST)

    request = http.Request.make("GET", "http://api.example.com/users")
    _show("Before", request.headers)

    policy.execute(PolicyContext(request=request))

    _show("After", request.headers)
    print(f"X-API-Version = {request.headers['X-API-Version']}")


def remove_header_example() -> None:
    policy = RemoveHeaderPolicy("Authorization", Flow.REQUEST)

    request = http.Request.make(
        "GET",
        "http://api.example.com/users",
        headers={"Authorization": "Bearer secret-token", "Content-Type": "application/json"},
    )
    _show("Before", request.headers)

    policy.execute(PolicyContext(request=request))

    _show("After", request.headers)
    print(f"Authorization header removed: {'Authorization' not in request.headers}")


def chaining_example() -> None:
    executor = Executor()
    executor.add(AddHeaderPolicy("X-Request-ID", "12345-67890", Flow.REQUEST))
    executor.add(AddHeaderPolicy("X-Gateway", "api-platform", Flow.REQUEST))
    executor.add(RemoveHeaderPolicy("X-Internal-Token", Flow.REQUEST))

    request = http.Request.make(
        "GET",
        "http://api.example.com/users",
        headers={"X-Internal-Token": "internal-secret", "User-Agent": "TestClient/1.0"},
    )
    _show("Before", request.headers)

    executor.execute(PolicyContext(request=request))

    _show("After", request.headers)
    print("Policies applied:")
    for policy in executor.list():
        print(f"  - {policy.name}")


def middleware_example() -> None:
    executor = Executor()
    executor.add(AddHeaderPolicy("X-Gateway", "api-platform", Flow.REQUEST))
    # No response exists yet while the request is handled, so this one fails
    executor.add(AddHeaderPolicy("X-Served-By", "gateway", Flow.RESPONSE))

    request = http.Request.make("GET", "http://api.example.com/test")
    try:
        execute_policies(executor, request)
        response = http.Response.make(200, b"Success")
    except PolicyExecutionError as e:
        print(f"Policy chain failed at {e.policy_name}: {e.__cause__}")
        response = http.Response.make(500, b"Policy execution failed")

    _show("Request seen by handler", request.headers)
    print(f"Response status: {response.status_code}")


def main() -> None:
    print("Gateway Policies - Basic Usage Example")
    print("======================================\n")

    examples = [
        ("Add Header Policy", add_header_example),
        ("Remove Header Policy", remove_header_example),
        ("Chaining Multiple Policies", chaining_example),
        ("Middleware Integration", middleware_example),
    ]
    for i, (title, example) in enumerate(examples, 1):
        print(f"Example {i}: {title}")
        example()
        print()


if __name__ == "__main__":
    main()

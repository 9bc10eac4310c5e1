"""Integration tests for the AI collaborator HTTP client"""

import json
import httpx
import pytest
from dhanrakshak.domain.exceptions import AICollaboratorError
from dhanrakshak.infrastructure.clients.ai import AiCollaboratorClient


def _completion(content: str) -> dict:
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


def _client(handler) -> AiCollaboratorClient:
    return AiCollaboratorClient(
        base_url="https://ai.test/v1/",
        api_key="test-key",
        model="test-model",
        timeout=2.0,
        transport=httpx.MockTransport(handler),
    )


async def test_parse_sms_sends_prompt_and_returns_content():
    """Test request shape and content extraction"""
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["auth"] = request.headers["Authorization"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json=_completion('  {"transactionType": "DEBIT", "amount": 500}  '))

    text = await _client(handler).parse_sms("Rs.500 debited from a/c XX1234")

    assert text == '{"transactionType": "DEBIT", "amount": 500}'
    assert seen["url"] == "https://ai.test/v1/chat/completions"
    assert seen["auth"] == "Bearer test-key"
    assert seen["body"]["model"] == "test-model"
    assert seen["body"]["temperature"] == 0.0
    assert "SMS: Rs.500 debited from a/c XX1234" in seen["body"]["messages"][0]["content"]


async def test_generate_insights_uses_summary():
    """Test narrative prompt carries the portfolio summary"""
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json=_completion("Diversify into gold."))

    text = await _client(handler).generate_insights("Net worth: ₹10.00 L")

    assert text == "Diversify into gold."
    assert "Net worth: ₹10.00 L" in seen["body"]["messages"][0]["content"]
    assert seen["body"]["max_tokens"] == 800


async def test_http_error_is_collaborator_error():
    """Test non-2xx responses"""
    client = _client(lambda request: httpx.Response(503, json={"error": "overloaded"}))

    with pytest.raises(AICollaboratorError, match="503"):
        await client.parse_sms("Rs.500 debited")


async def test_timeout_is_collaborator_error():
    """Test transport timeouts"""

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(AICollaboratorError, match="timeout"):
        await _client(handler).parse_sms("Rs.500 debited")


async def test_connection_error_is_collaborator_error():
    """Test unreachable collaborator"""

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(AICollaboratorError, match="unreachable"):
        await _client(handler).parse_sms("Rs.500 debited")


async def test_unexpected_envelope_is_collaborator_error():
    """Test a 200 response without choices"""
    client = _client(lambda request: httpx.Response(200, json={"id": "cmpl-1"}))

    with pytest.raises(AICollaboratorError, match="envelope"):
        await client.parse_sms("Rs.500 debited")

"""AI collaborator HTTP client (OpenAI-compatible chat completions)"""

import httpx

from dhanrakshak.config import settings
from dhanrakshak.domain.exceptions import AICollaboratorError

SMS_PARSING_PROMPT = """You are a financial transaction parser for Indian bank SMS messages.
Parse the following SMS and extract transaction details as JSON.

SMS: {sms}

Extract these fields (use null if not found):
- transactionType: "CREDIT" or "DEBIT"
- amount: number (in INR)
- balance: number (remaining balance if mentioned)
- merchant: string (payee/payer name)
- accountLastFour: string (last 4 digits of account)
- referenceNumber: string (UPI ref, transaction ID)
- transactionMode: "UPI", "NEFT", "IMPS", "ATM", "POS", "CARD", or "OTHER"

Respond ONLY with valid JSON, no explanation.
Example: {{"transactionType":"DEBIT","amount":500.00,"balance":12500.50,"merchant":"Swiggy","accountLastFour":"1234","referenceNumber":"123456789012","transactionMode":"UPI"}}
"""

PORTFOLIO_INSIGHTS_PROMPT = """You are a personal finance advisor for India.
Analyze this portfolio and provide 3-4 actionable insights:

{summary}

Consider:
- Asset allocation (equity/debt/gold ratio)
- Risk level for the investor
- Tax-saving opportunities (80C, ELSS, NPS)
- Emergency fund adequacy

Keep response concise, practical, and specific to Indian context.
"""


class AiCollaboratorClient:
    """Client for the external model that parses SMS and writes portfolio narratives"""

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        model: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = (base_url or settings.ai_api_base).rstrip("/")
        self.api_key = api_key or settings.ai_api_key
        self.model = model or settings.ai_model
        self.timeout = timeout or settings.ai_timeout_seconds
        self.transport = transport

    async def complete(self, prompt: str, temperature: float = 0.0, max_tokens: int = 400) -> str:
        """
        Send a single-turn prompt and return the model's text.

        Raises:
            AICollaboratorError: On timeout, HTTP errors, or an unexpected response envelope
        """
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                response = await client.post(
                    f"{self.base_url}/chat/completions",
                    headers={
                        "Authorization": f"Bearer {self.api_key}",
                        "Content-Type": "application/json",
                    },
                    json={
                        "model": self.model,
                        "messages": [{"role": "user", "content": prompt}],
                        "temperature": temperature,
                        "max_tokens": max_tokens,
                    },
                )
                response.raise_for_status()
                data = response.json()
                return data["choices"][0]["message"]["content"].strip()

            except httpx.TimeoutException as e:
                raise AICollaboratorError(f"AI collaborator timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                raise AICollaboratorError(f"AI collaborator error: {e.response.status_code}") from e
            except httpx.RequestError as e:
                raise AICollaboratorError(f"AI collaborator unreachable: {e}") from e
            except (KeyError, IndexError, TypeError, ValueError, AttributeError) as e:
                raise AICollaboratorError(f"Invalid response envelope from AI collaborator: {e}") from e

    async def parse_sms(self, sms_body: str) -> str:
        """Ask the model for transaction fields; returns its raw (possibly fenced) JSON text"""
        return await self.complete(SMS_PARSING_PROMPT.format(sms=sms_body))

    async def generate_insights(self, portfolio_summary: str) -> str:
        return await self.complete(
            PORTFOLIO_INSIGHTS_PROMPT.format(summary=portfolio_summary),
            temperature=0.7,
            max_tokens=800,
        )

"""Decoding and validation of transaction fields returned by the AI collaborator"""

import math
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from dhanrakshak.domain.extraction import TransactionTextExtractor
from dhanrakshak.domain.models import (
    AI_CONFIDENCE,
    DEFAULT_MERCHANT,
    ParsedTransaction,
    ParseFailure,
    ParseMethod,
    ParseResult,
    TransactionMode,
    TransactionType,
)


class AiTransactionPayload(BaseModel):
    """JSON object the model is prompted to return; every field may be null"""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    transaction_type: Optional[str] = Field(None, alias="transactionType")
    # Strict: JSON true must not become 1.0; NaN and overflowed literals are rejected
    amount: Optional[float] = Field(None, strict=True, allow_inf_nan=False)
    balance: Optional[float] = Field(None, strict=True, allow_inf_nan=False)
    merchant: Optional[str] = None
    account_last_four: Optional[str] = Field(None, alias="accountLastFour")
    reference_number: Optional[str] = Field(None, alias="referenceNumber")
    transaction_mode: Optional[str] = Field(None, alias="transactionMode")

    @field_validator("account_last_four", "reference_number", mode="before")
    @classmethod
    def _numbers_as_text(cls, value: Any) -> Any:
        # Models sometimes emit 1234 instead of "1234"
        if isinstance(value, bool):
            return value
        if isinstance(value, int) or (isinstance(value, float) and math.isfinite(value)):
            return str(int(value))
        return value


def strip_code_fences(text: str) -> str:
    """Remove a leading ```json / ``` fence and a trailing ``` fence"""
    cleaned = text.strip()
    if cleaned[: len("```json")].lower() == "```json":
        cleaned = cleaned[len("```json"):]
    if cleaned.startswith("```"):
        cleaned = cleaned[len("```"):]
    if cleaned.endswith("```"):
        cleaned = cleaned[: -len("```")]
    return cleaned.strip()


def _to_transaction_type(value: str) -> TransactionType:
    try:
        return TransactionType(value.strip().upper())
    except ValueError:
        return TransactionType.UNKNOWN


def _to_mode(value: Optional[str]) -> TransactionMode:
    if not value:
        return TransactionMode.OTHER
    try:
        return TransactionMode(value.strip().upper())
    except ValueError:
        return TransactionMode.OTHER


def parse_ai_response(
    response_text: str,
    raw_sms: str,
    extractor: TransactionTextExtractor,
    sender_id: str | None = None,
    received_at: datetime | None = None,
) -> ParseResult:
    """
    Turn AI collaborator output into a ParseResult.

    Same success rule as the regex path: a transaction type must be present and the
    amount must be positive. Bank and spam flag come from the shared pattern library
    since the model is not asked for them.
    """
    try:
        payload = AiTransactionPayload.model_validate_json(strip_code_fences(response_text))
    except ValidationError as e:
        if any(error["type"] == "json_invalid" for error in e.errors()):
            return ParseResult.failed(ParseFailure.AI_MALFORMED_RESPONSE)
        return ParseResult.failed(ParseFailure.AI_VALIDATION_FAILED)

    if not payload.transaction_type or payload.amount is None or payload.amount <= 0:
        return ParseResult.failed(ParseFailure.AI_VALIDATION_FAILED)

    account_last4 = payload.account_last_four[-4:] if payload.account_last_four else None

    transaction = ParsedTransaction(
        amount=payload.amount,
        type=_to_transaction_type(payload.transaction_type),
        raw_text=raw_sms,
        merchant=payload.merchant or DEFAULT_MERCHANT,
        balance_after=payload.balance,
        account_last4=account_last4,
        reference_id=payload.reference_number,
        bank=extractor.identify_bank(raw_sms, sender_id),
        is_spam=extractor.is_spam(raw_sms),
        confidence=AI_CONFIDENCE,
        parse_method=ParseMethod.AI,
        transaction_mode=_to_mode(payload.transaction_mode),
        timestamp=received_at,
    )
    return ParseResult.success(transaction)

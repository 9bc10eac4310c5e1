"""POST /v1/sms/parse and /v1/sms/parse/batch - bank SMS extraction endpoints"""

import asyncio
import logging
import time
from datetime import datetime, timezone
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from starlette.concurrency import run_in_threadpool

from dhanrakshak.api.dependencies import get_ai_client, get_extractor, get_request_id
from dhanrakshak.api.v1.schemas import (
    BatchParseItemResult,
    BatchParseRequest,
    BatchParseResponse,
    ParsedTransactionSchema,
    SmsParseRequest,
    SmsParseResponse,
)
from dhanrakshak.config import settings
from dhanrakshak.domain.exceptions import AICollaboratorError
from dhanrakshak.domain.extraction import TransactionTextExtractor, parse_batch
from dhanrakshak.domain.models import ParsedTransaction, SmsMessage
from dhanrakshak.domain.resolution import Resolution, resolve_transaction
from dhanrakshak.infrastructure.clients.ai import AiCollaboratorClient
from dhanrakshak.infrastructure.observability.logging import log_parse_outcome
from dhanrakshak.infrastructure.observability.metrics import ai_fallback_counter, record_parse

router = APIRouter()

AI_UNAVAILABLE = "UNAVAILABLE"


def to_transaction_schema(transaction: ParsedTransaction) -> ParsedTransactionSchema:
    return ParsedTransactionSchema(
        amount=transaction.amount,
        type=transaction.type.value,
        merchant=transaction.merchant,
        balance_after=transaction.balance_after,
        account_last4=transaction.account_last4,
        reference_id=transaction.reference_id,
        bank=transaction.bank.value,
        is_spam=transaction.is_spam,
        confidence=transaction.confidence,
        parse_method=transaction.parse_method.value,
        transaction_mode=transaction.transaction_mode.value,
        raw_text=transaction.raw_text,
        timestamp=transaction.timestamp,
    )


async def fetch_ai_response(client: AiCollaboratorClient, raw_sms: str, request_id: str) -> Optional[str]:
    """AI text for one SMS, or None when the collaborator fails (the regex path takes over)"""
    try:
        return await client.parse_sms(raw_sms)
    except AICollaboratorError as e:
        ai_fallback_counter.labels(reason=AI_UNAVAILABLE).inc()
        logging.warning(f"AI collaborator unavailable, using regex: {e}", extra={"request_id": request_id})
        return None


def _fallback_reason(resolution: Resolution, ai_attempted: bool, ai_text: Optional[str]) -> Optional[str]:
    if resolution.ai_failure is not None:
        return resolution.ai_failure.value
    if ai_attempted and ai_text is None:
        return AI_UNAVAILABLE
    return None


@router.post("/sms/parse", response_model=SmsParseResponse)
async def parse_sms(
    payload: SmsParseRequest,
    request: Request,
    extractor: TransactionTextExtractor = Depends(get_extractor),
    ai_client: Optional[AiCollaboratorClient] = Depends(get_ai_client),
):
    """
    Extract a transaction from one bank SMS.

    Flow:
    1. Ask the AI collaborator (if enabled and requested)
    2. Accept its result if it validates, otherwise parse with the regex extractor
    3. Return the transaction, or 422 when the message is not a parseable transaction
    """
    start_time = time.time()
    request_id = get_request_id(request)
    received_at = payload.received_at or datetime.now(timezone.utc)

    ai_attempted = payload.use_ai and ai_client is not None
    ai_text = await fetch_ai_response(ai_client, payload.raw_sms, request_id) if ai_attempted else None

    resolution = resolve_transaction(
        payload.raw_sms,
        extractor,
        sender_id=payload.sender_id,
        ai_response=ai_text,
        received_at=received_at,
    )
    result = resolution.result
    fallback_reason = _fallback_reason(resolution, ai_attempted, ai_text)

    duration_ms = (time.time() - start_time) * 1000
    record_parse(resolution)
    log_parse_outcome(
        request_id,
        outcome="parsed" if result.ok else result.failure.value,
        method=result.transaction.parse_method.value if result.ok else None,
        bank=result.transaction.bank.value if result.ok else None,
        duration_ms=duration_ms,
        ai_failure=fallback_reason,
    )

    if not result.ok:
        raise HTTPException(
            status_code=422,
            detail={"message": "Could not parse this message", "reason": result.failure.value},
        )

    return SmsParseResponse(
        transaction=to_transaction_schema(result.transaction),
        ai_fallback_reason=fallback_reason,
    )


@router.post("/sms/parse/batch", response_model=BatchParseResponse)
async def parse_sms_batch(
    payload: BatchParseRequest,
    request: Request,
    extractor: TransactionTextExtractor = Depends(get_extractor),
    ai_client: Optional[AiCollaboratorClient] = Depends(get_ai_client),
):
    """
    Extract transactions from many SMS at once.

    Messages are independent: AI calls fan out concurrently, regex parsing runs on a
    worker pool. Results keep the request order.
    """
    start_time = time.time()
    request_id = get_request_id(request)

    if len(payload.messages) > settings.batch_max_messages:
        raise HTTPException(
            status_code=422,
            detail=f"Batch too large: {len(payload.messages)} messages (max {settings.batch_max_messages})",
        )

    now = datetime.now(timezone.utc)
    messages = [
        SmsMessage(raw_text=item.raw_sms, sender_id=item.sender_id, received_at=item.received_at or now)
        for item in payload.messages
    ]

    if payload.use_ai and ai_client is not None:
        ai_texts = await asyncio.gather(
            *(fetch_ai_response(ai_client, message.raw_text, request_id) for message in messages)
        )
        resolutions = [
            resolve_transaction(
                message.raw_text,
                extractor,
                sender_id=message.sender_id,
                ai_response=ai_text,
                received_at=message.received_at,
            )
            for message, ai_text in zip(messages, ai_texts)
        ]
    else:
        parsed = await run_in_threadpool(parse_batch, extractor, messages, settings.batch_max_workers)
        resolutions = [Resolution(result=result) for result in parsed]

    items: List[BatchParseItemResult] = []
    spam_count = 0
    for index, resolution in enumerate(resolutions):
        record_parse(resolution)
        result = resolution.result
        if not result.ok:
            items.append(BatchParseItemResult(index=index, parsed=False, failure_reason=result.failure.value))
            continue

        if result.transaction.is_spam:
            spam_count += 1
            if not payload.include_spam:
                items.append(BatchParseItemResult(index=index, parsed=True, suppressed_as_spam=True))
                continue

        items.append(
            BatchParseItemResult(index=index, parsed=True, transaction=to_transaction_schema(result.transaction))
        )

    parsed_count = sum(1 for item in items if item.parsed)
    duration_ms = (time.time() - start_time) * 1000
    logging.info(
        "SMS batch parsed",
        extra={
            "request_id": request_id,
            "step": "sms_batch",
            "message_count": len(messages),
            "parsed_count": parsed_count,
            "spam_count": spam_count,
            "duration_ms": duration_ms,
        },
    )

    return BatchParseResponse(
        results=items,
        parsed_count=parsed_count,
        failed_count=len(items) - parsed_count,
        spam_count=spam_count,
    )

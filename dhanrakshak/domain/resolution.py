"""Two-stage transaction resolver: AI result first, regex extractor as fallback"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from dhanrakshak.domain.ai_response import parse_ai_response
from dhanrakshak.domain.extraction import TransactionTextExtractor
from dhanrakshak.domain.models import ParseFailure, ParseResult


@dataclass(frozen=True)
class Resolution:
    """Final parse plus why the AI stage was skipped over, if it was tried"""

    result: ParseResult
    ai_failure: Optional[ParseFailure] = None

    @property
    def fell_back(self) -> bool:
        return self.ai_failure is not None


def resolve_transaction(
    raw_sms: str,
    extractor: TransactionTextExtractor,
    sender_id: str | None = None,
    ai_response: str | None = None,
    received_at: datetime | None = None,
) -> Resolution:
    """
    Resolve one SMS into a transaction.

    ``ai_response`` is the collaborator's raw text, or None when it was unavailable
    or not asked. Any decode or validation failure falls through to the regex path.
    """
    if ai_response is not None:
        ai_result = parse_ai_response(ai_response, raw_sms, extractor, sender_id, received_at)
        if ai_result.ok:
            return Resolution(result=ai_result)
        return Resolution(
            result=extractor.parse(raw_sms, sender_id, received_at),
            ai_failure=ai_result.failure,
        )

    return Resolution(result=extractor.parse(raw_sms, sender_id, received_at))

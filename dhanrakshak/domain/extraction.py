"""Regex transaction extractor - turns raw bank SMS into ParsedTransaction records"""

import math
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from typing import List, Optional, Sequence

from dhanrakshak.domain.exceptions import InvalidInputError
from dhanrakshak.domain.models import (
    DEFAULT_MERCHANT,
    REGEX_CONFIDENCE,
    Bank,
    ParsedTransaction,
    ParseFailure,
    ParseMethod,
    ParseResult,
    SmsMessage,
    TransactionMode,
    TransactionType,
)
from dhanrakshak.domain.patterns import BANK_SENDER_IDS, PatternLibrary, default_pattern_library


def _parse_number(literal: str) -> Optional[float]:
    """Strip thousands separators and parse; None when nothing numeric or finite is left"""
    try:
        value = float(literal.replace(",", ""))
    except ValueError:
        return None
    # a long digit run overflows to inf without raising
    return value if math.isfinite(value) else None


class TransactionTextExtractor:
    """
    Deterministic SMS parser driven by a PatternLibrary.

    Holds no mutable state, so one instance can serve concurrent callers.
    """

    def __init__(self, patterns: PatternLibrary | None = None, confidence: float = REGEX_CONFIDENCE):
        self.patterns = patterns or default_pattern_library()
        self.confidence = confidence

    def parse(
        self,
        raw_sms: str,
        sender_id: str | None = None,
        received_at: datetime | None = None,
    ) -> ParseResult:
        """
        Parse one SMS.

        Pipeline (short-circuits only on the gate and the amount):
        1. Transaction gate: a transactional verb AND a currency marker
        2. Bank from sender id, then body
        3. Type (debit keywords win over credit keywords)
        4. Amount - first currency amount in the text, mandatory and > 0
        5-8. Balance, account, merchant, reference - optional, defaulted
        9. Spam flag - spam is still parsed, callers decide whether to drop it
        """
        if not isinstance(raw_sms, str):
            raise InvalidInputError(f"SMS body must be a string, got {type(raw_sms).__name__}")
        if not raw_sms.strip():
            return ParseResult.failed(ParseFailure.EMPTY_MESSAGE)

        if not self.is_transactional(raw_sms):
            return ParseResult.failed(ParseFailure.NOT_TRANSACTIONAL)

        amount = self.extract_amount(raw_sms)
        if amount is None or amount <= 0:
            return ParseResult.failed(ParseFailure.MISSING_AMOUNT)

        transaction = ParsedTransaction(
            amount=amount,
            type=self.extract_type(raw_sms),
            raw_text=raw_sms,
            merchant=self.extract_merchant(raw_sms),
            balance_after=self.extract_balance(raw_sms),
            account_last4=self.extract_account_last4(raw_sms),
            reference_id=self.extract_reference(raw_sms),
            bank=self.identify_bank(raw_sms, sender_id),
            is_spam=self.is_spam(raw_sms),
            confidence=self.confidence,
            parse_method=ParseMethod.REGEX,
            transaction_mode=self.detect_mode(raw_sms),
            timestamp=received_at,
        )
        return ParseResult.success(transaction)

    def parse_for_bank(self, raw_sms: str, bank: Bank, received_at: datetime | None = None) -> ParseResult:
        """Parse an SMS known to come from ``bank`` using that bank's sender id"""
        return self.parse(raw_sms, BANK_SENDER_IDS.get(bank), received_at)

    def is_transactional(self, raw_sms: str) -> bool:
        lower_body = raw_sms.lower()
        has_verb = any(verb in lower_body for verb in self.patterns.transaction_verbs)
        has_currency = any(marker in lower_body for marker in self.patterns.currency_markers)
        return has_verb and has_currency

    def identify_bank(self, raw_sms: str, sender_id: str | None = None) -> Bank:
        """Sender id match always wins over a body match"""
        if sender_id:
            for bank, pattern in self.patterns.bank_patterns:
                if pattern.search(sender_id):
                    return bank

        for bank, pattern in self.patterns.bank_patterns:
            if pattern.search(raw_sms):
                return bank

        return Bank.UNKNOWN

    def extract_type(self, raw_sms: str) -> TransactionType:
        lower_body = raw_sms.lower()
        if any(keyword in lower_body for keyword in self.patterns.debit_keywords):
            return TransactionType.DEBIT
        if any(keyword in lower_body for keyword in self.patterns.credit_keywords):
            return TransactionType.CREDIT
        return TransactionType.UNKNOWN

    def extract_amount(self, raw_sms: str) -> Optional[float]:
        """First currency amount in the text; later amounts are usually the balance"""
        match = self.patterns.amount.search(raw_sms)
        if not match:
            return None
        return _parse_number(match.group(1))

    def extract_balance(self, raw_sms: str) -> Optional[float]:
        match = self.patterns.balance.search(raw_sms)
        if not match:
            return None
        return _parse_number(match.group(1))

    def extract_account_last4(self, raw_sms: str) -> Optional[str]:
        match = self.patterns.account.search(raw_sms)
        if not match:
            return None
        return match.group(1)[-4:]

    def extract_merchant(self, raw_sms: str) -> str:
        """
        Ordered fallback chain, first hit wins:
        UPI-style payee token, ATM, POS vendor, bank transfer, generic default.
        """
        lower_body = raw_sms.lower()

        match = self.patterns.merchant_context.search(raw_sms)
        if match:
            merchant = match.group(1).split("@")[0].strip("._-")
            if merchant:
                return merchant

        if "atm" in lower_body:
            return "ATM Withdrawal"

        if "pos" in lower_body:
            pos_match = self.patterns.pos_vendor.search(raw_sms)
            if pos_match and pos_match.group(1).strip():
                return pos_match.group(1).strip()
            return "POS Transaction"

        if any(keyword in lower_body for keyword in self.patterns.bank_transfer_keywords):
            return "Bank Transfer"

        return DEFAULT_MERCHANT

    def extract_reference(self, raw_sms: str) -> Optional[str]:
        match = self.patterns.reference.search(raw_sms)
        return match.group(1) if match else None

    def is_spam(self, raw_sms: str) -> bool:
        lower_body = raw_sms.lower()
        return any(keyword in lower_body for keyword in self.patterns.spam_keywords)

    def detect_mode(self, raw_sms: str) -> TransactionMode:
        lower_body = raw_sms.lower()
        for mode, keyword in self.patterns.mode_keywords:
            if keyword in lower_body:
                return mode
        return TransactionMode.OTHER


def parse_batch(
    extractor: TransactionTextExtractor,
    messages: Sequence[SmsMessage],
    max_workers: int = 4,
) -> List[ParseResult]:
    """
    Parse independent messages concurrently.

    Results line up with ``messages`` by index.
    """
    if not messages:
        return []

    with ThreadPoolExecutor(max_workers=max(1, max_workers)) as executor:
        return list(
            executor.map(
                lambda message: extractor.parse(message.raw_text, message.sender_id, message.received_at),
                messages,
            )
        )

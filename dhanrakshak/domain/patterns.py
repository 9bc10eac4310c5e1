"""Pattern library for Indian bank transaction SMS

Patterns are kept as declarative tables (pattern string + tag) and compiled once into an
immutable PatternLibrary that is shared by every extractor instance.
"""

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Pattern, Tuple

from dhanrakshak.domain.models import Bank, TransactionMode

# Sender id and body markers per bank, in priority order
BANK_PATTERN_TABLE: Tuple[Tuple[Bank, str], ...] = (
    (Bank.HDFC, r"(?:HDFC|HDFCBK)"),
    (Bank.ICICI, r"(?:ICICI|ICICIB)"),
    (Bank.STANDARD_CHARTERED, r"(?:SCB|STANDARD\s*CHARTERED|SCBANK)"),
    (Bank.AXIS, r"(?:AXIS|AXISB)"),
    (Bank.SBI, r"(?:SBI|SBIINB|STATE\s*BANK)"),
    (Bank.KOTAK, r"(?:KOTAK|KOTAKB)"),
)

# Canonical DLT sender ids used for bank-specific parsing
BANK_SENDER_IDS = {
    Bank.HDFC: "HDFCBK",
    Bank.ICICI: "ICICIB",
    Bank.STANDARD_CHARTERED: "SCB",
    Bank.AXIS: "AXISB",
    Bank.SBI: "SBIINB",
    Bank.KOTAK: "KOTAKB",
}

FIELD_PATTERN_TABLE = {
    "amount": r"(?:Rs\.?|INR|₹)\s*([\d,]+\.?\d*)",
    "balance": r"(?:bal(?:ance)?|avl\.? bal|available)[:\s]*(?:Rs\.?|INR|₹)?\s*([\d,]+\.?\d*)",
    "account": r"(?:a/c|ac|acct|account)[\s:]*(?:no\.?)?[\s:]*[xX*]*?(\d{4,6})",
    "reference": r"\b(?:UPI(?:\s*Ref)?|Ref(?:\.?\s?No)?)\.?[:\s]*([A-Z0-9]*\d[A-Z0-9]*)",
    # Payee/payer token after to/from/at/@. Account words ("from a/c") are not merchants.
    "merchant_context": (
        r"(?:\b(?:to|from|at)|@)\s+"
        r"(?!(?:a/?c|acct|account|your|card)\b)"
        r"([A-Za-z0-9@._\-]+)(?=[\s,;:!)]|$)"
    ),
    "pos_vendor": r"\bpos[\s-]*([A-Za-z0-9 ]+?)\s+(?:on|dated|rs|inr|₹)",
}

TRANSACTION_VERBS = (
    "debited",
    "credited",
    "withdrawn",
    "deposited",
    "transferred",
    "payment",
    "purchase",
    "spent",
    "received",
)

CURRENCY_MARKERS = ("rs", "inr", "₹")

# Debit keywords are evaluated before credit keywords
DEBIT_KEYWORDS = ("debited", "withdrawn", "spent", "paid", "purchase", "sent to", "transferred to")
CREDIT_KEYWORDS = ("credited", "deposited", "received", "refund", "cashback", "transferred from")

SPAM_KEYWORDS = (
    "offer",
    "win",
    "reward points",
    "cashback offer",
    "congratulations",
    "limited period",
    "apply now",
)

BANK_TRANSFER_KEYWORDS = ("neft", "imps", "rtgs")

# First matching keyword decides the payment rail
MODE_KEYWORD_TABLE: Tuple[Tuple[TransactionMode, str], ...] = (
    (TransactionMode.UPI, "upi"),
    (TransactionMode.NEFT, "neft"),
    (TransactionMode.IMPS, "imps"),
    (TransactionMode.RTGS, "rtgs"),
    (TransactionMode.ATM, "atm"),
    (TransactionMode.POS, "pos"),
    (TransactionMode.CARD, "card"),
)


@dataclass(frozen=True)
class PatternLibrary:
    """Compiled, read-only pattern set; safe to share across threads"""

    bank_patterns: Tuple[Tuple[Bank, Pattern], ...]
    amount: Pattern
    balance: Pattern
    account: Pattern
    reference: Pattern
    merchant_context: Pattern
    pos_vendor: Pattern
    transaction_verbs: Tuple[str, ...] = TRANSACTION_VERBS
    currency_markers: Tuple[str, ...] = CURRENCY_MARKERS
    debit_keywords: Tuple[str, ...] = DEBIT_KEYWORDS
    credit_keywords: Tuple[str, ...] = CREDIT_KEYWORDS
    spam_keywords: Tuple[str, ...] = SPAM_KEYWORDS
    bank_transfer_keywords: Tuple[str, ...] = BANK_TRANSFER_KEYWORDS
    mode_keywords: Tuple[Tuple[TransactionMode, str], ...] = MODE_KEYWORD_TABLE


def build_pattern_library() -> PatternLibrary:
    """Compile every pattern table into a PatternLibrary"""
    fields = {
        name: re.compile(pattern, re.IGNORECASE)
        for name, pattern in FIELD_PATTERN_TABLE.items()
    }
    return PatternLibrary(
        bank_patterns=tuple(
            (bank, re.compile(pattern, re.IGNORECASE)) for bank, pattern in BANK_PATTERN_TABLE
        ),
        **fields,
    )


@lru_cache(maxsize=1)
def default_pattern_library() -> PatternLibrary:
    """Process-wide library, compiled on first use"""
    return build_pattern_library()

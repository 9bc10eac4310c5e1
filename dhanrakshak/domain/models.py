"""Domain models - pure Python dataclasses representing parsed transactions, holdings and insights"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Dict, Optional, Tuple

REGEX_CONFIDENCE = 0.70
AI_CONFIDENCE = 0.95

DEFAULT_MERCHANT = "Transaction"


class TransactionType(str, Enum):
    DEBIT = "DEBIT"
    CREDIT = "CREDIT"
    UNKNOWN = "UNKNOWN"


class Bank(str, Enum):
    HDFC = "HDFC"
    ICICI = "ICICI"
    STANDARD_CHARTERED = "STANDARD_CHARTERED"
    AXIS = "AXIS"
    SBI = "SBI"
    KOTAK = "KOTAK"
    UNKNOWN = "UNKNOWN"


class ParseMethod(str, Enum):
    AI = "AI"
    REGEX = "REGEX"


class TransactionMode(str, Enum):
    UPI = "UPI"
    NEFT = "NEFT"
    IMPS = "IMPS"
    RTGS = "RTGS"
    ATM = "ATM"
    POS = "POS"
    CARD = "CARD"
    OTHER = "OTHER"


class ParseFailure(str, Enum):
    """Why a message did not produce a transaction record"""

    EMPTY_MESSAGE = "EMPTY_MESSAGE"
    NOT_TRANSACTIONAL = "NOT_TRANSACTIONAL"
    MISSING_AMOUNT = "MISSING_AMOUNT"
    AI_MALFORMED_RESPONSE = "AI_MALFORMED_RESPONSE"
    AI_VALIDATION_FAILED = "AI_VALIDATION_FAILED"


@dataclass(frozen=True)
class ParsedTransaction:
    """Transaction extracted from a single bank SMS. A re-parse produces a new record."""

    amount: float
    type: TransactionType
    raw_text: str
    merchant: str = DEFAULT_MERCHANT
    balance_after: Optional[float] = None
    account_last4: Optional[str] = None
    reference_id: Optional[str] = None
    bank: Bank = Bank.UNKNOWN
    is_spam: bool = False
    confidence: float = REGEX_CONFIDENCE
    parse_method: ParseMethod = ParseMethod.REGEX
    transaction_mode: TransactionMode = TransactionMode.OTHER
    timestamp: Optional[datetime] = None  # when the SMS was received, supplied by the caller

    @property
    def is_debit(self) -> bool:
        return self.type == TransactionType.DEBIT

    @property
    def is_credit(self) -> bool:
        return self.type == TransactionType.CREDIT


@dataclass(frozen=True)
class ParseResult:
    """Either a parsed transaction or the reason parsing stopped"""

    transaction: Optional[ParsedTransaction] = None
    failure: Optional[ParseFailure] = None

    @property
    def ok(self) -> bool:
        return self.transaction is not None

    @classmethod
    def success(cls, transaction: ParsedTransaction) -> "ParseResult":
        return cls(transaction=transaction)

    @classmethod
    def failed(cls, reason: ParseFailure) -> "ParseResult":
        return cls(failure=reason)


@dataclass(frozen=True)
class SmsMessage:
    """Inbound SMS as handed to the batch parser"""

    raw_text: str
    sender_id: Optional[str] = None
    received_at: Optional[datetime] = None


# Holdings snapshot


@dataclass(frozen=True)
class Asset:
    """Market-linked or retirement holding (stocks, mutual funds, EPF, PPF, bonds, gold)"""

    asset_type: str  # STOCK, MUTUAL_FUND, EPF, PPF, BOND, GOLD, ...
    current_value: float
    invested_amount: float
    name: str = ""

    @property
    def profit_loss(self) -> float:
        return self.current_value - self.invested_amount


@dataclass(frozen=True)
class BankAccount:
    bank_name: str
    balance: float
    account_last4: Optional[str] = None


@dataclass(frozen=True)
class FixedDeposit:
    bank_name: str
    principal: float
    current_value: float
    interest_rate: float = 0.0
    tenure_months: int = 0


@dataclass(frozen=True)
class TransactionRecord:
    """Persisted ledger entry read back for expense forecasting"""

    type: str  # EXPENSE, INCOME, BUY, SELL, ...
    amount: float
    description: str = ""
    occurred_on: Optional[date] = None


# Insights


@dataclass(frozen=True)
class PortfolioMetrics:
    """Bucketed portfolio totals. Percentages are derived from the totals on every access."""

    total_net_worth: float = 0.0
    total_invested: float = 0.0
    total_equity: float = 0.0
    total_debt: float = 0.0
    total_gold: float = 0.0
    total_cash: float = 0.0
    total_profit_loss: float = 0.0
    asset_type_values: Dict[str, float] = field(default_factory=dict)
    asset_type_invested: Dict[str, float] = field(default_factory=dict)
    predicted_next_month_expense: float = 0.0
    forecast_narrative: str = ""

    def _share(self, bucket_total: float) -> float:
        if self.total_net_worth <= 0:
            return 0.0
        return bucket_total / self.total_net_worth * 100

    @property
    def equity_percentage(self) -> float:
        return self._share(self.total_equity)

    @property
    def debt_percentage(self) -> float:
        return self._share(self.total_debt)

    @property
    def gold_percentage(self) -> float:
        return self._share(self.total_gold)

    @property
    def cash_percentage(self) -> float:
        return self._share(self.total_cash)


@dataclass(frozen=True)
class AllocationAnalysis:
    current_equity: float
    current_debt: float
    current_gold: float
    current_cash: float
    ideal_equity: float
    ideal_debt: float
    ideal_gold: float
    ideal_cash: float
    deviation_messages: Tuple[str, ...] = ()


class RiskLevel(str, Enum):
    VERY_HIGH = "Very High"
    HIGH = "High"
    MODERATE = "Moderate"
    LOW = "Low"
    VERY_LOW = "Very Low"


@dataclass(frozen=True)
class RiskAssessment:
    risk_score: int  # 1, 3, 5, 7 or 9
    risk_level: RiskLevel
    risk_description: str
    diversification_score: int  # 4, 7 or 10
    diversification_level: str


class Priority(str, Enum):
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


@dataclass(frozen=True)
class Suggestion:
    title: str
    priority: Priority
    description: str
    action_item: str
    icon_hint: str


class ScenarioCategory(str, Enum):
    EQUITY = "EQUITY"
    DEBT = "DEBT"
    COMPARISON = "COMPARISON"


@dataclass(frozen=True)
class WhatIfScenario:
    title: str
    results: Tuple[str, ...]
    category: ScenarioCategory


class NarrativeSource(str, Enum):
    AI = "AI"
    HEURISTIC = "HEURISTIC"


@dataclass(frozen=True)
class PortfolioInsights:
    """Complete insights report handed to the presentation layer"""

    metrics: PortfolioMetrics
    allocation_analysis: AllocationAnalysis
    risk_assessment: RiskAssessment
    suggestions: Tuple[Suggestion, ...]
    what_if_scenarios: Tuple[WhatIfScenario, ...]
    narrative: str
    narrative_source: NarrativeSource

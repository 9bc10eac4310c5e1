"""Pydantic schemas for API request/response validation"""

from datetime import date, datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


# SMS parsing


class SmsParseRequest(BaseModel):
    """Request body for POST /v1/sms/parse"""

    raw_sms: str = Field(..., description="Raw SMS body")
    sender_id: Optional[str] = Field(None, description="SMS sender id, e.g. HDFCBK")
    received_at: Optional[datetime] = Field(None, description="When the SMS was received (defaults to now)")
    use_ai: bool = Field(True, description="Try the AI collaborator before the regex extractor")


class ParsedTransactionSchema(BaseModel):
    amount: float
    type: str
    merchant: str
    balance_after: Optional[float] = None
    account_last4: Optional[str] = None
    reference_id: Optional[str] = None
    bank: str
    is_spam: bool
    confidence: float
    parse_method: str
    transaction_mode: str
    raw_text: str
    timestamp: Optional[datetime] = None


class SmsParseResponse(BaseModel):
    """Response for POST /v1/sms/parse"""

    transaction: ParsedTransactionSchema
    ai_fallback_reason: Optional[str] = None


class BatchSmsItem(BaseModel):
    raw_sms: str
    sender_id: Optional[str] = None
    received_at: Optional[datetime] = None


class BatchParseRequest(BaseModel):
    """Request body for POST /v1/sms/parse/batch"""

    messages: List[BatchSmsItem] = Field(..., min_length=1)
    use_ai: bool = False
    include_spam: bool = True


class BatchParseItemResult(BaseModel):
    index: int
    parsed: bool
    failure_reason: Optional[str] = None
    suppressed_as_spam: bool = False
    transaction: Optional[ParsedTransactionSchema] = None


class BatchParseResponse(BaseModel):
    results: List[BatchParseItemResult]
    parsed_count: int
    failed_count: int
    spam_count: int


# Portfolio insights


class AssetSchema(BaseModel):
    asset_type: str = Field(..., min_length=1, description="STOCK, MUTUAL_FUND, EPF, PPF, BOND, GOLD, ...")
    current_value: float
    invested_amount: float
    name: str = ""


class BankAccountSchema(BaseModel):
    bank_name: str
    balance: float
    account_last4: Optional[str] = None


class FixedDepositSchema(BaseModel):
    """Either current_value, or start_date and maturity_date to value the deposit from its terms"""

    bank_name: str
    principal: float
    current_value: Optional[float] = None
    interest_rate: float = 0.0
    tenure_months: int = 0
    start_date: Optional[date] = None
    maturity_date: Optional[date] = None


class TransactionRecordSchema(BaseModel):
    type: str
    amount: float
    description: str = ""
    occurred_on: Optional[date] = None


class InsightsRequest(BaseModel):
    """Request body for POST /v1/insights"""

    assets: List[AssetSchema] = Field(default_factory=list)
    bank_accounts: List[BankAccountSchema] = Field(default_factory=list)
    fixed_deposits: List[FixedDepositSchema] = Field(default_factory=list)
    transactions: List[TransactionRecordSchema] = Field(default_factory=list)
    monthly_income: float = Field(..., ge=0, description="Monthly income in INR")
    monthly_expenses: float = Field(..., ge=0, description="Monthly expenses in INR")
    use_ai_narrative: bool = False
    as_of: Optional[date] = Field(None, description="Valuation date for dated deposits (defaults to today)")


class MetricsSchema(BaseModel):
    total_net_worth: float
    total_invested: float
    total_equity: float
    total_debt: float
    total_gold: float
    total_cash: float
    total_profit_loss: float
    equity_percentage: float
    debt_percentage: float
    gold_percentage: float
    cash_percentage: float
    asset_type_values: Dict[str, float]
    asset_type_invested: Dict[str, float]
    predicted_next_month_expense: float
    forecast_narrative: str


class AllocationSchema(BaseModel):
    current_equity: float
    current_debt: float
    current_gold: float
    current_cash: float
    ideal_equity: float
    ideal_debt: float
    ideal_gold: float
    ideal_cash: float
    deviation_messages: List[str]


class RiskSchema(BaseModel):
    risk_score: int
    risk_level: str
    risk_description: str
    diversification_score: int
    diversification_level: str


class SuggestionSchema(BaseModel):
    title: str
    priority: str
    description: str
    action_item: str
    icon_hint: str


class ScenarioSchema(BaseModel):
    title: str
    results: List[str]
    category: str


class InsightsResponse(BaseModel):
    """Response for POST /v1/insights"""

    metrics: MetricsSchema
    allocation_analysis: AllocationSchema
    risk_assessment: RiskSchema
    suggestions: List[SuggestionSchema]
    what_if_scenarios: List[ScenarioSchema]
    narrative: str
    narrative_source: str


# Calculators


class SipRequest(BaseModel):
    monthly_amount: float = Field(..., ge=0)
    annual_rate: float = Field(..., ge=0, description="Expected annual return in percent")
    years: float = Field(..., gt=0)


class LumpsumRequest(BaseModel):
    principal: float = Field(..., ge=0)
    annual_rate: float = Field(..., ge=0)
    years: float = Field(..., gt=0)


class FdRequest(LumpsumRequest):
    compounding: str = Field("QUARTERLY", description="MONTHLY, QUARTERLY, HALF_YEARLY or YEARLY")


class RdRequest(SipRequest):
    pass


class EmiRequest(BaseModel):
    principal: float = Field(..., gt=0)
    annual_rate: float = Field(..., ge=0)
    tenure_months: int = Field(..., gt=0)


class ProjectionResponse(BaseModel):
    invested: float
    future_value: float
    gains: float


class EmiResponse(BaseModel):
    emi: float
    total_payment: float
    total_interest: float

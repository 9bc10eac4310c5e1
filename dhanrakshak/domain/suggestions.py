"""Rule-based investment suggestions and what-if projections"""

from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from dhanrakshak.domain.models import (
    PortfolioMetrics,
    Priority,
    ScenarioCategory,
    Suggestion,
    WhatIfScenario,
)
from dhanrakshak.domain.projections import lumpsum_future_value, ppf_future_value, sip_future_value
from dhanrakshak.utils.number_format import format_large_number, format_rupees

EMERGENCY_FUND_MONTHS = 6
SECTION_80C_LIMIT = 150_000
SIP_SAVINGS_THRESHOLD = 5_000
SIP_SHARE_OF_SAVINGS = 0.30
GOLD_MIN_PERCENTAGE = 5.0
GOLD_MIN_NET_WORTH = 100_000
GOLD_TARGET_SHARE = 0.10
IDLE_CASH_PERCENTAGE = 25.0
CASH_RESERVE_SHARE = 0.10

SCENARIO_SIP_SHARE_OF_INCOME = 0.10
SCENARIO_SIP_RATE = 12.0
PPF_MONTHLY_CONTRIBUTION = 12_500
PPF_RATE = 7.1
PPF_YEARS = 15
COMPARISON_PRINCIPAL = 100_000
COMPARISON_YEARS = 5
FD_RATE = 6.5
DEBT_FUND_RATE = 8.5


@dataclass(frozen=True)
class SuggestionContext:
    metrics: PortfolioMetrics
    monthly_income: float
    monthly_expenses: float

    @property
    def monthly_savings(self) -> float:
        return self.monthly_income - self.monthly_expenses


SuggestionRule = Callable[[SuggestionContext], Optional[Suggestion]]


def emergency_fund_rule(ctx: SuggestionContext) -> Optional[Suggestion]:
    required = ctx.monthly_expenses * EMERGENCY_FUND_MONTHS
    if ctx.metrics.total_cash >= required:
        return None
    shortfall = required - ctx.metrics.total_cash
    return Suggestion(
        title="Build Emergency Fund",
        priority=Priority.HIGH,
        description=(
            f"Build an emergency fund of {format_rupees(required)} (6 months expenses). "
            f"Current shortfall: {format_rupees(shortfall)}"
        ),
        action_item="Keep in high-yield savings account or liquid funds",
        icon_hint="ic_shield",
    )


def tax_saving_rule(ctx: SuggestionContext) -> Optional[Suggestion]:
    values = ctx.metrics.asset_type_values
    if values.get("EPF", 0.0) + values.get("PPF", 0.0) >= SECTION_80C_LIMIT:
        return None
    return Suggestion(
        title="Maximize Tax Savings (80C)",
        priority=Priority.HIGH,
        description="You haven't fully utilized your ₹1.5L limit under Section 80C",
        action_item="Invest in PPF, ELSS, or increase VPF contribution",
        icon_hint="ic_receipt",
    )


def sip_rule(ctx: SuggestionContext) -> Optional[Suggestion]:
    savings = ctx.monthly_savings
    if savings <= SIP_SAVINGS_THRESHOLD:
        return None
    suggested_sip = savings * SIP_SHARE_OF_SAVINGS
    return Suggestion(
        title="Start/Increase SIP",
        priority=Priority.MEDIUM,
        description=(
            f"With {format_rupees(savings)} monthly savings, consider SIP of {format_rupees(suggested_sip)}"
        ),
        action_item="Diversified equity mutual funds for long-term wealth creation",
        icon_hint="ic_trending_up",
    )


def gold_rule(ctx: SuggestionContext) -> Optional[Suggestion]:
    metrics = ctx.metrics
    if not (metrics.gold_percentage < GOLD_MIN_PERCENTAGE and metrics.total_net_worth > GOLD_MIN_NET_WORTH):
        return None
    gold_target = metrics.total_net_worth * GOLD_TARGET_SHARE
    return Suggestion(
        title="Add Gold Allocation",
        priority=Priority.MEDIUM,
        description=f"Add {format_rupees(gold_target)} in gold (10% of portfolio) as inflation hedge",
        action_item="Consider Sovereign Gold Bonds for tax efficiency",
        icon_hint="ic_diamond",
    )


def idle_cash_rule(ctx: SuggestionContext) -> Optional[Suggestion]:
    metrics = ctx.metrics
    if metrics.cash_percentage <= IDLE_CASH_PERCENTAGE:
        return None
    excess = metrics.total_cash - metrics.total_net_worth * CASH_RESERVE_SHARE
    return Suggestion(
        title="Deploy Idle Cash",
        priority=Priority.HIGH,
        description=f"{format_rupees(excess)} excess cash earning low interest",
        action_item="Consider debt funds, FDs, or staggered equity investment",
        icon_hint="ic_account_balance",
    )


# Fixed evaluation order; rules are independent and there is no dedup
SUGGESTION_RULES: Tuple[SuggestionRule, ...] = (
    emergency_fund_rule,
    tax_saving_rule,
    sip_rule,
    gold_rule,
    idle_cash_rule,
)


def generate_suggestions(
    metrics: PortfolioMetrics,
    monthly_income: float,
    monthly_expenses: float,
) -> List[Suggestion]:
    """Run every suggestion rule in order and collect the ones that fire"""
    ctx = SuggestionContext(metrics, monthly_income, monthly_expenses)
    suggestions: List[Suggestion] = []
    for rule in SUGGESTION_RULES:
        suggestion = rule(ctx)
        if suggestion is not None:
            suggestions.append(suggestion)
    return suggestions


def generate_what_if_scenarios(metrics: PortfolioMetrics, monthly_income: float) -> List[WhatIfScenario]:
    """
    Three fixed projections:
    - 10% of income in an equity SIP at 12% for 5 and 10 years
    - maxed-out PPF (₹1.5L/year) at 7.1% for 15 years
    - ₹1L in an FD at 6.5% vs a debt fund at 8.5% for 5 years

    ``metrics`` is accepted for parity with the other generators; the projections
    depend only on income and fixed rates.
    """
    sip_amount = monthly_income * SCENARIO_SIP_SHARE_OF_INCOME
    sip_5_years = sip_future_value(sip_amount, SCENARIO_SIP_RATE, 5)
    sip_10_years = sip_future_value(sip_amount, SCENARIO_SIP_RATE, 10)

    ppf_value = ppf_future_value(PPF_MONTHLY_CONTRIBUTION * 12, PPF_YEARS, PPF_RATE)

    fd_value = lumpsum_future_value(COMPARISON_PRINCIPAL, FD_RATE, COMPARISON_YEARS)
    debt_fund_value = lumpsum_future_value(COMPARISON_PRINCIPAL, DEBT_FUND_RATE, COMPARISON_YEARS)

    return [
        WhatIfScenario(
            title=f"If you invest 10% income in SIP (₹{format_large_number(sip_amount)}/month)",
            results=(
                f"5 years @ 12% returns: ₹{format_large_number(sip_5_years)}",
                f"10 years @ 12% returns: ₹{format_large_number(sip_10_years)}",
            ),
            category=ScenarioCategory.EQUITY,
        ),
        WhatIfScenario(
            title="If you max out PPF (₹1.5L/year)",
            results=(
                f"15 years @ 7.1%: ₹{format_large_number(ppf_value)}",
                "Tax-free returns + Section 80C benefit",
            ),
            category=ScenarioCategory.DEBT,
        ),
        WhatIfScenario(
            title="₹1L in FD vs Debt Mutual Fund (5 years)",
            results=(
                f"FD @ 6.5%: ₹{format_large_number(fd_value)}",
                f"Debt Fund @ 8.5%: ₹{format_large_number(debt_fund_value)}",
                "Debt funds also have indexation tax benefit",
            ),
            category=ScenarioCategory.COMPARISON,
        ),
    ]

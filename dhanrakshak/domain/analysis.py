"""Allocation and risk analysis - compares bucket shares against a fixed target mix"""

from typing import Callable, List, Optional, Tuple

from dhanrakshak.domain.models import AllocationAnalysis, PortfolioMetrics, RiskAssessment, RiskLevel
from dhanrakshak.utils.number_format import format_rupees

# Moderate-risk target mix, in percent
IDEAL_EQUITY = 60.0
IDEAL_DEBT = 25.0
IDEAL_GOLD = 10.0
IDEAL_CASH = 5.0

EQUITY_LOW_BAND = 10.0
EQUITY_HIGH_BAND = 15.0
DEBT_LOW_BAND = 10.0
IDLE_CASH_THRESHOLD = 20.0
MIN_GOLD_PERCENTAGE = 5.0

DeviationRule = Callable[[PortfolioMetrics], Optional[str]]


def _equity_too_low(metrics: PortfolioMetrics) -> Optional[str]:
    if metrics.equity_percentage < IDEAL_EQUITY - EQUITY_LOW_BAND:
        return "Equity allocation is low. Consider increasing exposure to stocks/mutual funds for higher growth."
    return None


def _equity_too_high(metrics: PortfolioMetrics) -> Optional[str]:
    if metrics.equity_percentage > IDEAL_EQUITY + EQUITY_HIGH_BAND:
        return "High equity exposure increases risk. Consider diversifying into debt instruments."
    return None


def _debt_too_low(metrics: PortfolioMetrics) -> Optional[str]:
    if metrics.debt_percentage < IDEAL_DEBT - DEBT_LOW_BAND:
        return "Debt allocation is low. Add more stable instruments like PPF, FDs for stability."
    return None


def _idle_cash(metrics: PortfolioMetrics) -> Optional[str]:
    if metrics.cash_percentage > IDLE_CASH_THRESHOLD:
        return (
            f"Excess cash ({format_rupees(metrics.total_cash)}) is idle. "
            "Consider investing for better returns."
        )
    return None


def _gold_missing(metrics: PortfolioMetrics) -> Optional[str]:
    if metrics.gold_percentage < MIN_GOLD_PERCENTAGE:
        return "Consider adding Gold (5-10%) as a hedge against inflation."
    return None


# Evaluated in order; every rule fires independently
DEVIATION_RULES: Tuple[DeviationRule, ...] = (
    _equity_too_low,
    _equity_too_high,
    _debt_too_low,
    _idle_cash,
    _gold_missing,
)


def analyze_allocation(metrics: PortfolioMetrics) -> AllocationAnalysis:
    """Current vs ideal bucket shares plus one message per deviation rule that fires"""
    messages: List[str] = []
    for rule in DEVIATION_RULES:
        message = rule(metrics)
        if message is not None:
            messages.append(message)

    return AllocationAnalysis(
        current_equity=metrics.equity_percentage,
        current_debt=metrics.debt_percentage,
        current_gold=metrics.gold_percentage,
        current_cash=metrics.cash_percentage,
        ideal_equity=IDEAL_EQUITY,
        ideal_debt=IDEAL_DEBT,
        ideal_gold=IDEAL_GOLD,
        ideal_cash=IDEAL_CASH,
        deviation_messages=tuple(messages),
    )


def risk_band(equity_percentage: float) -> Tuple[int, RiskLevel, str]:
    """
    Map equity share to a discrete risk band.

    Bands:
    - 80+ : 9, Very High
    - >60 : 7, High
    - >40 : 5, Moderate
    - >20 : 3, Low
    - else: 1, Very Low
    """
    if equity_percentage >= 80:
        return (
            9,
            RiskLevel.VERY_HIGH,
            "Your portfolio is heavily weighted towards equities. "
            "High potential returns but significant volatility.",
        )
    elif equity_percentage > 60:
        return (
            7,
            RiskLevel.HIGH,
            "Aggressive portfolio with good growth potential. Suitable for long-term investors.",
        )
    elif equity_percentage > 40:
        return (
            5,
            RiskLevel.MODERATE,
            "Balanced portfolio with mix of growth and stability. Good for medium-term goals.",
        )
    elif equity_percentage > 20:
        return (
            3,
            RiskLevel.LOW,
            "Conservative portfolio focused on capital preservation. Lower returns but stable.",
        )
    else:
        return (
            1,
            RiskLevel.VERY_LOW,
            "Ultra-conservative portfolio. Consider adding some equity for inflation protection.",
        )


def diversification_band(distinct_asset_types: int) -> Tuple[int, str]:
    if distinct_asset_types >= 5:
        return 10, "Excellent"
    elif distinct_asset_types >= 3:
        return 7, "Good"
    else:
        return 4, "Poor — add more asset types"


def assess_risk(metrics: PortfolioMetrics) -> RiskAssessment:
    """Risk from equity share; diversification from asset types actually held (nonzero value)"""
    score, level, description = risk_band(metrics.equity_percentage)

    held_types = sum(1 for value in metrics.asset_type_values.values() if value != 0)
    diversification_score, diversification_level = diversification_band(held_types)

    return RiskAssessment(
        risk_score=score,
        risk_level=level,
        risk_description=description,
        diversification_score=diversification_score,
        diversification_level=diversification_level,
    )

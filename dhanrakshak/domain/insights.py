"""Insights orchestrator - composes aggregation, analysis and suggestions into one report"""

from typing import Sequence

from dhanrakshak.domain.aggregation import compute_metrics
from dhanrakshak.domain.analysis import analyze_allocation, assess_risk
from dhanrakshak.domain.models import (
    Asset,
    BankAccount,
    FixedDeposit,
    NarrativeSource,
    PortfolioInsights,
    PortfolioMetrics,
    TransactionRecord,
)
from dhanrakshak.domain.suggestions import generate_suggestions, generate_what_if_scenarios
from dhanrakshak.utils.number_format import format_large_number


def generate_heuristic_narrative(metrics: PortfolioMetrics) -> str:
    """Offline stand-in for the AI narrative, keyed on net-worth bands"""
    lines = ["**Portfolio Analysis**", ""]

    if metrics.total_net_worth < 100_000:
        lines += [
            "You're in the early stages of wealth building. Focus on:",
            "• Building an emergency fund first",
            "• Starting small SIPs to develop investing discipline",
            "• Maximizing employer PF matching",
        ]
    elif metrics.total_net_worth < 1_000_000:
        lines += [
            "Good progress! At this stage, focus on:",
            "• Diversifying across asset classes",
            "• Increasing equity allocation for growth",
            "• Considering tax-efficient instruments (ELSS, PPF)",
        ]
    else:
        lines += [
            "Strong portfolio! Optimization tips:",
            "• Rebalance annually to maintain target allocation",
            "• Consider international diversification",
            "• Explore direct equity for hands-on investors",
        ]

    if metrics.equity_percentage > 70:
        lines += ["", "High equity exposure - may face volatility in market downturns."]

    if metrics.cash_percentage > 30:
        lines += ["", "High cash holding is eroding to inflation. Deploy systematically."]

    return "\n".join(lines)


def summarize_for_narrative(metrics: PortfolioMetrics) -> str:
    """Plain-text portfolio summary handed to the AI collaborator as prompt input"""
    return "\n".join(
        [
            f"Net worth: ₹{format_large_number(metrics.total_net_worth)}",
            f"Invested: ₹{format_large_number(metrics.total_invested)}",
            f"Profit/loss: ₹{metrics.total_profit_loss:.0f}",
            f"Equity: {metrics.equity_percentage:.1f}%",
            f"Debt: {metrics.debt_percentage:.1f}%",
            f"Gold: {metrics.gold_percentage:.1f}%",
            f"Cash: {metrics.cash_percentage:.1f}%",
            f"Asset types held: {', '.join(sorted(metrics.asset_type_values)) or 'none'}",
            f"Projected next-month expenses: ₹{metrics.predicted_next_month_expense:.0f}",
        ]
    )


def build_insights_from_metrics(
    metrics: PortfolioMetrics,
    monthly_income: float,
    monthly_expenses: float,
    ai_narrative: str | None = None,
) -> PortfolioInsights:
    """Assemble the report for already-computed metrics"""
    if ai_narrative and ai_narrative.strip():
        narrative, source = ai_narrative.strip(), NarrativeSource.AI
    else:
        narrative, source = generate_heuristic_narrative(metrics), NarrativeSource.HEURISTIC

    return PortfolioInsights(
        metrics=metrics,
        allocation_analysis=analyze_allocation(metrics),
        risk_assessment=assess_risk(metrics),
        suggestions=tuple(generate_suggestions(metrics, monthly_income, monthly_expenses)),
        what_if_scenarios=tuple(generate_what_if_scenarios(metrics, monthly_income)),
        narrative=narrative,
        narrative_source=source,
    )


def build_portfolio_insights(
    assets: Sequence[Asset],
    bank_accounts: Sequence[BankAccount],
    deposits: Sequence[FixedDeposit],
    transactions: Sequence[TransactionRecord],
    monthly_income: float,
    monthly_expenses: float,
    ai_narrative: str | None = None,
) -> PortfolioInsights:
    """
    Main entry point: holdings snapshot in, complete insights report out.

    ``ai_narrative`` is text already produced by the external AI collaborator; when it
    is missing or blank the heuristic narrative is used instead.
    """
    metrics = compute_metrics(assets, bank_accounts, deposits, transactions)
    return build_insights_from_metrics(metrics, monthly_income, monthly_expenses, ai_narrative)

"""Unit tests for the insights orchestrator"""

import pytest
from dhanrakshak.domain.insights import (
    build_insights_from_metrics,
    build_portfolio_insights,
    generate_heuristic_narrative,
    summarize_for_narrative,
)
from dhanrakshak.domain.models import NarrativeSource, PortfolioMetrics, RiskLevel


def test_build_portfolio_insights(sample_assets, sample_bank_accounts, sample_deposits, sample_expenses):
    """Test end-to-end report for a salaried investor"""
    insights = build_portfolio_insights(
        sample_assets,
        sample_bank_accounts,
        sample_deposits,
        sample_expenses,
        monthly_income=120000,
        monthly_expenses=40000,
    )

    assert insights.metrics.total_net_worth == 900000
    assert insights.metrics.predicted_next_month_expense == pytest.approx(42000)
    assert insights.allocation_analysis.deviation_messages == ()
    assert insights.risk_assessment.risk_level == RiskLevel.MODERATE
    assert insights.risk_assessment.diversification_level == "Excellent"
    assert [s.title for s in insights.suggestions] == ["Build Emergency Fund", "Start/Increase SIP"]
    assert len(insights.what_if_scenarios) == 3
    assert insights.narrative_source == NarrativeSource.HEURISTIC
    assert insights.narrative.startswith("**Portfolio Analysis**\n\nGood progress!")


def test_ai_narrative_is_used_when_present():
    """Test non-blank AI text replaces the heuristic narrative"""
    insights = build_insights_from_metrics(PortfolioMetrics(), 0, 0, ai_narrative="  Rebalance yearly.  ")

    assert insights.narrative == "Rebalance yearly."
    assert insights.narrative_source == NarrativeSource.AI


def test_blank_ai_narrative_falls_back():
    """Test whitespace-only AI text is ignored"""
    insights = build_insights_from_metrics(PortfolioMetrics(), 0, 0, ai_narrative="   ")

    assert insights.narrative_source == NarrativeSource.HEURISTIC


def test_heuristic_narrative_bands():
    """Test net-worth bands and the equity/cash warnings"""
    early = generate_heuristic_narrative(PortfolioMetrics(total_net_worth=50000, total_cash=50000))
    strong = generate_heuristic_narrative(PortfolioMetrics(total_net_worth=2000000, total_equity=1500000))

    assert "early stages of wealth building" in early
    assert "High cash holding" in early
    assert "Strong portfolio!" in strong
    assert "High equity exposure" in strong
    assert "High cash holding" not in strong


def test_summarize_for_narrative():
    """Test prompt summary carries totals and shares"""
    metrics = PortfolioMetrics(
        total_net_worth=1000000,
        total_equity=600000,
        total_cash=400000,
        asset_type_values={"STOCK": 600000},
    )

    summary = summarize_for_narrative(metrics)

    assert "Net worth: ₹10.00 L" in summary
    assert "Equity: 60.0%" in summary
    assert "Cash: 40.0%" in summary
    assert "Asset types held: STOCK" in summary

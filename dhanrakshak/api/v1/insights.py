"""POST /v1/insights - portfolio insights endpoint"""

import logging
import time
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request

from dhanrakshak.api.dependencies import get_ai_client, get_request_id
from dhanrakshak.api.v1.schemas import (
    AllocationSchema,
    FixedDepositSchema,
    InsightsRequest,
    InsightsResponse,
    MetricsSchema,
    RiskSchema,
    ScenarioSchema,
    SuggestionSchema,
)
from dhanrakshak.domain.aggregation import compute_metrics
from dhanrakshak.domain.exceptions import AICollaboratorError, InvalidInputError
from dhanrakshak.domain.insights import build_insights_from_metrics, summarize_for_narrative
from dhanrakshak.domain.models import (
    Asset,
    BankAccount,
    FixedDeposit,
    PortfolioInsights,
    PortfolioMetrics,
    TransactionRecord,
)
from dhanrakshak.domain.projections import fixed_deposit_value_on
from dhanrakshak.infrastructure.clients.ai import AiCollaboratorClient
from dhanrakshak.infrastructure.observability.logging import log_insights_generated
from dhanrakshak.infrastructure.observability.metrics import ai_fallback_counter, record_insights

router = APIRouter()


def to_fixed_deposit(deposit: FixedDepositSchema, as_of: date) -> FixedDeposit:
    """Use the reported current value, or value a dated deposit from its terms on ``as_of``"""
    current_value = deposit.current_value
    if current_value is None:
        if deposit.start_date is None or deposit.maturity_date is None:
            raise InvalidInputError(
                f"Fixed deposit at {deposit.bank_name} needs current_value or start_date and maturity_date"
            )
        current_value = fixed_deposit_value_on(
            deposit.principal, deposit.interest_rate, deposit.start_date, deposit.maturity_date, as_of
        )
    return FixedDeposit(
        deposit.bank_name, deposit.principal, current_value, deposit.interest_rate, deposit.tenure_months
    )


def _metrics_schema(metrics: PortfolioMetrics) -> MetricsSchema:
    return MetricsSchema(
        total_net_worth=metrics.total_net_worth,
        total_invested=metrics.total_invested,
        total_equity=metrics.total_equity,
        total_debt=metrics.total_debt,
        total_gold=metrics.total_gold,
        total_cash=metrics.total_cash,
        total_profit_loss=metrics.total_profit_loss,
        equity_percentage=metrics.equity_percentage,
        debt_percentage=metrics.debt_percentage,
        gold_percentage=metrics.gold_percentage,
        cash_percentage=metrics.cash_percentage,
        asset_type_values=dict(metrics.asset_type_values),
        asset_type_invested=dict(metrics.asset_type_invested),
        predicted_next_month_expense=metrics.predicted_next_month_expense,
        forecast_narrative=metrics.forecast_narrative,
    )


def to_insights_response(insights: PortfolioInsights) -> InsightsResponse:
    allocation = insights.allocation_analysis
    risk = insights.risk_assessment
    return InsightsResponse(
        metrics=_metrics_schema(insights.metrics),
        allocation_analysis=AllocationSchema(
            current_equity=allocation.current_equity,
            current_debt=allocation.current_debt,
            current_gold=allocation.current_gold,
            current_cash=allocation.current_cash,
            ideal_equity=allocation.ideal_equity,
            ideal_debt=allocation.ideal_debt,
            ideal_gold=allocation.ideal_gold,
            ideal_cash=allocation.ideal_cash,
            deviation_messages=list(allocation.deviation_messages),
        ),
        risk_assessment=RiskSchema(
            risk_score=risk.risk_score,
            risk_level=risk.risk_level.value,
            risk_description=risk.risk_description,
            diversification_score=risk.diversification_score,
            diversification_level=risk.diversification_level,
        ),
        suggestions=[
            SuggestionSchema(
                title=s.title,
                priority=s.priority.value,
                description=s.description,
                action_item=s.action_item,
                icon_hint=s.icon_hint,
            )
            for s in insights.suggestions
        ],
        what_if_scenarios=[
            ScenarioSchema(title=w.title, results=list(w.results), category=w.category.value)
            for w in insights.what_if_scenarios
        ],
        narrative=insights.narrative,
        narrative_source=insights.narrative_source.value,
    )


@router.post("/insights", response_model=InsightsResponse)
async def create_insights(
    payload: InsightsRequest,
    request: Request,
    ai_client: Optional[AiCollaboratorClient] = Depends(get_ai_client),
):
    """
    Build the portfolio insights report for a holdings snapshot.

    Flow:
    1. Aggregate holdings into bucketed metrics
    2. Ask the AI collaborator for a narrative (if enabled and requested)
    3. Analyze allocation and risk, generate suggestions and what-if scenarios
    """
    start_time = time.time()
    request_id = get_request_id(request)
    as_of = payload.as_of or date.today()

    try:
        metrics = compute_metrics(
            assets=[
                Asset(a.asset_type.upper(), a.current_value, a.invested_amount, a.name) for a in payload.assets
            ],
            bank_accounts=[BankAccount(b.bank_name, b.balance, b.account_last4) for b in payload.bank_accounts],
            deposits=[to_fixed_deposit(d, as_of) for d in payload.fixed_deposits],
            transactions=[
                TransactionRecord(t.type.upper(), t.amount, t.description, t.occurred_on)
                for t in payload.transactions
            ],
        )

        ai_narrative = None
        if payload.use_ai_narrative and ai_client is not None:
            try:
                ai_narrative = await ai_client.generate_insights(summarize_for_narrative(metrics))
            except AICollaboratorError as e:
                ai_fallback_counter.labels(reason="UNAVAILABLE").inc()
                logging.warning(f"AI narrative unavailable, using heuristic: {e}", extra={"request_id": request_id})

        insights = build_insights_from_metrics(
            metrics, payload.monthly_income, payload.monthly_expenses, ai_narrative
        )

    except InvalidInputError as e:
        logging.warning(f"Invalid holdings: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=400, detail=str(e))

    except Exception as e:
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    duration_ms = (time.time() - start_time) * 1000
    record_insights(insights.narrative_source.value, len(insights.suggestions))
    log_insights_generated(
        request_id,
        net_worth=metrics.total_net_worth,
        suggestion_count=len(insights.suggestions),
        narrative_source=insights.narrative_source.value,
        duration_ms=duration_ms,
    )

    return to_insights_response(insights)

"""Portfolio aggregation - buckets holdings into equity/debt/gold/cash and forecasts expenses"""

import math
from typing import Dict, Sequence

from dhanrakshak.domain.exceptions import InvalidInputError
from dhanrakshak.domain.models import (
    Asset,
    BankAccount,
    FixedDeposit,
    PortfolioMetrics,
    TransactionRecord,
)
from dhanrakshak.utils.number_format import format_rupees

EQUITY_ASSET_TYPES = frozenset({"STOCK", "MUTUAL_FUND"})
DEBT_ASSET_TYPES = frozenset({"EPF", "PPF", "BOND"})
GOLD_ASSET_TYPES = frozenset({"GOLD"})

FIXED_DEPOSIT_KEY = "FIXED_DEPOSIT"
CASH_KEY = "CASH"

EXPENSE_TYPE = "EXPENSE"
FORECAST_BUFFER = 1.05  # flat 5% on top of the observed spend


def _check_collection(name: str, value: object) -> None:
    if value is None:
        raise InvalidInputError(f"{name} must be a collection, got None")


def _check_amount(name: str, value: float) -> None:
    if not isinstance(value, (int, float)) or not math.isfinite(value):
        raise InvalidInputError(f"{name} must be a finite number, got {value!r}")


def predict_next_month_expense(transactions: Sequence[TransactionRecord]) -> float:
    """
    Forecast next month's spend from the supplied history.

    This is an approximation, not a time-series model: the history is treated as one
    month of spend and a flat 5% buffer is added. No expenses means a zero forecast.
    """
    expenses = [t.amount for t in transactions if t.type == EXPENSE_TYPE]
    if not expenses:
        return 0.0
    return sum(expenses) * FORECAST_BUFFER


def forecast_narrative(predicted_expense: float) -> str:
    return (
        "Based on your spending patterns, next month's expenses are projected to be around "
        f"{format_rupees(predicted_expense)}. Plan accordingly."
    )


def compute_metrics(
    assets: Sequence[Asset],
    bank_accounts: Sequence[BankAccount],
    deposits: Sequence[FixedDeposit],
    transactions: Sequence[TransactionRecord],
) -> PortfolioMetrics:
    """
    Aggregate a holdings snapshot into PortfolioMetrics.

    Bucketing (fixed):
    - STOCK, MUTUAL_FUND -> equity
    - EPF, PPF, BOND and fixed deposits -> debt
    - GOLD -> gold
    - bank balances -> cash

    Invested amounts run in parallel: assets use current - profit/loss, deposits their
    principal, and cash counts as fully invested at its balance.

    Inputs are read, never modified.
    """
    _check_collection("assets", assets)
    _check_collection("bank_accounts", bank_accounts)
    _check_collection("deposits", deposits)
    _check_collection("transactions", transactions)

    asset_type_values: Dict[str, float] = {}
    asset_type_invested: Dict[str, float] = {}
    total_equity = 0.0
    total_debt = 0.0
    total_gold = 0.0
    total_cash = 0.0
    total_profit_loss = 0.0
    total_invested = 0.0

    for asset in assets:
        _check_amount("asset.current_value", asset.current_value)
        _check_amount("asset.invested_amount", asset.invested_amount)
        value = asset.current_value
        asset_type_values[asset.asset_type] = asset_type_values.get(asset.asset_type, 0.0) + value

        if asset.asset_type in EQUITY_ASSET_TYPES:
            total_equity += value
        elif asset.asset_type in DEBT_ASSET_TYPES:
            total_debt += value
        elif asset.asset_type in GOLD_ASSET_TYPES:
            total_gold += value

        total_profit_loss += asset.profit_loss

        invested = asset.current_value - asset.profit_loss
        asset_type_invested[asset.asset_type] = asset_type_invested.get(asset.asset_type, 0.0) + invested
        total_invested += invested

    for account in bank_accounts:
        _check_amount("bank_account.balance", account.balance)
        total_cash += account.balance

    for deposit in deposits:
        _check_amount("deposit.current_value", deposit.current_value)
        _check_amount("deposit.principal", deposit.principal)
        total_debt += deposit.current_value
        asset_type_invested[FIXED_DEPOSIT_KEY] = asset_type_invested.get(FIXED_DEPOSIT_KEY, 0.0) + deposit.principal
        total_invested += deposit.principal

    # Cash has no cost basis; it is reported as invested at face value
    asset_type_invested[CASH_KEY] = total_cash
    total_invested += total_cash

    predicted = predict_next_month_expense(transactions)

    return PortfolioMetrics(
        total_net_worth=total_equity + total_debt + total_gold + total_cash,
        total_invested=total_invested,
        total_equity=total_equity,
        total_debt=total_debt,
        total_gold=total_gold,
        total_cash=total_cash,
        total_profit_loss=total_profit_loss,
        asset_type_values=asset_type_values,
        asset_type_invested=asset_type_invested,
        predicted_next_month_expense=predicted,
        forecast_narrative=forecast_narrative(predicted),
    )

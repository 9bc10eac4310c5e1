"""POST /v1/calculators/* - investment and loan projections"""

import logging

from fastapi import APIRouter, HTTPException

from dhanrakshak.api.v1.schemas import (
    EmiRequest,
    EmiResponse,
    FdRequest,
    LumpsumRequest,
    ProjectionResponse,
    RdRequest,
    SipRequest,
)
from dhanrakshak.domain.exceptions import InvalidInputError
from dhanrakshak.domain.projections import (
    COMPOUNDING_PERIODS,
    fd_maturity_amount,
    loan_emi,
    lumpsum_future_value,
    rd_maturity_amount,
    sip_future_value,
)

router = APIRouter()


def _projection(invested: float, future_value: float) -> ProjectionResponse:
    return ProjectionResponse(
        invested=round(invested, 2),
        future_value=round(future_value, 2),
        gains=round(future_value - invested, 2),
    )


@router.post("/calculators/sip", response_model=ProjectionResponse)
def calculate_sip(payload: SipRequest):
    try:
        future_value = sip_future_value(payload.monthly_amount, payload.annual_rate, payload.years)
    except InvalidInputError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _projection(payload.monthly_amount * payload.years * 12, future_value)


@router.post("/calculators/lumpsum", response_model=ProjectionResponse)
def calculate_lumpsum(payload: LumpsumRequest):
    try:
        future_value = lumpsum_future_value(payload.principal, payload.annual_rate, payload.years)
    except InvalidInputError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _projection(payload.principal, future_value)


@router.post("/calculators/fd", response_model=ProjectionResponse)
def calculate_fd(payload: FdRequest):
    if payload.compounding.upper() not in COMPOUNDING_PERIODS:
        raise HTTPException(
            status_code=400,
            detail=f"compounding must be one of {', '.join(COMPOUNDING_PERIODS)}",
        )
    try:
        maturity = fd_maturity_amount(payload.principal, payload.annual_rate, payload.years, payload.compounding)
    except InvalidInputError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _projection(payload.principal, maturity)


@router.post("/calculators/rd", response_model=ProjectionResponse)
def calculate_rd(payload: RdRequest):
    try:
        maturity = rd_maturity_amount(payload.monthly_amount, payload.annual_rate, payload.years)
    except InvalidInputError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _projection(payload.monthly_amount * int(payload.years * 12), maturity)


@router.post("/calculators/emi", response_model=EmiResponse)
def calculate_emi(payload: EmiRequest):
    try:
        emi = loan_emi(payload.principal, payload.annual_rate, payload.tenure_months)
    except InvalidInputError as e:
        logging.warning(f"Invalid EMI input: {e}")
        raise HTTPException(status_code=400, detail=str(e))

    total_payment = emi * payload.tenure_months
    return EmiResponse(
        emi=round(emi, 2),
        total_payment=round(total_payment, 2),
        total_interest=round(total_payment - payload.principal, 2),
    )

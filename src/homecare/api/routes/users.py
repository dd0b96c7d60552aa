"""Per-user monthly balance endpoints."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query, status

from ...data.assignments_repository import AssignmentsUnavailable
from ...schemas.schedule import MonthlyBalanceResponse
from ...services.schedule.service import compute_user_monthly_balance

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/{user_id}/monthly-balance", response_model=MonthlyBalanceResponse, status_code=status.HTTP_200_OK)
def monthly_balance(
    user_id: str,
    month: int = Query(..., ge=1, le=12),
    year: int = Query(..., ge=1900, le=2200),
) -> MonthlyBalanceResponse:
    try:
        balance = compute_user_monthly_balance(user_id, month, year)
    except AssignmentsUnavailable as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    if balance is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"User {user_id} not found")
    return balance

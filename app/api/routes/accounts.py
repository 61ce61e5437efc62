"""Account API routes."""

from fastapi import APIRouter, Depends, HTTPException, status

from app.api.dependencies import get_account_repository
from app.repositories.account_repository import AccountRepository
from app.schemas.account import AccountResponse, MeterReadingResponse

router = APIRouter(prefix="/accounts", tags=["accounts"])


@router.get("/{account_id}", response_model=AccountResponse)
def get_account(
    account_id: int,
    repository: AccountRepository = Depends(get_account_repository),
) -> AccountResponse:
    """Get an account with its readings, oldest first."""
    account = repository.get_by_id(account_id)
    if not account:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Account not found",
        )
    readings = sorted(account.readings, key=lambda r: r.reading_timestamp)
    return AccountResponse(
        account_id=account.account_id,
        first_name=account.first_name,
        last_name=account.last_name,
        readings=[MeterReadingResponse.model_validate(r) for r in readings],
    )

from fastapi import APIRouter, Depends

from ..models.user import TokenRequest, TokenResponse
from ..services.auth_service import TokenService, get_token_service

router = APIRouter(tags=["auth"])


@router.post("/jwt", response_model=TokenResponse)
async def issue_token(
    body: TokenRequest,
    tokens: TokenService = Depends(get_token_service),
) -> TokenResponse:
    return TokenResponse(token=tokens.issue_token(body.email))


__all__ = ["router"]

# career_canvas/routers/auth_router.py
import httpx
from fastapi import APIRouter, Depends

from ..dependencies.service_dependencies import get_auth_service, get_http_client
from ..oauth import OAuthProvider
from ..schemas import AuthCodeRequest, AuthResponse, TokenData, UserResponse, ValidateTokenResponse
from ..security import get_current_user
from ..services import AuthService

router = APIRouter(prefix="/api", tags=["authentication"])


async def _login(provider: OAuthProvider, body: AuthCodeRequest, auth_service: AuthService, client: httpx.AsyncClient):
    token, user = await auth_service.login(provider, body.code, body.redirect_uri, client)
    return AuthResponse(token=token, user=UserResponse.model_validate(user))


@router.post("/authGoogle", response_model=AuthResponse)
async def auth_google(
    body: AuthCodeRequest,
    auth_service: AuthService = Depends(get_auth_service),
    client: httpx.AsyncClient = Depends(get_http_client),
):
    """Exchange a Google authorization code for a session token"""
    return await _login(OAuthProvider.GOOGLE, body, auth_service, client)


@router.post("/authMicrosoft", response_model=AuthResponse)
async def auth_microsoft(
    body: AuthCodeRequest,
    auth_service: AuthService = Depends(get_auth_service),
    client: httpx.AsyncClient = Depends(get_http_client),
):
    """Exchange a Microsoft authorization code for a session token"""
    return await _login(OAuthProvider.MICROSOFT, body, auth_service, client)


@router.get("/validateToken", response_model=ValidateTokenResponse)
async def validate_token(current_user: TokenData = Depends(get_current_user)):
    """Echo the caller's identity claims if the bearer token is still valid"""
    return ValidateTokenResponse(user=current_user)

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

import httpx

from .config import get_settings
from .exceptions import OAuthError

logger = logging.getLogger(__name__)


class OAuthProvider(str, Enum):
    GOOGLE = "google"
    MICROSOFT = "microsoft"


@dataclass
class UserProfile:
    email: str
    name: Optional[str]
    picture: Optional[str]
    provider_id: Optional[str]


@dataclass
class OAuthToken:
    access_token: str
    token_type: str
    scope: Optional[str] = None
    expires_in: Optional[int] = None


GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
GOOGLE_USERINFO_URL = "https://www.googleapis.com/oauth2/v2/userinfo"

MICROSOFT_TOKEN_URL = "https://login.microsoftonline.com/common/oauth2/v2.0/token"
MICROSOFT_ME_URL = "https://graph.microsoft.com/v1.0/me"
MICROSOFT_SCOPES = "openid profile email"


def _token_request(provider: OAuthProvider, code: str, redirect_uri: Optional[str]) -> tuple:
    settings = get_settings()
    data = {
        "code": code,
        "grant_type": "authorization_code",
    }
    if redirect_uri:
        data["redirect_uri"] = redirect_uri

    if provider == OAuthProvider.GOOGLE:
        data["client_id"] = settings.GOOGLE_CLIENT_ID
        data["client_secret"] = settings.GOOGLE_CLIENT_SECRET
        return GOOGLE_TOKEN_URL, data

    if provider == OAuthProvider.MICROSOFT:
        data["client_id"] = settings.MICROSOFT_CLIENT_ID
        data["client_secret"] = settings.MICROSOFT_CLIENT_SECRET
        data["scope"] = MICROSOFT_SCOPES
        return MICROSOFT_TOKEN_URL, data

    raise ValueError(f"Unknown provider: {provider}")


async def exchange_code_for_token(
    provider: OAuthProvider,
    code: str,
    redirect_uri: Optional[str],
    client: httpx.AsyncClient,
) -> OAuthToken:
    """Single attempt; any transport failure or missing access_token is an OAuthError"""
    token_url, data = _token_request(provider, code, redirect_uri)
    headers = {"Content-Type": "application/x-www-form-urlencoded", "Accept": "application/json"}

    try:
        response = await client.post(token_url, data=data, headers=headers)
    except httpx.TimeoutException:
        raise OAuthError(f"{provider.value} token request timed out")
    except httpx.RequestError as e:
        raise OAuthError(f"Network error contacting {provider.value}: {e}")

    try:
        token_data = response.json() if response.content else {}
    except ValueError:
        raise OAuthError("Provider returned invalid JSON response")

    if not isinstance(token_data, dict) or "access_token" not in token_data:
        error_msg = ""
        if isinstance(token_data, dict):
            error_msg = token_data.get("error_description") or token_data.get("error") or ""
        logger.warning(f"{provider.value} token exchange failed with HTTP {response.status_code}")
        raise OAuthError(
            f"Failed to get access token from {provider.value}" + (f": {error_msg}" if error_msg else "")
        )

    return OAuthToken(
        access_token=token_data["access_token"],
        token_type=token_data.get("token_type", "Bearer"),
        scope=token_data.get("scope"),
        expires_in=token_data.get("expires_in"),
    )


async def fetch_user_profile(
    provider: OAuthProvider,
    token: OAuthToken,
    client: httpx.AsyncClient,
) -> UserProfile:
    if provider == OAuthProvider.GOOGLE:
        return await _fetch_google_profile(token.access_token, client)
    elif provider == OAuthProvider.MICROSOFT:
        return await _fetch_microsoft_profile(token.access_token, client)
    else:
        raise ValueError(f"Unknown provider: {provider}")


async def _get_json(url: str, access_token: str, client: httpx.AsyncClient) -> dict:
    headers = {"Authorization": f"Bearer {access_token}"}
    try:
        response = await client.get(url, headers=headers)
        response.raise_for_status()
        user_data = response.json()
    except httpx.HTTPStatusError as e:
        raise OAuthError(f"Profile request failed: HTTP {e.response.status_code}")
    except httpx.RequestError as e:
        raise OAuthError(f"Network error fetching profile: {e}")
    except ValueError:
        raise OAuthError("Provider returned invalid JSON response")

    if not isinstance(user_data, dict):
        raise OAuthError("Provider returned an unexpected profile payload")
    return user_data


async def _fetch_google_profile(access_token: str, client: httpx.AsyncClient) -> UserProfile:
    user_data = await _get_json(GOOGLE_USERINFO_URL, access_token, client)

    email = user_data.get("email")
    if not email:
        raise OAuthError("Google account has no email")

    return UserProfile(
        email=email,
        name=user_data.get("name"),
        picture=user_data.get("picture"),
        provider_id=str(user_data["id"]) if user_data.get("id") is not None else None,
    )


async def _fetch_microsoft_profile(access_token: str, client: httpx.AsyncClient) -> UserProfile:
    user_data = await _get_json(MICROSOFT_ME_URL, access_token, client)

    # Work accounts often leave `mail` empty; the UPN is then the login address
    email = user_data.get("mail") or user_data.get("userPrincipalName")
    if not email:
        raise OAuthError("Microsoft account has no email")

    return UserProfile(
        email=email,
        name=user_data.get("displayName"),
        # Graph serves the photo from a separate endpoint
        picture=None,
        provider_id=user_data.get("id"),
    )

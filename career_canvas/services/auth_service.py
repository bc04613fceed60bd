# career_canvas/services/auth_service.py
import logging
from typing import Optional, Tuple

import httpx
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..constants import ErrorMessages
from ..exceptions import InternalError, InvalidInputError, OAuthError
from ..models import User
from ..oauth import OAuthProvider, UserProfile, exchange_code_for_token, fetch_user_profile
from ..security import create_access_token

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, db: Session):
        self.db = db

    async def login(
        self,
        provider: OAuthProvider,
        code: Optional[str],
        redirect_uri: Optional[str],
        client: httpx.AsyncClient,
    ) -> Tuple[str, User]:
        """
        Exchanges an authorization code with the provider, upserts the local
        user by email and returns a freshly signed session token with that user.
        """
        if not code:
            raise InvalidInputError(ErrorMessages.CODE_REQUIRED)

        try:
            token = await exchange_code_for_token(provider, code, redirect_uri, client)
            profile = await fetch_user_profile(provider, token, client)
        except OAuthError as e:
            logger.warning(f"{provider.value} login failed: {e.message}")
            raise OAuthError(f"{ErrorMessages.AUTH_FAILED}: {e.message}")

        user = self.upsert_user(provider, profile)
        access_token = create_access_token({
            "id": user.id,
            "email": user.email,
            "name": user.name,
            "provider": user.provider,
            "picture": user.picture,
        })
        logger.info(f"User {user.id} logged in with {provider.value}")
        return access_token, user

    def upsert_user(self, provider: OAuthProvider, profile: UserProfile) -> User:
        """One user per email; a repeat login refreshes name, picture and provider"""
        try:
            user = self.db.query(User).filter(User.email == profile.email).first()
            if user is None:
                user = User(email=profile.email)
                self.db.add(user)
            self._apply_profile(user, provider, profile)
            self.db.commit()
        except IntegrityError:
            # Another login for the same email inserted first; update that row
            self.db.rollback()
            user = self._update_existing(provider, profile)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Database error upserting user: {e}")
            raise InternalError(ErrorMessages.INTERNAL, details=str(e))

        self.db.refresh(user)
        return user

    def _update_existing(self, provider: OAuthProvider, profile: UserProfile) -> User:
        try:
            user = self.db.query(User).filter(User.email == profile.email).one()
            self._apply_profile(user, provider, profile)
            self.db.commit()
            return user
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Database error updating user after concurrent insert: {e}")
            raise InternalError(ErrorMessages.INTERNAL, details=str(e))

    @staticmethod
    def _apply_profile(user: User, provider: OAuthProvider, profile: UserProfile):
        user.name = profile.name
        user.picture = profile.picture
        user.provider = provider.value
        user.provider_id = profile.provider_id

# shopfront/services/session_service.py
import logging
from typing import Optional
import aiohttp
import pydantic
from ..exceptions import ApiError, AuthError
from ..models.user import Session, SessionUser
from .api_client import ApiClient

class SessionService:
    """Creates and verifies chat sessions against the backend"""

    def __init__(self, http_session: aiohttp.ClientSession, base_url: str, timeout: int = 30):
        self.http = http_session
        self.base_url = base_url
        self.timeout = timeout
        self.logger = logging.getLogger(__name__)

    def client(self, session: Optional[Session] = None) -> ApiClient:
        """API client carrying the session's bearer token"""
        return ApiClient(
            self.http,
            self.base_url,
            token=session.token if session else None,
            timeout=self.timeout
        )

    async def login(self, token: str) -> Session:
        """Verify a bearer token and build the session for it"""
        token = token.strip()
        if not token:
            raise AuthError("Token is empty")

        try:
            data = await ApiClient(self.http, self.base_url, token=token, timeout=self.timeout).verify_token()
        except ApiError as e:
            if e.status in (401, 403):
                raise AuthError("Token was rejected") from e
            raise

        user_data = data.get("user")
        if not user_data:
            raise AuthError("Token was rejected")

        try:
            user = SessionUser.model_validate(user_data)
        except pydantic.ValidationError as e:
            self.logger.error(f"Unusable user payload from /verifyToken: {e}")
            raise AuthError("Backend returned an unusable user") from e

        self.logger.info(f"Session opened for user {user.id} ({user.role.value})")
        return Session(token=token, user=user)

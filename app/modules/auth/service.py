import hashlib
import time
from supabase import Client
from app.config.settings import settings
from app.core.exceptions import StepQuestError, UnauthenticatedError, UnavailableError
from app.modules.auth.schemas import LoginRequest, RegisterRequest, TokenResponse, RegisterResponse
from app.modules.profiles.service import ProfileService
from fastapi import HTTPException
from typing import Dict, Any, Optional
import logging

logger = logging.getLogger(__name__)

# In-memory cache for get_current_user to reduce Supabase auth calls (e.g. many parallel requests with same token)
_AUTH_USER_CACHE: Dict[str, tuple] = {}


def clear_auth_cache() -> None:
    _AUTH_USER_CACHE.clear()


class AuthService:
    def __init__(self, supabase: Client, profiles: Optional[ProfileService] = None):
        self.supabase = supabase
        self.profiles = profiles

    def register(self, register_data: RegisterRequest) -> RegisterResponse:
        """Register a new user using Supabase Auth and create their step profile"""
        try:
            user_metadata = {}
            if register_data.name:
                user_metadata["name"] = register_data.name

            auth_response = self.supabase.auth.sign_up({
                "email": register_data.email,
                "password": register_data.password,
                "options": {
                    "data": user_metadata
                }
            })
        except Exception as e:
            error_message = str(e)
            if "already registered" in error_message.lower() or "already exists" in error_message.lower():
                raise HTTPException(status_code=400, detail="User already exists")
            raise UnavailableError(f"Registration failed: {error_message}")

        if not auth_response.user:
            raise HTTPException(status_code=400, detail="Failed to register user")

        user = auth_response.user
        friend_code = None
        if self.profiles is not None:
            profile = self.profiles.create_profile(user.id, register_data.name or "")
            friend_code = profile.friend_code

        logger.info(f"Registered user {user.id}")
        return RegisterResponse(
            user_id=user.id,
            email=user.email or register_data.email,
            friend_code=friend_code,
            message="User registered successfully"
        )

    def login(self, login_data: LoginRequest) -> TokenResponse:
        """Authenticate user using Supabase Auth; makes sure a step profile exists"""
        try:
            auth_response = self.supabase.auth.sign_in_with_password({
                "email": login_data.email,
                "password": login_data.password
            })
        except Exception as e:
            error_message = str(e)
            if "invalid" in error_message.lower() or "credentials" in error_message.lower():
                raise UnauthenticatedError("Invalid email or password")
            raise UnavailableError(f"Login failed: {error_message}")

        if not auth_response.user or not auth_response.session:
            raise UnauthenticatedError("Invalid credentials")

        user = auth_response.user
        if self.profiles is not None:
            name = (user.user_metadata or {}).get("name", "")
            self.profiles.ensure_profile(user.id, name)

        return TokenResponse(
            access_token=auth_response.session.access_token,
            token_type="bearer",
            user_id=user.id,
            email=user.email or login_data.email
        )

    def get_current_user(self, token: str) -> Dict[str, Any]:
        """Get current user details from Supabase Auth token. Uses short TTL cache to reduce auth API calls."""
        try:
            cache_key = hashlib.sha256(token.encode()).hexdigest()
            now = time.monotonic()
            if cache_key in _AUTH_USER_CACHE:
                user_data, expiry = _AUTH_USER_CACHE[cache_key]
                if now < expiry:
                    return user_data
                del _AUTH_USER_CACHE[cache_key]
            user_response = self.supabase.auth.get_user(jwt=token)
            if not user_response or not user_response.user:
                raise UnauthenticatedError("Invalid or expired token")
            user = user_response.user
            user_data = {
                "id": user.id,
                "email": user.email,
                "user_metadata": user.user_metadata or {},
            }
            if len(_AUTH_USER_CACHE) < settings.auth_cache_max_size:
                _AUTH_USER_CACHE[cache_key] = (user_data, now + settings.auth_cache_ttl_seconds)
            return user_data
        except StepQuestError:
            raise
        except Exception as e:
            error_msg = str(e)
            if "JWT" in error_msg or "expired" in error_msg.lower() or "invalid" in error_msg.lower():
                raise UnauthenticatedError("Invalid or expired token")
            raise UnauthenticatedError("Authentication failed")

    def current_user_id(self, token: Optional[str]) -> str:
        if not token:
            raise UnauthenticatedError("Not authenticated")
        return self.get_current_user(token)["id"]

    def logout(self, token: str) -> bool:
        """Logout user using Supabase Auth"""
        cache_key = hashlib.sha256(token.encode()).hexdigest()
        _AUTH_USER_CACHE.pop(cache_key, None)
        try:
            # Supabase Auth tokens are stateless JWTs; the token still expires on its own
            self.supabase.auth.sign_out()
            return True
        except Exception as e:
            logger.warning(f"Sign out failed: {e}")
            return False

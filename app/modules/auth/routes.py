from fastapi import APIRouter, Depends
from app.core.dependencies import get_current_user, get_current_token, get_profile_service
from app.database.supabase_client import get_supabase
from app.modules.auth.schemas import LoginRequest, RegisterRequest, TokenResponse, RegisterResponse
from app.modules.auth.service import AuthService
from app.modules.profiles.service import ProfileService
from supabase import Client
from typing import Dict

router = APIRouter(prefix="/auth", tags=["auth"])


def get_auth_flow_service(
    supabase: Client = Depends(get_supabase),
    profiles: ProfileService = Depends(get_profile_service)
) -> AuthService:
    return AuthService(supabase, profiles)


@router.post("/register", response_model=RegisterResponse, status_code=201)
async def register(
    register_data: RegisterRequest,
    service: AuthService = Depends(get_auth_flow_service)
):
    """Register a new user and create their step profile"""
    return service.register(register_data)


@router.post("/login", response_model=TokenResponse)
async def login(
    login_data: LoginRequest,
    service: AuthService = Depends(get_auth_flow_service)
):
    """Login and get access token"""
    return service.login(login_data)


@router.post("/logout", status_code=200)
async def logout(
    token: str = Depends(get_current_token),
    service: AuthService = Depends(get_auth_flow_service)
):
    """Logout and invalidate token"""
    service.logout(token)
    return {"message": "Logged out successfully"}


@router.get("/me")
async def get_me(current_user: Dict = Depends(get_current_user)):
    """Get current authenticated user"""
    return current_user

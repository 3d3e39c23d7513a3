from fastapi import APIRouter, Depends, Request, status
from sqlmodel import Session
from database import get_session
from errors import database_errors
from schemas import SignupRequest, LoginRequest, AuthResponse, UserProfile
from middleware.auth import verify_jwt_middleware, current_user_id
from services.accounts import AccountService

router = APIRouter()


def get_account_service(
    request: Request,
    session: Session = Depends(get_session)
) -> AccountService:
    return AccountService(session, request.app.state.settings)


@router.post("/auth/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def signup(
    signup_data: SignupRequest,
    service: AccountService = Depends(get_account_service)
):
    """
    Register a new user

    Args:
        signup_data: Name, email and password
        service: Account service

    Returns:
        Session token and public user fields
    """
    with database_errors("Server error during signup", "Signup error"):
        return service.register(signup_data)


@router.post("/auth/login", response_model=AuthResponse)
def login(
    login_data: LoginRequest,
    service: AccountService = Depends(get_account_service)
):
    """
    Exchange email and password for a session token

    Args:
        login_data: Email and password
        service: Account service

    Returns:
        Session token and public user fields
    """
    with database_errors("Server error during login", "Login error"):
        return service.login(login_data)


@router.get(
    "/auth/profile",
    dependencies=[Depends(verify_jwt_middleware)],
    response_model=UserProfile
)
def profile(request: Request, service: AccountService = Depends(get_account_service)):
    """Get the authenticated user's profile"""
    with database_errors("Server error", "Profile fetch error"):
        return service.get_profile(current_user_id(request))

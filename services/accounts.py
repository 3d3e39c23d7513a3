import logging

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from config import Settings
from errors import AuthError, ConflictError, NotFoundError, ValidationError
from models import User
from schemas import AuthResponse, LoginRequest, SignupRequest, UserProfile, UserSummary
from utils.jwt import create_access_token
from utils.passwords import hash_password, verify_password

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


def normalize_email(email: str) -> str:
    return email.strip().lower()


class AccountService:
    """Registration, credential checks and profile lookup"""

    def __init__(self, session: Session, settings: Settings):
        self.session = session
        self.settings = settings

    def register(self, data: SignupRequest) -> AuthResponse:
        """
        Create a user and issue a session token

        Raises:
            ValidationError: If a field is missing or the password is too short
            ConflictError: If the email is already registered
        """
        name = (data.name or "").strip()
        email = normalize_email(data.email or "")
        password = data.password or ""

        if not name or not email or not password:
            raise ValidationError("All fields are required")

        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

        if self._find_by_email(email):
            raise ConflictError("Email already in use")

        user = User(
            name=name,
            email=email,
            password_hash=hash_password(password, self.settings.bcrypt_rounds),
        )
        self.session.add(user)
        try:
            self.session.commit()
        except IntegrityError:
            # Lost a race with a concurrent signup for the same email
            self.session.rollback()
            raise ConflictError("Email already in use")
        self.session.refresh(user)

        logger.info("Registered user %s", user.id)
        return self._auth_response(user)

    def login(self, data: LoginRequest) -> AuthResponse:
        """
        Verify credentials and issue a session token

        Unknown email and wrong password fail identically.

        Raises:
            ValidationError: If email or password is missing
            AuthError: If the credentials do not match a user
        """
        if not data.email or not data.password:
            raise ValidationError("Email and password are required")

        user = self._find_by_email(normalize_email(data.email))
        if not user or not verify_password(data.password, user.password_hash):
            logger.info("Rejected login attempt")
            raise AuthError("Invalid credentials")

        logger.info("User %s logged in", user.id)
        return self._auth_response(user)

    def get_profile(self, user_id: str) -> UserProfile:
        """
        Raises:
            NotFoundError: If the user no longer exists
        """
        user = self.session.get(User, user_id)
        if not user:
            raise NotFoundError("User not found")
        return UserProfile.model_validate(user)

    def _find_by_email(self, email: str):
        return self.session.exec(select(User).where(User.email == email)).first()

    def _auth_response(self, user: User) -> AuthResponse:
        token = create_access_token(user.id, user.email, self.settings)
        return AuthResponse(token=token, user=UserSummary.model_validate(user))

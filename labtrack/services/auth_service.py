"""Auth service — login and current-user lookup."""

from typing import Dict, Any

from sqlalchemy.orm import Session

from labtrack.core.config import Settings
from labtrack.core.exceptions import AuthenticationError, ResourceNotFoundError
from labtrack.core.security import create_access_token, verify_password
from labtrack.models.user import User


class AuthService:
    """Handles authentication."""

    @staticmethod
    def authenticate(db: Session, email: str, password: str, settings: Settings) -> Dict[str, Any]:
        """Authenticate user and return a JWT access token.

        Raises:
            AuthenticationError: If credentials are invalid.
        """
        user = db.query(User).filter(User.email == email).first()
        if not user or not verify_password(password, user.hashed_password):
            raise AuthenticationError("Invalid email or password")

        token_data = {
            "sub": str(user.id),
            "role": user.role.value,
        }
        access_token = create_access_token(token_data, settings)

        return {
            "access_token": access_token,
            "token_type": "bearer",
            "user": {
                "id": user.id,
                "name": user.name,
                "email": user.email,
                "role": user.role.value,
            },
        }

    @staticmethod
    def get_user(db: Session, user_id: int) -> User:
        """Get a user by id."""
        user = db.query(User).filter(User.id == user_id).first()
        if not user:
            raise ResourceNotFoundError(f"User {user_id} not found")
        return user


auth_service = AuthService()

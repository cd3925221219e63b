"""User service — admin-only user management."""

from typing import List, Optional

from sqlalchemy.orm import Session

from labtrack.core.exceptions import ResourceConflictError, ResourceNotFoundError, ValidationError
from labtrack.core.security import Actor, hash_password
from labtrack.models.school import School
from labtrack.models.user import User, UserRole
from labtrack.schemas.schemas import UserCreate, UserUpdate


class UserService:
    """Create, edit and delete application users."""

    @staticmethod
    def list_users(db: Session) -> List[User]:
        return db.query(User).order_by(User.created_at.desc(), User.id.desc()).all()

    @staticmethod
    def _check_unique(db: Session, name: Optional[str], email: Optional[str], exclude_id: Optional[int] = None) -> None:
        if email:
            query = db.query(User).filter(User.email == email)
            if exclude_id is not None:
                query = query.filter(User.id != exclude_id)
            if query.first():
                raise ResourceConflictError("Email already exists")
        if name:
            query = db.query(User).filter(User.name == name)
            if exclude_id is not None:
                query = query.filter(User.id != exclude_id)
            if query.first():
                raise ResourceConflictError("Username already exists")

    @staticmethod
    def _check_school(db: Session, school_id: Optional[int]) -> None:
        if school_id is not None and not db.query(School).filter(School.id == school_id).first():
            raise ResourceNotFoundError("School not found")

    @staticmethod
    def create_user(db: Session, fields: UserCreate) -> User:
        """Create a new user. The affiliated school is kept for faculty only."""
        UserService._check_unique(db, fields.username, fields.email)
        school_id = fields.affiliated_school_id if fields.role == UserRole.faculty else None
        UserService._check_school(db, school_id)

        user = User(
            name=fields.username,
            email=fields.email,
            hashed_password=hash_password(fields.password),
            role=fields.role,
            affiliated_school_id=school_id,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    @staticmethod
    def update_user(db: Session, user_id: int, fields: UserUpdate) -> User:
        user = db.query(User).filter(User.id == user_id).first()
        if not user:
            raise ResourceNotFoundError("User not found")

        UserService._check_unique(db, fields.username, fields.email, exclude_id=user_id)

        if fields.username:
            user.name = fields.username
        if fields.email:
            user.email = fields.email
        if fields.role:
            user.role = fields.role
        if fields.password:
            user.hashed_password = hash_password(fields.password)
        if "affiliated_school_id" in fields.model_fields_set:
            UserService._check_school(db, fields.affiliated_school_id)
            user.affiliated_school_id = fields.affiliated_school_id
        if user.role != UserRole.faculty:
            user.affiliated_school_id = None

        db.commit()
        db.refresh(user)
        return user

    @staticmethod
    def delete_user(db: Session, user_id: int, actor: Actor) -> dict:
        """Delete a user. Admins cannot delete their own account."""
        if user_id == actor.id:
            raise ValidationError("Cannot delete your own account")
        user = db.query(User).filter(User.id == user_id).first()
        if not user:
            raise ResourceNotFoundError("User not found")
        deleted = {"id": user.id, "username": user.name, "email": user.email}
        db.delete(user)
        db.commit()
        return deleted


user_service = UserService()

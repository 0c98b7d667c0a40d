from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.exceptions import ConflictError, NotFoundError
from app.core.security import get_password_hash
from app.models import User, Role
from app.schemas.auth import UserProfileResponse


class UserService:
    """Lookups and writes against the user datastore."""

    @staticmethod
    def find_by_username(db: Session, username: str) -> Optional[User]:
        return db.query(User).filter(User.username == username).first()

    @staticmethod
    def find_by_email(db: Session, email: str) -> Optional[User]:
        return db.query(User).filter(User.email == email).first()

    @staticmethod
    def get_user_by_username(db: Session, username: str) -> User:
        """Get a user by username. Raises NotFoundError if missing."""
        user = UserService.find_by_username(db, username)
        if not user:
            raise NotFoundError(detail=f"User not found: {username}")
        return user

    @staticmethod
    def user_exists(db: Session, username: str) -> bool:
        return db.query(User.id).filter(User.username == username).first() is not None

    @staticmethod
    def user_exists_by_email(db: Session, email: str) -> bool:
        return db.query(User.id).filter(User.email == email).first() is not None

    @staticmethod
    def create_user(
        db: Session,
        username: str,
        email: str,
        password: str,
        first_name: str,
        last_name: str,
        role: Role = Role.USER,
    ) -> User:
        """Create a new user with a bcrypt-hashed password."""
        user = User(
            username=username,
            email=email,
            password_hash=get_password_hash(password),
            first_name=first_name,
            last_name=last_name,
            role=role,
        )
        db.add(user)
        try:
            db.commit()
        except IntegrityError:
            # Another request took the username or email after our existence check
            db.rollback()
            if UserService.find_by_username(db, username) is not None:
                raise ConflictError("Username already exists")
            if UserService.find_by_email(db, email) is not None:
                raise ConflictError("Email already exists")
            raise
        db.refresh(user)
        return user

    @staticmethod
    def update_password(db: Session, user: User, new_password: str) -> None:
        user.password_hash = get_password_hash(new_password)
        db.commit()

    @staticmethod
    def get_user_profile(db: Session, username: str) -> UserProfileResponse:
        user = UserService.get_user_by_username(db, username)
        return UserProfileResponse.model_validate(user)

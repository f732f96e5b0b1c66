"""User manager for fastapi-users authentication system."""
import logging
import uuid
from typing import Optional

from fastapi import Request
from fastapi_users import BaseUserManager, InvalidPasswordException, UUIDIDMixin

from reprotrack.models.user import User
from reprotrack.config import Settings


logger = logging.getLogger(__name__)


class UserManager(UUIDIDMixin, BaseUserManager[User, uuid.UUID]):
    """
    Custom user manager for handling user lifecycle events.
    
    Extends fastapi-users BaseUserManager with a registration hook and
    password rules for farm accounts.
    """
    
    def __init__(self, user_db, settings: Settings):
        """
        Initialize UserManager with user database and settings.
        
        Args:
            user_db: Database adapter for user operations
            settings: Application settings containing secrets
        """
        super().__init__(user_db)
        self.reset_password_token_secret = settings.secret_key
        self.verification_token_secret = settings.secret_key
        self.reset_password_token_lifetime_seconds = settings.jwt_lifetime_seconds
        self.verification_token_lifetime_seconds = settings.jwt_lifetime_seconds
    
    async def on_after_register(
        self, 
        user: User, 
        request: Optional[Request] = None
    ) -> None:
        """Log successful registrations."""
        logger.info(f"User {user.id} has registered with email {user.email}")
    
    async def validate_password(
        self,
        password: str,
        user: Optional[User] = None
    ) -> None:
        """
        Validate password meets security requirements.
        
        Args:
            password: The password to validate
            user: Optional user object for context
            
        Raises:
            InvalidPasswordException: If password doesn't meet requirements
        """
        if len(password) < 8:
            raise InvalidPasswordException(reason="Password must be at least 8 characters long")
        
        # Prevent DoS through very long passwords
        if len(password) > 100:
            raise InvalidPasswordException(reason="Password must be at most 100 characters long")
        
        if not any(c.isalpha() for c in password):
            raise InvalidPasswordException(reason="Password must contain at least one letter")
        
        if not any(c.isdigit() for c in password):
            raise InvalidPasswordException(reason="Password must contain at least one digit")
        
        if user and password.lower() == user.email.lower():
            raise InvalidPasswordException(reason="Password cannot be the same as email")

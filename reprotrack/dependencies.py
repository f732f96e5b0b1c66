"""FastAPI dependencies for authentication, database access and services."""
import uuid
from functools import lru_cache
from typing import AsyncGenerator

from fastapi import Depends
from fastapi_users import FastAPIUsers
from fastapi_users.authentication import (
    AuthenticationBackend,
    BearerTransport,
    JWTStrategy,
)
from fastapi_users.db import SQLAlchemyUserDatabase
from sqlalchemy.ext.asyncio import AsyncSession

from reprotrack.config import Settings
from reprotrack.database import get_async_session
from reprotrack.models.user import User
from reprotrack.services.user_manager import UserManager
from reprotrack.services.mother_registry import MotherRegistry
from reprotrack.services.litter_ledger import LitterLedger
from reprotrack.services.offspring_registry import OffspringRegistry
from reprotrack.services.report_aggregator import ReportAggregator
from reprotrack.services.summarizer import SummarizerClient


# Initialize settings
settings = Settings()


async def get_user_db(
    session: AsyncSession = Depends(get_async_session)
) -> AsyncGenerator[SQLAlchemyUserDatabase, None]:
    """
    Dependency to get the user database adapter.
    
    Args:
        session: Async database session
        
    Yields:
        SQLAlchemyUserDatabase: Database adapter for user operations
    """
    yield SQLAlchemyUserDatabase(session, User)


async def get_user_manager(
    user_db: SQLAlchemyUserDatabase = Depends(get_user_db)
) -> AsyncGenerator[UserManager, None]:
    """
    Dependency to get the user manager.
    
    Args:
        user_db: User database adapter
        
    Yields:
        UserManager: User manager instance
    """
    yield UserManager(user_db, settings)


def get_jwt_strategy() -> JWTStrategy:
    """
    Get JWT authentication strategy.
    
    Returns:
        JWTStrategy: JWT strategy configured with secret and lifetime
    """
    return JWTStrategy(
        secret=settings.secret_key,
        lifetime_seconds=settings.jwt_lifetime_seconds,
        algorithm="HS256",
    )


# Configure Bearer token transport
bearer_transport = BearerTransport(tokenUrl="api/auth/jwt/login")


# Configure authentication backend with JWT
auth_backend = AuthenticationBackend(
    name="jwt",
    transport=bearer_transport,
    get_strategy=get_jwt_strategy,
)


# Create FastAPIUsers instance
fastapi_users = FastAPIUsers[User, uuid.UUID](
    get_user_manager,
    [auth_backend],
)


# Export commonly used dependencies
current_active_user = fastapi_users.current_user(active=True)


@lru_cache
def get_summarizer() -> SummarizerClient:
    """
    Shared summarizer client.
    
    One instance per process so its rate limiter applies across requests.
    """
    return SummarizerClient(settings)


def get_mother_registry(
    session: AsyncSession = Depends(get_async_session)
) -> MotherRegistry:
    """Dependency providing the mother registry bound to the request session."""
    return MotherRegistry(session)


def get_litter_ledger(
    mothers: MotherRegistry = Depends(get_mother_registry)
) -> LitterLedger:
    """Dependency providing the litter ledger bound to the request session."""
    return LitterLedger(mothers.session, mothers)


def get_offspring_registry(
    litters: LitterLedger = Depends(get_litter_ledger)
) -> OffspringRegistry:
    """Dependency providing the offspring registry bound to the request session."""
    return OffspringRegistry(litters.session, litters)


def get_report_aggregator(
    mothers: MotherRegistry = Depends(get_mother_registry),
    summarizer: SummarizerClient = Depends(get_summarizer),
) -> ReportAggregator:
    """Dependency providing the report aggregator bound to the request session."""
    return ReportAggregator(mothers.session, summarizer, mothers)

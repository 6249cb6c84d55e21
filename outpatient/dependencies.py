"""FastAPI dependencies."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from outpatient.core.redis_client import CacheManager, get_cache_manager
from outpatient.database import get_db

# Type aliases for dependency injection
DatabaseSession = Annotated[AsyncSession, Depends(get_db)]
Cache = Annotated[CacheManager | None, Depends(get_cache_manager)]

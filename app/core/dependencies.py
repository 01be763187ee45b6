# app/core/dependencies.py

"""
FastAPI 애플리케이션의 의존성 주입(Dependency Injection)을 모아 노출하는 모듈입니다.

- 데이터베이스 세션 (get_db_session).
- 현재 인증된 사용자 프로필 (get_current_user).
"""

from typing import AsyncGenerator

from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.database import get_session as get_main_app_session

# flake8: noqa
from app.core.security import get_auth_strategy, get_current_user


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    app.core.database.get_session을 래핑한 비동기 세션 의존성입니다.
    """
    async for session in get_main_app_session():
        yield session

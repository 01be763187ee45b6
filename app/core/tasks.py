# app/core/tasks.py

"""
ARQ 워커가 실행하는 유지보수 태스크 모듈입니다.
"""

import logging
from typing import Any, Dict

from sqlmodel import select

from app.core.database import get_async_session_context
from app.domains.usr import crud as usr_crud

logger = logging.getLogger(__name__)


async def health_check_database_task(ctx: Dict[str, Any]) -> Dict[str, str]:
    """
    주기적인 데이터베이스 헬스 체크 태스크.
    데이터베이스 연결 상태를 확인하고 로그를 남깁니다.
    """
    logger.info("ARQ task: database health check")
    try:
        async with get_async_session_context() as db:
            result = await db.execute(select(1))
            if result.scalar_one_or_none() == 1:
                return {"status": "success", "message": "Database connection successful."}
            error_msg = "Database health check failed: No result from test query."
    except Exception as e:
        error_msg = f"Database connection error: {e}"
    logger.error("Database health check failed: %s", error_msg)
    return {"status": "failed", "message": error_msg}


async def cleanup_orphan_credentials_task(ctx: Dict[str, Any]) -> Dict[str, Any]:
    """
    소유 사용자가 사라진 자격증명을 정리합니다.
    DB에 연쇄 삭제가 걸려 있지 않으므로, API 밖에서 사용자가 삭제된 경우를 주기적으로 처리합니다.
    """
    async with get_async_session_context() as db:
        removed = await usr_crud.credentials.remove_orphans(db)
    logger.info("ARQ task: removed %d orphaned credentials", removed)
    return {"status": "ok", "removed_count": removed}

# app/domains/usr/services.py

import logging

from fastapi import HTTPException, status
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.security import verify_password
from . import crud, models, schemas

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password."


def _invalid_credentials() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=INVALID_CREDENTIALS,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def verify_credentials(db: AsyncSession, credentials: schemas.Credentials) -> models.User:
    """
    이메일로 사용자를 찾고 저장된 해시와 비밀번호를 비교합니다.
    사용자가 없거나 비밀번호가 틀린 경우 모두 같은 401 응답을 돌려줍니다 (계정 존재 여부 노출 방지).
    """
    found_user = await crud.user.get_by_email(db, email=credentials.email, with_credentials=True)
    if found_user is None:
        logger.info("Login rejected: unknown email")
        raise _invalid_credentials()

    stored = found_user.user_credentials
    if stored is None or not verify_password(credentials.password, stored.password):
        logger.info("Login rejected: password mismatch for %s", found_user.email)
        raise _invalid_credentials()

    return found_user


def convert_to_user_profile(user: models.User) -> schemas.UserProfile:
    """
    사용자 레코드를 토큰에 담을 공개 프로필로 변환합니다.
    이름은 firstName, lastName 중 있는 값만 공백으로 이어 붙입니다.
    """
    name = " ".join(part for part in (user.first_name, user.last_name) if part)
    return schemas.UserProfile(id=user.email, name=name)

# app/core/security.py

"""
애플리케이션의 보안 관련 유틸리티 함수 및 의존성 주입을 정의하는 모듈입니다.

- 비밀번호 해싱 및 검증.
- JWT(JSON Web Token) 생성 및 검증.
- 요청마다 호출되는 인증 전략 (stub / jwt) 과 현재 사용자 획득.
"""

import logging
from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Optional

from jose import jwt, JWTError
from passlib.context import CryptContext
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.core.config import settings
from app.domains.usr.schemas import UserProfile

logger = logging.getLogger(__name__)


# --- 비밀번호 해싱 설정 ---
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.PASSWORD_HASH_ROUNDS,
)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    일반 텍스트 비밀번호와 해싱된 비밀번호를 비교하여 일치하는지 확인합니다.
    """
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """
    주어진 비밀번호를 해싱합니다.
    """
    return pwd_context.hash(password)


# --- JWT 토큰 생성 및 검증 ---
def create_access_token(profile: UserProfile, expires_delta: Optional[timedelta] = None) -> str:
    """
    사용자 프로필을 담은 Access Token을 생성합니다.
    서명 중 발생한 오류는 그대로 호출자에게 전달됩니다.
    """
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(seconds=settings.ACCESS_TOKEN_EXPIRE_SECONDS)
    )
    to_encode = {"sub": profile.id, "name": profile.name, "exp": expire}
    return jwt.encode(to_encode, settings.SECRET_KEY.get_secret_value(), algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> UserProfile:
    """
    토큰의 서명과 만료 시간을 검증하고 프로필을 복원합니다.
    검증에 실패하면 JWTError를 발생시킵니다.
    """
    payload = jwt.decode(token, settings.SECRET_KEY.get_secret_value(), algorithms=[settings.ALGORITHM])
    subject = payload.get("sub")
    if not subject:
        raise JWTError("Token has no subject")
    return UserProfile(id=subject, name=payload.get("name") or "")


# --- 인증 전략 ---
def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


class AuthenticationStrategy(ABC):
    """요청 컨텍스트에서 호출자의 신원을 확인하는 전략의 공통 인터페이스"""
    name: str = ""

    @abstractmethod
    async def authenticate(self, request: Request, token: Optional[str]) -> UserProfile:
        ...


class StubAuthenticationStrategy(AuthenticationStrategy):
    """
    토큰을 전혀 검사하지 않고 항상 고정된 신원으로 인증합니다.
    보안 장치가 아니며 테스트/로컬 개발 전용입니다. production 환경에서는 설정 단계에서 거부됩니다.
    """
    name = "stub"

    def __init__(self, identity: str):
        self.identity = identity

    async def authenticate(self, request: Request, token: Optional[str]) -> UserProfile:
        return UserProfile(id=self.identity, name="")


class JWTAuthenticationStrategy(AuthenticationStrategy):
    """Bearer 토큰의 서명과 만료를 검증하여 신원을 확인합니다."""
    name = "jwt"

    async def authenticate(self, request: Request, token: Optional[str]) -> UserProfile:
        if not token:
            raise _unauthorized("Not authenticated")
        try:
            return decode_access_token(token)
        except JWTError as e:
            logger.info("Rejected bearer token on %s: %s", request.url.path, e)
            raise _unauthorized("Could not validate credentials")


@lru_cache
def get_auth_strategy() -> AuthenticationStrategy:
    """설정에 따라 인증 전략 인스턴스를 반환합니다."""
    if settings.AUTH_STRATEGY == "stub":
        logger.warning(
            "Stub authentication strategy is active: every request is authenticated as %s",
            settings.STUB_IDENTITY,
        )
        return StubAuthenticationStrategy(settings.STUB_IDENTITY)
    return JWTAuthenticationStrategy()


bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    strategy: AuthenticationStrategy = Depends(get_auth_strategy),
) -> UserProfile:
    """
    인증 전략을 통해 현재 요청의 사용자 프로필을 확인합니다.
    """
    token = credentials.credentials if credentials is not None else None
    return await strategy.authenticate(request, token)

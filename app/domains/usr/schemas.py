# app/domains/usr/schemas.py

"""
'usr' 도메인 (사용자 및 자격증명 관리)의 API 데이터 전송 객체(DTO)를 정의하는 모듈입니다.

API 상에서는 camelCase 필드명(firstName, userId 등)을 사용하고,
파이썬 코드와 DB 모델에서는 snake_case 필드명을 사용합니다.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """camelCase 별칭을 사용하는 스키마의 공통 베이스"""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# =============================================================================
# 1. 사용자 (User) 스키마
# =============================================================================
class UserBase(CamelModel):
    first_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)


class UserCreate(UserBase):
    """
    사용자 생성(가입)을 위한 스키마.
    password가 함께 오면 자격증명도 같이 생성합니다.
    """
    email: EmailStr = Field(..., max_length=255)
    password: Optional[str] = Field(None, min_length=8)


class UserUpdate(UserBase):
    """사용자 부분 수정을 위한 스키마. 이메일(기본 키)은 변경할 수 없습니다."""
    pass


class UserReplace(UserBase):
    """사용자 전체 교체(PUT)를 위한 스키마"""
    email: Optional[EmailStr] = Field(None, max_length=255)


class UserRead(UserBase):
    email: str


class UserReadWithCredentials(UserRead):
    """자격증명 관계를 포함하여 조회할 때 사용하는 스키마"""
    user_credentials: Optional["UserCredentialsRead"] = None


# =============================================================================
# 2. 자격증명 (UserCredentials) 스키마
# =============================================================================
class UserCredentialsCreate(CamelModel):
    """password는 평문으로 받아 저장 시 해싱합니다."""
    user_id: str = Field(..., max_length=255)
    password: str = Field(..., min_length=1)


class UserCredentialsUpdate(CamelModel):
    user_id: Optional[str] = Field(None, max_length=255)
    password: Optional[str] = Field(None, min_length=1)


class UserCredentialsRead(CamelModel):
    """비밀번호 해시는 응답에 포함하지 않습니다."""
    id: str
    user_id: str


# =============================================================================
# 3. 인증 (Authentication) 스키마
# =============================================================================
class Credentials(BaseModel):
    """로그인 요청 본문"""
    email: EmailStr
    password: str


class UserProfile(BaseModel):
    """토큰에 담기는 공개 사용자 프로필. id는 항상 사용자 이메일입니다."""
    id: str
    name: str = ""


class TokenResponse(BaseModel):
    token: str


# =============================================================================
# 4. 공통 응답 스키마
# =============================================================================
class Count(BaseModel):
    count: int


UserReadWithCredentials.model_rebuild()

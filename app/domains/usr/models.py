# app/domains/usr/models.py

"""
'usr' 도메인의 데이터베이스 ORM 모델을 정의하는 모듈입니다.

이 모듈은 users, user_credentials 두 테이블에 대한 SQLModel 클래스를 포함합니다.
사용자는 이메일로 식별되며, 자격증명(비밀번호 해시)은 별도 테이블에 1:1로 저장됩니다.
"""

import uuid
from typing import Optional

from sqlalchemy import Column, ForeignKey, String
from sqlmodel import Field, Relationship, SQLModel


# =============================================================================
# 1. users 테이블 모델
# =============================================================================
class UserBase(SQLModel):
    """
    users 테이블의 기본 속성을 정의하는 SQLModel Base 클래스입니다.
    """
    email: str = Field(max_length=255, primary_key=True, description="사용자 이메일 (기본 키)")
    first_name: Optional[str] = Field(default=None, max_length=100, description="이름")
    last_name: Optional[str] = Field(default=None, max_length=100, description="성")


class User(UserBase, table=True):
    """
    users 테이블에 매핑되는 SQLModel ORM 클래스입니다.
    """
    __tablename__ = "users"

    # 1:1 관계. 비동기 세션에서는 지연 로딩이 불가하므로 필요할 때 selectinload로 함께 조회합니다.
    user_credentials: Optional["UserCredentials"] = Relationship(
        back_populates="user",
        sa_relationship_kwargs={"uselist": False, "cascade": "all, delete-orphan"},
    )


# =============================================================================
# 2. user_credentials 테이블 모델
# =============================================================================
class UserCredentialsBase(SQLModel):
    """
    user_credentials 테이블의 기본 속성을 정의하는 SQLModel Base 클래스입니다.
    """
    id: str = Field(
        default_factory=lambda: uuid.uuid4().hex,
        primary_key=True,
        max_length=32,
        description="자격증명 고유 ID (자동 생성)"
    )
    user_id: str = Field(
        sa_column=Column(
            "user_id",
            String(255),
            ForeignKey("users.email", name="fk_credential_userId"),
            unique=True,
            nullable=False,
        ),
        description="소유 사용자 이메일 (FK)"
    )
    password: str = Field(max_length=255, description="해싱된 비밀번호")


class UserCredentials(UserCredentialsBase, table=True):
    """
    user_credentials 테이블에 매핑되는 SQLModel ORM 클래스입니다.
    사용자 삭제 시 DB 단의 연쇄 삭제는 걸지 않고, 애플리케이션(crud)에서 함께 정리합니다.
    """
    __tablename__ = "user_credentials"

    user: Optional[User] = Relationship(back_populates="user_credentials")

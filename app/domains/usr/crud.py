# app/domains/usr/crud.py

"""
'usr' 도메인의 CRUD 작업을 담당하는 모듈입니다.
비밀번호는 항상 해싱해서 저장하며, 자격증명의 userId는 존재하는 사용자를 가리켜야 합니다.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from fastapi import HTTPException, status

from app.core.crud_base import CRUDBase
from app.core.security import get_password_hash
from . import models as usr_models
from . import schemas as usr_schemas

logger = logging.getLogger(__name__)


# =============================================================================
# 1. users 테이블 CRUD
# =============================================================================
class CRUDUser(CRUDBase[usr_models.User, usr_schemas.UserCreate, usr_schemas.UserUpdate]):
    def __init__(self):
        super().__init__(model=usr_models.User)

    async def get_by_email(
        self, db: AsyncSession, *, email: str, with_credentials: bool = False
    ) -> Optional[usr_models.User]:
        """이메일로 사용자를 조회합니다."""
        include = ["user_credentials"] if with_credentials else None
        return await self.get_by_attribute(db, attribute="email", value=email, include=include)

    async def create(self, db: AsyncSession, *, obj_in: usr_schemas.UserCreate) -> usr_models.User:
        """
        새로운 사용자를 생성합니다.
        비밀번호가 함께 주어지면 해싱하여 자격증명 레코드도 같은 트랜잭션에서 생성합니다.
        """
        if await self.get(db, obj_in.email):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email already registered")

        db_user = usr_models.User(**obj_in.model_dump(exclude={"password"}))
        if obj_in.password is not None:
            db_user.user_credentials = usr_models.UserCredentials(
                user_id=db_user.email, password=get_password_hash(obj_in.password)
            )
        db.add(db_user)

        await db.commit()
        await db.refresh(db_user)
        logger.info("Created user %s", db_user.email)
        return db_user

    async def remove(self, db: AsyncSession, *, id: str) -> usr_models.User:
        """
        사용자를 삭제합니다. 소유한 자격증명은 관계 cascade로 함께 삭제됩니다.
        """
        db_user = await self.get(db, id, include=["user_credentials"])
        if not db_user:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

        await db.delete(db_user)
        await db.commit()
        logger.info("Deleted user %s", id)
        return db_user


user = CRUDUser()


# =============================================================================
# 2. user_credentials 테이블 CRUD
# =============================================================================
class CRUDUserCredentials(
    CRUDBase[
        usr_models.UserCredentials,
        usr_schemas.UserCredentialsCreate,
        usr_schemas.UserCredentialsUpdate
    ]
):
    def __init__(self):
        super().__init__(model=usr_models.UserCredentials)

    async def get_by_user_id(self, db: AsyncSession, *, user_id: str) -> Optional[usr_models.UserCredentials]:
        return await self.get_by_attribute(db, attribute="user_id", value=user_id)

    async def _check_owner(self, db: AsyncSession, *, user_id: str, current_id: Optional[str] = None) -> None:
        """
        userId가 존재하는 사용자를 가리키는지, 그 사용자에게 다른 자격증명이 없는지 확인합니다.
        """
        if await user.get(db, user_id) is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"userId '{user_id}' does not reference an existing user"
            )
        existing = await self.get_by_user_id(db, user_id=user_id)
        if existing is not None and existing.id != current_id:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"User '{user_id}' already has credentials"
            )

    @staticmethod
    def _hashed(data: Dict[str, Any]) -> Dict[str, Any]:
        if data.get("password") is not None:
            data["password"] = get_password_hash(data["password"])
        return data

    async def create(
        self, db: AsyncSession, *, obj_in: usr_schemas.UserCredentialsCreate
    ) -> usr_models.UserCredentials:
        await self._check_owner(db, user_id=obj_in.user_id)
        db_obj = usr_models.UserCredentials(**self._hashed(obj_in.model_dump()))
        db.add(db_obj)
        await db.commit()
        await db.refresh(db_obj)
        return db_obj

    async def update(
        self,
        db: AsyncSession,
        *,
        db_obj: usr_models.UserCredentials,
        obj_in: usr_schemas.UserCredentialsUpdate,
    ) -> usr_models.UserCredentials:
        update_data = self._hashed(obj_in.model_dump(exclude_unset=True, exclude_none=True))
        if "user_id" in update_data and update_data["user_id"] != db_obj.user_id:
            await self._check_owner(db, user_id=update_data["user_id"], current_id=db_obj.id)
        for key, value in update_data.items():
            setattr(db_obj, key, value)

        db.add(db_obj)
        await db.commit()
        await db.refresh(db_obj)
        return db_obj

    async def replace(
        self,
        db: AsyncSession,
        *,
        db_obj: usr_models.UserCredentials,
        obj_in: usr_schemas.UserCredentialsCreate,
        exclude: Optional[set] = None,
    ) -> usr_models.UserCredentials:
        if obj_in.user_id != db_obj.user_id:
            await self._check_owner(db, user_id=obj_in.user_id, current_id=db_obj.id)
        hashed = obj_in.model_copy(update={"password": get_password_hash(obj_in.password)})
        return await super().replace(db, db_obj=db_obj, obj_in=hashed, exclude=exclude)

    async def update_all(
        self, db: AsyncSession, *, values: Dict[str, Any], filters: Optional[Dict[str, Any]] = None
    ) -> int:
        """
        일괄 수정에서는 userId를 바꿀 수 없습니다 (1:1 관계가 깨지므로).
        """
        if "user_id" in values:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="userId cannot be changed by a bulk update"
            )
        return await super().update_all(db, values=self._hashed(dict(values)), filters=filters)

    async def get_orphans(self, db: AsyncSession) -> List[usr_models.UserCredentials]:
        """소유 사용자가 더 이상 존재하지 않는 자격증명 목록을 반환합니다."""
        statement = select(self.model).where(
            self.model.user_id.not_in(select(usr_models.User.email))
        )
        result = await db.execute(statement)
        return list(result.scalars().all())

    async def remove_orphans(self, db: AsyncSession) -> int:
        orphans = await self.get_orphans(db)
        for orphan in orphans:
            await db.delete(orphan)
        if orphans:
            await db.commit()
        return len(orphans)


credentials = CRUDUserCredentials()

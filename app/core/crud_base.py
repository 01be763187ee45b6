# app/core/crud_base.py

"""
공통 CRUD(Create, Read, Update, Delete) 작업을 위한 기본 클래스 모듈입니다.
모든 메서드는 비동기(async) 환경에 맞게 작성되었습니다.
"""

from typing import Generic, List, Optional, Sequence, Tuple, Type, TypeVar, Any, Dict

from sqlalchemy import func, update as sa_update
from sqlalchemy.orm import selectinload
from sqlmodel import SQLModel, select
from sqlmodel.ext.asyncio.session import AsyncSession
from pydantic import BaseModel

ModelType = TypeVar("ModelType", bound=SQLModel)
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)
UpdateSchemaType = TypeVar("UpdateSchemaType", bound=BaseModel)


# where 절 비교 연산자 -> SQLAlchemy 표현식
_OPERATORS = {
    "eq": lambda column, value: column == value,
    "neq": lambda column, value: column != value,
    "gt": lambda column, value: column > value,
    "gte": lambda column, value: column >= value,
    "lt": lambda column, value: column < value,
    "lte": lambda column, value: column <= value,
    "inq": lambda column, value: column.in_(value),
    "nin": lambda column, value: column.not_in(value),
    "like": lambda column, value: column.like(value),
}


class CRUDBase(Generic[ModelType, CreateSchemaType, UpdateSchemaType]):
    """
    모든 CRUD 작업에 대한 기본 클래스를 정의합니다.
    """
    def __init__(self, model: Type[ModelType]):
        self.model = model

    def _conditions(self, filters: Optional[Dict[str, Any]]) -> List[Any]:
        """
        필터 딕셔너리를 where 조건 목록으로 변환합니다.
        값이 딕셔너리면 {"연산자": 값} 형태로 해석하고, 아니면 동등 비교를 합니다.
        """
        conditions = []
        for attribute, value in (filters or {}).items():
            if not hasattr(self.model, attribute):
                raise ValueError(f"Model {self.model.__name__} has no attribute '{attribute}'")
            column = getattr(self.model, attribute)
            if isinstance(value, dict):
                if not value:
                    raise ValueError(f"Empty operator object for '{attribute}'")
                for op, operand in value.items():
                    conditions.append(_OPERATORS[op](column, operand))
            else:
                conditions.append(column == value)
        return conditions

    def _with_relations(self, query: Any, include: Optional[Sequence[str]]) -> Any:
        for relation in include or ():
            query = query.options(selectinload(getattr(self.model, relation)))
        return query

    async def get(self, db: AsyncSession, id: Any, *, include: Optional[Sequence[str]] = None) -> Optional[ModelType]:
        """
        기본 키를 기준으로 단일 레코드를 조회합니다.
        include에 관계명을 주면 해당 관계를 함께 로드합니다.
        """
        if not include:
            return await db.get(self.model, id)
        pk = self.model.__mapper__.primary_key[0]
        query = self._with_relations(select(self.model).where(pk == id), include)
        result = await db.execute(query)
        return result.scalars().one_or_none()

    async def get_multi(
        self,
        db: AsyncSession,
        *,
        filters: Optional[Dict[str, Any]] = None,
        order_by: Optional[Sequence[Tuple[str, bool]]] = None,  # (속성명, 내림차순 여부)
        include: Optional[Sequence[str]] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> List[ModelType]:
        """
        조건을 만족하는 여러 레코드를 조회합니다. 정렬, 페이징, 관계 로딩을 지원합니다.
        """
        query = select(self.model)
        conditions = self._conditions(filters)
        if conditions:
            query = query.where(*conditions)

        for attribute, desc in order_by or ():
            column = getattr(self.model, attribute)
            query = query.order_by(column.desc() if desc else column)

        query = self._with_relations(query, include)
        query = query.offset(skip).limit(limit)
        result = await db.execute(query)
        return list(result.scalars().all())

    async def get_by_attribute(
        self, db: AsyncSession, *, attribute: str, value: Any, include: Optional[Sequence[str]] = None
    ) -> Optional[ModelType]:
        statement = select(self.model).where(getattr(self.model, attribute) == value)
        statement = self._with_relations(statement, include)
        response = await db.execute(statement)
        return response.scalar_one_or_none()

    async def count(self, db: AsyncSession, *, filters: Optional[Dict[str, Any]] = None) -> int:
        """조건을 만족하는 레코드 수를 반환합니다."""
        query = select(func.count()).select_from(self.model)
        conditions = self._conditions(filters)
        if conditions:
            query = query.where(*conditions)
        result = await db.execute(query)
        return int(result.scalar_one())

    async def create(self, db: AsyncSession, *, obj_in: CreateSchemaType) -> ModelType:
        """
        새로운 레코드를 생성합니다.
        """
        db_obj = self.model(**obj_in.model_dump())
        db.add(db_obj)
        await db.commit()
        await db.refresh(db_obj)
        return db_obj

    async def update(
        self, db: AsyncSession, *, db_obj: ModelType, obj_in: UpdateSchemaType
    ) -> ModelType:
        """
        기존 레코드를 부분 업데이트합니다. 요청에 포함된 필드만 변경합니다.
        """
        update_data = obj_in.model_dump(exclude_unset=True)
        for key, value in update_data.items():
            setattr(db_obj, key, value)

        db.add(db_obj)
        await db.commit()
        await db.refresh(db_obj)
        return db_obj

    async def replace(
        self, db: AsyncSession, *, db_obj: ModelType, obj_in: BaseModel, exclude: Optional[set] = None
    ) -> ModelType:
        """
        기존 레코드를 통째로 교체합니다. 요청에 없는 필드는 기본값으로 되돌립니다.
        """
        for key, value in obj_in.model_dump(exclude=exclude).items():
            setattr(db_obj, key, value)

        db.add(db_obj)
        await db.commit()
        await db.refresh(db_obj)
        return db_obj

    async def update_all(
        self, db: AsyncSession, *, values: Dict[str, Any], filters: Optional[Dict[str, Any]] = None
    ) -> int:
        """
        조건을 만족하는 모든 레코드를 일괄 수정하고, 수정된 레코드 수를 반환합니다.
        """
        if not values:
            return await self.count(db, filters=filters)

        statement = sa_update(self.model).values(**values)
        conditions = self._conditions(filters)
        if conditions:
            statement = statement.where(*conditions)
        result = await db.execute(statement)
        await db.commit()
        return result.rowcount

    async def delete(self, db: AsyncSession, *, id: Any) -> Optional[ModelType]:
        """
        기본 키를 기준으로 레코드를 삭제합니다.
        """
        db_obj = await db.get(self.model, id)
        if db_obj:
            await db.delete(db_obj)
            await db.commit()
        return db_obj

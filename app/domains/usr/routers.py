# app/domains/usr/routers.py

"""
'usr' 도메인 (사용자 및 자격증명 관리)과 관련된 API 엔드포인트를 정의하는 모듈입니다.

- /users: 가입과 로그인을 제외한 모든 엔드포인트는 인증 전략을 통과해야 합니다.
- /user-credentials: 인증 없이 접근할 수 있습니다.
"""

from typing import Any, Dict, List, Optional, Union

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core import dependencies as deps
from app.core.filters import parse_filter, parse_where
from app.core.security import create_access_token

from . import crud as usr_crud
from . import models as usr_models
from . import schemas as usr_schemas
from . import services as usr_services


router = APIRouter(
    responses={404: {"description": "Not found"}},
)

USER_FIELDS = ("email", "first_name", "last_name")
USER_RELATIONS = {"userCredentials": "user_credentials", "user_credentials": "user_credentials"}
# 비밀번호 해시로는 필터링/정렬할 수 없습니다.
CREDENTIALS_FIELDS = ("id", "user_id")

WHERE_DESCRIPTION = 'JSON where clause, e.g. {"firstName": "Ada"}'
FILTER_DESCRIPTION = 'JSON filter, e.g. {"where": {...}, "limit": 10, "skip": 0, "order": "email ASC", "include": ["userCredentials"]}'


def user_where(where: Optional[str] = Query(None, description=WHERE_DESCRIPTION)) -> Dict[str, Any]:
    return parse_where(where, USER_FIELDS)


def credentials_where(where: Optional[str] = Query(None, description=WHERE_DESCRIPTION)) -> Dict[str, Any]:
    return parse_where(where, CREDENTIALS_FIELDS)


def _to_user_read(db_user: usr_models.User, include: List[str]) -> Union[usr_schemas.UserRead, usr_schemas.UserReadWithCredentials]:
    if "user_credentials" in include:
        return usr_schemas.UserReadWithCredentials.model_validate(db_user)
    return usr_schemas.UserRead.model_validate(db_user)


# =============================================================================
# 1. 사용자 (User) 엔드포인트
# =============================================================================
@router.post("/users", response_model=usr_schemas.UserRead, summary="새 사용자 생성")
async def create_user(
    user_in: usr_schemas.UserCreate,
    db: AsyncSession = Depends(deps.get_db_session),
):
    return await usr_crud.user.create(db, obj_in=user_in)


@router.post("/users/login", response_model=usr_schemas.TokenResponse, summary="로그인 (Access Token 발급)")
async def login(
    credentials: usr_schemas.Credentials,
    db: AsyncSession = Depends(deps.get_db_session),
):
    # 사용자 존재 여부와 비밀번호를 확인합니다.
    db_user = await usr_services.verify_credentials(db, credentials)
    # 토큰에는 축약된 공개 프로필만 담습니다.
    profile = usr_services.convert_to_user_profile(db_user)
    token = create_access_token(profile)
    return {"token": token}


@router.get("/users/me", response_model=usr_schemas.UserProfile, summary="현재 사용자 프로필 조회")
async def read_current_user(
    current_user: usr_schemas.UserProfile = Depends(deps.get_current_user),
):
    return current_user


@router.get("/users/count", response_model=usr_schemas.Count, summary="사용자 수 조회")
async def count_users(
    filters: Dict[str, Any] = Depends(user_where),
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: usr_schemas.UserProfile = Depends(deps.get_current_user),
):
    return {"count": await usr_crud.user.count(db, filters=filters)}


@router.get(
    "/users",
    response_model=List[usr_schemas.UserReadWithCredentials],
    response_model_exclude_unset=True,
    summary="사용자 목록 조회",
)
async def find_users(
    filter_: Optional[str] = Query(None, alias="filter", description=FILTER_DESCRIPTION),
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: usr_schemas.UserProfile = Depends(deps.get_current_user),
):
    parsed = parse_filter(filter_, USER_FIELDS, USER_RELATIONS)
    users = await usr_crud.user.get_multi(
        db,
        filters=parsed.where,
        order_by=parsed.order_by(USER_FIELDS),
        include=parsed.include,
        skip=parsed.skip,
        limit=parsed.limit,
    )
    return [_to_user_read(u, parsed.include) for u in users]


@router.patch("/users", response_model=usr_schemas.Count, summary="조건에 맞는 사용자 일괄 수정")
async def update_all_users(
    user_in: usr_schemas.UserUpdate,
    filters: Dict[str, Any] = Depends(user_where),
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: usr_schemas.UserProfile = Depends(deps.get_current_user),
):
    values = user_in.model_dump(exclude_unset=True)
    return {"count": await usr_crud.user.update_all(db, values=values, filters=filters)}


@router.get(
    "/users/{id}",
    response_model=usr_schemas.UserReadWithCredentials,
    response_model_exclude_unset=True,
    summary="특정 사용자 조회",
)
async def find_user_by_id(
    id: str,
    filter_: Optional[str] = Query(None, alias="filter", description=FILTER_DESCRIPTION),
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: usr_schemas.UserProfile = Depends(deps.get_current_user),
):
    parsed = parse_filter(filter_, USER_FIELDS, USER_RELATIONS)
    db_user = await usr_crud.user.get(db, id, include=parsed.include)
    if not db_user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return _to_user_read(db_user, parsed.include)


@router.patch("/users/{id}", status_code=status.HTTP_204_NO_CONTENT, summary="사용자 부분 수정")
async def update_user_by_id(
    id: str,
    user_in: usr_schemas.UserUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: usr_schemas.UserProfile = Depends(deps.get_current_user),
):
    db_user = await usr_crud.user.get(db, id)
    if not db_user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    await usr_crud.user.update(db, db_obj=db_user, obj_in=user_in)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put("/users/{id}", status_code=status.HTTP_204_NO_CONTENT, summary="사용자 전체 교체")
async def replace_user_by_id(
    id: str,
    user_in: usr_schemas.UserReplace,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: usr_schemas.UserProfile = Depends(deps.get_current_user),
):
    db_user = await usr_crud.user.get(db, id)
    if not db_user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    if user_in.email is not None and user_in.email != id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="email cannot be changed")
    await usr_crud.user.replace(db, db_obj=db_user, obj_in=user_in, exclude={"email"})
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/users/{id}", status_code=status.HTTP_204_NO_CONTENT, summary="사용자 삭제")
async def delete_user_by_id(
    id: str,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: usr_schemas.UserProfile = Depends(deps.get_current_user),
):
    await usr_crud.user.remove(db, id=id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# =============================================================================
# 2. 자격증명 (UserCredentials) 엔드포인트
# =============================================================================
@router.post("/user-credentials", response_model=usr_schemas.UserCredentialsRead, summary="자격증명 생성")
async def create_user_credentials(
    credentials_in: usr_schemas.UserCredentialsCreate,
    db: AsyncSession = Depends(deps.get_db_session),
):
    return await usr_crud.credentials.create(db, obj_in=credentials_in)


@router.get("/user-credentials/count", response_model=usr_schemas.Count, summary="자격증명 수 조회")
async def count_user_credentials(
    filters: Dict[str, Any] = Depends(credentials_where),
    db: AsyncSession = Depends(deps.get_db_session),
):
    return {"count": await usr_crud.credentials.count(db, filters=filters)}


@router.get("/user-credentials", response_model=List[usr_schemas.UserCredentialsRead], summary="자격증명 목록 조회")
async def find_user_credentials(
    filter_: Optional[str] = Query(None, alias="filter", description=FILTER_DESCRIPTION),
    db: AsyncSession = Depends(deps.get_db_session),
):
    parsed = parse_filter(filter_, CREDENTIALS_FIELDS)
    return await usr_crud.credentials.get_multi(
        db,
        filters=parsed.where,
        order_by=parsed.order_by(CREDENTIALS_FIELDS),
        skip=parsed.skip,
        limit=parsed.limit,
    )


@router.patch("/user-credentials", response_model=usr_schemas.Count, summary="조건에 맞는 자격증명 일괄 수정")
async def update_all_user_credentials(
    credentials_in: usr_schemas.UserCredentialsUpdate,
    filters: Dict[str, Any] = Depends(credentials_where),
    db: AsyncSession = Depends(deps.get_db_session),
):
    values = credentials_in.model_dump(exclude_unset=True, exclude_none=True)
    return {"count": await usr_crud.credentials.update_all(db, values=values, filters=filters)}


@router.get("/user-credentials/{id}", response_model=usr_schemas.UserCredentialsRead, summary="특정 자격증명 조회")
async def find_user_credentials_by_id(
    id: str,
    db: AsyncSession = Depends(deps.get_db_session),
):
    db_credentials = await usr_crud.credentials.get(db, id)
    if not db_credentials:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="UserCredentials not found")
    return db_credentials


@router.patch("/user-credentials/{id}", status_code=status.HTTP_204_NO_CONTENT, summary="자격증명 부분 수정")
async def update_user_credentials_by_id(
    id: str,
    credentials_in: usr_schemas.UserCredentialsUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
):
    db_credentials = await usr_crud.credentials.get(db, id)
    if not db_credentials:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="UserCredentials not found")
    await usr_crud.credentials.update(db, db_obj=db_credentials, obj_in=credentials_in)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put("/user-credentials/{id}", status_code=status.HTTP_204_NO_CONTENT, summary="자격증명 전체 교체")
async def replace_user_credentials_by_id(
    id: str,
    credentials_in: usr_schemas.UserCredentialsCreate,
    db: AsyncSession = Depends(deps.get_db_session),
):
    db_credentials = await usr_crud.credentials.get(db, id)
    if not db_credentials:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="UserCredentials not found")
    await usr_crud.credentials.replace(db, db_obj=db_credentials, obj_in=credentials_in)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/user-credentials/{id}", status_code=status.HTTP_204_NO_CONTENT, summary="자격증명 삭제")
async def delete_user_credentials_by_id(
    id: str,
    db: AsyncSession = Depends(deps.get_db_session),
):
    if not await usr_crud.credentials.delete(db, id=id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="UserCredentials not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)

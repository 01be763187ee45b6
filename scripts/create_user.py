# scripts/create_user.py

import asyncio
from typing import Optional

import typer
from fastapi import HTTPException
from pydantic import ValidationError

from app.core.database import AsyncSessionLocal, engine
from app.domains.usr import crud as usr_crud
from app.domains.usr import schemas as usr_schemas

cli = typer.Typer(help="사용자 계정 관리 도구")


async def _create_user(user_in: usr_schemas.UserCreate) -> None:
    async with AsyncSessionLocal() as db:
        try:
            await usr_crud.user.create(db, obj_in=user_in)
        finally:
            await engine.dispose()


async def _set_password(email: str, password: str) -> bool:
    """
    사용자의 비밀번호를 변경합니다. 자격증명이 없으면 새로 생성합니다.
    사용자가 없으면 False를 반환합니다.
    """
    async with AsyncSessionLocal() as db:
        try:
            if await usr_crud.user.get(db, email) is None:
                return False
            existing = await usr_crud.credentials.get_by_user_id(db, user_id=email)
            if existing is None:
                await usr_crud.credentials.create(
                    db, obj_in=usr_schemas.UserCredentialsCreate(user_id=email, password=password)
                )
            else:
                await usr_crud.credentials.update(
                    db, db_obj=existing, obj_in=usr_schemas.UserCredentialsUpdate(password=password)
                )
            return True
        finally:
            await engine.dispose()


@cli.command("create")
def create(
    email: str = typer.Option(..., '--email', '-e', prompt="이메일을 입력하세요", help="사용자 이메일 (로그인 ID)"),
    password: str = typer.Option(
        ..., '--password', '-p',
        prompt="비밀번호를 입력하세요",
        hide_input=True,
        confirmation_prompt=True,
        help="비밀번호 (최소 8자 이상)"
    ),
    first_name: Optional[str] = typer.Option(None, '--first-name', help="이름"),
    last_name: Optional[str] = typer.Option(None, '--last-name', help="성"),
):
    """
    새 사용자와 자격증명을 생성합니다.
    """
    try:
        user_in = usr_schemas.UserCreate(
            email=email, password=password, first_name=first_name, last_name=last_name
        )
    except ValidationError as e:
        typer.echo(f"오류: 입력값이 올바르지 않습니다.\n{e}", err=True)
        raise typer.Exit(code=1)

    try:
        asyncio.run(_create_user(user_in))
    except HTTPException as e:
        typer.echo(f"오류: {e.detail}", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"사용자 계정이 생성되었습니다: {user_in.email}")


@cli.command("set-password")
def set_password(
    email: str = typer.Option(..., '--email', '-e', prompt="이메일을 입력하세요"),
    password: str = typer.Option(
        ..., '--password', '-p',
        prompt="새 비밀번호를 입력하세요",
        hide_input=True,
        confirmation_prompt=True,
    ),
):
    """
    기존 사용자의 비밀번호를 변경합니다.
    """
    if len(password) < 8:
        typer.echo("오류: 비밀번호는 최소 8자 이상이어야 합니다.", err=True)
        raise typer.Exit(code=1)
    try:
        # API와 같은 규칙으로 이메일을 정규화합니다 (도메인 소문자화).
        email = usr_schemas.Credentials(email=email, password=password).email
    except ValidationError as e:
        typer.echo(f"오류: 입력값이 올바르지 않습니다.\n{e}", err=True)
        raise typer.Exit(code=1)
    if not asyncio.run(_set_password(email, password)):
        typer.echo(f"오류: 존재하지 않는 사용자입니다: {email}", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"비밀번호가 변경되었습니다: {email}")


if __name__ == "__main__":
    cli()

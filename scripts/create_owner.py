# flake8: noqa
# scripts/create_owner.py

"""
DFMS 소유자(owner) 계정을 만드는 CLI 스크립트입니다.

    python -m scripts.create_owner --email owner@example.com

이미 있는 이메일이면 새로 만들지 않고 역할만 owner로 올립니다.
로그인은 매직링크로 하므로 비밀번호는 받지 않습니다.
"""

import asyncio
import logging

import typer
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.database import AsyncSessionLocal
from app.core.ids import IdGenerator, default_id_generator
from app.domains.usr import crud as usr_crud
from app.domains.usr import schemas as usr_schemas
from app.domains.usr.models import User, UserRole

logger = logging.getLogger(__name__)

cli = typer.Typer()


async def create_owner_user(db: AsyncSession, email: str, id_gen: IdGenerator = default_id_generator) -> User:
    """
    데이터베이스에 소유자 사용자를 생성하거나 기존 사용자를 owner로 승격하는 비동기 함수
    """
    db_user = await usr_crud.user.get_by_email(db, email=email)
    if db_user is None:
        user_in = usr_schemas.UserCreate(email=email, role=UserRole.OWNER)
        return await usr_crud.user.create(db, obj_in=user_in, id_gen=id_gen)

    if db_user.role != UserRole.OWNER:
        db_user = await usr_crud.user.update(db, db_obj=db_user, obj_in={"role": UserRole.OWNER})
        logger.info("기존 사용자를 owner로 승격했습니다: %s", email)
    return db_user


@cli.command()
def main(
    email: str = typer.Option(
        ..., '--email', '-e',
        prompt="소유자 이메일을 입력하세요",
        help="생성할 소유자 계정의 이메일 주소입니다."
    ),
):
    """
    DFMS 애플리케이션을 위한 소유자(owner) 계정을 생성합니다.
    """
    logging.basicConfig(level=logging.INFO)
    typer.echo("소유자 계정 생성을 시작합니다...")

    async def run_creation():
        async with AsyncSessionLocal() as db:
            db_user = await create_owner_user(db, email=email)
            typer.echo(f"소유자 계정 준비 완료: {db_user.email} (id={db_user.id})")

    asyncio.run(run_creation())


if __name__ == "__main__":
    cli()

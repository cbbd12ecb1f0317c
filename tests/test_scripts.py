# tests/test_scripts.py

"""
관리 스크립트(scripts/) 동작을 테스트하는 모듈입니다.
"""

import pytest
from sqlmodel.ext.asyncio.session import AsyncSession

from app.domains.usr.models import User, UserRole
from scripts.create_owner import create_owner_user


@pytest.mark.asyncio
async def test_create_owner_user_creates_new_owner(db_session: AsyncSession, id_gen):
    db_user = await create_owner_user(db_session, email="boss@example.com", id_gen=id_gen)
    assert db_user.role == UserRole.OWNER
    assert db_user.email == "boss@example.com"


@pytest.mark.asyncio
async def test_create_owner_user_promotes_existing(db_session: AsyncSession, id_gen, test_viewer: User):
    db_user = await create_owner_user(db_session, email=test_viewer.email, id_gen=id_gen)
    assert db_user.id == test_viewer.id
    assert db_user.role == UserRole.OWNER

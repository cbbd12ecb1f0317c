# app/core/clock.py

"""
시각 처리 유틸리티 모듈입니다.

모든 시각은 시간대 정보가 있는 UTC로 다룹니다.
저장소(SQLite 등)에서 시간대 정보 없이 읽힌 값은 UTC로 간주합니다.
"""

from datetime import datetime, UTC


def utc_now() -> datetime:
    return datetime.now(UTC)


def as_utc(value: datetime) -> datetime:
    """시간대 정보가 없는 시각은 UTC로 간주하고, 있는 시각은 UTC로 변환합니다."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)

# app/domains/mnt/services.py

"""
편대 정비 기한 초과(컴플라이언스) 계산 서비스입니다.

결과는 저장하지 않고 조회할 때마다 점검 이력과 부품별 점검 주기로부터 새로 계산합니다.

계산 규칙:
 - 점검 주기(inspection_frequency)가 없는 부품은 제외합니다.
 - 기준 시각은 부품의 마지막 점검 시각(시각 기준 최신)이며, 점검 이력이 없으면 부품 생성 시각입니다.
 - 경과 일수 = floor((now - 기준 시각) / 86400초)
 - 경과 일수 > 주기 인 경우에만 초과이며, 초과 일수 = 경과 일수 - 주기 입니다. (경계값은 초과 아님)
"""

from datetime import datetime
from typing import Any, Dict, List, Optional
import logging

from fastapi import HTTPException, status
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.clock import as_utc
from app.domains.fms import crud as fms_crud
from app.domains.loc import crud as loc_crud
from app.domains.mnt import crud as mnt_crud

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 86400


def elapsed_days(baseline: datetime, now: datetime) -> int:
    """기준 시각부터 현재까지 경과한 일수 (내림)"""
    return int((as_utc(now) - as_utc(baseline)).total_seconds() // SECONDS_PER_DAY)


def days_overdue(baseline: datetime, frequency: int, now: datetime) -> Optional[int]:
    """
    초과 일수를 반환합니다. 초과가 아니면 None을 반환합니다.

    >>> from datetime import timedelta, UTC
    >>> now = datetime(2025, 3, 1, tzinfo=UTC)
    >>> days_overdue(now - timedelta(days=45), 30, now)
    15
    >>> days_overdue(now - timedelta(days=30), 30, now) is None
    True
    """
    elapsed = elapsed_days(baseline, now)
    if elapsed > frequency:
        return elapsed - frequency
    return None


async def compute_overdue_parts(db: AsyncSession, *, fleet_id: str, now: datetime) -> Dict[str, Any]:
    """
    편대에 속한 자산들의 정비 기한 초과 부품을 자산별로 묶어 반환합니다.
    초과 부품이 하나 이상인 자산만 한 번씩 포함됩니다.
    """
    if await loc_crud.fleet.get(db, fleet_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Fleet not found")

    assets = await fms_crud.asset.get_multi(db, limit=None, fleet_id=fleet_id)
    report: List[Dict[str, Any]] = []

    for db_asset in assets:
        parts = [
            p for p in await fms_crud.asset_part.get_by_asset(db, asset_id=db_asset.id)
            if p.inspection_frequency is not None
        ]
        latest = await mnt_crud.inspection.get_latest_part_times(db, part_ids=[p.id for p in parts], now=now)

        overdue_parts = []
        for db_part in parts:
            last_time = latest.get(db_part.id)
            baseline = last_time or as_utc(db_part.created_at)
            overdue = days_overdue(baseline, db_part.inspection_frequency, now)
            if overdue is None:
                continue
            overdue_parts.append({
                "part_id": db_part.id,
                "part_name": db_part.name,
                "last_inspection_time": last_time,
                "baseline_time": baseline,
                "inspection_frequency": db_part.inspection_frequency,
                "days_overdue": overdue,
            })

        if overdue_parts:
            report.append({
                "asset_id": db_asset.id,
                "asset_name": db_asset.name,
                "overdue_parts": overdue_parts,
            })

    logger.info(
        "컴플라이언스 계산: fleet_id=%s assets=%d overdue_assets=%d",
        fleet_id, len(assets), len(report)
    )
    return {"fleet_id": fleet_id, "assets_with_overdue_parts": report}

# app/domains/usr/tasks.py

"""
'usr' 도메인의 ARQ 백그라운드 작업 모듈입니다.
"""

from typing import Any, Dict
import logging

logger = logging.getLogger(__name__)


async def send_magic_link_email_task(ctx: Dict[str, Any], email: str, link: str) -> Dict[str, Any]:
    """
    매직링크를 이메일로 전달합니다.
    실제 메일 발송은 외부 메일 게이트웨이가 담당하며, 이 작업은 발송 요청을 기록합니다.
    """
    logger.info("매직링크 발송 요청: email=%s", email)
    logger.debug("매직링크: %s", link)
    return {"status": "queued", "email": email}

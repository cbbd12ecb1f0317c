# app/core/ids.py

"""
엔티티 식별자(ID) 생성을 담당하는 모듈입니다.

모든 엔티티 ID는 불투명(opaque)하고 전역적으로 고유하며 생성 시각 순으로 정렬 가능한 문자열입니다.
ID 생성기는 전역 상태가 아니라 의존성 주입(deps.get_id_generator)으로 각 쓰기 작업에 전달되므로,
테스트에서는 결정적인(deterministic) 생성기로 교체할 수 있습니다.
"""

import time
import uuid


class IdGenerator:
    """
    시간 정렬 가능한 32자리 16진수 ID 생성기.
    앞 12자리는 Unix 밀리초 시각, 뒤 20자리는 무작위 값입니다.
    """
    def new_id(self) -> str:
        millis = time.time_ns() // 1_000_000
        return f"{millis:012x}{uuid.uuid4().hex[:20]}"


default_id_generator = IdGenerator()

# app/domains/usr/__init__.py

"""
FastAPI 애플리케이션의 'usr' 도메인 패키지입니다.

'usr' 도메인은 사용자(역할 포함)와 매직링크 기반 세션을 관리합니다.
다른 모든 도메인의 요청은 이 도메인의 세션 해석을 거쳐 사용자와 역할을 얻습니다.

주요 서브모듈:
- `models.py`: users, sessions 테이블에 매핑되는 SQLModel 정의.
- `schemas.py`: 사용자/세션 요청 및 응답 모델.
- `crud.py`: 사용자 조회/생성과 세션 생성/해석/삭제 로직.
- `routers.py`: 인증(세션) 및 사용자 관리 엔드포인트.
- `tasks.py`: 매직링크 이메일 발송 arq 작업.
"""

__title__ = "DFMS User Domain"
__description__ = "Manages users, roles and magic-link sessions."
__version__ = "0.1.0"
__all__ = []

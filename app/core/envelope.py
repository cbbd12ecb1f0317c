# app/core/envelope.py

"""
단일 엔티티 응답 `{id, type, fields}`를 만드는 헬퍼 모듈입니다.
요청 검증 오류 요약과 부분 업데이트용 null 검사도 함께 둡니다.

계층 조회 응답은 응답 모델에 하위 ID 목록(fleet, templates, assets, components 등)을
추가 필드로 선언하고, 그 값을 키워드 인자로 넘겨 채웁니다.
"""

from typing import Any, Dict, Sequence, Type, TypeVar

from pydantic import BaseModel
from sqlmodel import SQLModel

ResponseType = TypeVar("ResponseType", bound=BaseModel)


def to_envelope(response_cls: Type[ResponseType], db_obj: SQLModel, **relations: Any) -> ResponseType:
    """ORM 객체를 응답 모델의 `fields` 스키마로 변환해 감쌉니다."""
    fields_cls = response_cls.model_fields["fields"].annotation
    fields = fields_cls.model_validate(db_obj.model_dump(exclude={"id"}))
    return response_cls(id=db_obj.id, fields=fields, **relations)


def describe_validation_errors(errors: Sequence[Dict[str, Any]]) -> str:
    """
    pydantic 검증 오류 목록을 `{"error": ...}` 응답용 한 줄 메시지로 요약합니다.
    예: "body.name: Field required; body.latitude: Input should be a valid number"
    """
    parts = []
    for err in errors:
        loc = ".".join(str(p) for p in err.get("loc", ()))
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "; ".join(parts) or "Invalid request"


def reject_null(value: Any) -> Any:
    """
    부분 업데이트 모델에서 NOT NULL 컬럼에 대응하는 필드의 명시적 null을 거부합니다.
    필드를 생략한 경우에는 검증기가 실행되지 않으므로 기존 값이 유지됩니다.
    """
    if value is None:
        raise ValueError("must not be null")
    return value

# tests/domains/test_fms_n.py

"""
'fms' 도메인 (장비 카탈로그 및 자산 인스턴스) 관련 API 엔드포인트에 대한 통합 테스트 모듈입니다.

- 자산 템플릿/구성품 CRUD 및 참조 검증 (본문의 잘못된 참조는 400, 경로의 잘못된 ID는 404)
- 자산 생성 시 템플릿 구성품으로 부품 자동 생성 (`instantiate_parts`)
- 자산 부품 장착 시 구성품-템플릿 일치 검증
- 자산 상세 조회의 부품/첨부 조합
- 삭제 정책 (자산이 있는 템플릿은 삭제 불가, 자산 삭제 시 부품/점검/첨부 연쇄 삭제)
"""

from datetime import datetime, timedelta, UTC
from typing import Any, Dict, List

import pytest
from httpx import AsyncClient
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.clock import as_utc
from app.domains.fms import models as fms_models
from app.domains.mnt import models as mnt_models
from app.domains.shared import models as shared_models

MISSING_ID = "00000000000000000000000000000999"


async def _create_template(client: AsyncClient, name: str = "Quad X4", components: List[str] = ()) -> Dict[str, Any]:
    """템플릿과 구성품을 만들고, 구성품 ID가 채워진 템플릿 응답을 반환합니다."""
    response = await client.post("/api/v1/fms/asset-templates", json={"name": name, "product_weight": 1.2})
    assert response.status_code == 201, response.text
    template = response.json()
    for component_name in components:
        response = await client.post(
            "/api/v1/fms/components", json={"name": component_name, "template_id": template["id"]}
        )
        assert response.status_code == 201, response.text
    return (await client.get(f"/api/v1/fms/asset-templates/{template['id']}")).json()


async def _create_asset(client: AsyncClient, template_id: str, **payload: Any) -> Dict[str, Any]:
    response = await client.post(
        "/api/v1/fms/assets", json={"name": "Drone-01", "template_id": template_id, **payload}
    )
    assert response.status_code == 201, response.text
    return response.json()


# --- 자산 템플릿 / 구성품 ---
@pytest.mark.asyncio
async def test_create_template_with_components(editor_client: AsyncClient):
    """
    템플릿에 구성품을 추가하면 템플릿 응답의 `components`에 생성 순서대로 나타나는지 테스트합니다.
    """
    print("\n--- Running test_create_template_with_components ---")
    template = await _create_template(editor_client, components=["Motor", "Battery"])
    print(f"Response JSON: {template}")
    assert template["type"] == "template"
    assert template["fields"]["product_weight"] == 1.2
    assert len(template["components"]) == 2

    response = await editor_client.get("/api/v1/fms/components", params={"template_id": template["id"]})
    assert response.status_code == 200
    assert [c["id"] for c in response.json()] == template["components"]
    assert [c["fields"]["name"] for c in response.json()] == ["Motor", "Battery"]


@pytest.mark.asyncio
async def test_create_component_with_unknown_template(editor_client: AsyncClient):
    response = await editor_client.post("/api/v1/fms/components", json={"name": "Motor", "template_id": MISSING_ID})
    assert response.status_code == 400
    assert response.json() == {"error": "Asset template not found for the given ID"}


@pytest.mark.asyncio
async def test_update_component_cannot_move_template(editor_client: AsyncClient):
    template = await _create_template(editor_client, components=["Motor"])
    component_id = template["components"][0]

    response = await editor_client.put(f"/api/v1/fms/components/{component_id}", json={"template_id": "x"})
    assert response.status_code == 400

    response = await editor_client.put(f"/api/v1/fms/components/{component_id}", json={"name": "Motor v2"})
    assert response.status_code == 200
    assert response.json()["fields"]["name"] == "Motor v2"
    assert response.json()["fields"]["template_id"] == template["id"]


@pytest.mark.asyncio
async def test_read_missing_template(viewer_client: AsyncClient):
    response = await viewer_client.get(f"/api/v1/fms/asset-templates/{MISSING_ID}")
    assert response.status_code == 404
    assert response.json() == {"error": "Asset template not found"}


@pytest.mark.asyncio
async def test_viewer_cannot_create_template(viewer_client: AsyncClient):
    response = await viewer_client.post("/api/v1/fms/asset-templates", json={"name": "Quad X4"})
    assert response.status_code == 403


# --- 자산 ---
@pytest.mark.asyncio
async def test_create_asset_with_unknown_template(editor_client: AsyncClient):
    response = await editor_client.post("/api/v1/fms/assets", json={"name": "Drone-01", "template_id": MISSING_ID})
    assert response.status_code == 400
    assert response.json() == {"error": "Asset template not found for the given ID"}


@pytest.mark.asyncio
async def test_create_asset_with_unknown_fleet(editor_client: AsyncClient):
    template = await _create_template(editor_client)
    response = await editor_client.post(
        "/api/v1/fms/assets", json={"name": "Drone-01", "template_id": template["id"], "fleet_id": MISSING_ID}
    )
    assert response.status_code == 400
    assert response.json() == {"error": "Fleet not found for the given ID"}


@pytest.mark.asyncio
async def test_create_asset_instantiates_parts(editor_client: AsyncClient):
    """
    `instantiate_parts=true`이면 템플릿 구성품마다 같은 이름의 부품이 지정한 점검 주기로 생성됩니다.
    """
    template = await _create_template(editor_client, components=["Motor", "Battery", "Camera"])
    asset = await _create_asset(
        editor_client, template["id"], instantiate_parts=True, inspection_frequency=30
    )

    assert asset["type"] == "asset"
    assert asset["attachments"] == []
    parts = asset["parts"]
    assert [p["fields"]["component_id"] for p in parts] == template["components"]
    assert [p["fields"]["name"] for p in parts] == ["Motor", "Battery", "Camera"]
    assert all(p["fields"]["inspection_frequency"] == 30 for p in parts)
    assert all(p["fields"]["asset_id"] == asset["id"] for p in parts)


@pytest.mark.asyncio
async def test_create_asset_without_parts(editor_client: AsyncClient):
    template = await _create_template(editor_client, components=["Motor"])
    asset = await _create_asset(editor_client, template["id"])
    assert asset["parts"] == []


@pytest.mark.asyncio
async def test_create_asset_and_parts_record_request_time(editor_client: AsyncClient, clock):
    """자산과 부품의 생성 시각은 요청 시점의 현재 시각(주입된 시계)으로 기록됩니다."""
    clock.now = clock.now - timedelta(days=10)
    template = await _create_template(editor_client, components=["Motor", "Battery"])
    asset = await _create_asset(editor_client, template["id"], instantiate_parts=True)

    assert as_utc(datetime.fromisoformat(asset["fields"]["created_at"])) == clock.now
    for part in asset["parts"]:
        assert as_utc(datetime.fromisoformat(part["fields"]["created_at"])) == clock.now

    clock.advance(days=1)
    response = await editor_client.post(
        f"/api/v1/fms/assets/{asset['id']}/parts", json={"component_id": template["components"][0]}
    )
    assert response.status_code == 201
    assert as_utc(datetime.fromisoformat(response.json()["fields"]["created_at"])) == clock.now


@pytest.mark.asyncio
async def test_list_assets_by_fleet(editor_client: AsyncClient):
    template = await _create_template(editor_client)
    fleet = (await editor_client.post("/api/v1/loc/fleets", json={"name": "Alpha"})).json()
    in_fleet = await _create_asset(editor_client, template["id"], fleet_id=fleet["id"])
    await _create_asset(editor_client, template["id"], name="Drone-02")

    response = await editor_client.get("/api/v1/fms/assets", params={"fleet_id": fleet["id"]})
    assert response.status_code == 200
    assert [a["id"] for a in response.json()] == [in_fleet["id"]]

    response = await editor_client.get("/api/v1/fms/assets")
    assert len(response.json()) == 2


@pytest.mark.asyncio
async def test_update_asset_rejects_template_change(editor_client: AsyncClient):
    template = await _create_template(editor_client)
    asset = await _create_asset(editor_client, template["id"])

    response = await editor_client.put(f"/api/v1/fms/assets/{asset['id']}", json={"template_id": template["id"]})
    assert response.status_code == 400

    response = await editor_client.put(f"/api/v1/fms/assets/{asset['id']}", json={"warranty": "2 years"})
    assert response.status_code == 200
    assert response.json()["fields"]["warranty"] == "2 years"
    assert response.json()["fields"]["name"] == "Drone-01"


@pytest.mark.asyncio
async def test_update_rejects_null_name(editor_client: AsyncClient):
    """필수 명칭에 null을 보내면 저장을 시도하지 않고 검증 오류(400)를 반환합니다."""
    template = await _create_template(editor_client, components=["Motor"])
    asset = await _create_asset(editor_client, template["id"], instantiate_parts=True)
    urls = {
        f"/api/v1/fms/asset-templates/{template['id']}": "Quad X4",
        f"/api/v1/fms/components/{template['components'][0]}": "Motor",
        f"/api/v1/fms/assets/{asset['id']}": "Drone-01",
        f"/api/v1/fms/asset-parts/{asset['parts'][0]['id']}": "Motor",
    }
    for url, name in urls.items():
        response = await editor_client.put(url, json={"name": None})
        assert response.status_code == 400, url
        assert "body.name" in response.json()["error"]

        response = await editor_client.get(url)
        assert response.json()["fields"]["name"] == name


# --- 자산 부품 ---
@pytest.mark.asyncio
async def test_add_part_defaults_name_to_component(editor_client: AsyncClient):
    template = await _create_template(editor_client, components=["Motor"])
    asset = await _create_asset(editor_client, template["id"])

    response = await editor_client.post(
        f"/api/v1/fms/assets/{asset['id']}/parts",
        json={"component_id": template["components"][0], "serial_number": "SN-1"},
    )
    assert response.status_code == 201
    part = response.json()
    assert part["type"] == "asset_part"
    assert part["fields"]["name"] == "Motor"
    assert part["fields"]["serial_number"] == "SN-1"
    assert part["fields"]["inspection_frequency"] is None


@pytest.mark.asyncio
async def test_add_part_with_foreign_component(editor_client: AsyncClient):
    """다른 템플릿에 속한 구성품으로 부품을 장착하면 400을 반환합니다."""
    template = await _create_template(editor_client, components=["Motor"])
    other = await _create_template(editor_client, name="Fixed Wing", components=["Wing"])
    asset = await _create_asset(editor_client, template["id"])

    response = await editor_client.post(
        f"/api/v1/fms/assets/{asset['id']}/parts", json={"component_id": other["components"][0]}
    )
    assert response.status_code == 400
    assert response.json() == {"error": "Component does not belong to the asset's template"}

    response = await editor_client.post(
        f"/api/v1/fms/assets/{asset['id']}/parts", json={"component_id": MISSING_ID}
    )
    assert response.status_code == 400
    assert response.json() == {"error": "Component not found for the given ID"}


@pytest.mark.asyncio
async def test_add_part_to_missing_asset(editor_client: AsyncClient):
    template = await _create_template(editor_client, components=["Motor"])
    response = await editor_client.post(
        f"/api/v1/fms/assets/{MISSING_ID}/parts", json={"component_id": template["components"][0]}
    )
    assert response.status_code == 404
    assert response.json() == {"error": "Asset not found"}


@pytest.mark.asyncio
async def test_update_part_clears_frequency(editor_client: AsyncClient):
    template = await _create_template(editor_client, components=["Motor"])
    asset = await _create_asset(editor_client, template["id"], instantiate_parts=True, inspection_frequency=14)
    part_id = asset["parts"][0]["id"]

    response = await editor_client.put(
        f"/api/v1/fms/asset-parts/{part_id}", json={"inspection_frequency": None, "condition": "worn"}
    )
    assert response.status_code == 200
    fields = response.json()["fields"]
    assert fields["inspection_frequency"] is None
    assert fields["condition"] == "worn"


@pytest.mark.asyncio
async def test_read_asset_includes_part_and_asset_attachments(editor_client: AsyncClient):
    template = await _create_template(editor_client, components=["Motor"])
    asset = await _create_asset(editor_client, template["id"], instantiate_parts=True)
    part_id = asset["parts"][0]["id"]

    for entity_type, entity_id, uri in [
        ("Asset", asset["id"], "s3://bucket/drone.jpg"),
        ("AssetPart", part_id, "s3://bucket/motor.jpg"),
    ]:
        response = await editor_client.post(
            "/api/v1/shared/attachments", json={"entity_type": entity_type, "entity_id": entity_id, "uri": uri}
        )
        assert response.status_code == 201, response.text

    body = (await editor_client.get(f"/api/v1/fms/assets/{asset['id']}")).json()
    assert body["attachments"] == ["s3://bucket/drone.jpg"]
    assert body["parts"][0]["attachments"] == ["s3://bucket/motor.jpg"]


# --- 삭제 정책 ---
@pytest.mark.asyncio
async def test_delete_component_keeps_parts(editor_client: AsyncClient):
    template = await _create_template(editor_client, components=["Motor"])
    asset = await _create_asset(editor_client, template["id"], instantiate_parts=True)
    component_id = template["components"][0]

    response = await editor_client.delete(f"/api/v1/fms/components/{component_id}")
    assert response.status_code == 200
    assert response.json() == {"message": "Component deleted"}

    part = (await editor_client.get(f"/api/v1/fms/asset-parts/{asset['parts'][0]['id']}")).json()
    assert part["fields"]["component_id"] == component_id
    assert (await editor_client.get(f"/api/v1/fms/asset-templates/{template['id']}")).json()["components"] == []


@pytest.mark.asyncio
async def test_delete_template_in_use(editor_client: AsyncClient):
    template = await _create_template(editor_client)
    await _create_asset(editor_client, template["id"])

    response = await editor_client.delete(f"/api/v1/fms/asset-templates/{template['id']}")
    assert response.status_code == 400
    assert response.json() == {"error": "Cannot delete this asset template as it has associated assets."}


@pytest.mark.asyncio
async def test_delete_unused_template_removes_components(editor_client: AsyncClient, db_session: AsyncSession):
    template = await _create_template(editor_client, components=["Motor", "Battery"])

    response = await editor_client.delete(f"/api/v1/fms/asset-templates/{template['id']}")
    assert response.status_code == 200
    assert response.json() == {"message": "Asset template deleted"}

    result = await db_session.execute(
        select(fms_models.Component).where(fms_models.Component.template_id == template["id"])
    )
    assert result.scalars().all() == []


@pytest.mark.asyncio
async def test_delete_asset_cascades(editor_client: AsyncClient, db_session: AsyncSession):
    """
    자산을 삭제하면 부품, 자산/부품의 점검 기록, 그리고 그 첨부가 함께 삭제됩니다.
    """
    template = await _create_template(editor_client, components=["Motor"])
    asset = await _create_asset(editor_client, template["id"], instantiate_parts=True)
    part_id = asset["parts"][0]["id"]
    timestamp = datetime.now(UTC).isoformat()

    inspection = (await editor_client.post(
        f"/api/v1/mnt/asset-parts/{part_id}/inspections", json={"timestamp": timestamp, "action": "check"}
    )).json()
    await editor_client.post(f"/api/v1/mnt/assets/{asset['id']}/inspections", json={"timestamp": timestamp})
    await editor_client.post(
        "/api/v1/shared/attachments",
        json={"entity_type": "Inspection", "entity_id": inspection["id"], "uri": "s3://bucket/report.pdf"},
    )
    await editor_client.post(
        "/api/v1/shared/attachments",
        json={"entity_type": "AssetPart", "entity_id": part_id, "uri": "s3://bucket/motor.jpg"},
    )

    response = await editor_client.delete(f"/api/v1/fms/assets/{asset['id']}")
    assert response.status_code == 200
    assert response.json() == {"message": "Asset deleted"}

    assert (await editor_client.get(f"/api/v1/fms/assets/{asset['id']}")).status_code == 404
    assert (await editor_client.get(f"/api/v1/fms/asset-parts/{part_id}")).status_code == 404
    assert (await db_session.execute(select(mnt_models.Inspection))).scalars().all() == []
    assert (await db_session.execute(select(shared_models.Attachment))).scalars().all() == []

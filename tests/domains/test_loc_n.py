# tests/domains/test_loc_n.py

"""
'loc' 도메인 (기지/편대 계층) 관련 API 엔드포인트에 대한 통합 테스트를 정의하는 모듈입니다.

- 기지 관리: `POST/GET/PUT/DELETE /loc/ports`
- 편대 관리: `POST/GET/PUT/DELETE /loc/fleets`
- 편대-기지 배정/해제 (조건부 해제: 현재 배정이 다르면 아무것도 바꾸지 않음)
- 편대-템플릿 연관/해제 (멱등)
- 자산-편대 배정/해제

다양한 사용자 역할(editor, viewer, 비인증)에 따른 권한 검사를 함께 검증합니다.
"""

from typing import Any, Dict

import pytest
from httpx import AsyncClient
from sqlmodel.ext.asyncio.session import AsyncSession

from app.domains.loc import crud as loc_crud
from app.domains.loc import models as loc_models


async def _create_port(client: AsyncClient, name: str = "Busan Base") -> Dict[str, Any]:
    response = await client.post(
        "/api/v1/loc/ports",
        json={"name": name, "latitude": 35.1, "longitude": 129.0, "elevation": 12.5},
    )
    assert response.status_code == 201, response.text
    return response.json()


async def _create_fleet(client: AsyncClient, **payload: Any) -> Dict[str, Any]:
    body = {"name": "Alpha", "description": "d", **payload}
    response = await client.post("/api/v1/loc/fleets", json=body)
    assert response.status_code == 201, response.text
    return response.json()


async def _create_asset(client: AsyncClient, **payload: Any) -> Dict[str, Any]:
    template = (await client.post("/api/v1/fms/asset-templates", json={"name": "Quad X4"})).json()
    response = await client.post(
        "/api/v1/fms/assets", json={"name": "Drone-01", "template_id": template["id"], **payload}
    )
    assert response.status_code == 201, response.text
    return response.json()


# --- 기지 관리 엔드포인트 테스트 ---
@pytest.mark.asyncio
async def test_create_and_read_port(editor_client: AsyncClient):
    """
    editor 권한으로 기지를 생성하고, 조회 시 `{id, type, fields, fleet}` 형태로 반환되는지 테스트합니다.
    """
    print("\n--- Running test_create_and_read_port ---")
    created = await _create_port(editor_client)
    print(f"Response JSON: {created}")
    assert created["type"] == "port"
    assert created["fields"]["name"] == "Busan Base"
    assert created["fields"]["elevation"] == 12.5

    response = await editor_client.get(f"/api/v1/loc/ports/{created['id']}")
    assert response.status_code == 200
    assert response.json()["fleet"] == []


@pytest.mark.asyncio
async def test_create_port_rejects_out_of_range_latitude(editor_client: AsyncClient):
    response = await editor_client.post(
        "/api/v1/loc/ports", json={"name": "Nowhere", "latitude": 91, "longitude": 0}
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_viewer_cannot_create_port(viewer_client: AsyncClient):
    response = await viewer_client.post(
        "/api/v1/loc/ports", json={"name": "Base", "latitude": 0, "longitude": 0}
    )
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_update_port_partial(editor_client: AsyncClient):
    created = await _create_port(editor_client)
    response = await editor_client.put(f"/api/v1/loc/ports/{created['id']}", json={"elevation": 40})
    assert response.status_code == 200
    fields = response.json()["fields"]
    assert fields["elevation"] == 40
    assert fields["name"] == "Busan Base"
    assert fields["latitude"] == 35.1


@pytest.mark.asyncio
@pytest.mark.parametrize("field", ["name", "latitude", "longitude", "elevation"])
async def test_update_port_rejects_null_field(editor_client: AsyncClient, field: str):
    """필수 속성에 null을 보내면 저장을 시도하지 않고 검증 오류(400)를 반환합니다."""
    created = await _create_port(editor_client)
    response = await editor_client.put(f"/api/v1/loc/ports/{created['id']}", json={field: None})
    assert response.status_code == 400
    assert f"body.{field}" in response.json()["error"]

    fields = (await editor_client.get(f"/api/v1/loc/ports/{created['id']}")).json()["fields"]
    assert fields[field] == created["fields"][field]


@pytest.mark.asyncio
async def test_read_missing_port(viewer_client: AsyncClient):
    response = await viewer_client.get("/api/v1/loc/ports/00000000000000000000000000000999")
    assert response.status_code == 404
    assert response.json() == {"error": "Port not found"}


# --- 편대 관리 엔드포인트 테스트 ---
@pytest.mark.asyncio
async def test_fleet_round_trip(editor_client: AsyncClient):
    """createFleet(name="Alpha", description="d") 후 조회하면 같은 값과 빈 연관 목록을 반환합니다."""
    created = await _create_fleet(editor_client)
    response = await editor_client.get(f"/api/v1/loc/fleets/{created['id']}")
    assert response.status_code == 200
    body = response.json()
    assert body["type"] == "fleet"
    assert body["fields"]["name"] == "Alpha"
    assert body["fields"]["description"] == "d"
    assert body["templates"] == []
    assert body["assets"] == []


@pytest.mark.asyncio
@pytest.mark.parametrize("name", ["", "   "])
async def test_create_fleet_requires_name(editor_client: AsyncClient, name: str):
    response = await editor_client.post("/api/v1/loc/fleets", json={"name": name})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_create_fleet_with_unknown_port(editor_client: AsyncClient):
    response = await editor_client.post(
        "/api/v1/loc/fleets", json={"name": "Alpha", "port_id": "00000000000000000000000000000999"}
    )
    assert response.status_code == 400
    assert response.json() == {"error": "Port not found for the given ID"}


@pytest.mark.asyncio
async def test_update_fleet_rejects_port_field(editor_client: AsyncClient):
    created = await _create_fleet(editor_client)
    response = await editor_client.put(f"/api/v1/loc/fleets/{created['id']}", json={"port_id": "x"})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_update_fleet_rejects_null_name(editor_client: AsyncClient):
    created = await _create_fleet(editor_client)
    response = await editor_client.put(f"/api/v1/loc/fleets/{created['id']}", json={"name": None})
    assert response.status_code == 400
    assert "body.name" in response.json()["error"]

    body = (await editor_client.get(f"/api/v1/loc/fleets/{created['id']}")).json()
    assert body["fields"]["name"] == "Alpha"


@pytest.mark.asyncio
async def test_update_fleet_clears_description(editor_client: AsyncClient):
    """설명은 선택 속성이므로 null로 지울 수 있습니다."""
    created = await _create_fleet(editor_client)
    response = await editor_client.put(
        f"/api/v1/loc/fleets/{created['id']}", json={"description": None}
    )
    assert response.status_code == 200
    assert response.json()["fields"]["description"] is None
    assert response.json()["fields"]["name"] == "Alpha"


# --- 편대-기지 배정 테스트 ---
@pytest.mark.asyncio
async def test_assign_and_unassign_fleet_port(editor_client: AsyncClient):
    port = await _create_port(editor_client)
    fleet = await _create_fleet(editor_client)

    response = await editor_client.post(f"/api/v1/loc/ports/{port['id']}/fleets/{fleet['id']}")
    assert response.status_code == 200
    assert response.json() == {"message": "Fleet added to port"}
    assert (await editor_client.get(f"/api/v1/loc/ports/{port['id']}")).json()["fleet"] == [fleet["id"]]

    response = await editor_client.delete(f"/api/v1/loc/ports/{port['id']}/fleets/{fleet['id']}")
    assert response.status_code == 200
    assert response.json() == {"message": "Fleet removed from port"}
    assert (await editor_client.get(f"/api/v1/loc/ports/{port['id']}")).json()["fleet"] == []
    assert (await editor_client.get(f"/api/v1/loc/fleets/{fleet['id']}")).json()["fields"]["port_id"] is None


@pytest.mark.asyncio
async def test_unassign_fleet_from_stale_port_is_noop(editor_client: AsyncClient, db_session: AsyncSession):
    """
    편대가 다른 기지로 옮겨진 뒤 이전 기지 기준으로 해제를 요청하면
    오류 없이 성공으로 응답하고 현재 배정은 바뀌지 않습니다.
    """
    port_a = await _create_port(editor_client, "A")
    port_b = await _create_port(editor_client, "B")
    fleet = await _create_fleet(editor_client, port_id=port_a["id"])

    await editor_client.post(f"/api/v1/loc/ports/{port_b['id']}/fleets/{fleet['id']}")

    response = await editor_client.delete(f"/api/v1/loc/ports/{port_a['id']}/fleets/{fleet['id']}")
    assert response.status_code == 200

    body = (await editor_client.get(f"/api/v1/loc/fleets/{fleet['id']}")).json()
    assert body["fields"]["port_id"] == port_b["id"]

    cleared = await loc_crud.fleet.unassign_from_port(db_session, fleet_id=fleet["id"], port_id=port_a["id"])
    assert cleared is False


@pytest.mark.asyncio
async def test_delete_port_keeps_fleets(editor_client: AsyncClient, db_session: AsyncSession):
    port = await _create_port(editor_client)
    fleet = await _create_fleet(editor_client, port_id=port["id"])

    response = await editor_client.delete(f"/api/v1/loc/ports/{port['id']}")
    assert response.status_code == 200
    assert response.json() == {"message": "Port deleted"}

    assert (await editor_client.get(f"/api/v1/loc/ports/{port['id']}")).status_code == 404
    db_fleet = await db_session.get(loc_models.Fleet, fleet["id"])
    assert db_fleet is not None
    assert db_fleet.port_id is None


# --- 편대-템플릿 연관 테스트 ---
@pytest.mark.asyncio
async def test_associate_and_dissociate_template(editor_client: AsyncClient):
    fleet = await _create_fleet(editor_client)
    template = (await editor_client.post("/api/v1/fms/asset-templates", json={"name": "Quad X4"})).json()
    path = f"/api/v1/loc/fleets/{fleet['id']}/templates/{template['id']}"

    assert (await editor_client.post(path)).status_code == 200
    assert (await editor_client.post(path)).status_code == 200  # 중복 연관은 무시
    assert (await editor_client.get(f"/api/v1/loc/fleets/{fleet['id']}")).json()["templates"] == [template["id"]]

    response = await editor_client.delete(path)
    assert response.status_code == 200
    assert response.json() == {"message": "Template dissociated from fleet"}
    assert (await editor_client.delete(path)).status_code == 200  # 이중 해제도 성공
    assert (await editor_client.get(f"/api/v1/loc/fleets/{fleet['id']}")).json()["templates"] == []


@pytest.mark.asyncio
async def test_associate_unknown_template(editor_client: AsyncClient):
    fleet = await _create_fleet(editor_client)
    response = await editor_client.post(
        f"/api/v1/loc/fleets/{fleet['id']}/templates/00000000000000000000000000000999"
    )
    assert response.status_code == 404


# --- 자산-편대 배정 테스트 ---
@pytest.mark.asyncio
async def test_assign_and_unassign_asset(editor_client: AsyncClient):
    fleet = await _create_fleet(editor_client)
    asset = await _create_asset(editor_client)

    response = await editor_client.post(f"/api/v1/loc/fleets/{fleet['id']}/assets/{asset['id']}")
    assert response.status_code == 200
    assert response.json() == {"message": "Asset added to fleet"}
    assert (await editor_client.get(f"/api/v1/loc/fleets/{fleet['id']}")).json()["assets"] == [asset["id"]]

    response = await editor_client.delete(f"/api/v1/loc/fleets/{fleet['id']}/assets/{asset['id']}")
    assert response.status_code == 200
    assert (await editor_client.get(f"/api/v1/loc/fleets/{fleet['id']}")).json()["assets"] == []


@pytest.mark.asyncio
async def test_unassign_asset_from_other_fleet_is_noop(editor_client: AsyncClient):
    fleet_a = await _create_fleet(editor_client, name="A")
    fleet_b = await _create_fleet(editor_client, name="B")
    asset = await _create_asset(editor_client, fleet_id=fleet_b["id"])

    response = await editor_client.delete(f"/api/v1/loc/fleets/{fleet_a['id']}/assets/{asset['id']}")
    assert response.status_code == 200
    assert (await editor_client.get(f"/api/v1/loc/fleets/{fleet_b['id']}")).json()["assets"] == [asset["id"]]


@pytest.mark.asyncio
async def test_delete_fleet_unassigns_assets(editor_client: AsyncClient):
    fleet = await _create_fleet(editor_client)
    asset = await _create_asset(editor_client, fleet_id=fleet["id"])

    response = await editor_client.delete(f"/api/v1/loc/fleets/{fleet['id']}")
    assert response.status_code == 200
    assert response.json() == {"message": "Fleet deleted"}

    body = (await editor_client.get(f"/api/v1/fms/assets/{asset['id']}")).json()
    assert body["fields"]["fleet_id"] is None

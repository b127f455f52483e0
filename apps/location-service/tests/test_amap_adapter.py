from __future__ import annotations

import httpx
import pytest
from geo_engine.models import Coordinate

from location_service.errors import NotFoundError, ProviderError, ProviderUnavailableError
from location_service.providers.amap import AmapAdapter


def build_adapter(handler, api_key: str | None = "amap-key") -> AmapAdapter:
    transport = httpx.MockTransport(handler)
    return AmapAdapter(
        api_key=api_key,
        base_url="https://restapi.amap.com/v3",
        timeout_seconds=5.0,
        client_factory=lambda: httpx.AsyncClient(transport=transport, timeout=5.0),
    )


@pytest.mark.asyncio
async def test_amap_geocode_parses_first_match() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/v3/geocode/geo"
        assert request.url.params["key"] == "amap-key"
        assert request.url.params["address"] == "北京市朝阳区阜通东大街6号"
        assert "city" not in request.url.params
        return httpx.Response(
            status_code=200,
            json={
                "status": "1",
                "info": "OK",
                "count": "1",
                "geocodes": [
                    {
                        "formatted_address": "北京市朝阳区阜通东大街6号",
                        "province": "北京市",
                        "city": "北京市",
                        "district": "朝阳区",
                        "township": [],
                        "adcode": "110105",
                        "location": "116.482086,39.990464",
                        "level": "门牌号",
                    }
                ],
            },
        )

    adapter = build_adapter(handler)
    result = await adapter.geocode("北京市朝阳区阜通东大街6号")

    assert result.address == "北京市朝阳区阜通东大街6号"
    assert result.location == Coordinate(longitude=116.482086, latitude=39.990464)
    assert result.district == "朝阳区"
    assert result.township is None
    assert result.level == "门牌号"
    assert result.adcode == "110105"


@pytest.mark.asyncio
async def test_amap_geocode_raises_not_found_for_zero_matches() -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code=200, json={"status": "1", "count": "0", "geocodes": []})

    adapter = build_adapter(handler)
    with pytest.raises(NotFoundError) as exc_info:
        await adapter.geocode("nowhere")

    assert exc_info.value.provider == "amap"


@pytest.mark.asyncio
async def test_amap_maps_provider_status_failure() -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code=200, json={"status": "0", "info": "INVALID_USER_KEY"})

    adapter = build_adapter(handler)
    with pytest.raises(ProviderError) as exc_info:
        await adapter.geocode("北京")

    assert "INVALID_USER_KEY" in exc_info.value.message
    assert exc_info.value.code == "PROVIDER_ERROR"


@pytest.mark.asyncio
async def test_amap_reverse_geocode_maps_nested_components() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.params["location"] == "116.481488,39.990464"
        return httpx.Response(
            status_code=200,
            json={
                "status": "1",
                "regeocode": {
                    "formatted_address": "北京市朝阳区望京街道望京SOHO",
                    "addressComponent": {
                        "province": "北京市",
                        "city": [],
                        "district": "朝阳区",
                        "township": "望京街道",
                        "neighborhood": {"name": [], "type": []},
                        "building": {"name": "望京SOHO", "type": "商务住宅"},
                        "adcode": "110105",
                    },
                },
            },
        )

    adapter = build_adapter(handler)
    coordinate = Coordinate(longitude=116.481488, latitude=39.990464)
    result = await adapter.reverse_geocode(coordinate)

    assert result.address == "北京市朝阳区望京街道望京SOHO"
    assert result.city is None
    assert result.neighborhood is None
    assert result.building == "望京SOHO"
    assert result.location == coordinate


@pytest.mark.asyncio
async def test_amap_reverse_geocode_without_address_raises_not_found() -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(
            status_code=200,
            json={"status": "1", "regeocode": {"formatted_address": [], "addressComponent": {}}},
        )

    adapter = build_adapter(handler)
    with pytest.raises(NotFoundError):
        await adapter.reverse_geocode(Coordinate(longitude=150.0, latitude=-30.0))


@pytest.mark.asyncio
async def test_amap_search_poi_reports_provider_total() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/v3/place/text"
        assert request.url.params["page"] == "2"
        assert request.url.params["offset"] == "25"
        assert request.url.params["citylimit"] == "true"
        return httpx.Response(
            status_code=200,
            json={
                "status": "1",
                "count": "132",
                "pois": [
                    {
                        "id": "B000A7BD6C",
                        "name": "北京大学",
                        "type": "科教文化服务;学校;高等院校",
                        "address": "颐和园路5号",
                        "location": "116.310905,39.992806",
                        "tel": "010-62752114",
                    },
                    {
                        "id": "B000A80RRA",
                        "name": "北京大学东门",
                        "type": "交通设施服务;地铁站",
                        "address": [],
                        "location": "116.315745,39.992345",
                        "tel": [],
                    },
                    {"id": "B0FFGNOLOC", "name": "无坐标", "type": "", "address": "", "location": []},
                ],
            },
        )

    adapter = build_adapter(handler)
    result = await adapter.search_poi("北京大学", "北京", page=2, limit=50)

    assert result.total == 132
    assert [poi.id for poi in result.pois] == ["B000A7BD6C", "B000A80RRA"]
    assert result.pois[1].tel is None
    assert result.pois[1].address == ""
    assert result.pois[0].distance is None


@pytest.mark.asyncio
async def test_amap_search_address_returns_empty_list_without_tips() -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code=200, json={"status": "1", "count": "0", "tips": []})

    adapter = build_adapter(handler)
    assert await adapter.search_address("zzzz") == []


@pytest.mark.asyncio
async def test_amap_search_address_maps_tips() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/v3/assistant/inputtips"
        return httpx.Response(
            status_code=200,
            json={
                "status": "1",
                "tips": [
                    {
                        "id": "B000A83M61",
                        "name": "肯德基(花家地店)",
                        "district": "北京市朝阳区",
                        "adcode": "110105",
                        "location": "116.469023,39.979225",
                        "address": "花家地街1号",
                    },
                    {"id": [], "name": "肯德基", "district": [], "adcode": [], "location": [], "address": []},
                    {"id": [], "name": [], "district": [], "location": []},
                ],
            },
        )

    adapter = build_adapter(handler)
    suggestions = await adapter.search_address("肯德基")

    assert len(suggestions) == 2
    assert suggestions[0].address == "北京市朝阳区花家地街1号"
    assert suggestions[0].building == "肯德基(花家地店)"
    assert suggestions[0].location == Coordinate(longitude=116.469023, latitude=39.979225)
    assert suggestions[1].address == "肯德基"
    assert suggestions[1].location is None
    assert suggestions[1].adcode is None


@pytest.mark.asyncio
async def test_amap_nearby_poi_keeps_provider_distance() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/v3/place/around"
        assert request.url.params["radius"] == "500"
        assert request.url.params["keywords"] == "咖啡"
        return httpx.Response(
            status_code=200,
            json={
                "status": "1",
                "count": "1",
                "pois": [
                    {
                        "id": "B0FFH1",
                        "name": "星巴克",
                        "type": "餐饮服务;咖啡厅",
                        "address": "望京街",
                        "location": "116.480000,39.990000",
                        "distance": "152",
                    }
                ],
            },
        )

    adapter = build_adapter(handler)
    pois = await adapter.nearby_poi(Coordinate(longitude=116.481, latitude=39.99), 500, "咖啡")

    assert len(pois) == 1
    assert pois[0].distance == 152.0


@pytest.mark.asyncio
async def test_amap_locate_by_ip_uses_rectangle_center() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.params["ip"] == "114.247.50.2"
        return httpx.Response(
            status_code=200,
            json={
                "status": "1",
                "province": "北京市",
                "city": "北京市",
                "adcode": "110000",
                "rectangle": "116.0,39.0;117.0,41.0",
            },
        )

    adapter = build_adapter(handler)
    result = await adapter.locate_by_ip("114.247.50.2")

    assert result.address == "北京市"
    assert result.location == Coordinate(longitude=116.5, latitude=40.0)
    assert result.adcode == "110000"


@pytest.mark.asyncio
async def test_amap_locate_by_ip_without_region_raises_not_found() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert "ip" not in request.url.params
        return httpx.Response(
            status_code=200,
            json={"status": "1", "province": [], "city": [], "adcode": [], "rectangle": []},
        )

    adapter = build_adapter(handler)
    with pytest.raises(NotFoundError):
        await adapter.locate_by_ip()


@pytest.mark.asyncio
async def test_amap_maps_http_error() -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code=503, json={"message": "down"})

    adapter = build_adapter(handler)
    with pytest.raises(ProviderError):
        await adapter.geocode("北京")


@pytest.mark.asyncio
async def test_amap_maps_timeout_to_unavailable() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    adapter = build_adapter(handler)
    with pytest.raises(ProviderUnavailableError) as exc_info:
        await adapter.geocode("北京")

    assert exc_info.value.status_code == 504


@pytest.mark.asyncio
async def test_amap_maps_connection_error_to_unavailable() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    adapter = build_adapter(handler)
    with pytest.raises(ProviderUnavailableError):
        await adapter.search_poi("咖啡", None, page=1, limit=10)


@pytest.mark.asyncio
async def test_amap_rejects_invalid_json() -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code=200, content=b"<html>maintenance</html>")

    adapter = build_adapter(handler)
    with pytest.raises(ProviderError):
        await adapter.geocode("北京")


@pytest.mark.asyncio
async def test_amap_rejects_out_of_range_location() -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(
            status_code=200,
            json={"status": "1", "geocodes": [{"formatted_address": "x", "location": "200.0,10.0"}]},
        )

    adapter = build_adapter(handler)
    with pytest.raises(ProviderError):
        await adapter.geocode("x")


@pytest.mark.asyncio
async def test_amap_unconfigured_adapter_makes_no_request() -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    adapter = build_adapter(handler, api_key=None)
    assert adapter.configured is False
    with pytest.raises(ProviderError):
        await adapter.geocode("北京")

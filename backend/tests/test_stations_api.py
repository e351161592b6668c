"""Tests for station API endpoints."""

import uuid

from fastapi import status
from httpx import AsyncClient
from subway.models.subway import Station

from tests.helpers.test_data import make_unique_line_name, make_unique_station_name


class TestStationsAPI:
    """Test cases for station API endpoints."""

    async def test_create_station(self, async_client: AsyncClient) -> None:
        """Test registering a station returns 201 with a Location header."""
        name = make_unique_station_name("Gangnam")

        response = await async_client.post("/api/v1/stations", json={"name": name})

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data["name"] == name
        assert response.headers["location"] == f"/api/v1/stations/{data['id']}"

    async def test_create_station_duplicate(self, async_client: AsyncClient) -> None:
        name = make_unique_station_name("Gangnam")

        response1 = await async_client.post("/api/v1/stations", json={"name": name})
        assert response1.status_code == status.HTTP_201_CREATED

        response2 = await async_client.post("/api/v1/stations", json={"name": name})
        assert response2.status_code == status.HTTP_409_CONFLICT
        assert "already exists" in response2.json()["detail"]

    async def test_create_station_empty_name(self, async_client: AsyncClient) -> None:
        response = await async_client.post("/api/v1/stations", json={"name": ""})

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_CONTENT

    async def test_list_stations(self, async_client: AsyncClient, stations: dict[str, Station]) -> None:
        response = await async_client.get("/api/v1/stations")

        assert response.status_code == status.HTTP_200_OK
        names = [station["name"] for station in response.json()]
        assert names == sorted(station.name for station in stations.values())

    async def test_delete_station(self, async_client: AsyncClient, stations: dict[str, Station]) -> None:
        """Test deleting an existing station returns 200."""
        response = await async_client.delete(f"/api/v1/stations/{stations['A'].id}")

        assert response.status_code == status.HTTP_200_OK
        remaining = [station["id"] for station in (await async_client.get("/api/v1/stations")).json()]
        assert str(stations["A"].id) not in remaining

    async def test_delete_missing_station(self, async_client: AsyncClient) -> None:
        """Test deleting a station that does not exist returns 204."""
        response = await async_client.delete(f"/api/v1/stations/{uuid.uuid4()}")

        assert response.status_code == status.HTTP_204_NO_CONTENT

    async def test_delete_station_used_by_line(self, async_client: AsyncClient, stations: dict[str, Station]) -> None:
        response = await async_client.post(
            "/api/v1/lines",
            json={
                "name": make_unique_line_name(),
                "color": "bg-green-600",
                "up_station_id": str(stations["A"].id),
                "down_station_id": str(stations["B"].id),
                "distance": 5,
            },
        )
        assert response.status_code == status.HTTP_201_CREATED

        response = await async_client.delete(f"/api/v1/stations/{stations['A'].id}")

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    async def test_delete_station_invalid_id(self, async_client: AsyncClient) -> None:
        response = await async_client.delete("/api/v1/stations/not-a-uuid")

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_CONTENT

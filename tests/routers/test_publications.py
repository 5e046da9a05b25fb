import pytest

from tests.helpers.constants import TEST_SAVED_PUBLICATIONS

pytestmark = pytest.mark.asyncio


def _ids(response):
    return [pub["id"] for pub in response.json()]


async def test_can_fetch_publication_by_id(setup_publications, client):
    response = await client.get("/api/v1/publications/3")

    assert response.status_code == 200
    body = response.json()
    expected = TEST_SAVED_PUBLICATIONS[2]
    assert body["id"] == 3
    assert body["title"] == expected["title"]
    assert body["class"] == "Stars"
    assert body["systemCode"] == "NES"
    assert body["gameId"] == expected["game_id"]
    assert body["submissionId"] == expected["submission_id"]
    assert body["frames"] == expected["frames"]
    assert body["rerecords"] == expected["rerecords"]
    assert body["emulatorVersion"] == expected["emulator_version"]
    assert body["movieFileName"] == expected["movie_file_name"]
    assert body["obsoletedById"] is None
    assert body["createTimestamp"].startswith("2018-07-15")
    assert body["authors"] == ["alice", "carol"]
    assert body["flags"] == ["commentary", "verified"]


async def test_can_fetch_obsoleted_publication_by_id(setup_publications, client):
    response = await client.get("/api/v1/publications/1")

    assert response.status_code == 200
    assert response.json()["obsoletedById"] == 4


async def test_cannot_fetch_nonexistent_publication(setup_publications, client):
    response = await client.get("/api/v1/publications/1000")

    assert response.status_code == 404
    body = response.json()
    assert body["status"] == 404
    assert body["error"]["type"] == "not_found"
    assert body["path"] == "/api/v1/publications/1000"


async def test_fetch_publication_with_invalid_id_is_bad_request(setup_publications, client):
    response = await client.get("/api/v1/publications/abc")

    assert response.status_code == 400
    body = response.json()
    assert body["error"]["type"] == "validation_error"
    assert body["error"]["details"][0]["loc"] == ["path", "publication_id"]


async def test_list_returns_current_publications_by_default(setup_publications, client):
    response = await client.get("/api/v1/publications")

    assert response.status_code == 200
    assert _ids(response) == [2, 3, 4]


async def test_list_with_empty_catalog(client):
    response = await client.get("/api/v1/publications")

    assert response.status_code == 200
    assert response.json() == []


@pytest.mark.parametrize(
    "query,expected",
    [
        ("showObsoleted=true", [1, 2, 3, 4]),
        ("onlyObsoleted=true", [1]),
        ("onlyObsoleted=true&showObsoleted=false", [1]),
        ("systems=nes", [3, 4]),
        ("systems=NES,snes", [2, 3, 4]),
        ("classNames=moons", [4]),
        ("classNames=Moons&showObsoleted=true", [1, 4]),
        ("startYear=2016", [3, 4]),
        ("endYear=2016", [2]),
        ("startYear=2016&endYear=2019", [3]),
        ("genreNames=rpg", [2]),
        ("genreNames=Platformer", [3, 4]),
        ("flagNames=verified", [3]),
        ("flagNames=verified&showObsoleted=true", [1, 3]),
        ("authorIds=3", [3, 4]),
        ("authorIds=1,2", [2, 3]),
        ("gameIds=1", [4]),
        ("gameIds=1&showObsoleted=true", [1, 4]),
        ("systems=nes&flagNames=commentary", [3]),
        ("systems=gba", []),
    ],
)
async def test_list_filters_by_tokens(setup_publications, client, query, expected):
    response = await client.get(f"/api/v1/publications?{query}")

    assert response.status_code == 200
    assert _ids(response) == expected


@pytest.mark.parametrize(
    "sort,expected",
    [
        ("id", [2, 3, 4]),
        ("-id", [4, 3, 2]),
        ("+id", [2, 3, 4]),
        ("-frames", [2, 3, 4]),
        ("frames", [4, 3, 2]),
        ("-FRAMES", [2, 3, 4]),
        ("title", [3, 4, 2]),
        ("class,-id", [4, 2, 3]),
        ("systemCode,-frames", [3, 4, 2]),
        ("system_code,frames", [4, 3, 2]),
        ("-createTimestamp", [4, 3, 2]),
        ("rerecords", [4, 3, 2]),
    ],
)
async def test_list_sorts_by_requested_fields(setup_publications, client, sort, expected):
    response = await client.get("/api/v1/publications", params={"sort": sort})

    assert response.status_code == 200
    assert _ids(response) == expected


@pytest.mark.parametrize("sort", ["foo", "-foo", "title,notAField", "authors", "flags"])
async def test_list_with_invalid_sort_is_bad_request(setup_publications, client, sort):
    response = await client.get("/api/v1/publications", params={"sort": sort})

    assert response.status_code == 400
    body = response.json()
    assert body["error"]["type"] == "validation_error"
    assert "sort" in body["error"]["details"]
    assert any("Invalid Sort parameter" in msg for msg in body["error"]["details"]["sort"])


async def test_invalid_sort_error_names_the_bad_field(setup_publications, client):
    response = await client.get("/api/v1/publications", params={"sort": "title,-bogus"})

    assert response.status_code == 400
    assert response.json()["error"]["details"] == {"sort": ["Invalid Sort parameter: 'bogus'"]}


@pytest.mark.parametrize(
    "query,expected",
    [
        ("limit=2", [2, 3]),
        ("limit=2&offset=2", [4]),
        ("offset=1", [3, 4]),
        ("offset=10", []),
        ("limit=1&offset=1&sort=-frames", [3]),
        ("limit=2&offset=1&showObsoleted=true", [2, 3]),
    ],
)
async def test_list_paginates(setup_publications, client, query, expected):
    response = await client.get(f"/api/v1/publications?{query}")

    assert response.status_code == 200
    assert _ids(response) == expected


@pytest.mark.parametrize("query", ["limit=0", "limit=101", "offset=-1", "limit=abc", "startYear=soon"])
async def test_list_with_invalid_paging_is_bad_request(setup_publications, client, query):
    response = await client.get(f"/api/v1/publications?{query}")

    assert response.status_code == 400
    assert response.json()["error"]["type"] == "validation_error"


@pytest.mark.parametrize("param", ["authorIds", "gameIds"])
async def test_list_with_malformed_id_list_is_bad_request(setup_publications, client, param):
    response = await client.get("/api/v1/publications", params={param: "1,two"})

    assert response.status_code == 400
    body = response.json()
    assert body["error"]["type"] == "validation_error"
    assert param in body["error"]["details"]


async def test_list_ignores_fields_when_field_selection_disabled(setup_publications, client, monkeypatch):
    monkeypatch.setenv("API_FIELD_SELECTION_ENABLED", "false")
    response = await client.get("/api/v1/publications", params={"fields": "id,title"})

    assert response.status_code == 200
    assert "systemCode" in response.json()[0]


async def test_list_selects_fields_when_enabled(setup_publications, client, monkeypatch):
    monkeypatch.setenv("API_FIELD_SELECTION_ENABLED", "true")
    response = await client.get("/api/v1/publications", params={"fields": "id,TITLE,unknown"})

    assert response.status_code == 200
    body = response.json()
    assert len(body) == 3
    assert all(set(pub) == {"id", "title"} for pub in body)


async def test_responses_carry_correlation_id(setup_publications, client):
    response = await client.get("/api/v1/publications/2", headers={"X-Correlation-ID": "abc-123"})

    assert response.headers["X-Correlation-ID"] == "abc-123"


async def test_error_envelope_carries_correlation_id(client):
    response = await client.get("/api/v1/publications/5", headers={"X-Request-ID": "req-9"})

    assert response.status_code == 404
    assert response.json()["correlation_id"] == "req-9"


async def test_health_check(client):
    response = await client.get("/api/v1/health")

    assert response.status_code == 200
    assert response.json()["message"] == "Healthy"


@pytest.mark.parametrize(
    "query,expected",
    [
        ("sort=branch", [2, 3, 4]),
        ("sort=-branch", [3, 4, 2]),
        ("sort=submissionId", [2, 3, 4]),
        ("sort=-submissionId", [4, 3, 2]),
        ("sort=systemFrameRate,-id", [3, 2, 4]),
        ("sort=obsoletedById&showObsoleted=true", [2, 3, 4, 1]),
        ("sort=-obsoletedById&showObsoleted=true", [2, 3, 4, 1]),
    ],
)
async def test_list_sorts_nulls_as_largest_value(setup_publications, client, query, expected):
    response = await client.get(f"/api/v1/publications?{query}")

    assert response.status_code == 200
    assert _ids(response) == expected


@pytest.mark.parametrize("publication_id", ["99999999999999999999", "2147483648", "0", "-1"])
async def test_fetch_publication_with_out_of_range_id_is_bad_request(setup_publications, client, publication_id):
    response = await client.get(f"/api/v1/publications/{publication_id}")

    assert response.status_code == 400
    assert response.json()["error"]["type"] == "validation_error"


@pytest.mark.parametrize("param", ["authorIds", "gameIds"])
@pytest.mark.parametrize("value", ["99999999999999999999", "1,2147483648", "0"])
async def test_list_with_out_of_range_ids_is_bad_request(setup_publications, client, param, value):
    response = await client.get("/api/v1/publications", params={param: value})

    assert response.status_code == 400
    body = response.json()
    assert body["error"]["type"] == "validation_error"
    assert "between 1 and 2147483647" in body["error"]["details"][param][0]


@pytest.mark.parametrize(
    "query",
    ["startYear=99999999999999999999", "endYear=-99999999999999999999", "endYear=10000", "offset=99999999999999999999"],
)
async def test_list_with_out_of_range_numbers_is_bad_request(setup_publications, client, query):
    response = await client.get(f"/api/v1/publications?{query}")

    assert response.status_code == 400
    assert response.json()["error"]["type"] == "validation_error"


async def test_largest_valid_id_is_not_found(setup_publications, client):
    response = await client.get("/api/v1/publications/2147483647")

    assert response.status_code == 404


async def test_publication_routes_document_error_envelopes(client):
    response = await client.get("/openapi.json")

    paths = response.json()["paths"]
    for path in ("/api/v1/publications", "/api/v1/publications/{publication_id}"):
        responses = paths[path]["get"]["responses"]
        assert {"400", "500"} <= set(responses)
        assert responses["500"]["content"]["application/json"]["schema"]["$ref"].endswith("/ErrorResponse")

"""HTTP surface — routes, defaults, format flag and error mapping.

Tests cover:
    - Welcome and health endpoints
    - Route defaults reach the upstream query string
    - format=parsed returns the normalized body, otherwise the raw upstream body
    - Search resolves popular names, 400 without name, no upstream call
    - Upstream/transport failures → 500 with {"error": ...}
"""

from unittest.mock import AsyncMock, patch

import httpx

from fake_cad import cad_payload, cad_row, json_response, text_response


def test_root_welcome(api):
    resp = api.get("/")
    assert resp.status_code == 200
    assert resp.json() == {"message": "Welcome to MeteorSpy API"}


def test_health(api):
    body = api.get("/api/health").json()
    assert body["status"] == "OK"
    assert body["timestamp"]


def test_close_approaches_defaults_and_raw_body(api, upstream):
    payload = cad_payload([cad_row()])
    fake = upstream(json_response(payload))
    resp = api.get("/api/close-approaches")
    assert resp.status_code == 200
    assert resp.json() == payload
    assert dict(fake.requests[0].url.params) == {
        "date-min": "now",
        "date-max": "+60",
        "dist-max": "0.05",
        "body": "Earth",
        "sort": "date",
    }


def test_close_approaches_parsed(api, upstream):
    upstream(json_response(cad_payload([cad_row(des="2024 AB", dist="1.0")])))
    body = api.get("/api/close-approaches", params={"format": "parsed"}).json()
    assert body["count"] == 1
    assert body["signature"]["version"] == "1.5"
    approach = body["approaches"][0]
    assert approach["name"] == "2024 AB"
    assert approach["distanceKm"] == 149597871.0
    assert approach["distanceLunarDistances"] == 389.17


def test_close_approaches_passes_query_through(api, upstream):
    fake = upstream(json_response(cad_payload([])))
    api.get(
        "/api/close-approaches",
        params={"date-min": "2026-01-01", "date-max": "2026-02-01", "dist-max": "10LD"},
    )
    params = fake.requests[0].url.params
    assert params["date-min"] == "2026-01-01"
    assert params["date-max"] == "2026-02-01"
    assert params["dist-max"] == "10LD"


def test_asteroid_defaults(api, upstream):
    fake = upstream(json_response(cad_payload([])))
    resp = api.get("/api/asteroid/433")
    assert resp.status_code == 200
    assert dict(fake.requests[0].url.params) == {
        "des": "433",
        "date-min": "1900-01-01",
        "date-max": "2100-12-31",
        "dist-max": "1",
        "fullname": "true",
        "diameter": "true",
    }


def test_asteroid_parsed_empty_omits_signature(api, upstream):
    upstream(json_response(cad_payload([], count=0)))
    body = api.get("/api/asteroid/433", params={"format": "parsed"}).json()
    assert body == {"count": 0, "approaches": []}


def test_search_resolves_popular_name(api):
    mock = AsyncMock(return_value=cad_payload([cad_row(des="99942")]))
    with patch("meteorspy.client.object_approaches", mock):
        resp = api.get("/api/search", params={"name": "APOPHIS"})
    assert resp.status_code == 200
    assert mock.await_count == 1
    assert mock.await_args.args[:4] == ("99942", "1900-01-01", "2100-12-31", "1")
    # parsed is the default here
    assert resp.json()["approaches"][0]["name"] == "99942"


def test_search_unknown_name_passes_through(api, upstream):
    fake = upstream(json_response(cad_payload([])))
    api.get("/api/search", params={"name": "2024 YR4", "format": "raw"})
    assert fake.requests[0].url.params["des"] == "2024 YR4"


def test_search_without_name_is_400_and_skips_upstream(api, upstream):
    fake = upstream(json_response(cad_payload([])))
    resp = api.get("/api/search")
    assert resp.status_code == 400
    assert "name" in resp.json()["error"]
    assert fake.requests == []


def test_upstream_503_becomes_500(api, upstream):
    upstream(text_response("Service Unavailable", 503))
    resp = api.get("/api/close-approaches")
    assert resp.status_code == 500
    assert "503" in resp.json()["error"]


def test_transport_failure_becomes_500(api, upstream):
    def refuse(request):
        raise httpx.ConnectError("connection refused", request=request)

    upstream(refuse)
    resp = api.get("/api/asteroid/433")
    assert resp.status_code == 500
    assert "ConnectError" in resp.json()["error"]


def test_parsed_out_of_range_distances_serialize_as_null(api, upstream):
    upstream(json_response(cad_payload([
        cad_row(des="inf", dist="1e309"),
        cad_row(des="wide", dist="1e303"),
        cad_row(des="near", dist="1.0"),
    ])))
    resp = api.get("/api/close-approaches", params={"format": "parsed"})
    assert resp.status_code == 200
    inf, wide, near = resp.json()["approaches"]
    assert inf["distanceAu"] is None
    assert inf["distanceKm"] is None
    assert wide["distanceAu"] == 1e303
    assert wide["distanceKm"] is None
    assert near["distanceKm"] == 149597871.0


def test_redirect_loop_becomes_500_with_message(api, upstream):
    def loop(request):
        return httpx.Response(302, headers={"Location": str(request.url)})

    upstream(loop, follow_redirects=True)
    resp = api.get("/api/close-approaches")
    assert resp.status_code == 500
    assert "TooManyRedirects" in resp.json()["error"]

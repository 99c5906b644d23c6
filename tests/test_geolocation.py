"""IP geolocation client."""

import httpx

from app.infrastructure.geolocation import DEFAULT_IP_INFO, GeoLocationService, is_public_ip

IPWHO_RESPONSE = {
    "success": True,
    "ip": "8.8.8.8",
    "country": "United States",
    "region": "California",
    "city": "Mountain View",
    "latitude": 37.386,
    "longitude": -122.0838,
    "timezone": {"id": "America/Los_Angeles"},
    "connection": {"isp": "Google LLC"},
}


def make_service(handler):
    calls = []

    def recording(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return handler(request)

    return GeoLocationService(base_url="https://geo.test", transport=httpx.MockTransport(recording)), calls


class TestGeoLocationService:

    def test_maps_successful_lookup(self):
        service, calls = make_service(lambda request: httpx.Response(200, json=IPWHO_RESPONSE))
        info = service.get_ip_info("8.8.8.8")
        assert info == {
            "country": "United States",
            "city": "Mountain View",
            "region": "California",
            "coordinates": {"latitude": 37.386, "longitude": -122.0838},
            "timezone": "America/Los_Angeles",
            "isp": "Google LLC",
        }
        assert str(calls[0].url) == "https://geo.test/8.8.8.8"

    def test_results_are_cached(self):
        service, calls = make_service(lambda request: httpx.Response(200, json=IPWHO_RESPONSE))
        service.get_ip_info("8.8.8.8")
        service.get_ip_info("8.8.8.8")
        assert len(calls) == 1
        assert service.get_cache_stats()["size"] == 1

    def test_unsuccessful_answer_falls_back(self):
        service, _ = make_service(lambda request: httpx.Response(200, json={"success": False, "message": "reserved"}))
        assert service.get_ip_info("8.8.8.8") == DEFAULT_IP_INFO

    def test_http_error_falls_back(self):
        service, _ = make_service(lambda request: httpx.Response(503))
        assert service.get_ip_info("8.8.8.8") == DEFAULT_IP_INFO

    def test_network_error_falls_back(self):
        def boom(request):
            raise httpx.ConnectTimeout("timeout", request=request)

        service, _ = make_service(boom)
        assert service.get_ip_info("8.8.8.8") == DEFAULT_IP_INFO

    def test_private_addresses_skip_lookup(self):
        service, calls = make_service(lambda request: httpx.Response(200, json=IPWHO_RESPONSE))
        for ip in ("127.0.0.1", "192.168.1.10", "::1", "testclient", None):
            assert service.get_ip_info(ip) == DEFAULT_IP_INFO
        assert calls == []


def test_is_public_ip():
    assert is_public_ip("8.8.8.8")
    assert not is_public_ip("10.0.0.1")
    assert not is_public_ip("garbage")

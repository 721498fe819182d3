from fleetdesk.auth.jwt import issue_account_token
from fleetdesk.config import settings


def _bearer(role: str) -> dict[str, str]:
    token = issue_account_token("account-a", role, settings.jwt_secret)
    return {"Authorization": f"Bearer {token}"}


def test_metrics_endpoint_reports_request_counters_and_timings(client):
    client.get("/health")

    response = client.get("/metrics", headers=_bearer("MANAGER"))

    assert response.status_code == 200
    payload = response.json()
    assert payload["counters"]["http_requests_total"] >= 1
    assert payload["timings"]["http_request_duration_seconds"]["count"] >= 1


def test_metrics_endpoint_includes_dispatch_counters(client, seed):
    order = seed.order(seed.customer())
    body = {
        "orderId": str(order.id),
        "vehicleId": str(seed.vehicle().id),
        "driverId": str(seed.employee().id),
    }
    client.post("/api/dispatch/assign", json=body, headers=_bearer("DISPATCHER"))

    payload = client.get("/metrics", headers=_bearer("ADMIN")).json()

    assert payload["counters"]["dispatch_assign_total"] == 1
    assert payload["timings"]["dispatch_assign_seconds"]["count"] == 1


def test_metrics_endpoint_exposes_explicit_response_schema(client):
    payload = client.get("/openapi.json").json()
    metrics_get = payload["paths"]["/metrics"]["get"]

    assert metrics_get["responses"]["200"]["content"]["application/json"]["schema"]["$ref"] == (
        "#/components/schemas/MetricsResponse"
    )


def test_metrics_endpoint_requires_auth_when_test_bypass_disabled(client):
    original = settings.enable_test_auth_bypass
    settings.enable_test_auth_bypass = False
    try:
        response = client.get("/metrics")
        assert response.status_code == 401
        assert response.json()["message"] == "Missing bearer token"
    finally:
        settings.enable_test_auth_bypass = original


def test_metrics_endpoint_rejects_dispatcher_role(client):
    response = client.get("/metrics", headers=_bearer("DISPATCHER"))

    assert response.status_code == 403
    assert response.json() == {"success": False, "message": "Insufficient role"}

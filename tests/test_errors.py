from fastapi.testclient import TestClient
from app.main import app
from app.core.config import settings
from app.core.errors import field_errors

client = TestClient(app)

def test_404_not_found():
    response = client.get("/non-existent-route")
    assert response.status_code == 404
    data = response.json()
    assert "error" in data
    assert "code" in data
    assert data["code"] == "HTTP_ERROR"

def test_validation_error_structure():
    # Temporary route to exercise the validation handler
    from pydantic import BaseModel

    class Item(BaseModel):
        name: str
        price: int

    @app.post("/test-validation")
    def create_item(item: Item):
        return item

    response = client.post("/test-validation", json={"name": "foo", "price": "invalid"})
    assert response.status_code == 422
    data = response.json()
    assert data["code"] == "VALIDATION_ERROR"
    assert "details" in data
    assert [error["field"] for error in data["details"]] == ["price"]

def test_custom_exception():
    from app.core.exceptions import ResourceNotFoundError

    @app.get("/test-custom-error")
    def trigger_custom_error():
        raise ResourceNotFoundError(message="Item not found")

    response = client.get("/test-custom-error")
    assert response.status_code == 404
    data = response.json()
    assert data["code"] == "NOT_FOUND"
    assert data["error"] == "Item not found"

def test_dispatch_error_carries_failure_reason_code():
    from app.core.exceptions import ProviderTimeoutError

    @app.get("/test-dispatch-error")
    def trigger_dispatch_error():
        raise ProviderTimeoutError("SMS service request timed out", details="read timeout")

    response = client.get("/test-dispatch-error")
    assert response.status_code == 502
    data = response.json()
    assert data["code"] == "TimeoutError"
    assert data["details"] == "read timeout"

def test_unhandled_exception_is_internal_error():
    @app.get("/test-unhandled-error")
    def trigger_unhandled_error():
        raise RuntimeError("boom")

    response = TestClient(app, raise_server_exceptions=False).get("/test-unhandled-error")
    assert response.status_code == 500
    assert response.json()["code"] == "INTERNAL_ERROR"

def test_invalid_recipient_is_client_error():
    from app.core.exceptions import InvalidInputError

    @app.get("/test-invalid-recipient")
    def trigger_invalid_recipient():
        raise InvalidInputError("Invalid phone number format", details="+")

    response = client.get("/test-invalid-recipient")
    assert response.status_code == 400
    assert response.json()["code"] == "InvalidInput"

def test_production_hides_upstream_details(monkeypatch):
    from app.core.exceptions import ConfigurationError, ProviderRejectedError

    @app.get("/test-config-error")
    def trigger_config_error():
        raise ConfigurationError("SMS provider configuration invalid", details=["AT_API_KEY is required"])

    @app.get("/test-rejected-error")
    def trigger_rejected_error():
        raise ProviderRejectedError("SMS provider rejected the request", details="The supplied authentication is invalid")

    assert client.get("/test-config-error").json()["details"] == ["AT_API_KEY is required"]

    monkeypatch.setattr(settings, "ENVIRONMENT", "production")

    response = client.get("/test-config-error")
    assert response.status_code == 500
    assert response.json()["code"] == "CONFIGURATION_ERROR"
    assert response.json()["details"] is None

    response = client.get("/test-rejected-error")
    assert response.status_code == 502
    assert response.json()["code"] == "ProviderRejected"
    assert response.json()["details"] is None

def test_production_keeps_client_error_details(monkeypatch):
    from app.core.exceptions import ResourceNotFoundError

    @app.get("/test-missing-transaction")
    def trigger_missing_transaction():
        raise ResourceNotFoundError("Transaction not found", details={"reference": "TXN1"})

    monkeypatch.setattr(settings, "ENVIRONMENT", "production")

    assert client.get("/test-missing-transaction").json()["details"] == {"reference": "TXN1"}

def test_field_errors_flattens_form_locations():
    errors = [
        {"loc": ("body", "accountNumber"), "msg": "Value error, account number must be exactly 10 digits"},
        {"loc": ("amount",), "msg": "Input should be greater than 0"},
        {"loc": ("body",), "msg": "Field required"},
    ]
    assert field_errors(errors) == [
        {"field": "accountNumber", "message": "account number must be exactly 10 digits"},
        {"field": "amount", "message": "Input should be greater than 0"},
        {"field": "form", "message": "Field required"},
    ]

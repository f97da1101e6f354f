from urllib.parse import parse_qs

import httpx
import pytest

from app.core.exceptions import (
    InvalidProviderResponseError,
    ProviderNetworkError,
    ProviderRejectedError,
    ProviderTimeoutError,
)
from app.schemas.dispatch import ProviderRequest
from app.services.sms_transport import AfricasTalkingTransport
from fakes import SUCCESS_ENVELOPE


def make_transport(config, handler):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return AfricasTalkingTransport(config, client=client)


def sample_request(sender="sandbox"):
    return ProviderRequest(to=["+2348082225459"], message="CR Amt:1,500.00 & more", sender=sender)


@pytest.mark.asyncio
async def test_send_posts_form_to_sandbox_endpoint(sandbox_config):
    captured = []

    def handler(request):
        request.read()
        captured.append(request)
        return httpx.Response(201, json=SUCCESS_ENVELOPE)

    transport = make_transport(sandbox_config, handler)
    payload = await transport.send(sample_request())

    assert payload == SUCCESS_ENVELOPE
    request = captured[0]
    assert request.method == "POST"
    assert str(request.url) == "https://api.sandbox.africastalking.com/version1/messaging"
    assert request.headers["apiKey"] == "test-key"
    assert request.headers["Accept"] == "application/json"
    assert parse_qs(request.content.decode()) == {
        "username": ["sandbox"],
        "to": ["+2348082225459"],
        "message": ["CR Amt:1,500.00 & more"],
        "from": ["sandbox"],
    }


@pytest.mark.asyncio
async def test_send_uses_production_endpoint(production_config):
    captured = []

    def handler(request):
        captured.append(request)
        return httpx.Response(201, json=SUCCESS_ENVELOPE)

    await make_transport(production_config, handler).send(sample_request(sender="MYBANK"))

    assert str(captured[0].url) == "https://api.africastalking.com/version1/messaging"


@pytest.mark.asyncio
async def test_http_error_status_is_rejection(sandbox_config):
    def handler(request):
        return httpx.Response(401, text="The supplied authentication is invalid")

    with pytest.raises(ProviderRejectedError) as exc_info:
        await make_transport(sandbox_config, handler).send(sample_request())

    assert exc_info.value.details == "The supplied authentication is invalid"


@pytest.mark.asyncio
async def test_non_json_body_is_invalid_response(sandbox_config):
    def handler(request):
        return httpx.Response(201, text="<html>gateway</html>")

    with pytest.raises(InvalidProviderResponseError):
        await make_transport(sandbox_config, handler).send(sample_request())


@pytest.mark.asyncio
async def test_connection_refused_is_network_error(sandbox_config):
    def handler(request):
        raise httpx.ConnectError("Connection refused", request=request)

    with pytest.raises(ProviderNetworkError):
        await make_transport(sandbox_config, handler).send(sample_request())


@pytest.mark.asyncio
async def test_timeout_is_timeout_error(sandbox_config):
    def handler(request):
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(ProviderTimeoutError):
        await make_transport(sandbox_config, handler).send(sample_request())


@pytest.mark.asyncio
async def test_close_leaves_injected_client_open(sandbox_config):
    client = httpx.AsyncClient(transport=httpx.MockTransport(lambda request: httpx.Response(201, json={})))
    transport = AfricasTalkingTransport(sandbox_config, client=client)

    await transport.close()

    assert not client.is_closed
    await client.aclose()

import pytest

from app.core.config import ProviderConfig


@pytest.fixture
def sandbox_config():
    return ProviderConfig(api_key="test-key", username="sandbox", mode="sandbox")


@pytest.fixture
def production_config():
    return ProviderConfig(
        api_key="live-key",
        username="mybank",
        mode="production",
        sender_id="MYBANK",
        base_url="https://api.africastalking.com",
    )

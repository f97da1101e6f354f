"""
Test Africa's Talking SMS Integration

Run this script to verify the SMS relay is configured correctly
and can send messages.

In sandbox mode the recipient must first be added to the
Africa's Talking Sandbox Simulator (SMS → Simulator).

Usage: python scripts/send_test_sms.py [+2348082225459]
"""

import asyncio
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv

# Load environment variables before settings are read
load_dotenv()

from app.core.config import settings, ProviderConfig
from app.core.exceptions import ConfigurationError, FailureReason
from app.schemas.dispatch import Delivered
from app.services.sms_service import MessageDispatcher
from app.services.sms_transport import AfricasTalkingTransport

DEFAULT_TEST_NUMBER = "+2348082225459"
TEST_MESSAGE = "Hello from Africa's Talking Sandbox! This is a test message."


def check_config():
    """Prints and validates the provider configuration."""
    print("=" * 60)
    print("  Africa's Talking Configuration Test")
    print("=" * 60 + "\n")

    print(f"API Key: {settings.AT_API_KEY[:10]}..." if settings.AT_API_KEY else "API Key: ❌ Not set")
    print(f"Username: {settings.AT_USERNAME}")
    print(f"Mode: {settings.sms_mode}")
    print(f"Sender: {settings.AT_SENDER or '(none)'}\n")

    try:
        return ProviderConfig.from_settings(settings)
    except ConfigurationError as e:
        print(f"❌ {e.message}")
        print("⚠️  Please set AT_API_KEY and AT_USERNAME in the .env file")
        return None


async def send_test_message(config: ProviderConfig, phone: str):
    """Sends one test SMS and prints the outcome."""
    print("=" * 60)
    print("  Test Message Sending")
    print("=" * 60 + "\n")

    print(f"📤 Sending test SMS to {phone}...")

    transport = AfricasTalkingTransport(config)
    try:
        outcome = await MessageDispatcher(config, transport).dispatch(phone, TEST_MESSAGE)
    finally:
        await transport.close()

    if isinstance(outcome, Delivered):
        print("\n🎉 SMS Test PASSED!")
        print(f"Recipient: {outcome.recipient}")
        print(f"Message ID: {outcome.provider_message_id}")
        print(f"Cost: {outcome.cost}")
        return

    print("\n❌ SMS Test FAILED!")
    print(f"Reason: {outcome.reason.value}")
    print(f"Detail: {outcome.detail}")

    if outcome.detail and "InvalidSenderId" in outcome.detail:
        print("\n💡 Make sure AT_USERNAME is 'sandbox' or AT_SENDER is a registered sender ID")
    elif outcome.reason is FailureReason.PROVIDER_REJECTED:
        print("\n💡 In sandbox mode, add the number to the Sandbox Simulator first:")
        print("   https://account.africastalking.com/apps/sandbox → SMS → Simulator")


async def main():
    print("\n🧪 TxnAlert SMS Integration Test\n")

    config = check_config()
    if config is None:
        print("\n❌ Configuration test failed. Please fix .env file and try again.")
        return

    phone = sys.argv[1] if len(sys.argv) > 1 else DEFAULT_TEST_NUMBER
    await send_test_message(config, phone)
    print("\n" + "=" * 60 + "\n")


if __name__ == "__main__":
    asyncio.run(main())

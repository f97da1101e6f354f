import pytest

from app.core.exceptions import InvalidProviderResponseError
from app.schemas.provider import (
    AcceptedRecipient,
    FailedRecipient,
    RejectedEnvelope,
    decode_envelope,
)
from fakes import SUCCESS_ENVELOPE, make_envelope


def test_decode_success():
    assert decode_envelope(SUCCESS_ENVELOPE) == AcceptedRecipient(
        number="+2348082225459",
        message_id="ATXid_1",
        cost="KES 0.8",
    )


def test_decode_numeric_cost_as_string():
    envelope = make_envelope([
        {"number": "+2348082225459", "status": "Success", "cost": 0.8, "messageId": "ATXid_2"}
    ])
    assert decode_envelope(envelope).cost == "0.8"


def test_decode_empty_recipients_uses_message():
    assert decode_envelope(make_envelope([], message="InvalidSenderId")) == RejectedEnvelope(
        reason="InvalidSenderId"
    )


def test_decode_missing_recipients_and_message():
    assert decode_envelope({"SMSMessageData": {}}) == RejectedEnvelope(reason="Unknown API error")


def test_decode_non_success_status():
    envelope = make_envelope([
        {"statusCode": 406, "number": "+2348082225459", "status": "UserInBlacklist", "cost": "0", "messageId": "None"}
    ])
    assert decode_envelope(envelope) == FailedRecipient(number="+2348082225459", status="UserInBlacklist")


def test_decode_only_first_recipient_is_inspected():
    envelope = make_envelope([
        {"number": "+2348082225459", "status": "InsufficientBalance"},
        {"number": "+2348030000000", "status": "Success", "cost": "KES 0.8", "messageId": "ATXid_3"},
    ])
    assert isinstance(decode_envelope(envelope), FailedRecipient)


@pytest.mark.parametrize("payload", [
    None,
    "not json",
    {"SMSMessageData": None},
    {"smsMessageData": {"Recipients": []}},
    {"SMSMessageData": {"Recipients": "none"}},
    {"SMSMessageData": {"Recipients": [{"status": "Success"}]}},
])
def test_decode_rejects_unexpected_shapes(payload):
    with pytest.raises(InvalidProviderResponseError):
        decode_envelope(payload)


def test_decode_success_without_message_id_is_invalid():
    envelope = make_envelope([{"number": "+2348082225459", "status": "Success", "cost": "KES 0.8"}])
    with pytest.raises(InvalidProviderResponseError):
        decode_envelope(envelope)


def test_decode_non_success_entry_without_number():
    envelope = make_envelope([{"status": "UserInBlacklist", "statusCode": 406}])
    assert decode_envelope(envelope) == FailedRecipient(status="UserInBlacklist", number=None)


def test_decode_success_without_number_is_invalid():
    envelope = make_envelope([{"status": "Success", "cost": "KES 0.8", "messageId": "ATXid_4"}])
    with pytest.raises(InvalidProviderResponseError):
        decode_envelope(envelope)

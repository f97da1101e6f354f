"""
app/api/transactions.py

Purpose: Demo transaction endpoints

- Receives the transfer form and stores it in the session
- Builds the demo receipt SMS
- Schedules the receipt SMS dispatch without waiting for it
- Serves the receipt and details views
"""

from fastapi import APIRouter, BackgroundTasks, Form, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import PlainTextResponse, RedirectResponse
from pydantic import ValidationError
from datetime import datetime, timezone
from typing import Optional

from app.core.config import settings
from app.core.exceptions import ResourceNotFoundError
from app.core.logging import get_logger, LogContext
from app.schemas.dispatch import Delivered
from app.schemas.response import TransactionDetails
from app.schemas.transaction import TransactionForm, TransactionRecord
from app.services.sms_service import MessageDispatcher
from utils.sms_utils import build_receipt_sms, generate_reference_number, mask_account_number
from utils.validation_utils import to_international

logger = get_logger(__name__)
router = APIRouter()
api_router = APIRouter()

SESSION_KEY = "transaction"


def get_dispatcher(request: Request) -> Optional[MessageDispatcher]:
    """Dispatcher built at startup; None when SMS relay is disabled."""
    return getattr(request.app.state, "dispatcher", None)


def load_transaction(request: Request) -> Optional[TransactionRecord]:
    data = request.session.get(SESSION_KEY)
    if not data:
        return None
    try:
        return TransactionRecord.model_validate(data)
    except ValidationError:
        logger.warning("Discarding unreadable session transaction")
        request.session.pop(SESSION_KEY, None)
        return None


async def send_receipt_sms(dispatcher: MessageDispatcher, phone: str, text: str, reference: str):
    """
    Background task: relays the receipt SMS and logs the outcome.
    The receipt flow never depends on the result.
    """
    outcome = await dispatcher.dispatch(phone, text)

    if isinstance(outcome, Delivered):
        logger.info(
            f"✅ Receipt SMS delivered for {reference}",
            extra={"reference": reference, "provider_message_id": outcome.provider_message_id}
        )
    else:
        logger.error(
            f"❌ Receipt SMS failed for {reference}: {outcome.reason.value} ({outcome.detail})",
            extra={"reference": reference, "reason": outcome.reason.value}
        )


@router.post("/submit-transaction")
async def submit_transaction(
    request: Request,
    background_tasks: BackgroundTasks,
    accountName: str = Form(...),
    bankName: str = Form(...),
    accountNumber: str = Form(...),
    amount: str = Form(...),
    narration: str = Form(...),
    transactionDate: str = Form(...),
    phoneNumber: Optional[str] = Form(None),
):
    """
    Handles the demo transfer form.

    Stores the transaction in the session, logs the simulated SMS and,
    when a phone number is given, relays it through the SMS provider
    in the background. Always redirects to the receipt.
    """
    try:
        form = TransactionForm(
            accountName=accountName,
            bankName=bankName,
            accountNumber=accountNumber,
            phoneNumber=phoneNumber,
            amount=amount,
            narration=narration,
            transactionDate=transactionDate,
        )
    except ValidationError as e:
        raise RequestValidationError(e.errors(include_url=False))

    reference = generate_reference_number()
    receipt_sms = build_receipt_sms(
        account_name=form.account_name,
        account_number=form.account_number,
        amount=form.amount,
        transaction_date=form.transaction_date,
    )

    record = TransactionRecord(
        **form.model_dump(),
        reference_number=reference,
        submitted_at=datetime.now(timezone.utc),
        receipt_sms=receipt_sms,
    )
    request.session[SESSION_KEY] = record.to_session()

    with LogContext(reference=reference):
        logger.info(f"=== DEMO SMS SIMULATION ===\n{receipt_sms}\n===========================")

        dispatcher = get_dispatcher(request)
        if form.phone_number and dispatcher is not None:
            phone = to_international(form.phone_number, settings.DEFAULT_COUNTRY_CODE)
            logger.info(f"📱 Scheduling receipt SMS to {phone}")
            background_tasks.add_task(send_receipt_sms, dispatcher, phone, receipt_sms, reference)
        elif form.phone_number:
            logger.info("SMS relay disabled; receipt SMS not sent")

    return RedirectResponse(url="/receipt", status_code=303)


@router.get("/receipt")
async def receipt(request: Request):
    """Receipt SMS text for the session transaction."""
    record = load_transaction(request)
    if record is None:
        return RedirectResponse(url="/", status_code=303)
    return PlainTextResponse(record.receipt_sms)


@router.get("/details", response_model=TransactionDetails)
async def details(request: Request):
    """Details view for the session transaction."""
    record = load_transaction(request)
    if record is None:
        return RedirectResponse(url="/", status_code=303)

    sms_recipient = None
    if record.phone_number:
        sms_recipient = to_international(record.phone_number, settings.DEFAULT_COUNTRY_CODE)

    return TransactionDetails(
        reference_number=record.reference_number,
        account_name=record.account_name,
        bank_name=record.bank_name,
        masked_account_number=mask_account_number(record.account_number),
        amount=record.amount,
        narration=record.narration,
        transaction_date=record.transaction_date,
        submitted_at=record.submitted_at,
        sms_recipient=sms_recipient,
    )


@api_router.get("/transaction-data")
async def transaction_data(request: Request):
    """Raw session transaction as JSON."""
    record = load_transaction(request)
    if record is None:
        raise ResourceNotFoundError("No transaction data found")
    return record.to_session()

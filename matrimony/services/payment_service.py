from __future__ import annotations

import logging
import time
from typing import Optional

import stripe
from starlette.concurrency import run_in_threadpool

from ..config import get_settings
from ..db import get_db
from ..errors import ConflictError, DependencyError, ForbiddenError, NotFoundError, ValidationError
from ..models.identifiers import parse_object_id
from ..models.payment import (
    ContactRequest,
    ContactRequestDocument,
    PaymentCreate,
    PaymentDocument,
)
from ..repositories.biodata import BiodataRepository
from ..repositories.exceptions import NotFoundRepositoryError, StaleStateRepositoryError
from ..repositories.requests import PaymentRepository
from ..repositories.user import UserRepository

LOGGER = logging.getLogger("uvicorn.error")


def to_minor_units(price: float) -> int:
    """Stripe amounts are integers in the smallest currency unit."""

    return int(round(price * 100))


class PaymentService:
    """Contact-unlock payments: Stripe intents, receipts and contact requests."""

    def __init__(
        self,
        payment_repo: PaymentRepository,
        biodata_repo: BiodataRepository,
        user_repo: UserRepository,
        *,
        stripe_secret_key: str,
        currency: str,
    ) -> None:
        self._payment_repo = payment_repo
        self._biodata_repo = biodata_repo
        self._user_repo = user_repo
        self._stripe_secret_key = stripe_secret_key
        self._currency = currency

    @staticmethod
    def _now_ms() -> int:
        return int(time.time() * 1000)

    async def create_payment_intent(self, price: float, email: str) -> str:
        """Create a Stripe PaymentIntent and return its client secret."""

        if not self._stripe_secret_key:
            LOGGER.error("STRIPE_SECRET_KEY is not set; cannot create payment intent")
            raise DependencyError("payments are not configured")
        amount = to_minor_units(price)
        if amount <= 0:
            raise ValidationError("price must be positive")
        try:
            intent = await run_in_threadpool(
                stripe.PaymentIntent.create,
                amount=amount,
                currency=self._currency,
                payment_method_types=["card"],
                receipt_email=email,
                api_key=self._stripe_secret_key,
            )
        except stripe.StripeError as exc:
            LOGGER.error("Stripe PaymentIntent failed for %s: %s", email, exc)
            raise DependencyError("payment provider unavailable") from None
        return intent["client_secret"]

    async def record_payment(
        self,
        email: str,
        payload: PaymentCreate,
    ) -> tuple[PaymentDocument, ContactRequestDocument]:
        """Persist a completed payment and open a pending contact request for it."""

        biodata = await self._biodata_repo.get_by_biodata_id(payload.biodata_id)
        if not biodata:
            raise NotFoundError("biodata not found")
        if biodata.email == email:
            raise ValidationError("cannot request your own contact information")

        now_ms = self._now_ms()
        payment = await self._payment_repo.insert_payment(
            email=email,
            biodata_id=payload.biodata_id,
            amount=payload.amount,
            currency=(payload.currency or self._currency).lower(),
            transaction_id=payload.transaction_id.strip(),
            created_at=now_ms,
        )
        contact_request = await self._payment_repo.insert_contact_request(
            requester_email=email,
            biodata_id=payload.biodata_id,
            payment_id=payment.id,
            created_at=now_ms,
        )
        LOGGER.info("Payment %s recorded; contact request %s pending", payment.id, contact_request.id)
        return payment, contact_request

    async def list_payments(self) -> list[PaymentDocument]:
        return await self._payment_repo.list_payments()

    async def _with_contact_details(self, requests: list[ContactRequestDocument]) -> list[ContactRequest]:
        biodatas = await self._biodata_repo.get_many(r.biodata_id for r in requests)
        results: list[ContactRequest] = []
        for request in requests:
            data = request.model_dump(by_alias=True, round_trip=True)
            biodata = biodatas.get(request.biodata_id)
            if biodata:
                data["name"] = biodata.name
                if request.status == "approved":
                    data["contactEmail"] = biodata.email
                    data["mobileNumber"] = biodata.mobile_number
            results.append(ContactRequest(**data))
        return results

    async def list_contact_requests(self, requester_email: Optional[str] = None) -> list[ContactRequest]:
        requests = await self._payment_repo.list_contact_requests(requester_email)
        return await self._with_contact_details(requests)

    async def approve_contact_request(self, request_id: str) -> ContactRequest:
        object_id = parse_object_id(request_id, "contact request id")
        try:
            approved = await self._payment_repo.approve_contact_request(object_id, self._now_ms())
        except NotFoundRepositoryError:
            raise NotFoundError("contact request not found") from None
        except StaleStateRepositoryError:
            raise ConflictError("contact request already approved") from None
        return (await self._with_contact_details([approved]))[0]

    async def delete_contact_request(self, request_id: str, requester_email: str) -> None:
        object_id = parse_object_id(request_id, "contact request id")
        existing = await self._payment_repo.get_contact_request(object_id)
        if not existing:
            raise NotFoundError("contact request not found")
        if existing.requester_email != requester_email:
            user = await self._user_repo.get_by_email(requester_email)
            if not user or user.role != "admin":
                raise ForbiddenError()
        await self._payment_repo.delete_contact_request(object_id)


def get_payment_service() -> PaymentService:
    settings = get_settings()
    db = get_db()
    return PaymentService(
        PaymentRepository(db),
        BiodataRepository(db),
        UserRepository(db),
        stripe_secret_key=settings.stripe_secret_key,
        currency=settings.stripe_currency,
    )


__all__ = ["PaymentService", "get_payment_service", "to_minor_units"]

from fastapi import APIRouter, Depends, status

from ..dependencies import get_current_email, require_admin
from ..models.payment import (
    ContactRequest,
    ContactRequestList,
    Payment,
    PaymentCreate,
    PaymentIntentRequest,
    PaymentIntentResponse,
    PaymentList,
    PaymentReceipt,
)
from ..models.user import UpdateResult
from ..services.payment_service import PaymentService, get_payment_service

router = APIRouter(tags=["payments"])


@router.post("/create-payment-intent", response_model=PaymentIntentResponse)
async def create_payment_intent(
    body: PaymentIntentRequest,
    email: str = Depends(get_current_email),
    service: PaymentService = Depends(get_payment_service),
) -> PaymentIntentResponse:
    secret = await service.create_payment_intent(body.price, email)
    return PaymentIntentResponse(clientSecret=secret)


@router.post("/payments", response_model=PaymentReceipt, status_code=status.HTTP_201_CREATED)
async def record_payment(
    body: PaymentCreate,
    email: str = Depends(get_current_email),
    service: PaymentService = Depends(get_payment_service),
) -> PaymentReceipt:
    payment, contact_request = await service.record_payment(email, body)
    return PaymentReceipt(
        payment=Payment(**payment.model_dump(by_alias=True, round_trip=True)),
        contactRequest=ContactRequest(**contact_request.model_dump(by_alias=True, round_trip=True)),
    )


@router.get("/payments", response_model=PaymentList)
async def list_payments(
    _admin: str = Depends(require_admin),
    service: PaymentService = Depends(get_payment_service),
) -> PaymentList:
    payments = await service.list_payments()
    return PaymentList(payments=[Payment(**p.model_dump(by_alias=True, round_trip=True)) for p in payments])


@router.get("/contact-requests/mine", response_model=ContactRequestList)
async def my_contact_requests(
    email: str = Depends(get_current_email),
    service: PaymentService = Depends(get_payment_service),
) -> ContactRequestList:
    return ContactRequestList(contactRequests=await service.list_contact_requests(email))


@router.get("/contact-requests", response_model=ContactRequestList)
async def list_contact_requests(
    _admin: str = Depends(require_admin),
    service: PaymentService = Depends(get_payment_service),
) -> ContactRequestList:
    return ContactRequestList(contactRequests=await service.list_contact_requests())


@router.patch("/contact-requests/{request_id}/approve", response_model=ContactRequest)
async def approve_contact_request(
    request_id: str,
    _admin: str = Depends(require_admin),
    service: PaymentService = Depends(get_payment_service),
) -> ContactRequest:
    return await service.approve_contact_request(request_id)


@router.delete("/contact-requests/{request_id}", response_model=UpdateResult)
async def delete_contact_request(
    request_id: str,
    email: str = Depends(get_current_email),
    service: PaymentService = Depends(get_payment_service),
) -> UpdateResult:
    await service.delete_contact_request(request_id, email)
    return UpdateResult(success=True)


__all__ = ["router"]

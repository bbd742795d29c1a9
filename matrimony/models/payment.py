from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from .identifiers import PyObjectId

RequestStatus = Literal["pending", "approved"]


class PaymentIntentRequest(BaseModel):
    """Amount to charge, in major currency units (e.g. 5.0 == $5)."""

    price: float = Field(gt=0, le=10_000)


class PaymentIntentResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    client_secret: str = Field(alias="clientSecret")


class PaymentCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    biodata_id: int = Field(alias="biodataId", ge=1)
    amount: float = Field(gt=0)
    transaction_id: str = Field(alias="transactionId", min_length=1, max_length=255)
    currency: Optional[str] = Field(default=None, max_length=8)


class PaymentDocument(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow", arbitrary_types_allowed=True)

    id: PyObjectId = Field(alias="_id")
    email: str
    biodata_id: int = Field(alias="biodataId")
    amount: float
    currency: str
    transaction_id: str = Field(alias="transactionId")
    created_at: int = Field(alias="createdAt")


class Payment(PaymentDocument):
    model_config = ConfigDict(populate_by_name=True, extra="ignore", arbitrary_types_allowed=True)


class ContactRequestDocument(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow", arbitrary_types_allowed=True)

    id: PyObjectId = Field(alias="_id")
    requester_email: str = Field(alias="requesterEmail")
    biodata_id: int = Field(alias="biodataId")
    payment_id: Optional[PyObjectId] = Field(default=None, alias="paymentId")
    status: RequestStatus = "pending"
    created_at: int = Field(alias="createdAt")
    approved_at: Optional[int] = Field(default=None, alias="approvedAt")


class ContactRequest(ContactRequestDocument):
    """Contact request as returned to clients.

    ``contactEmail``/``mobileNumber`` are only filled once approved.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore", arbitrary_types_allowed=True)

    name: Optional[str] = None
    contact_email: Optional[str] = Field(default=None, alias="contactEmail")
    mobile_number: Optional[str] = Field(default=None, alias="mobileNumber")


class PaymentReceipt(BaseModel):
    payment: Payment
    contact_request: ContactRequest = Field(alias="contactRequest")

    model_config = ConfigDict(populate_by_name=True)


class PremiumRequestCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    biodata_id: int = Field(alias="biodataId", ge=1)


class PremiumRequestDocument(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow", arbitrary_types_allowed=True)

    id: PyObjectId = Field(alias="_id")
    email: str
    biodata_id: int = Field(alias="biodataId")
    status: RequestStatus = "pending"
    created_at: int = Field(alias="createdAt")
    approved_at: Optional[int] = Field(default=None, alias="approvedAt")


class PremiumRequest(PremiumRequestDocument):
    model_config = ConfigDict(populate_by_name=True, extra="ignore", arbitrary_types_allowed=True)


class PaymentList(BaseModel):
    payments: List[Payment] = Field(default_factory=list)


class ContactRequestList(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    contact_requests: List[ContactRequest] = Field(default_factory=list, alias="contactRequests")


class PremiumRequestList(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    premium_requests: List[PremiumRequest] = Field(default_factory=list, alias="premiumRequests")


__all__ = [
    "ContactRequest",
    "ContactRequestDocument",
    "ContactRequestList",
    "Payment",
    "PaymentCreate",
    "PaymentDocument",
    "PaymentIntentRequest",
    "PaymentIntentResponse",
    "PaymentList",
    "PaymentReceipt",
    "PremiumRequest",
    "PremiumRequestCreate",
    "PremiumRequestDocument",
    "PremiumRequestList",
    "RequestStatus",
]

"""Wallet domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, field_validator

from ...shared.validators import clean_text


class PurchaseRequest(BaseModel):
    packageId: str
    paymentMethod: str = "MOBILE_MONEY"


class PayoutCreate(BaseModel):
    amount: float
    bankDetails: str

    @field_validator("amount")
    @classmethod
    def validate_amount(cls, v):
        if v <= 0:
            raise ValueError("Amount must be greater than 0")
        return round(v, 2)

    @field_validator("bankDetails")
    @classmethod
    def validate_bank_details(cls, v):
        v = clean_text(v, max_length=1000)
        if not v:
            raise ValueError("Bank details are required")
        return v


class PayoutReview(BaseModel):
    status: Literal["APPROVED", "REJECTED"]


class MinutePackageResponse(BaseModel):
    id: str
    name: str
    minutes: int
    price: float


class MinutePurchaseResponse(BaseModel):
    id: int
    packageName: str
    minutesPurchased: int
    price: float
    paymentMethod: str
    paymentStatus: str
    transactionRef: Optional[str] = None
    createdAt: Optional[datetime] = None


class MinuteUsageResponse(BaseModel):
    id: int
    sessionId: Optional[int] = None
    minutesUsed: int
    createdAt: Optional[datetime] = None


class WalletResponse(BaseModel):
    id: int
    userId: int
    balance: float
    availableMinutes: int
    totalMinutesPurchased: int
    minutePurchases: list[MinutePurchaseResponse] = []
    minuteUsage: list[MinuteUsageResponse] = []


class BalanceResponse(BaseModel):
    balance: float
    availableMinutes: int


class PayoutResponse(BaseModel):
    id: int
    walletId: int
    amount: float
    status: str
    createdAt: Optional[datetime] = None
    processedAt: Optional[datetime] = None
    message: Optional[str] = None


class TransactionResponse(BaseModel):
    id: int
    amount: float
    type: str
    status: str
    description: Optional[str] = None
    reference: Optional[str] = None
    createdAt: Optional[datetime] = None

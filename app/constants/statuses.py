"""Status and role values shared by models, services and schemas."""

from enum import Enum


class UserRole(str, Enum):
    CLIENT = "CLIENT"
    PROVIDER = "PROVIDER"
    ADMIN = "ADMIN"


class KycStatus(str, Enum):
    NOT_SUBMITTED = "NOT_SUBMITTED"
    SUBMITTED = "SUBMITTED"
    VERIFIED = "VERIFIED"
    REJECTED = "REJECTED"


class BookingStatus(str, Enum):
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    DECLINED = "DECLINED"


class AppSessionStatus(str, Enum):
    SCHEDULED = "SCHEDULED"
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class TransactionType(str, Enum):
    DEPOSIT = "DEPOSIT"
    WITHDRAWAL = "WITHDRAWAL"
    EARNING = "EARNING"
    PAYMENT = "PAYMENT"


class TransactionStatus(str, Enum):
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


class PayoutStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class NotificationType(str, Enum):
    BOOKING_REQUEST = "BOOKING_REQUEST"
    BOOKING_CONFIRMED = "BOOKING_CONFIRMED"
    BOOKING_DECLINED = "BOOKING_DECLINED"
    BOOKING_RESCHEDULED = "BOOKING_RESCHEDULED"
    SESSION_UPDATE = "SESSION_UPDATE"
    PAYOUT_UPDATE = "PAYOUT_UPDATE"
    KYC_UPDATE = "KYC_UPDATE"
    NEW_MESSAGE = "NEW_MESSAGE"
    SYSTEM = "SYSTEM"


# Bookings and sessions in these states occupy provider time
BLOCKING_BOOKING_STATUSES = (BookingStatus.PENDING.value, BookingStatus.ACCEPTED.value)
BLOCKING_SESSION_STATUSES = (AppSessionStatus.SCHEDULED.value, AppSessionStatus.ACTIVE.value)

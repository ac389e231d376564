from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .constants.statuses import (
    AppSessionStatus,
    BookingStatus,
    KycStatus,
    PayoutStatus,
    TransactionStatus,
    UserRole,
)
from .database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    name = Column(String(255), nullable=True)
    image = Column(String(500), nullable=True)
    role = Column(String(20), default=UserRole.CLIENT.value, nullable=False)
    # KYC (identity verification) for providers
    kyc_status = Column(String(20), default=KycStatus.NOT_SUBMITTED.value, nullable=False)
    kyc_submitted_at = Column(DateTime, nullable=True)
    kyc_verified_at = Column(DateTime, nullable=True)
    kyc_rejection_reason = Column(Text, nullable=True)
    id_front_url = Column(String(500), nullable=True)
    id_back_url = Column(String(500), nullable=True)
    selfie_url = Column(String(500), nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    services = relationship("Service", back_populates="provider")
    wallet = relationship("Wallet", back_populates="user", uselist=False)
    devices = relationship("Device", back_populates="user")
    notifications = relationship("Notification", back_populates="user")


class Service(Base):
    __tablename__ = "services"

    id = Column(Integer, primary_key=True, index=True)
    provider_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    category = Column(String(100), default="General", nullable=False)
    price = Column(Float, nullable=False)  # Base price for `duration` minutes
    duration = Column(Integer, nullable=False)  # Base duration in minutes
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    provider = relationship("User", back_populates="services")
    bookings = relationship("BookingRequest", back_populates="service")


class BookingRequest(Base):
    """A client's request for provider time. Never deleted (audit trail)."""

    __tablename__ = "booking_requests"

    id = Column(Integer, primary_key=True, index=True)
    client_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    service_id = Column(Integer, ForeignKey("services.id"), nullable=False, index=True)
    requested_time = Column(DateTime, nullable=True, index=True)
    duration = Column(Integer, nullable=True)  # Minutes; falls back to service duration
    price = Column(Float, nullable=True)  # Locked price; falls back to service price
    status = Column(String(20), default=BookingStatus.PENDING.value, nullable=False, index=True)
    notes = Column(Text, nullable=True)
    is_instant = Column(Boolean, default=False, nullable=False)
    expires_at = Column(DateTime, nullable=True)  # Instant bookings only, not enforced here
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    client = relationship("User", foreign_keys=[client_id])
    service = relationship("Service", back_populates="bookings")
    session = relationship("AppSession", back_populates="booking", uselist=False)


class AppSession(Base):
    """Confirmed engagement between a client and a provider"""

    __tablename__ = "app_sessions"

    id = Column(Integer, primary_key=True, index=True)
    # At most one session per booking request
    booking_id = Column(
        Integer, ForeignKey("booking_requests.id"), unique=True, nullable=True, index=True
    )
    client_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    provider_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    service_id = Column(Integer, ForeignKey("services.id"), nullable=True)
    status = Column(
        String(20), default=AppSessionStatus.SCHEDULED.value, nullable=False, index=True
    )
    start_time = Column(DateTime, nullable=False, index=True)
    end_time = Column(DateTime, nullable=True)
    price = Column(Float, nullable=False)  # Locked at acceptance
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    booking = relationship("BookingRequest", back_populates="session")
    client = relationship("User", foreign_keys=[client_id])
    provider = relationship("User", foreign_keys=[provider_id])
    service = relationship("Service")
    review = relationship("Review", back_populates="session", uselist=False)
    messages = relationship("Message", back_populates="session", order_by="Message.id")


class Review(Base):
    __tablename__ = "reviews"
    __table_args__ = (CheckConstraint("rating >= 1 AND rating <= 5", name="ck_reviews_rating"),)

    id = Column(Integer, primary_key=True, index=True)
    session_id = Column(Integer, ForeignKey("app_sessions.id"), unique=True, nullable=False)
    client_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    provider_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    rating = Column(Integer, nullable=False)
    comment = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    session = relationship("AppSession", back_populates="review")
    client = relationship("User", foreign_keys=[client_id])


class Wallet(Base):
    __tablename__ = "wallets"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=False)
    balance = Column(Float, default=0.0, nullable=False)  # Provider earnings available for payout
    available_minutes = Column(Integer, default=0, nullable=False)
    total_minutes_purchased = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="wallet")
    transactions = relationship("WalletTransaction", back_populates="wallet")
    minute_purchases = relationship("MinutePurchase", back_populates="wallet")
    minute_usage = relationship("MinuteUsage", back_populates="wallet")
    payout_requests = relationship("PayoutRequest", back_populates="wallet")


class WalletTransaction(Base):
    """Ledger row; written in the same unit of work as the balance change"""

    __tablename__ = "wallet_transactions"

    id = Column(Integer, primary_key=True, index=True)
    wallet_id = Column(Integer, ForeignKey("wallets.id"), nullable=False, index=True)
    amount = Column(Float, nullable=False)
    type = Column(String(20), nullable=False)  # DEPOSIT, WITHDRAWAL, EARNING, PAYMENT
    status = Column(String(20), default=TransactionStatus.PENDING.value, nullable=False)
    description = Column(String(255), nullable=True)
    reference = Column(String(100), nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    wallet = relationship("Wallet", back_populates="transactions")


class MinutePurchase(Base):
    __tablename__ = "minute_purchases"

    id = Column(Integer, primary_key=True, index=True)
    wallet_id = Column(Integer, ForeignKey("wallets.id"), nullable=False, index=True)
    package_name = Column(String(100), nullable=False)
    minutes_purchased = Column(Integer, nullable=False)
    price = Column(Float, nullable=False)
    payment_method = Column(String(50), nullable=False)
    payment_status = Column(String(20), nullable=False)
    transaction_ref = Column(String(100), nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    wallet = relationship("Wallet", back_populates="minute_purchases")


class MinuteUsage(Base):
    __tablename__ = "minute_usage"

    id = Column(Integer, primary_key=True, index=True)
    wallet_id = Column(Integer, ForeignKey("wallets.id"), nullable=False, index=True)
    session_id = Column(Integer, ForeignKey("app_sessions.id"), nullable=True)
    minutes_used = Column(Integer, nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    wallet = relationship("Wallet", back_populates="minute_usage")


class PayoutRequest(Base):
    __tablename__ = "payout_requests"

    id = Column(Integer, primary_key=True, index=True)
    wallet_id = Column(Integer, ForeignKey("wallets.id"), nullable=False, index=True)
    transaction_id = Column(Integer, ForeignKey("wallet_transactions.id"), nullable=True)
    amount = Column(Float, nullable=False)
    status = Column(String(20), default=PayoutStatus.PENDING.value, nullable=False)
    bank_details = Column(Text, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    processed_at = Column(DateTime, nullable=True)

    wallet = relationship("Wallet", back_populates="payout_requests")
    transaction = relationship("WalletTransaction")


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    type = Column(String(50), nullable=False)
    title = Column(String(255), nullable=False)
    body = Column(Text, nullable=False)
    data = Column(JSON, nullable=True)
    is_read = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    user = relationship("User", back_populates="notifications")


class Device(Base):
    """Push notification target registered by a mobile client"""

    __tablename__ = "devices"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    token = Column(String(500), unique=True, nullable=False)
    platform = Column(String(20), nullable=True)  # ios, android, web
    created_at = Column(DateTime, server_default=func.now())

    user = relationship("User", back_populates="devices")


class Message(Base):
    """Chat message exchanged between the two participants of a session"""

    __tablename__ = "messages"

    id = Column(Integer, primary_key=True, index=True)
    session_id = Column(Integer, ForeignKey("app_sessions.id"), nullable=False, index=True)
    sender_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    content = Column(Text, nullable=False)
    is_read = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    session = relationship("AppSession", back_populates="messages")
    sender = relationship("User")


class Favorite(Base):
    __tablename__ = "favorites"
    __table_args__ = (UniqueConstraint("user_id", "provider_id", name="uq_favorites_user_provider"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    provider_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    created_at = Column(DateTime, server_default=func.now())

    provider = relationship("User", foreign_keys=[provider_id])


class Follow(Base):
    __tablename__ = "follows"
    __table_args__ = (UniqueConstraint("follower_id", "provider_id", name="uq_follows_follower_provider"),)

    id = Column(Integer, primary_key=True, index=True)
    follower_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    provider_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    created_at = Column(DateTime, server_default=func.now())

    provider = relationship("User", foreign_keys=[provider_id])

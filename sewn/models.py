import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    JSON,
    Boolean,
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

from .constants import PLATFORM_FEE
from .database import Base


def generate_id():
    """Generate a UUID primary key"""
    return str(uuid.uuid4())


def utc_now() -> datetime:
    """Naive UTC timestamp, as stored in every DateTime column"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class User(Base):
    __tablename__ = "users"

    # Same id as the auth provider's user (JWT "sub" claim)
    id = Column(String(36), primary_key=True, default=generate_id)
    email = Column(String(255), unique=True, index=True, nullable=False)
    user_type = Column(String(20), default="client", nullable=False)  # expert, client, both
    name = Column(String(255), nullable=True)
    profile_image_url = Column(String(500), nullable=True)
    phone = Column(String(50), nullable=True)
    is_verified = Column(Boolean, default=False, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=utc_now, nullable=False)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now, nullable=False)

    expert_profile = relationship("ExpertProfile", back_populates="user", uselist=False)
    projects = relationship("Project", back_populates="client")
    notifications = relationship("Notification", back_populates="user")


class ExpertProfile(Base):
    __tablename__ = "expert_profiles"

    id = Column(String(36), primary_key=True, default=generate_id)
    user_id = Column(String(36), ForeignKey("users.id"), unique=True, nullable=False)
    bio = Column(Text, nullable=True)
    categories = Column(JSON, default=list, nullable=False)
    skills = Column(JSON, default=list, nullable=False)
    experience_years = Column(Integer, nullable=True)
    education = Column(String(255), nullable=True)
    location = Column(String(100), nullable=True)
    hourly_rate_min = Column(Integer, nullable=True)  # KRW
    hourly_rate_max = Column(Integer, nullable=True)
    project_rate_min = Column(Integer, nullable=True)
    project_rate_max = Column(Integer, nullable=True)
    availability = Column(String(20), default="available", nullable=False)
    rating_avg = Column(Float, default=0, nullable=False)
    review_count = Column(Integer, default=0, nullable=False)
    completed_projects = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime, default=utc_now, nullable=False)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now, nullable=False)

    user = relationship("User", back_populates="expert_profile")
    portfolio_items = relationship(
        "PortfolioItem", back_populates="expert", cascade="all, delete-orphan"
    )
    proposals = relationship("Proposal", back_populates="expert")


class PortfolioItem(Base):
    __tablename__ = "portfolio_items"

    id = Column(String(36), primary_key=True, default=generate_id)
    expert_id = Column(String(36), ForeignKey("expert_profiles.id"), index=True, nullable=False)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    image_urls = Column(JSON, default=list, nullable=False)
    category = Column(String(50), nullable=True)
    created_at = Column(DateTime, default=utc_now, nullable=False)

    expert = relationship("ExpertProfile", back_populates="portfolio_items")


class Project(Base):
    __tablename__ = "projects"

    id = Column(String(36), primary_key=True, default=generate_id)
    client_id = Column(String(36), ForeignKey("users.id"), index=True, nullable=False)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    categories = Column(JSON, default=list, nullable=False)
    budget_min = Column(Integer, nullable=True)  # KRW
    budget_max = Column(Integer, nullable=True)
    deadline = Column(DateTime, nullable=True)
    location = Column(String(100), nullable=True)
    attachment_urls = Column(JSON, default=list, nullable=False)
    status = Column(String(20), default="open", index=True, nullable=False)
    created_at = Column(DateTime, default=utc_now, nullable=False)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now, nullable=False)

    client = relationship("User", back_populates="projects")
    proposals = relationship("Proposal", back_populates="project")

    @property
    def proposal_count(self) -> int:
        return len(self.proposals)


class Proposal(Base):
    __tablename__ = "proposals"
    __table_args__ = (UniqueConstraint("project_id", "expert_id", name="uq_proposal_project_expert"),)

    id = Column(String(36), primary_key=True, default=generate_id)
    project_id = Column(String(36), ForeignKey("projects.id"), index=True, nullable=False)
    expert_id = Column(String(36), ForeignKey("expert_profiles.id"), index=True, nullable=False)
    cover_letter = Column(Text, nullable=False)
    proposed_rate = Column(Integer, nullable=False)  # KRW
    estimated_duration = Column(String(100), nullable=True)
    status = Column(String(20), default="pending", nullable=False)
    created_at = Column(DateTime, default=utc_now, nullable=False)

    project = relationship("Project", back_populates="proposals")
    expert = relationship("ExpertProfile", back_populates="proposals")


class Contract(Base):
    __tablename__ = "contracts"

    id = Column(String(36), primary_key=True, default=generate_id)
    project_id = Column(String(36), ForeignKey("projects.id"), index=True, nullable=False)
    client_id = Column(String(36), ForeignKey("users.id"), index=True, nullable=False)
    expert_id = Column(String(36), ForeignKey("users.id"), index=True, nullable=False)
    proposal_id = Column(String(36), ForeignKey("proposals.id"), nullable=True)
    agreed_amount = Column(Integer, nullable=False)  # KRW, what the client pays
    platform_fee_rate = Column(Float, default=PLATFORM_FEE["EXPERT_MAX"], nullable=False)
    status = Column(String(20), default="pending_payment", index=True, nullable=False)
    started_at = Column(DateTime, nullable=True)
    completed_at = Column(DateTime, nullable=True)
    completion_requested_at = Column(DateTime, nullable=True)
    deadline = Column(DateTime, nullable=True)
    payment_id = Column(String(255), nullable=True)
    payment_key = Column(String(255), nullable=True)
    created_at = Column(DateTime, default=utc_now, nullable=False)

    project = relationship("Project")
    client = relationship("User", foreign_keys=[client_id])
    expert = relationship("User", foreign_keys=[expert_id])
    proposal = relationship("Proposal")
    transactions = relationship("Transaction", back_populates="contract")

    @property
    def platform_fee(self) -> int:
        return round(self.agreed_amount * self.platform_fee_rate)

    @property
    def expert_amount(self) -> int:
        return self.agreed_amount - self.platform_fee


class Transaction(Base):
    __tablename__ = "transactions"

    id = Column(String(36), primary_key=True, default=generate_id)
    contract_id = Column(String(36), ForeignKey("contracts.id"), index=True, nullable=False)
    amount = Column(Integer, nullable=False)
    type = Column(String(30), nullable=False)  # escrow_deposit, release_to_expert, ...
    status = Column(String(20), default="pending", nullable=False)
    payment_method = Column(String(50), nullable=True)
    payment_id = Column(String(255), nullable=True)
    created_at = Column(DateTime, default=utc_now, nullable=False)

    contract = relationship("Contract", back_populates="transactions")


class Conversation(Base):
    __tablename__ = "conversations"

    id = Column(String(36), primary_key=True, default=generate_id)
    participant_ids = Column(JSON, default=list, nullable=False)
    project_id = Column(String(36), ForeignKey("projects.id"), nullable=True)
    last_message_at = Column(DateTime, nullable=True)
    last_message_preview = Column(String(255), nullable=True)
    created_at = Column(DateTime, default=utc_now, nullable=False)

    messages = relationship(
        "Message", back_populates="conversation", order_by="Message.created_at"
    )


class Message(Base):
    __tablename__ = "messages"

    id = Column(String(36), primary_key=True, default=generate_id)
    conversation_id = Column(String(36), ForeignKey("conversations.id"), index=True, nullable=False)
    sender_id = Column(String(36), ForeignKey("users.id"), nullable=False)
    content = Column(Text, default="", nullable=False)
    attachment_urls = Column(JSON, default=list, nullable=False)
    is_read = Column(Boolean, default=False, nullable=False)
    message_type = Column(String(10), default="text", nullable=False)  # text, image, file
    file_url = Column(String(500), nullable=True)
    file_name = Column(String(255), nullable=True)
    created_at = Column(DateTime, default=utc_now, nullable=False)

    conversation = relationship("Conversation", back_populates="messages")
    sender = relationship("User")


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(String(36), primary_key=True, default=generate_id)
    user_id = Column(String(36), ForeignKey("users.id"), index=True, nullable=False)
    type = Column(String(30), nullable=False)
    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=True)
    link = Column(String(500), nullable=True)
    related_id = Column(String(36), nullable=True)
    is_read = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=utc_now, nullable=False)

    user = relationship("User", back_populates="notifications")


class Review(Base):
    __tablename__ = "reviews"
    __table_args__ = (UniqueConstraint("contract_id", "reviewer_id", name="uq_review_contract_reviewer"),)

    id = Column(String(36), primary_key=True, default=generate_id)
    contract_id = Column(String(36), ForeignKey("contracts.id"), index=True, nullable=False)
    reviewer_id = Column(String(36), ForeignKey("users.id"), nullable=False)
    reviewee_id = Column(String(36), ForeignKey("users.id"), index=True, nullable=False)
    rating = Column(Integer, nullable=False)
    comment = Column(Text, nullable=True)
    created_at = Column(DateTime, default=utc_now, nullable=False)

    reviewer = relationship("User", foreign_keys=[reviewer_id])
    reviewee = relationship("User", foreign_keys=[reviewee_id])
    contract = relationship("Contract")

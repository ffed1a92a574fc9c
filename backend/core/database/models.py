"""
SQLAlchemy Database Models

Stores admin-panel users together with their signed identity:
- email_hash: SHA-384 of the email (48 bytes)
- signature: Ed25519 signature over email_hash (64 bytes)
- public_key: SPKI DER public key that produced the signature (44 bytes)

The three identity columns are written once at creation and never updated.
"""
from sqlalchemy import Column, String, DateTime, LargeBinary, Index, CheckConstraint
from sqlalchemy.orm import declarative_base
from datetime import datetime
import uuid

Base = declarative_base()


USER_ROLES = ("admin", "user")
USER_STATUSES = ("active", "inactive")


def _new_id() -> str:
    return str(uuid.uuid4())


def _sql_list(values) -> str:
    return ", ".join(f"'{value}'" for value in values)


class User(Base):
    """
    Admin-panel user with a server-signed email identity.
    """
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=_new_id)
    email = Column(String(320), nullable=False, unique=True, index=True)
    role = Column(String(20), nullable=False, default="user")
    status = Column(String(20), nullable=False, default="active")

    # Signed identity (immutable after creation)
    email_hash = Column(LargeBinary, nullable=False)
    signature = Column(LargeBinary, nullable=False)
    public_key = Column(LargeBinary, nullable=False)

    # Timestamps (naive UTC)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        CheckConstraint(f"role IN ({_sql_list(USER_ROLES)})", name="ck_users_role"),
        CheckConstraint(f"status IN ({_sql_list(USER_STATUSES)})", name="ck_users_status"),
        Index('ix_users_created_at', 'created_at'),
        Index('ix_users_role_status', 'role', 'status'),
    )

    def __repr__(self) -> str:
        return f"<User {self.id} {self.email} role={self.role} status={self.status}>"

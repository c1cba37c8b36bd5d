"""
Notification model - rent reminders and payment confirmations sent to tenants.

Rent reminders carry a period (YYYY-MM). A filtered unique index on
(tenant_id, type, period) guarantees at most one reminder per tenant per
month even if two sweeps race past the existence check.
"""
import enum
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Enum, Index, func, text
from sqlalchemy.orm import relationship
from .base import Base, enum_values


class NotificationType(str, enum.Enum):
     RENT_REMINDER = "rent_reminder"
     CONFIRMATION = "confirmation"


class NotificationStatus(str, enum.Enum):
     PENDING = "pending"
     SENT = "sent"
     FAILED = "failed"
     RECEIVED = "received"


class Notification(Base):
     __tablename__ = "notifications"
     __table_args__ = (
          Index(
               "uq_notifications_tenant_type_period",
               "tenant_id",
               "type",
               "period",
               unique=True,
               mssql_where=text("period IS NOT NULL"),
               postgresql_where=text("period IS NOT NULL"),
               sqlite_where=text("period IS NOT NULL"),
          ),
     )

     id = Column(Integer, primary_key=True, autoincrement=True)
     tenant_id = Column(
          Integer,
          ForeignKey("tenants.id", ondelete="SET NULL"),
          nullable=True,
          index=True
     )

     type = Column(
          Enum(NotificationType, name="notification_type", create_constraint=True, values_callable=enum_values),
          nullable=False,
          index=True
     )
     message = Column(Text, nullable=False)
     channel = Column(String(30), default="app", nullable=False)
     status = Column(
          Enum(NotificationStatus, name="notification_status", create_constraint=True, values_callable=enum_values),
          default=NotificationStatus.PENDING,
          nullable=False
     )
     period = Column(String(7), nullable=True)

     # Timestamps
     sent_at = Column(DateTime, nullable=True)
     received_at = Column(DateTime, nullable=True)
     created_at = Column(DateTime, server_default=func.now(), nullable=False, index=True)

     # Relationships
     tenant = relationship("Tenant", back_populates="notifications")

     def __repr__(self):
          return f"<Notification(id={self.id}, tenant_id={self.tenant_id}, type='{self.type.value}', status='{self.status.value}')>"

     def mark_as_received(self, when) -> None:
          """Record the tenant's acknowledgement."""
          self.status = NotificationStatus.RECEIVED
          self.received_at = when

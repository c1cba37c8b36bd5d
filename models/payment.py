import enum
from sqlalchemy import Column, Integer, Numeric, Date, String, Text, ForeignKey, Enum
from sqlalchemy.orm import relationship
from .base import Base, TimestampMixin, enum_values


class PaymentType(str, enum.Enum):
     """What a payment settles."""
     RENT = "rent"
     ADVANCE = "advance"
     DEPOSIT = "deposit"


class PaymentStatus(str, enum.Enum):
     """Enumeration for payment status."""
     PAID = "paid"
     PENDING = "pending"
     LATE = "late"


class Payment(TimestampMixin, Base):
     """
     Payment model - money received from a tenant against a lease.

     Rent and advance payments carry a target month (stored as the first
     day of that month); deposits do not.
     Payments recorded in one request share a batch_ref, which groups
     them on a receipt.
     """
     __tablename__ = "payments"

     id = Column(Integer, primary_key=True, autoincrement=True)

     # Foreign keys
     lease_id = Column(Integer, ForeignKey("leases.id"), nullable=False, index=True)
     tenant_id = Column(Integer, ForeignKey("tenants.id"), nullable=False, index=True)
     property_id = Column(Integer, ForeignKey("properties.id"), nullable=False, index=True)

     # Payment details
     amount = Column(Numeric(12, 2), nullable=False)
     type = Column(
          Enum(PaymentType, name="payment_type", create_constraint=True, values_callable=enum_values),
          nullable=False,
          index=True
     )
     target_month = Column(Date, nullable=True, index=True)
     paid_date = Column(Date, nullable=False, index=True)
     status = Column(
          Enum(PaymentStatus, name="payment_status", create_constraint=True, values_callable=enum_values),
          default=PaymentStatus.PAID,
          nullable=False
     )
     notes = Column(Text, nullable=True)
     batch_ref = Column(String(32), nullable=True, index=True)

     # Relationships
     lease = relationship("Lease", back_populates="payments")
     tenant = relationship("Tenant", back_populates="payments")
     property = relationship("Property")

     def __repr__(self):
          return f"<Payment(id={self.id}, amount={self.amount}, type='{self.type.value}', target_month={self.target_month})>"

     def covered_month(self):
          """Month the payment counts for: its target month, else the month it was paid."""
          reference = self.target_month or self.paid_date
          return reference.replace(day=1)

import enum
from sqlalchemy import Column, Integer, Numeric, Date, ForeignKey, Enum
from sqlalchemy.orm import relationship
from .base import Base, TimestampMixin, enum_values


class LeaseStatus(str, enum.Enum):
     """Enumeration for lease lifecycle status."""
     ACTIVE = "active"
     ENDED = "ended"


class Lease(TimestampMixin, Base):
     """
     Lease model - rental agreement linking one tenant to one property.

     At most one ACTIVE lease per property; enforced in LeaseService,
     not by the schema.
     """
     __tablename__ = "leases"

     id = Column(Integer, primary_key=True, autoincrement=True)
     tenant_id = Column(Integer, ForeignKey("tenants.id"), nullable=False, index=True)
     property_id = Column(Integer, ForeignKey("properties.id"), nullable=False, index=True)

     # Pricing (monthly rent may differ from the property's current rent)
     monthly_rent = Column(Numeric(12, 2), nullable=False)
     deposit = Column(Numeric(12, 2), default=0, nullable=False)
     advance_months = Column(Integer, default=0, nullable=False)

     # Lease period
     start_date = Column(Date, nullable=False)
     end_date = Column(Date, nullable=True)

     status = Column(
          Enum(LeaseStatus, name="lease_status", create_constraint=True, values_callable=enum_values),
          default=LeaseStatus.ACTIVE,
          nullable=False,
          index=True
     )

     # Relationships
     tenant = relationship("Tenant", back_populates="leases")
     property = relationship("Property", back_populates="leases")
     payments = relationship("Payment", back_populates="lease")

     def __repr__(self):
          return f"<Lease(id={self.id}, tenant_id={self.tenant_id}, property_id={self.property_id}, status='{self.status.value}')>"

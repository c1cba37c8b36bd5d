import enum
from sqlalchemy import Column, Integer, String, Text, Numeric, ForeignKey, Enum
from sqlalchemy.orm import relationship
from .base import Base, TimestampMixin, enum_values


class PropertyType(str, enum.Enum):
     """Kind of rentable unit."""
     HOUSE = "house"
     SHOP = "shop"
     ROOM = "room"
     STORE = "store"


class PropertyStatus(str, enum.Enum):
     """Occupancy status, maintained alongside the lease lifecycle."""
     AVAILABLE = "available"
     OCCUPIED = "occupied"


class Property(TimestampMixin, Base):
     """
     Property model - a rentable house, shop, room or store.

     The status column mirrors the lease lifecycle: it flips to OCCUPIED
     when a lease is created and back to AVAILABLE when the lease ends.
     """
     __tablename__ = "properties"

     id = Column(Integer, primary_key=True, autoincrement=True)
     owner_id = Column(Integer, ForeignKey("owners.id"), nullable=False, index=True)

     name = Column(String(255), nullable=False)
     address = Column(String(255), nullable=False)
     type = Column(
          Enum(PropertyType, name="property_type", create_constraint=True, values_callable=enum_values),
          nullable=False
     )
     description = Column(Text, nullable=True)

     # Pricing
     monthly_rent = Column(Numeric(12, 2), nullable=False)
     commission_percent = Column(Numeric(5, 2), default=10, nullable=False)

     status = Column(
          Enum(PropertyStatus, name="property_status", create_constraint=True, values_callable=enum_values),
          default=PropertyStatus.AVAILABLE,
          nullable=False,
          index=True
     )

     # Relationships
     owner = relationship("Owner", back_populates="properties")
     leases = relationship("Lease", back_populates="property")
     expenses = relationship("Expense", back_populates="property")

     def __repr__(self):
          return f"<Property(id={self.id}, name='{self.name}', status='{self.status.value}')>"

     @property
     def is_occupied(self) -> bool:
          return self.status == PropertyStatus.OCCUPIED

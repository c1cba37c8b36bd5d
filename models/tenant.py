from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship
from .base import Base, TimestampMixin


class Tenant(TimestampMixin, Base):
     """
     Tenant model - a person renting one or more properties over time.
     """
     __tablename__ = "tenants"

     id = Column(Integer, primary_key=True, autoincrement=True)
     name = Column(String(200), nullable=False, index=True)

     # Contact
     phone = Column(String(50), nullable=False)
     email = Column(String(255), nullable=True)
     address = Column(String(255), nullable=True)

     # ID verification
     id_document = Column(String(100), nullable=True)

     # Relationships
     leases = relationship("Lease", back_populates="tenant")
     payments = relationship("Payment", back_populates="tenant")
     notifications = relationship("Notification", back_populates="tenant")

     def __repr__(self):
          return f"<Tenant(id={self.id}, name='{self.name}')>"

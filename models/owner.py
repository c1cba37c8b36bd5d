from sqlalchemy import Column, Integer, String, Text
from sqlalchemy.orm import relationship
from .base import Base, TimestampMixin


class Owner(TimestampMixin, Base):
     """
     Owner model - landlord whose properties are managed by the agency.
     One owner, many properties.
     """
     __tablename__ = "owners"

     id = Column(Integer, primary_key=True, autoincrement=True)
     name = Column(String(200), nullable=False, index=True)

     # Contact
     phone = Column(String(50), nullable=False)
     email = Column(String(255), nullable=True)
     address = Column(String(255), nullable=True)

     notes = Column(Text, nullable=True)

     # Relationships
     properties = relationship("Property", back_populates="owner")

     def __repr__(self):
          return f"<Owner(id={self.id}, name='{self.name}')>"

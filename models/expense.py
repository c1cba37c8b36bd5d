import enum
from sqlalchemy import Column, Integer, Numeric, Date, String, Text, ForeignKey, Enum
from sqlalchemy.orm import relationship
from .base import Base, TimestampMixin, enum_values


class ExpenseCategory(str, enum.Enum):
     REPAIR = "repair"
     ELECTRICITY = "electricity"
     WATER = "water"
     DRAINAGE = "drainage"
     OTHER = "other"


class Expense(TimestampMixin, Base):
     """
     Expense model - costs incurred on a property, deducted from the
     amount paid out to its owner.
     """
     __tablename__ = "expenses"

     id = Column(Integer, primary_key=True, autoincrement=True)
     property_id = Column(Integer, ForeignKey("properties.id"), nullable=False, index=True)

     amount = Column(Numeric(12, 2), nullable=False)
     category = Column(
          Enum(ExpenseCategory, name="expense_category", create_constraint=True, values_callable=enum_values),
          default=ExpenseCategory.OTHER,
          nullable=False
     )
     description = Column(Text, nullable=False)
     expense_date = Column(Date, nullable=False, index=True)
     receipt_url = Column(String(500), nullable=True)

     # Relationships
     property = relationship("Property", back_populates="expenses")

     def __repr__(self):
          return f"<Expense(id={self.id}, amount={self.amount}, category='{self.category.value}')>"

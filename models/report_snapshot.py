"""
ReportSnapshot model - persisted agency-wide monthly report.

Snapshots are append-only: the application never updates them, but users
may delete them.
"""
from sqlalchemy import Column, Integer, String, Numeric, Text, DateTime, func
from .base import Base


class ReportSnapshot(Base):
     __tablename__ = "report_snapshots"

     id = Column(Integer, primary_key=True, autoincrement=True)
     month = Column(String(7), nullable=False, index=True)  # YYYY-MM

     total_revenue = Column(Numeric(14, 2), nullable=False)
     total_expenses = Column(Numeric(14, 2), nullable=False)
     net_profit = Column(Numeric(14, 2), nullable=False)  # agency commission
     detail_payload = Column(Text, nullable=False)  # JSON

     created_at = Column(DateTime, server_default=func.now(), nullable=False)

     def __repr__(self):
          return f"<ReportSnapshot(id={self.id}, month='{self.month}', net_profit={self.net_profit})>"

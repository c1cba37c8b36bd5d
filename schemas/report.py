"""
Pydantic schemas for persisted report snapshots.

Report documents themselves are returned as plain JSON built by
services.reporting.
"""
from datetime import datetime
from typing import Any, Optional, List
from pydantic import BaseModel, Field, ConfigDict


class ReportSnapshotResponse(BaseModel):
     """Schema for a persisted agency report."""
     id: int
     month: str
     total_revenue: float = Field(..., serialization_alias="totalRevenue")
     total_expenses: float = Field(..., serialization_alias="totalExpenses")
     net_profit: float = Field(..., serialization_alias="netProfit")
     created_at: datetime
     detail_payload: Optional[Any] = Field(None, serialization_alias="detailPayload")

     model_config = ConfigDict(from_attributes=True)


class ReportSnapshotListResponse(BaseModel):
     """Schema for snapshot list response (payloads omitted)."""
     snapshots: List[ReportSnapshotResponse]
     total: int

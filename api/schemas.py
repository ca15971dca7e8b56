from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class MonthlyPointModel(BaseModel):
    month: str
    value: float


class TableRowModel(BaseModel):
    customer: Any = None
    region: Any = None
    product: Any = None
    totalBookings: float = 0.0
    totalBillings: float = 0.0
    backlog: float = 0.0
    bookToBillRatio: Optional[float] = None


class DashboardDataResponse(BaseModel):
    bookingsMonthly: List[MonthlyPointModel] = Field(default_factory=list)
    billingsMonthly: List[MonthlyPointModel] = Field(default_factory=list)
    backlogByRegion: Dict[str, float] = Field(default_factory=dict)
    bookingsByProduct: Dict[str, float] = Field(default_factory=dict)
    tableRows: List[TableRowModel] = Field(default_factory=list)


class HealthResponse(BaseModel):
    status: str


class ErrorResponse(BaseModel):
    error: str
    type: str

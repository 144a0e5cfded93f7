from __future__ import annotations
from typing import List, Optional
from pydantic import BaseModel, Field


class Notification(BaseModel):
    level: str = Field(..., description="success | error")
    message: str


class ViewAction(BaseModel):
    name: str
    label: str
    method: str
    href: str
    disabled: bool = False


class ViewField(BaseModel):
    label: str
    value: str


class TimelineEntry(BaseModel):
    at: str
    label: str


class RecordHeader(BaseModel):
    recordNumber: str
    customerName: str


class RecordDetailSections(BaseModel):
    id: str
    status: str
    header: RecordHeader
    customerDetails: List[ViewField]
    diamondDetails: List[ViewField]
    statusTimeline: List[TimelineEntry]


class RecordDetailView(BaseModel):
    state: str = Field(..., description="ready | not_found")
    message: Optional[str] = None
    notification: Optional[Notification] = None
    record: Optional[RecordDetailSections] = None
    actions: List[ViewAction] = Field(default_factory=list)


class TrackingRow(BaseModel):
    recordId: str
    recordNumber: str
    customerName: str
    status: str
    appointmentDate: Optional[str] = None
    appointmentTime: Optional[str] = None
    serviceName: str
    action: ViewAction


class RecordTrackingView(BaseModel):
    state: str = Field(..., description="ready | empty | error")
    title: str
    notification: Optional[Notification] = None
    alert: Optional[str] = None
    redirectTo: Optional[str] = None
    columns: List[str] = Field(default_factory=list)
    rows: List[TrackingRow] = Field(default_factory=list)

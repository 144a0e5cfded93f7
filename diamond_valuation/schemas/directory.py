from __future__ import annotations
from typing import Optional
from pydantic import BaseModel


class ServiceResponse(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    price: Optional[str] = None


class UserResponse(BaseModel):
    id: str
    name: str
    email: Optional[str] = None
    phoneNumber: Optional[str] = None
    role: str


class ReceiptResponse(BaseModel):
    id: str
    receiptNumber: str
    customerId: str
    customerName: str
    consultantId: str
    serviceId: str
    appointmentDate: Optional[str] = None
    appointmentTime: Optional[str] = None
    issueDate: str

#diamond_valuation/models/service_offering.py
from __future__ import annotations

import uuid
from decimal import Decimal
from typing import Optional

from sqlalchemy import String, Text, Numeric, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from diamond_valuation.db.base import Base


class ServiceOffering(Base):
    """A valuation service a customer can book (e.g. standard / express valuation)."""
    __tablename__ = "services"

    id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)

    name: Mapped[str] = mapped_column(String(256), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    price: Mapped[Optional[Decimal]] = mapped_column(Numeric(14, 2), nullable=True)

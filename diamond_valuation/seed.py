import uuid
from datetime import date
from decimal import Decimal

from diamond_valuation.core.security import hash_password
from diamond_valuation.db.base import Base
from diamond_valuation.db.session import engine, session_scope
from diamond_valuation.models.enums import UserRole
from diamond_valuation.models.receipt import Receipt
from diamond_valuation.models.service_offering import ServiceOffering
from diamond_valuation.models.user import User

import diamond_valuation.models  # noqa: F401  (register tables)

DEMO_PASSWORD = "pass123"


def seed():
    Base.metadata.create_all(bind=engine)

    with session_scope() as db:
        users = {}
        for username, name, role in (
            ("customer1", "Linh Tran", UserRole.CUSTOMER),
            ("consultant1", "Minh Nguyen", UserRole.CONSULTANT),
            ("appraiser1", "Hoa Pham", UserRole.APPRAISER),
            ("manager1", "An Le", UserRole.MANAGER),
        ):
            user = User(
                id=uuid.uuid4(),
                name=name,
                email=f"{username}@example.com",
                phone_number="0900000000",
                role=role.value,
                username=username,
                password_hash=hash_password(DEMO_PASSWORD),
            )
            db.add(user)
            users[role] = user

        services = []
        for name, price in (("Standard Valuation", Decimal("50.00")), ("Express Valuation", Decimal("120.00"))):
            svc = ServiceOffering(id=uuid.uuid4(), name=name, description=f"{name} of a loose diamond", price=price)
            db.add(svc)
            services.append(svc)
        db.flush()

        customer = users[UserRole.CUSTOMER]
        db.add(
            Receipt(
                receipt_number="RC-000001",
                customer_id=customer.id,
                customer_name=customer.name,
                phone_number=customer.phone_number,
                email=customer.email,
                consultant_id=users[UserRole.CONSULTANT].id,
                service_id=services[0].id,
                appointment_date=date.today(),
                appointment_time="09:00-10:00",
            )
        )


if __name__ == "__main__":
    seed()

from decimal import Decimal

from diamond_valuation.core.security import issue_user_token
from diamond_valuation.models.enums import UserRole
from diamond_valuation.policies.rbac import Principal

API = "/api/v1"
PASSWORD = "pass123"

FULL_ATTRIBUTES = {
    "shape_and_cut": "Round Brilliant",
    "carat_weight": Decimal("1.010"),
    "clarity": "VS1",
    "cut_grade": "Excellent",
    "measurements": "6.45 x 6.48 x 3.99 mm",
    "polish": "Excellent",
    "symmetry": "Very Good",
    "fluorescence": "Faint",
    "estimated_value": Decimal("8500.00"),
    "valuation_method": "Market comparison",
    "certificate_number": "GIA-2141438167",
}

# same values, API field names
FULL_ATTRIBUTES_JSON = {
    "shapeAndCut": "Round Brilliant",
    "caratWeight": "1.01",
    "clarity": "VS1",
    "cutGrade": "Excellent",
    "measurements": "6.45 x 6.48 x 3.99 mm",
    "polish": "Excellent",
    "symmetry": "Very Good",
    "fluorescence": "Faint",
    "estimatedValue": "8500.00",
    "valuationMethod": "Market comparison",
    "certificateNumber": "GIA-2141438167",
}


def principal_of(user) -> Principal:
    return Principal(user_id=str(user.id), role=UserRole(user.role), display_name=user.name)


def auth_headers(user) -> dict:
    return {"Authorization": f"Bearer {issue_user_token(str(user.id), user.role, user.name)}"}

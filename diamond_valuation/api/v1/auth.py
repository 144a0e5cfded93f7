#diamond_valuation/api/v1/auth.py
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from diamond_valuation.db.session import get_db
from diamond_valuation.schemas.auth import LoginRequest, MeResponse, TokenResponse
from diamond_valuation.services.auth_service import authenticate
from diamond_valuation.core.security import issue_user_token
from diamond_valuation.core.auth_deps import get_current_principal

router = APIRouter(prefix="/auth")


@router.post("/login", response_model=TokenResponse)
async def login(req: LoginRequest, db: Session = Depends(get_db)):
    principal = authenticate(db, req.username, req.password)
    if not principal:
        raise HTTPException(status_code=401, detail="Invalid credentials.")

    token = issue_user_token(principal.user_id, principal.role.value, principal.display_name)
    return TokenResponse(access_token=token)


@router.get("/me", response_model=MeResponse)
def get_me(principal=Depends(get_current_principal)):
    return {
        "user_id": principal.user_id,
        "role": principal.role.value,
        "display_name": principal.display_name,
    }

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from inventory_ledger.database import get_db
from inventory_ledger.exceptions import StorageUnavailableError
from inventory_ledger.services.session_service import SessionService
from inventory_ledger.schemas.session import (
    LoginRequest,
    LoginEventResponse,
    LoginEventListResponse,
)
from inventory_ledger.schemas.common import MessageResponse

router = APIRouter(tags=["Sessions"])


@router.post(
    "/login-usuario",
    response_model=MessageResponse,
    summary="Register a login",
    description="Append a login event for the given email. No credentials are checked."
)
def register_login(
    login: LoginRequest,
    db: Session = Depends(get_db)
):
    service = SessionService(db)

    try:
        service.record_login(login.email)
    except StorageUnavailableError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error registrando login"
        )

    return MessageResponse(message=f"Sesión registrada para {login.email}")


@router.get(
    "/usuarios-logueados",
    response_model=LoginEventListResponse,
    summary="List login events",
    description="Every recorded login, newest first."
)
def list_logins(db: Session = Depends(get_db)):
    service = SessionService(db)

    try:
        events = service.list_logins()
    except StorageUnavailableError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error obteniendo usuarios"
        )

    return LoginEventListResponse(
        total=len(events),
        users=[LoginEventResponse.model_validate(e) for e in events]
    )

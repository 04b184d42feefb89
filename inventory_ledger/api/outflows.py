from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.orm import Session

from inventory_ledger.database import get_db
from inventory_ledger.exceptions import (
    InsufficientStockError,
    ProductNotFoundError,
    StorageUnavailableError,
)
from inventory_ledger.services.outflow_service import OutflowService
from inventory_ledger.schemas.outflow import (
    OutflowCreate,
    OutflowCreatedResponse,
    OutflowResponse,
    OutflowHistoryResponse,
    OutflowLedgerResponse,
)

router = APIRouter(tags=["Outflows"])


@router.post(
    "/registrar-salida",
    response_model=OutflowCreatedResponse,
    summary="Record a stock outflow",
    description="""
    Withdraw units from a product and append the movement to the history.

    **Stock consistency:**
    The decrement is a conditional UPDATE (`stock >= cantidad`), so concurrent
    outflows cannot drive stock negative. The losing request gets a 400.

    Not idempotent: retrying a timed-out request may withdraw twice.
    """
)
def record_outflow(
    outflow_data: OutflowCreate,
    request: Request,
    db: Session = Depends(get_db)
):
    """
    - **producto_id**: Code of the product (required)
    - **cantidad**: Units to withdraw, must be positive (required)
    - **usuario_correo**: Email of the user recording it (required)
    """
    settings = request.app.state.settings
    service = OutflowService(db, owner_scoped=settings.OUTFLOW_OWNER_SCOPED)

    try:
        outflow, remaining = service.record_outflow(
            outflow_data.product_code,
            outflow_data.quantity,
            outflow_data.owner_email,
        )
    except ProductNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Producto no encontrado"
        )
    except InsufficientStockError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Stock insuficiente"
        )
    except StorageUnavailableError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error registrando salida"
        )

    return OutflowCreatedResponse(
        message=f"Salida registrada: {outflow_data.quantity} unidades",
        outflow=OutflowResponse.model_validate(outflow),
        remaining_stock=remaining,
    )


@router.get(
    "/historial-salidas",
    response_model=OutflowHistoryResponse,
    summary="Outflow history of a user",
    description="Outflows recorded by the given email, newest first."
)
def outflow_history(
    owner_email: str = Query(..., alias="usuario_correo", min_length=1, description="Owner email"),
    db: Session = Depends(get_db)
):
    service = OutflowService(db)

    try:
        outflows = service.list_for_owner(owner_email)
    except StorageUnavailableError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error obteniendo historial"
        )

    return OutflowHistoryResponse(
        outflows=[OutflowResponse.model_validate(o) for o in outflows]
    )


@router.get(
    "/todas-salidas",
    response_model=OutflowLedgerResponse,
    summary="List all outflows",
    description="Every recorded outflow, newest first."
)
def list_all_outflows(db: Session = Depends(get_db)):
    service = OutflowService(db)

    try:
        outflows = service.list_all()
    except StorageUnavailableError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error obteniendo salidas"
        )

    return OutflowLedgerResponse(
        total=len(outflows),
        outflows=[OutflowResponse.model_validate(o) for o in outflows]
    )

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from inventory_ledger.database import get_db
from inventory_ledger.exceptions import StorageUnavailableError
from inventory_ledger.services.product_service import ProductService
from inventory_ledger.schemas.product import (
    ProductImportRequest,
    ProductResponse,
    ProductListResponse,
    ProductCatalogResponse,
)
from inventory_ledger.schemas.common import MessageResponse

router = APIRouter(tags=["Products"])


@router.post(
    "/importar-productos",
    response_model=MessageResponse,
    summary="Import a product list",
    description="""
    Insert or update each product by its code.

    A re-import replaces name and stock; category and owner stay as first imported.
    Items are committed one by one: on failure, earlier items remain imported.
    """
)
def import_products(
    payload: ProductImportRequest,
    db: Session = Depends(get_db)
):
    service = ProductService(db)

    try:
        imported = service.import_products(payload.products, payload.owner_email)
    except StorageUnavailableError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error importando productos"
        )

    return MessageResponse(message=f"Se importaron {imported} productos")


@router.get(
    "/productos",
    response_model=ProductListResponse,
    summary="List a user's products",
    description="Products owned by the given email, ordered by product code."
)
def list_products(
    owner_email: str = Query(..., alias="usuario_correo", min_length=1, description="Owner email"),
    db: Session = Depends(get_db)
):
    service = ProductService(db)

    try:
        products = service.list_for_owner(owner_email)
    except StorageUnavailableError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error obteniendo productos"
        )

    return ProductListResponse(
        products=[ProductResponse.model_validate(p) for p in products]
    )


@router.get(
    "/todos-productos",
    response_model=ProductCatalogResponse,
    summary="List all products",
    description="Every product, most recently imported first."
)
def list_all_products(db: Session = Depends(get_db)):
    service = ProductService(db)

    try:
        products = service.list_all()
    except StorageUnavailableError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error obteniendo productos"
        )

    return ProductCatalogResponse(
        total=len(products),
        products=[ProductResponse.model_validate(p) for p in products]
    )

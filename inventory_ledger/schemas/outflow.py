from pydantic import BaseModel, Field, ConfigDict
from datetime import datetime
from typing import Optional


class OutflowCreate(BaseModel):
    """Schema for recording a stock outflow."""
    product_code: str = Field(..., alias="producto_id", min_length=1, description="Code of the product")
    quantity: int = Field(..., alias="cantidad", gt=0, description="Units withdrawn")
    owner_email: str = Field(..., alias="usuario_correo", min_length=1, description="Email of the user recording it")

    model_config = ConfigDict(populate_by_name=True)


class OutflowResponse(BaseModel):
    """Schema for an outflow history row."""
    id: int
    product_code: str = Field(..., alias="producto_id")
    product_name: str = Field(..., alias="nombre_producto")
    quantity: int = Field(..., alias="cantidad")
    owner_email: str = Field(..., alias="usuario_correo")
    recorded_at: Optional[datetime] = Field(None, alias="fecha_salida")

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class OutflowCreatedResponse(BaseModel):
    """Schema returned after an outflow is recorded."""
    success: bool = True
    message: str = Field(..., alias="mensaje")
    outflow: OutflowResponse = Field(..., alias="salida")
    remaining_stock: int = Field(..., alias="stock_restante")

    model_config = ConfigDict(populate_by_name=True)


class OutflowHistoryResponse(BaseModel):
    """Schema for the outflow history of one user."""
    success: bool = True
    outflows: list[OutflowResponse] = Field(..., alias="salidas")

    model_config = ConfigDict(populate_by_name=True)


class OutflowLedgerResponse(OutflowHistoryResponse):
    """Schema for the listing of every outflow."""
    total: int

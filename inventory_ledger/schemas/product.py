from pydantic import BaseModel, Field, ConfigDict
from datetime import datetime
from typing import Optional


class ProductImportItem(BaseModel):
    """One product row from an imported list."""
    product_code: str = Field(..., alias="id_producto", min_length=1, max_length=100, description="Product code")
    name: str = Field(..., alias="nombre", min_length=1, max_length=255, description="Product name")
    category: Optional[str] = Field(None, alias="categoria", max_length=100, description="Category")
    stock: int = Field(default=0, description="Units on hand (replaces the current value on re-import)")

    model_config = ConfigDict(populate_by_name=True)


class ProductImportRequest(BaseModel):
    """Schema for importing a batch of products for one user."""
    products: list[ProductImportItem] = Field(..., alias="productos")
    owner_email: str = Field(..., alias="usuario_correo", min_length=1, description="Importing user's email")

    model_config = ConfigDict(populate_by_name=True)


class ProductResponse(BaseModel):
    """Schema for a product row."""
    id: int
    product_code: str = Field(..., alias="id_producto")
    name: str = Field(..., alias="nombre")
    category: Optional[str] = Field(None, alias="categoria")
    stock: int
    owner_email: Optional[str] = Field(None, alias="usuario_correo")
    imported_at: Optional[datetime] = Field(None, alias="fecha_importacion")

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class ProductListResponse(BaseModel):
    """Schema for the products of one user."""
    success: bool = True
    products: list[ProductResponse] = Field(..., alias="productos")

    model_config = ConfigDict(populate_by_name=True)


class ProductCatalogResponse(ProductListResponse):
    """Schema for the listing of every product."""
    total: int

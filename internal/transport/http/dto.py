"""
Data Transfer Objects for Product Service API.

Contains Pydantic models for request/response validation.
"""

from __future__ import annotations

from typing import Any, List, Optional

from pydantic import BaseModel, Field

from internal.domain.audit import AuditEntry
from internal.domain.product import CreateProductInput, Product, ProductPatch
from internal.domain.value_objects import NetWeight, WeightUnit


class NetWeightDTO(BaseModel):
    """Net weight of a product."""

    value: float = Field(..., gt=0, allow_inf_nan=False, description="Weight amount (must be positive)")
    unit: WeightUnit = Field(..., description="Weight unit")

    class Config:
        json_schema_extra = {"example": {"value": 500, "unit": "GRAM"}}

    def to_domain(self) -> NetWeight:
        return NetWeight(value=self.value, unit=self.unit)


# Request DTOs
class CreateProductRequest(BaseModel):
    """Request body for creating a product."""

    gtin: str = Field(..., description="GTIN, 8 to 14 digits")
    name: str = Field(..., description="Product name, at least 2 characters")
    description: Optional[str] = Field(None, description="Product description")
    brand: Optional[str] = Field(None, description="Brand name")
    manufacturer: Optional[str] = Field(None, description="Manufacturer name")
    net_weight: Optional[NetWeightDTO] = Field(None, description="Net weight")

    class Config:
        json_schema_extra = {
            "example": {
                "gtin": "00011122233348",
                "name": "Tomato Sauce 500g",
                "brand": "Acme",
                "net_weight": {"value": 500, "unit": "GRAM"},
            }
        }

    def to_input(self) -> CreateProductInput:
        """Convert to the domain input."""
        return CreateProductInput(
            gtin=self.gtin,
            name=self.name,
            description=self.description,
            brand=self.brand,
            manufacturer=self.manufacturer,
            net_weight=self.net_weight.to_domain() if self.net_weight else None,
        )


class UpdateProductRequest(BaseModel):
    """
    Request body for a partial product update.

    Only the keys sent by the client are applied; an explicit null clears
    a nullable field.
    """

    name: Optional[str] = Field(None, description="Product name")
    description: Optional[str] = Field(None, description="Product description")
    brand: Optional[str] = Field(None, description="Brand name")
    manufacturer: Optional[str] = Field(None, description="Manufacturer name")
    net_weight: Optional[NetWeightDTO] = Field(None, description="Net weight")

    class Config:
        json_schema_extra = {"example": {"name": "Tomato Sauce 750g"}}

    def to_patch(self) -> ProductPatch:
        """Convert the keys set by the client to a domain patch."""
        values = self.model_dump(exclude_unset=True)
        if "net_weight" in self.model_fields_set:
            values["net_weight"] = self.net_weight.to_domain() if self.net_weight else None
        return ProductPatch.from_dict(values)


# Response DTOs
class ProductResponse(BaseModel):
    """Product representation."""

    id: str = Field(..., description="Product id")
    gtin: str = Field(..., description="GTIN")
    name: str = Field(..., description="Product name")
    description: Optional[str] = Field(None, description="Product description")
    brand: Optional[str] = Field(None, description="Brand name")
    manufacturer: Optional[str] = Field(None, description="Manufacturer name")
    net_weight: Optional[NetWeightDTO] = Field(None, description="Net weight")
    status: str = Field(..., description="PENDING_REVIEW or PUBLISHED")
    created_by_role: str = Field(..., description="Role of the creator")
    created_at: str = Field(..., description="Creation timestamp")
    updated_at: str = Field(..., description="Last update timestamp")
    version: int = Field(..., description="Version, incremented on every change")

    @classmethod
    def from_entity(cls, product: Product) -> "ProductResponse":
        return cls(**product.to_primitives())


class ProductListResponse(BaseModel):
    """List of products."""

    data: List[ProductResponse] = Field(..., description="Products")
    total: int = Field(..., description="Number of products")


class AuditChangeDTO(BaseModel):
    """One changed field."""

    field: str
    before: Any = None
    after: Any = None


class AuditEntryResponse(BaseModel):
    """Audit entry representation."""

    product_id: str
    action: str
    changed_at: str
    changed_by_role: str
    changes: List[AuditChangeDTO] = Field(default_factory=list)
    version: int

    @classmethod
    def from_entity(cls, entry: AuditEntry) -> "AuditEntryResponse":
        data = entry.to_primitives()
        return cls(
            product_id=data["product_id"],
            action=data["action"],
            changed_at=data["changed_at"],
            changed_by_role=data["changed_by_role"],
            changes=[AuditChangeDTO(**c) for c in data["changes"]],
            version=data["version"],
        )


class AuditTrailResponse(BaseModel):
    """Audit history of a product."""

    product_id: str
    data: List[AuditEntryResponse] = Field(..., description="Entries, oldest first")


class ErrorResponse(BaseModel):
    """Error response body."""

    detail: str
    code: str
    request_id: Optional[str] = None

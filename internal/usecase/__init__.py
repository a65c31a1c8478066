"""
Use case package for Product Service.

Contains the product orchestrators and the ports they depend on.
"""
from .approve_product import ApproveProductUseCase
from .create_product import CreateProductUseCase
from .get_product import (
    GetAllProductsUseCase,
    GetProductAuditTrailUseCase,
    GetProductUseCase,
)
from .ports import AuditRepository, EventPublisher, ProductRepository
from .update_product import UpdateProductUseCase

__all__ = [
    "CreateProductUseCase",
    "UpdateProductUseCase",
    "ApproveProductUseCase",
    "GetProductUseCase",
    "GetAllProductsUseCase",
    "GetProductAuditTrailUseCase",
    "ProductRepository",
    "AuditRepository",
    "EventPublisher",
]

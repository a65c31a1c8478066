"""
Domain package for Product Service.

Contains domain entities, value objects, events and domain errors.
"""
from .product import (
    PATCHABLE_FIELDS,
    UNSET,
    CreateProductInput,
    Product,
    ProductPatch,
    ProductStatus,
    Role,
)
from .audit import (
    SYSTEM_ACTOR,
    AuditAction,
    AuditChangeItem,
    AuditEntry,
    compute_changes,
)
from .events import DOMAIN_EVENTS_TOPIC, ProductEvent, ProductEventType, describe_event
from .value_objects import NetWeight, WeightUnit, is_valid_gtin
from .errors import (
    AppError,
    DomainError,
    ErrorCode,
    EventPublishError,
)

__all__ = [
    "Product",
    "ProductPatch",
    "CreateProductInput",
    "ProductStatus",
    "Role",
    "PATCHABLE_FIELDS",
    "UNSET",
    "AuditEntry",
    "AuditAction",
    "AuditChangeItem",
    "SYSTEM_ACTOR",
    "compute_changes",
    "DOMAIN_EVENTS_TOPIC",
    "ProductEvent",
    "ProductEventType",
    "describe_event",
    "NetWeight",
    "WeightUnit",
    "is_valid_gtin",
    "AppError",
    "ErrorCode",
    "DomainError",
    "EventPublishError",
]

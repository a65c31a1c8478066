"""
Ports consumed by the product use cases.
"""
from typing import Optional, Protocol

from internal.domain.audit import AuditEntry
from internal.domain.product import Product


class ProductRepository(Protocol):
    """Protocol for product repository operations."""

    async def find_all(self) -> list[Product]:
        """Get every product."""
        ...

    async def find_by_id(self, product_id: str) -> Optional[Product]:
        """Get product by id."""
        ...

    async def save(self, product: Product) -> None:
        """Insert a new product."""
        ...

    async def update(self, product: Product) -> None:
        """Overwrite a product by id, without a version check."""
        ...


class AuditRepository(Protocol):
    """Protocol for audit repository operations."""

    async def add(self, entry: AuditEntry) -> None:
        """Append an audit entry."""
        ...

    async def find_by_product_id(self, product_id: str) -> list[AuditEntry]:
        """Get all audit entries of a product."""
        ...


class EventPublisher(Protocol):
    """Protocol for publishing serialized events to a topic."""

    async def publish(self, topic: str, payload: str) -> None:
        """Publish a payload."""
        ...

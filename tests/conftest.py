"""
Pytest configuration and fixtures.

In-memory implementations of the use case ports live here so that use case
and API tests run without PostgreSQL or a message broker.
"""
from typing import Optional

import pytest

from internal.domain.audit import AuditEntry
from internal.domain.events import ProductEvent
from internal.domain.product import CreateProductInput, Product, Role
from internal.domain.value_objects import NetWeight, WeightUnit
from internal.usecase import (
    ApproveProductUseCase,
    CreateProductUseCase,
    GetAllProductsUseCase,
    GetProductAuditTrailUseCase,
    GetProductUseCase,
    UpdateProductUseCase,
)


class CollaboratorDown(Exception):
    """Raised by fakes configured to fail."""


class InMemoryProductRepository:
    """
    Product store keeping serialized rows, like a database would.

    Every read hydrates a fresh entity, so mutating a loaded product does
    not touch the stored state until update() is called.
    """

    def __init__(self) -> None:
        self.rows: dict[str, dict] = {}
        self.saved: list[str] = []
        self.updated: list[str] = []
        self.fail_on: set[str] = set()

    def _check(self, method: str) -> None:
        if method in self.fail_on:
            raise CollaboratorDown(f"product store {method} failed")

    async def find_all(self) -> list[Product]:
        self._check("find_all")
        return [Product.hydrate(row).unwrap() for row in self.rows.values()]

    async def find_by_id(self, product_id: str) -> Optional[Product]:
        self._check("find_by_id")
        row = self.rows.get(product_id)
        return Product.hydrate(row).unwrap() if row else None

    async def save(self, product: Product) -> None:
        self._check("save")
        self.rows[product.id] = product.to_primitives()
        self.saved.append(product.id)

    async def update(self, product: Product) -> None:
        self._check("update")
        self.rows[product.id] = product.to_primitives()
        self.updated.append(product.id)

    def put(self, product: Product) -> Product:
        """Store a product directly, bypassing the call log."""
        self.rows[product.id] = product.to_primitives()
        return product


class InMemoryAuditRepository:
    """Append-only audit store."""

    def __init__(self) -> None:
        self.entries: list[AuditEntry] = []
        self.fail_on: set[str] = set()

    async def add(self, entry: AuditEntry) -> None:
        if "add" in self.fail_on:
            raise CollaboratorDown("audit store add failed")
        self.entries.append(entry)

    async def find_by_product_id(self, product_id: str) -> list[AuditEntry]:
        if "find_by_product_id" in self.fail_on:
            raise CollaboratorDown("audit store read failed")
        return [e for e in self.entries if e.product_id == product_id]


class RecordingPublisher:
    """Publisher that keeps every (topic, payload) it is given."""

    def __init__(self) -> None:
        self.messages: list[tuple[str, str]] = []
        self.fail = False

    async def publish(self, topic: str, payload: str) -> None:
        if self.fail:
            raise CollaboratorDown("broker unavailable")
        self.messages.append((topic, payload))

    @property
    def events(self) -> list[ProductEvent]:
        return [ProductEvent.from_json(payload) for _, payload in self.messages]


@pytest.fixture
def product_repository() -> InMemoryProductRepository:
    return InMemoryProductRepository()


@pytest.fixture
def audit_repository() -> InMemoryAuditRepository:
    return InMemoryAuditRepository()


@pytest.fixture
def publisher() -> RecordingPublisher:
    return RecordingPublisher()


@pytest.fixture
def create_use_case(product_repository, audit_repository, publisher) -> CreateProductUseCase:
    return CreateProductUseCase(product_repository, audit_repository, publisher)


@pytest.fixture
def update_use_case(product_repository, audit_repository, publisher) -> UpdateProductUseCase:
    return UpdateProductUseCase(product_repository, audit_repository, publisher)


@pytest.fixture
def approve_use_case(product_repository, audit_repository, publisher) -> ApproveProductUseCase:
    return ApproveProductUseCase(product_repository, audit_repository, publisher)


@pytest.fixture
def get_use_case(product_repository) -> GetProductUseCase:
    return GetProductUseCase(product_repository)


@pytest.fixture
def list_use_case(product_repository) -> GetAllProductsUseCase:
    return GetAllProductsUseCase(product_repository)


@pytest.fixture
def audit_trail_use_case(product_repository, audit_repository) -> GetProductAuditTrailUseCase:
    return GetProductAuditTrailUseCase(product_repository, audit_repository)


@pytest.fixture
def product_input() -> CreateProductInput:
    """Sample product input for tests."""
    return CreateProductInput(
        gtin="00011122233348",
        name="Tomato Sauce 500g",
        description="Classic tomato sauce",
        brand="Acme",
        manufacturer="Acme Foods",
        net_weight=NetWeight(value=500, unit=WeightUnit.GRAM),
    )


@pytest.fixture
def pending_product(product_repository, product_input) -> Product:
    """A stored product created by a provider, still pending review."""
    return product_repository.put(Product.create(product_input, Role.PROVIDER).unwrap())


@pytest.fixture
def published_product(product_repository, product_input) -> Product:
    """A stored product created by an editor, already published."""
    return product_repository.put(Product.create(product_input, Role.EDITOR).unwrap())

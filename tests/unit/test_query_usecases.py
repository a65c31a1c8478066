"""
Unit tests for the read-only product use cases.
"""
import pytest

from internal.domain.audit import AuditAction
from internal.domain.errors import ErrorCode
from internal.domain.product import ProductPatch, Role


class TestGetProduct:
    """Tests for GetProductUseCase."""

    @pytest.mark.asyncio
    async def test_found(self, get_use_case, pending_product, publisher):
        result = await get_use_case.execute(pending_product.id)

        assert result.unwrap().to_primitives() == pending_product.to_primitives()
        assert publisher.messages == []

    @pytest.mark.asyncio
    async def test_not_found(self, get_use_case):
        result = await get_use_case.execute("missing")

        assert result.unwrap_error().code == ErrorCode.NOT_FOUND


class TestGetAllProducts:
    """Tests for GetAllProductsUseCase."""

    @pytest.mark.asyncio
    async def test_empty_catalog(self, list_use_case):
        assert (await list_use_case.execute()).unwrap() == []

    @pytest.mark.asyncio
    async def test_lists_every_product(self, list_use_case, pending_product, published_product):
        products = (await list_use_case.execute()).unwrap()

        assert {p.id for p in products} == {pending_product.id, published_product.id}

    @pytest.mark.asyncio
    async def test_store_failure(self, list_use_case, product_repository):
        product_repository.fail_on.add("find_all")

        result = await list_use_case.execute()

        assert result.unwrap_error().details == {"cause": "CollaboratorDown"}


class TestGetProductAuditTrail:
    """Tests for GetProductAuditTrailUseCase."""

    @pytest.mark.asyncio
    async def test_trail_in_version_order(
        self, update_use_case, approve_use_case, audit_trail_use_case, pending_product
    ):
        await update_use_case.execute(pending_product.id, ProductPatch(brand="Globex"), Role.PROVIDER)
        await approve_use_case.execute(pending_product.id, Role.EDITOR)

        entries = (await audit_trail_use_case.execute(pending_product.id)).unwrap()

        assert [(e.action, e.version) for e in entries] == [
            (AuditAction.UPDATED, 2),
            (AuditAction.APPROVED, 3),
        ]

    @pytest.mark.asyncio
    async def test_new_product_has_empty_trail(self, audit_trail_use_case, pending_product):
        assert (await audit_trail_use_case.execute(pending_product.id)).unwrap() == []

    @pytest.mark.asyncio
    async def test_unknown_product(self, audit_trail_use_case):
        result = await audit_trail_use_case.execute("missing")

        assert result.unwrap_error().code == ErrorCode.NOT_FOUND

"""
Unit tests for UpdateProductUseCase.
"""
import logging

import pytest

from internal.domain.audit import AuditAction, AuditChangeItem
from internal.domain.errors import ErrorCode
from internal.domain.events import ProductEventType
from internal.domain.product import ProductPatch, Role
from internal.domain.value_objects import NetWeight, WeightUnit


class TestUpdateProductUseCase:
    """Tests for partial product updates."""

    @pytest.mark.asyncio
    async def test_rename_pending_product(
        self, update_use_case, pending_product, product_repository, audit_repository, publisher
    ):
        result = await update_use_case.execute(
            pending_product.id,
            ProductPatch(name="Tomato Sauce 750g"),
            Role.PROVIDER,
        )

        product = result.unwrap()
        assert product.name == "Tomato Sauce 750g"
        assert product.version == pending_product.version + 1
        assert product_repository.rows[product.id]["version"] == 2

        assert len(audit_repository.entries) == 1
        entry = audit_repository.entries[0]
        assert entry.action == AuditAction.UPDATED
        assert entry.changed_by_role == Role.PROVIDER
        assert entry.version == 2
        assert entry.changes == (
            AuditChangeItem(field="name", before="Tomato Sauce 500g", after="Tomato Sauce 750g"),
        )
        assert entry.product_before_snapshot["version"] == 1
        assert entry.product_after_snapshot == product.to_primitives()

        assert [e.type for e in publisher.events] == [ProductEventType.UPDATED]
        assert publisher.events[0].payload["name"] == "Tomato Sauce 750g"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "patch, expected_fields",
        [
            (ProductPatch(brand="Globex"), ["brand"]),
            (ProductPatch(brand="Globex", manufacturer=None), ["brand", "manufacturer"]),
            (
                ProductPatch(
                    name="Ketchup",
                    description="Spicy",
                    net_weight=NetWeight(value=1, unit=WeightUnit.KILOGRAM),
                ),
                ["name", "description", "net_weight"],
            ),
        ],
    )
    async def test_changes_list_matches_changed_fields(
        self, update_use_case, pending_product, audit_repository, patch, expected_fields
    ):
        result = await update_use_case.execute(pending_product.id, patch, Role.EDITOR)

        assert result.unwrap().version == 2
        assert [c.field for c in audit_repository.entries[0].changes] == expected_fields

    @pytest.mark.asyncio
    async def test_no_op_update_skips_side_effects(
        self, update_use_case, pending_product, product_repository, audit_repository, publisher
    ):
        result = await update_use_case.execute(
            pending_product.id,
            ProductPatch(name=pending_product.name, brand=pending_product.brand),
            Role.PROVIDER,
        )

        assert result.unwrap().version == 1
        assert product_repository.updated == []
        assert audit_repository.entries == []
        assert publisher.messages == []

    @pytest.mark.asyncio
    async def test_missing_product(self, update_use_case, publisher):
        result = await update_use_case.execute("missing", ProductPatch(name="Milk"), Role.EDITOR)

        assert result.unwrap_error().code == ErrorCode.NOT_FOUND
        assert publisher.messages == []

    @pytest.mark.asyncio
    async def test_provider_cannot_edit_published_product(
        self, update_use_case, published_product, product_repository, publisher
    ):
        result = await update_use_case.execute(
            published_product.id,
            ProductPatch(name="Renamed"),
            Role.PROVIDER,
        )

        assert result.unwrap_error().code == ErrorCode.VALIDATION
        assert product_repository.rows[published_product.id]["name"] == published_product.name
        assert publisher.messages == []

    @pytest.mark.asyncio
    async def test_rejection_is_logged_with_error_code(self, update_use_case, published_product, caplog):
        with caplog.at_level(logging.WARNING, logger="internal.usecase.update_product"):
            await update_use_case.execute(published_product.id, ProductPatch(name="Renamed"), Role.PROVIDER)

        record = caplog.records[-1]
        assert record.levelno == logging.WARNING
        assert record.code == "VALIDATION"
        assert record.product_id == published_product.id

    @pytest.mark.asyncio
    async def test_editor_can_edit_published_product(self, update_use_case, published_product):
        result = await update_use_case.execute(
            published_product.id,
            ProductPatch(name="Renamed"),
            Role.EDITOR,
        )

        assert result.unwrap().name == "Renamed"

    @pytest.mark.asyncio
    async def test_invalid_patch_is_not_persisted(
        self, update_use_case, pending_product, product_repository
    ):
        result = await update_use_case.execute(
            pending_product.id,
            ProductPatch(brand="Globex", net_weight=NetWeight(value=-5, unit=WeightUnit.GRAM)),
            Role.PROVIDER,
        )

        assert result.unwrap_error().message == "Net weight must be positive"
        assert product_repository.updated == []
        assert product_repository.rows[pending_product.id]["brand"] == "Acme"

    @pytest.mark.asyncio
    async def test_audit_failure_after_persist_is_reported(
        self, update_use_case, pending_product, product_repository, audit_repository, publisher
    ):
        audit_repository.fail_on.add("add")

        result = await update_use_case.execute(
            pending_product.id,
            ProductPatch(brand="Globex"),
            Role.PROVIDER,
        )

        error = result.unwrap_error()
        assert error.code == ErrorCode.VALIDATION
        assert error.message == "audit store add failed"
        assert product_repository.rows[pending_product.id]["brand"] == "Globex"
        assert publisher.messages == []

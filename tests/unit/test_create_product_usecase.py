"""
Unit tests for CreateProductUseCase.
"""
import logging

import pytest
from unittest.mock import AsyncMock, MagicMock

from internal.domain.errors import ErrorCode
from internal.domain.events import DOMAIN_EVENTS_TOPIC, ProductEventType
from internal.domain.product import CreateProductInput, ProductStatus, Role
from internal.domain.value_objects import NetWeight, WeightUnit
from internal.usecase.create_product import CreateProductUseCase


class TestCreateProductUseCase:
    """Tests for product creation."""

    @pytest.mark.asyncio
    async def test_editor_creation_is_published_immediately(
        self, create_use_case, product_repository, audit_repository, publisher
    ):
        input_dto = CreateProductInput(
            gtin="00011122233348",
            name="Tomato Sauce 500g",
            net_weight=NetWeight(value=500, unit=WeightUnit.GRAM),
        )

        result = await create_use_case.execute(input_dto, Role.EDITOR)

        product = result.unwrap()
        assert product.status == ProductStatus.PUBLISHED
        assert product.version == 1
        assert product_repository.saved == [product.id]
        assert audit_repository.entries == []

        assert len(publisher.messages) == 1
        topic, _ = publisher.messages[0]
        event = publisher.events[0]
        assert topic == DOMAIN_EVENTS_TOPIC
        assert event.type == ProductEventType.CREATED
        assert event.payload == product.to_primitives()
        assert event.payload["net_weight"] == {"value": 500, "unit": "GRAM"}

    @pytest.mark.asyncio
    async def test_provider_creation_is_pending(self, create_use_case):
        result = await create_use_case.execute(
            CreateProductInput(gtin="12345678", name="Milk"),
            Role.PROVIDER,
        )

        assert result.unwrap().status == ProductStatus.PENDING_REVIEW

    @pytest.mark.asyncio
    async def test_invalid_input_has_no_side_effects(
        self, create_use_case, product_repository, publisher
    ):
        result = await create_use_case.execute(
            CreateProductInput(gtin="12AB", name="Milk"),
            Role.EDITOR,
        )

        error = result.unwrap_error()
        assert error.code == ErrorCode.VALIDATION
        assert error.message == "GTIN invalid (8 - 14 digits required)"
        assert product_repository.rows == {}
        assert publisher.messages == []

    @pytest.mark.asyncio
    async def test_rejection_is_logged_with_error_code(self, create_use_case, caplog):
        with caplog.at_level(logging.WARNING, logger="internal.usecase.create_product"):
            await create_use_case.execute(CreateProductInput(gtin="12AB", name="Milk"), Role.PROVIDER)

        record = caplog.records[-1]
        assert record.levelno == logging.WARNING
        assert record.code == "VALIDATION"

    @pytest.mark.asyncio
    async def test_store_failure_becomes_validation_failure(
        self, create_use_case, product_repository, publisher
    ):
        product_repository.fail_on.add("save")

        result = await create_use_case.execute(
            CreateProductInput(gtin="12345678", name="Milk"),
            Role.EDITOR,
        )

        error = result.unwrap_error()
        assert error.code == ErrorCode.VALIDATION
        assert error.message == "product store save failed"
        assert error.details == {"cause": "CollaboratorDown"}
        assert publisher.messages == []

    @pytest.mark.asyncio
    async def test_publish_failure_after_save_is_reported(
        self, create_use_case, product_repository, publisher
    ):
        publisher.fail = True

        result = await create_use_case.execute(
            CreateProductInput(gtin="12345678", name="Milk"),
            Role.EDITOR,
        )

        assert result.unwrap_error().code == ErrorCode.VALIDATION
        # the row stays written; there is no compensation
        assert len(product_repository.rows) == 1

    @pytest.mark.asyncio
    async def test_uses_configured_topic(self):
        repository = MagicMock()
        repository.save = AsyncMock()
        publisher = MagicMock()
        publisher.publish = AsyncMock()
        use_case = CreateProductUseCase(repository, MagicMock(), publisher, topic="catalog-events")

        await use_case.execute(CreateProductInput(gtin="12345678", name="Milk"), Role.EDITOR)

        repository.save.assert_awaited_once()
        topic, payload = publisher.publish.await_args.args
        assert topic == "catalog-events"
        assert '"type": "product.created"' in payload

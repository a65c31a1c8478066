"""
Update Product Use Case.

Applies a partial update, records the field-level diff as an audit entry
and publishes a product.updated event.
"""
from internal.domain.audit import AuditAction, AuditEntry, compute_changes
from internal.domain.errors import AppError
from internal.domain.events import DOMAIN_EVENTS_TOPIC, ProductEvent, ProductEventType
from internal.domain.product import Product, ProductPatch, Role
from pkg.logger.logger import get_logger
from pkg.result import Result, fail, ok

from .common import collaborator_failure, publish_event
from .ports import AuditRepository, EventPublisher, ProductRepository


logger = get_logger(__name__)


class UpdateProductUseCase:
    """
    Use case for updating a product.

    A patch that changes nothing returns the product untouched and skips
    persistence, audit and event publication.
    """

    def __init__(
        self,
        repository: ProductRepository,
        audit_repository: AuditRepository,
        publisher: EventPublisher,
        topic: str = DOMAIN_EVENTS_TOPIC,
    ) -> None:
        self._repository = repository
        self._audit_repository = audit_repository
        self._publisher = publisher
        self._topic = topic

    async def execute(
        self,
        product_id: str,
        patch: ProductPatch,
        actor: Role,
    ) -> Result[Product, AppError]:
        """
        Execute the update product use case.

        Args:
            product_id: Id of the product to update.
            patch: Fields to change.
            actor: Role of the acting user.

        Returns:
            Success with the (possibly unchanged) product, NOT_FOUND, or a
            VALIDATION failure.
        """
        try:
            product = await self._repository.find_by_id(product_id)
            if product is None:
                return fail(AppError.not_found("Product not found"))

            before = product.to_primitives()

            updated = product.update(patch, actor)
            if updated.is_failure:
                logger.warning(
                    "Product update rejected",
                    product_id=product_id,
                    code=updated.unwrap_error().code.value,
                    error=updated.unwrap_error().message,
                )
                return updated

            if not updated.unwrap():
                logger.debug("Product update was a no-op", product_id=product_id)
                return ok(product)

            await self._repository.update(product)

            after = product.to_primitives()
            entry = AuditEntry.create(
                product_id=product.id,
                action=AuditAction.UPDATED,
                changed_by_role=actor,
                changes=compute_changes(before, after),
                version=product.version,
                product_before_snapshot=before,
                product_after_snapshot=after,
            ).unwrap()
            await self._audit_repository.add(entry)

            await publish_event(
                self._publisher,
                self._topic,
                ProductEvent(type=ProductEventType.UPDATED, payload=after),
            )

            logger.info(
                "Product updated",
                product_id=product.id,
                version=product.version,
                fields=[c.field for c in entry.changes],
                actor=actor.value,
            )
            return ok(product)

        except Exception as e:
            return collaborator_failure(e, "Failed to update product", product_id=product_id)

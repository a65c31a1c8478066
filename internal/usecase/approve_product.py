"""
Approve Product Use Case.

Publishes a product that is pending review, audits the transition and
announces it with a product.approved event.
"""
from internal.domain.audit import AuditAction, AuditChangeItem, AuditEntry
from internal.domain.errors import AppError
from internal.domain.events import DOMAIN_EVENTS_TOPIC, ProductEvent, ProductEventType
from internal.domain.product import Product, ProductStatus, Role
from pkg.logger.logger import get_logger
from pkg.result import Result, fail, ok

from .common import collaborator_failure, publish_event
from .ports import AuditRepository, EventPublisher, ProductRepository


logger = get_logger(__name__)


APPROVAL_CHANGE = AuditChangeItem(
    field="status",
    before=ProductStatus.PENDING_REVIEW.value,
    after=ProductStatus.PUBLISHED.value,
)


class ApproveProductUseCase:
    """
    Use case for approving a product.

    Approval of an already published product still persists, audits and
    publishes; the audit entry then records the fixed PENDING_REVIEW ->
    PUBLISHED change even though the entity did not move.
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

    async def execute(self, product_id: str, actor: Role) -> Result[Product, AppError]:
        """
        Execute the approve product use case.

        Args:
            product_id: Id of the product to approve.
            actor: Role of the acting user; must be EDITOR.

        Returns:
            Success with the product, NOT_FOUND, or a VALIDATION failure.
        """
        try:
            product = await self._repository.find_by_id(product_id)
            if product is None:
                return fail(AppError.not_found("Product not found"))

            before = product.to_primitives()

            approved = product.approve(actor)
            if approved.is_failure:
                logger.warning(
                    "Product approval rejected",
                    product_id=product_id,
                    actor=actor.value,
                    code=approved.unwrap_error().code.value,
                    error=approved.unwrap_error().message,
                )
                return approved

            await self._repository.update(product)

            after = product.to_primitives()
            entry = AuditEntry.create(
                product_id=product.id,
                action=AuditAction.APPROVED,
                changed_by_role=actor,
                changes=[APPROVAL_CHANGE],
                version=product.version,
                product_before_snapshot=before,
                product_after_snapshot=after,
            ).unwrap()
            await self._audit_repository.add(entry)

            await publish_event(
                self._publisher,
                self._topic,
                ProductEvent(type=ProductEventType.APPROVED, payload=after),
            )

            logger.info("Product approved", product_id=product.id, version=product.version)
            return ok(product)

        except Exception as e:
            return collaborator_failure(e, "Failed to approve product", product_id=product_id)

"""
Create Product Use Case.

Validates and stores a new product, then announces it on the domain
events topic.
"""
from internal.domain.errors import AppError
from internal.domain.events import DOMAIN_EVENTS_TOPIC, ProductEvent, ProductEventType
from internal.domain.product import CreateProductInput, Product, Role
from pkg.logger.logger import get_logger
from pkg.result import Result, fail, ok

from .common import collaborator_failure, publish_event
from .ports import AuditRepository, EventPublisher, ProductRepository


logger = get_logger(__name__)


class CreateProductUseCase:
    """
    Use case for creating a new product.

    Editors create products that are published immediately; providers
    create products pending review. Creation writes no audit entry.
    """

    def __init__(
        self,
        repository: ProductRepository,
        audit_repository: AuditRepository,
        publisher: EventPublisher,
        topic: str = DOMAIN_EVENTS_TOPIC,
    ) -> None:
        """
        Initialize the use case.

        Args:
            repository: Product repository for persistence.
            audit_repository: Audit repository (unused on creation).
            publisher: Event publisher.
            topic: Topic for product events.
        """
        self._repository = repository
        self._audit_repository = audit_repository
        self._publisher = publisher
        self._topic = topic

    async def execute(
        self,
        input_dto: CreateProductInput,
        actor: Role,
    ) -> Result[Product, AppError]:
        """
        Execute the create product use case.

        This method:
        1. Builds the product entity (validation)
        2. Persists it
        3. Publishes a product.created event

        Args:
            input_dto: Input data for creating the product.
            actor: Role of the creating user.

        Returns:
            Success with the created product, or a VALIDATION failure.
        """
        try:
            created = Product.create(input_dto, actor)
            if created.is_failure:
                error = created.unwrap_error()
                logger.warning(
                    "Product rejected",
                    gtin=input_dto.gtin,
                    code=error.code.value,
                    error=error.message,
                )
                return fail(AppError.validation(error.message or "Failed to create product"))

            product = created.unwrap()
            await self._repository.save(product)

            await publish_event(
                self._publisher,
                self._topic,
                ProductEvent(type=ProductEventType.CREATED, payload=product.to_primitives()),
            )

            logger.info(
                "Product created",
                product_id=product.id,
                gtin=product.gtin,
                status=product.status.value,
                actor=actor.value,
            )
            return ok(product)

        except Exception as e:
            return collaborator_failure(e, "Failed to create product", gtin=input_dto.gtin)

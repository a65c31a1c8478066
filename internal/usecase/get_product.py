"""
Read-only product use cases.
"""
from internal.domain.audit import AuditEntry
from internal.domain.errors import AppError
from internal.domain.product import Product
from pkg.result import Result, fail, ok

from .common import collaborator_failure
from .ports import AuditRepository, ProductRepository


class GetProductUseCase:
    """Use case for fetching one product by id."""

    def __init__(self, repository: ProductRepository) -> None:
        self._repository = repository

    async def execute(self, product_id: str) -> Result[Product, AppError]:
        """
        Get a product.

        Args:
            product_id: Id of the product.

        Returns:
            Success with the product, or NOT_FOUND.
        """
        try:
            product = await self._repository.find_by_id(product_id)
        except Exception as e:
            return collaborator_failure(e, "Failed to get product", product_id=product_id)

        if product is None:
            return fail(AppError.not_found("Product not found"))
        return ok(product)


class GetAllProductsUseCase:
    """Use case for listing every product."""

    def __init__(self, repository: ProductRepository) -> None:
        self._repository = repository

    async def execute(self) -> Result[list[Product], AppError]:
        try:
            products = await self._repository.find_all()
        except Exception as e:
            return collaborator_failure(e, "Failed to list products")
        return ok(list(products))


class GetProductAuditTrailUseCase:
    """Use case for reading the audit history of a product."""

    def __init__(
        self,
        repository: ProductRepository,
        audit_repository: AuditRepository,
    ) -> None:
        self._repository = repository
        self._audit_repository = audit_repository

    async def execute(self, product_id: str) -> Result[list[AuditEntry], AppError]:
        """
        Get the audit entries of a product, oldest version first.

        Args:
            product_id: Id of the product.

        Returns:
            Success with the entries, or NOT_FOUND if the product does not exist.
        """
        try:
            product = await self._repository.find_by_id(product_id)
            if product is None:
                return fail(AppError.not_found("Product not found"))

            entries = await self._audit_repository.find_by_product_id(product_id)
        except Exception as e:
            return collaborator_failure(e, "Failed to get audit trail", product_id=product_id)

        return ok(sorted(entries, key=lambda entry: (entry.version, entry.changed_at)))

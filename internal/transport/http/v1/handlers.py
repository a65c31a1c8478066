"""
FastAPI HTTP Handlers for Product Service API v1.

Implements REST endpoints for the product review workflow.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException, status
from fastapi.responses import JSONResponse, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from internal.domain.errors import AppError, ErrorCode
from internal.domain.product import Role
from internal.infrastructure.metrics import PRODUCT_MUTATIONS_TOTAL
from internal.transport.http.dto import (
    AuditEntryResponse,
    AuditTrailResponse,
    CreateProductRequest,
    ErrorResponse,
    ProductListResponse,
    ProductResponse,
    UpdateProductRequest,
)
from internal.usecase.approve_product import ApproveProductUseCase
from internal.usecase.create_product import CreateProductUseCase
from internal.usecase.get_product import (
    GetAllProductsUseCase,
    GetProductAuditTrailUseCase,
    GetProductUseCase,
)
from internal.usecase.update_product import UpdateProductUseCase
from pkg.logger.logger import get_logger, get_request_id, set_actor_role

logger = get_logger(__name__)


router = APIRouter(prefix="/api/v1", tags=["products"])


ERROR_STATUS = {
    ErrorCode.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorCode.UNAUTHORIZED: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorCode.INTERNAL: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Validation error"},
    401: {"model": ErrorResponse, "description": "Missing or unknown actor role"},
    503: {"model": ErrorResponse, "description": "Service unavailable"},
}


# Dependency injection container (simplified)
class Dependencies:
    """Container for handler dependencies."""

    create_use_case: Optional[CreateProductUseCase] = None
    update_use_case: Optional[UpdateProductUseCase] = None
    approve_use_case: Optional[ApproveProductUseCase] = None
    get_use_case: Optional[GetProductUseCase] = None
    list_use_case: Optional[GetAllProductsUseCase] = None
    audit_trail_use_case: Optional[GetProductAuditTrailUseCase] = None


_deps = Dependencies()


def _require(use_case):
    if use_case is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service not initialized",
        )
    return use_case


def get_create_use_case() -> CreateProductUseCase:
    """Get CreateProductUseCase instance."""
    return _require(_deps.create_use_case)


def get_update_use_case() -> UpdateProductUseCase:
    """Get UpdateProductUseCase instance."""
    return _require(_deps.update_use_case)


def get_approve_use_case() -> ApproveProductUseCase:
    """Get ApproveProductUseCase instance."""
    return _require(_deps.approve_use_case)


def get_product_use_case() -> GetProductUseCase:
    """Get GetProductUseCase instance."""
    return _require(_deps.get_use_case)


def get_list_use_case() -> GetAllProductsUseCase:
    """Get GetAllProductsUseCase instance."""
    return _require(_deps.list_use_case)


def get_audit_trail_use_case() -> GetProductAuditTrailUseCase:
    """Get GetProductAuditTrailUseCase instance."""
    return _require(_deps.audit_trail_use_case)


def set_dependencies(
    create_use_case: CreateProductUseCase,
    update_use_case: UpdateProductUseCase,
    approve_use_case: ApproveProductUseCase,
    get_use_case: GetProductUseCase,
    list_use_case: GetAllProductsUseCase,
    audit_trail_use_case: GetProductAuditTrailUseCase,
) -> None:
    """
    Set handler dependencies.

    Called during application startup.
    """
    _deps.create_use_case = create_use_case
    _deps.update_use_case = update_use_case
    _deps.approve_use_case = approve_use_case
    _deps.get_use_case = get_use_case
    _deps.list_use_case = list_use_case
    _deps.audit_trail_use_case = audit_trail_use_case


async def get_actor_role(
    x_actor_role: Optional[str] = Header(None, alias="X-Actor-Role"),
) -> Role:
    """
    Resolve the acting role from the X-Actor-Role header.

    Raises:
        HTTPException: 401 if the header is missing or names no known role.
    """
    try:
        role = Role((x_actor_role or "").strip().upper())
    except ValueError:
        logger.warning("Rejected actor role", actor_role=x_actor_role)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="X-Actor-Role header must be PROVIDER or EDITOR",
        )

    set_actor_role(role.value)
    return role


def error_response(error: AppError) -> JSONResponse:
    """
    Render a failed Result as an HTTP error.

    Args:
        error: Error carried by the failure.

    Returns:
        JSON response with the mapped status code.
    """
    body = ErrorResponse(
        detail=error.message,
        code=error.code.value,
        request_id=get_request_id(),
    )
    return JSONResponse(
        status_code=ERROR_STATUS.get(error.code, status.HTTP_500_INTERNAL_SERVER_ERROR),
        content=body.model_dump(),
    )


def _count_mutation(action: str, succeeded: bool) -> None:
    PRODUCT_MUTATIONS_TOTAL.labels(
        action=action,
        outcome="success" if succeeded else "failure",
    ).inc()


# Handlers
@router.get(
    "/products/metrics",
    response_class=Response,
    responses={200: {"description": "Prometheus metrics"}},
)
async def metrics() -> Response:
    """
    Prometheus metrics endpoint.

    Returns:
        Metrics in Prometheus text format.
    """
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)


@router.post(
    "/products",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        201: {"description": "Product created successfully"},
        **ERROR_RESPONSES,
    },
)
async def create_product(
    request: CreateProductRequest,
    actor: Role = Depends(get_actor_role),
    use_case: CreateProductUseCase = Depends(get_create_use_case),
):
    """
    Create a new product.

    Editors publish directly; providers create products pending review.

    Args:
        request: Product creation request.
        actor: Role of the acting user.
        use_case: Injected use case.

    Returns:
        Created product.
    """
    logger.info("Creating product", gtin=request.gtin)

    result = await use_case.execute(request.to_input(), actor)
    _count_mutation("create", result.is_success)

    if result.is_failure:
        return error_response(result.unwrap_error())

    return ProductResponse.from_entity(result.unwrap())


@router.get(
    "/products",
    response_model=ProductListResponse,
    responses=ERROR_RESPONSES,
)
async def list_products(
    actor: Role = Depends(get_actor_role),
    use_case: GetAllProductsUseCase = Depends(get_list_use_case),
):
    """
    List every product.

    Returns:
        Products and their count.
    """
    result = await use_case.execute()
    if result.is_failure:
        return error_response(result.unwrap_error())

    products = [ProductResponse.from_entity(p) for p in result.unwrap()]
    return ProductListResponse(data=products, total=len(products))


@router.get(
    "/products/{product_id}",
    response_model=ProductResponse,
    responses={
        404: {"model": ErrorResponse, "description": "Product not found"},
        **ERROR_RESPONSES,
    },
)
async def get_product(
    product_id: str,
    actor: Role = Depends(get_actor_role),
    use_case: GetProductUseCase = Depends(get_product_use_case),
):
    """
    Get a product by id.

    Args:
        product_id: Product id.

    Returns:
        Product data.
    """
    result = await use_case.execute(product_id)
    if result.is_failure:
        return error_response(result.unwrap_error())

    return ProductResponse.from_entity(result.unwrap())


@router.patch(
    "/products/{product_id}",
    response_model=ProductResponse,
    responses={
        404: {"model": ErrorResponse, "description": "Product not found"},
        **ERROR_RESPONSES,
    },
)
async def update_product(
    product_id: str,
    request: UpdateProductRequest,
    actor: Role = Depends(get_actor_role),
    use_case: UpdateProductUseCase = Depends(get_update_use_case),
):
    """
    Partially update a product.

    Only the fields present in the body are changed. Providers may edit
    only products that are still pending review.

    Args:
        product_id: Product id.
        request: Fields to change.
        actor: Role of the acting user.
        use_case: Injected use case.

    Returns:
        Updated product.
    """
    logger.info(
        "Updating product",
        product_id=product_id,
        fields=sorted(request.model_fields_set),
    )

    result = await use_case.execute(product_id, request.to_patch(), actor)
    _count_mutation("update", result.is_success)

    if result.is_failure:
        return error_response(result.unwrap_error())

    return ProductResponse.from_entity(result.unwrap())


@router.post(
    "/products/{product_id}/approve",
    response_model=ProductResponse,
    responses={
        404: {"model": ErrorResponse, "description": "Product not found"},
        **ERROR_RESPONSES,
    },
)
async def approve_product(
    product_id: str,
    actor: Role = Depends(get_actor_role),
    use_case: ApproveProductUseCase = Depends(get_approve_use_case),
):
    """
    Approve a product pending review. Requires the EDITOR role.
    """
    logger.info("Approving product", product_id=product_id)

    result = await use_case.execute(product_id, actor)
    _count_mutation("approve", result.is_success)

    if result.is_failure:
        return error_response(result.unwrap_error())

    return ProductResponse.from_entity(result.unwrap())


@router.get(
    "/products/{product_id}/audit",
    response_model=AuditTrailResponse,
    responses={
        404: {"model": ErrorResponse, "description": "Product not found"},
        **ERROR_RESPONSES,
    },
)
async def get_product_audit_trail(
    product_id: str,
    actor: Role = Depends(get_actor_role),
    use_case: GetProductAuditTrailUseCase = Depends(get_audit_trail_use_case),
):
    """
    Get the audit history of a product.

    Args:
        product_id: Product id.

    Returns:
        Audit entries, oldest first.
    """
    result = await use_case.execute(product_id)
    if result.is_failure:
        return error_response(result.unwrap_error())

    return AuditTrailResponse(
        product_id=product_id,
        data=[AuditEntryResponse.from_entity(e) for e in result.unwrap()],
    )

"""
Domain model for Product.

Product is the aggregate root of the catalog. It owns the review lifecycle
(PENDING_REVIEW -> PUBLISHED) and the version counter, and every mutation
rule lives here. Expected rule violations are returned as failed Results.
"""
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional, Union
from uuid import uuid4

from pkg.result import Result, fail, ok

from .errors import AppError
from .value_objects import NetWeight, is_valid_gtin


class Role(str, Enum):
    """Permission level of the acting user."""
    PROVIDER = "PROVIDER"
    EDITOR = "EDITOR"


class ProductStatus(str, Enum):
    """Review lifecycle status."""
    PENDING_REVIEW = "PENDING_REVIEW"
    PUBLISHED = "PUBLISHED"


# Fields a patch may touch, in diff order.
PATCHABLE_FIELDS = ("name", "description", "brand", "manufacturer", "net_weight")

MIN_NAME_LENGTH = 2


class _Unset:
    """Marker for a field absent from a patch."""

    _instance: Optional["_Unset"] = None

    def __new__(cls) -> "_Unset":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()


def utcnow() -> datetime:
    """Timezone-aware current UTC time."""
    return datetime.now(timezone.utc)


def parse_datetime(value: Union[str, datetime]) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value)


@dataclass(frozen=True)
class CreateProductInput:
    """Input for creating a product."""
    gtin: str
    name: str
    description: Optional[str] = None
    brand: Optional[str] = None
    manufacturer: Optional[str] = None
    net_weight: Optional[NetWeight] = None


@dataclass(frozen=True)
class ProductPatch:
    """
    Partial update of a product.

    A field left as UNSET is not part of the patch; None clears a
    nullable field.
    """
    name: Any = UNSET
    description: Any = UNSET
    brand: Any = UNSET
    manufacturer: Any = UNSET
    net_weight: Any = UNSET

    def __post_init__(self) -> None:
        if isinstance(self.net_weight, dict):
            object.__setattr__(self, "net_weight", NetWeight.from_dict(self.net_weight))

    @classmethod
    def from_dict(cls, data: dict) -> "ProductPatch":
        """
        Build a patch from the keys present in data.

        Args:
            data: Mapping of patchable field names to new values.

        Returns:
            ProductPatch with unknown keys ignored.
        """
        return cls(**{key: data[key] for key in PATCHABLE_FIELDS if key in data})


class Product:
    """
    Product aggregate root.

    Build instances through create() for new products or hydrate() for
    stored ones. Attributes are exposed read-only; mutations go through
    update() and approve().
    """

    def __init__(
        self,
        *,
        id: str,
        gtin: str,
        name: str,
        description: Optional[str],
        brand: Optional[str],
        manufacturer: Optional[str],
        net_weight: Optional[NetWeight],
        status: ProductStatus,
        created_by_role: Role,
        created_at: datetime,
        updated_at: datetime,
        version: int,
    ) -> None:
        self._id = id
        self._gtin = gtin
        self._name = name
        self._description = description
        self._brand = brand
        self._manufacturer = manufacturer
        self._net_weight = net_weight
        self._status = status
        self._created_by_role = created_by_role
        self._created_at = created_at
        self._updated_at = updated_at
        self._version = version

    @classmethod
    def create(cls, data: CreateProductInput, actor: Role) -> Result["Product", AppError]:
        """
        Create a new product.

        Editors publish directly; any other role starts in review.

        Args:
            data: Product input.
            actor: Role of the creating user.

        Returns:
            Success with the new product, or a VALIDATION failure.
        """
        if not is_valid_gtin(data.gtin):
            return fail(AppError.validation("GTIN invalid (8 - 14 digits required)"))

        if not isinstance(data.name, str) or len(data.name.strip()) < MIN_NAME_LENGTH:
            return fail(AppError.validation("At least 2 characters required for name"))

        if data.net_weight is not None and not data.net_weight.is_positive:
            return fail(AppError.validation("Net weight must be positive"))

        now = utcnow()
        status = ProductStatus.PUBLISHED if actor == Role.EDITOR else ProductStatus.PENDING_REVIEW

        return ok(cls(
            id=str(uuid4()),
            gtin=data.gtin,
            name=data.name.strip(),
            description=data.description,
            brand=data.brand,
            manufacturer=data.manufacturer,
            net_weight=data.net_weight,
            status=status,
            created_by_role=actor,
            created_at=now,
            updated_at=now,
            version=1,
        ))

    @classmethod
    def hydrate(cls, data: dict) -> Result["Product", AppError]:
        """
        Rebuild a product from stored primitives without business validation.

        Args:
            data: Output of to_primitives() or an equivalent stored record.

        Returns:
            Success with the product, or a VALIDATION failure if data is malformed.
        """
        try:
            return ok(cls(
                id=data["id"],
                gtin=data["gtin"],
                name=data["name"],
                description=data.get("description"),
                brand=data.get("brand"),
                manufacturer=data.get("manufacturer"),
                net_weight=NetWeight.from_dict(data.get("net_weight")),
                status=ProductStatus(data["status"]),
                created_by_role=Role(data["created_by_role"]),
                created_at=parse_datetime(data["created_at"]),
                updated_at=parse_datetime(data["updated_at"]),
                version=int(data["version"]),
            ))
        except (KeyError, TypeError, ValueError) as e:
            return fail(AppError.validation("Malformed product state", details={"error": str(e)}))

    def update(self, patch: ProductPatch, actor: Role) -> Result[bool, AppError]:
        """
        Apply a partial update.

        The whole patch is validated before any field changes. Version and
        updated_at move only if at least one field actually changed.

        Args:
            patch: Fields to change.
            actor: Role of the acting user.

        Returns:
            Success(True) if state changed, Success(False) for a no-op,
            or a VALIDATION failure.
        """
        if actor == Role.PROVIDER and self._status != ProductStatus.PENDING_REVIEW:
            return fail(AppError.validation(
                "Product can only be edited by PROVIDER when in PENDING_REVIEW status"
            ))

        if patch.name is not UNSET:
            if not isinstance(patch.name, str) or len(patch.name.strip()) < MIN_NAME_LENGTH:
                return fail(AppError.validation("At least 2 characters required for name"))

        if patch.net_weight is not UNSET and patch.net_weight is not None:
            if not patch.net_weight.is_positive:
                return fail(AppError.validation("Net weight must be positive"))

        changed = False

        if patch.name is not UNSET and patch.name.strip() != self._name:
            self._name = patch.name.strip()
            changed = True

        if patch.description is not UNSET and patch.description != self._description:
            self._description = patch.description
            changed = True

        if patch.brand is not UNSET and patch.brand != self._brand:
            self._brand = patch.brand
            changed = True

        if patch.manufacturer is not UNSET and patch.manufacturer != self._manufacturer:
            self._manufacturer = patch.manufacturer
            changed = True

        if patch.net_weight is not UNSET and patch.net_weight != self._net_weight:
            self._net_weight = patch.net_weight
            changed = True

        if changed:
            self._bump_version()

        return ok(changed)

    def approve(self, actor: Role) -> Result[None, AppError]:
        """
        Publish the product.

        Approving an already published product is a no-op success.

        Args:
            actor: Role of the acting user; must be EDITOR.

        Returns:
            Success(None) or a VALIDATION failure.
        """
        if actor != Role.EDITOR:
            return fail(AppError.validation("You should be an EDITOR to approve a product"))

        if self._status == ProductStatus.PUBLISHED:
            return ok()

        self._status = ProductStatus.PUBLISHED
        self._bump_version()
        return ok()

    def _bump_version(self) -> None:
        # version and updated_at only ever move together
        self._version += 1
        self._updated_at = utcnow()

    def to_primitives(self) -> dict:
        """
        Serialize current state.

        Returns:
            JSON-serializable snapshot of the product.
        """
        return {
            "id": self._id,
            "gtin": self._gtin,
            "name": self._name,
            "description": self._description,
            "brand": self._brand,
            "manufacturer": self._manufacturer,
            "net_weight": self._net_weight.to_dict() if self._net_weight else None,
            "status": self._status.value,
            "created_by_role": self._created_by_role.value,
            "created_at": self._created_at.isoformat(),
            "updated_at": self._updated_at.isoformat(),
            "version": self._version,
        }

    @property
    def id(self) -> str:
        return self._id

    @property
    def gtin(self) -> str:
        return self._gtin

    @property
    def name(self) -> str:
        return self._name

    @property
    def description(self) -> Optional[str]:
        return self._description

    @property
    def brand(self) -> Optional[str]:
        return self._brand

    @property
    def manufacturer(self) -> Optional[str]:
        return self._manufacturer

    @property
    def net_weight(self) -> Optional[NetWeight]:
        return self._net_weight

    @property
    def status(self) -> ProductStatus:
        return self._status

    @property
    def created_by_role(self) -> Role:
        return self._created_by_role

    @property
    def created_at(self) -> datetime:
        return self._created_at

    @property
    def updated_at(self) -> datetime:
        return self._updated_at

    @property
    def version(self) -> int:
        return self._version

    def __repr__(self) -> str:
        return (
            f"Product(id={self._id!r}, gtin={self._gtin!r}, "
            f"status={self._status.value}, version={self._version})"
        )

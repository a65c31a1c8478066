"""
Domain model for product audit entries.

An AuditEntry is an immutable record of one accepted mutation of a
product, with before/after snapshots and the field-level diff.
"""
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Iterable, Optional, Union

from pkg.result import Result, fail, ok

from .errors import AppError
from .product import PATCHABLE_FIELDS, Role, parse_datetime, utcnow


SYSTEM_ACTOR = "SYSTEM"


class AuditAction(str, Enum):
    """Kind of audited mutation."""
    CREATED = "CREATED"
    UPDATED = "UPDATED"
    APPROVED = "APPROVED"


@dataclass(frozen=True)
class AuditChangeItem:
    """One changed field."""
    field: str
    before: Any
    after: Any

    def to_dict(self) -> dict:
        """Convert to dictionary representation."""
        return {"field": self.field, "before": self.before, "after": self.after}

    @classmethod
    def from_dict(cls, data: dict) -> "AuditChangeItem":
        return cls(field=data["field"], before=data.get("before"), after=data.get("after"))


def compute_changes(
    before: dict,
    after: dict,
    fields: Iterable[str] = PATCHABLE_FIELDS,
) -> list[AuditChangeItem]:
    """
    Diff two product snapshots.

    Values are compared with deep equality, so nested structures such as
    net_weight count as changed only when their content differs.

    Args:
        before: Snapshot taken before the mutation.
        after: Snapshot taken after the mutation.
        fields: Fields to compare, in output order.

    Returns:
        One change item per differing field.
    """
    return [
        AuditChangeItem(field=name, before=before.get(name), after=after.get(name))
        for name in fields
        if before.get(name) != after.get(name)
    ]


@dataclass(frozen=True)
class AuditEntry:
    """
    Immutable audit record.

    Attributes:
        product_id: Id of the audited product (lookup only).
        action: Kind of mutation.
        changed_at: When the entry was created.
        changed_by_role: Acting role, or SYSTEM_ACTOR.
        changes: Field-level diff.
        version: Product version after the mutation.
        product_before_snapshot: Product state before the mutation.
        product_after_snapshot: Product state after the mutation.
    """
    product_id: str
    action: AuditAction
    changed_at: datetime
    changed_by_role: Union[Role, str]
    changes: tuple[AuditChangeItem, ...] = ()
    version: int = 0
    product_before_snapshot: Optional[dict] = None
    product_after_snapshot: Optional[dict] = None

    @classmethod
    def create(
        cls,
        product_id: str,
        action: AuditAction,
        changed_by_role: Union[Role, str],
        changes: Iterable[AuditChangeItem] = (),
        version: int = 0,
        product_before_snapshot: Optional[dict] = None,
        product_after_snapshot: Optional[dict] = None,
        changed_at: Optional[datetime] = None,
    ) -> Result["AuditEntry", AppError]:
        """
        Create a new audit entry stamped with the current time.

        A caller-supplied changed_at is ignored.

        Returns:
            Success with the entry, or a VALIDATION failure if product_id is empty.
        """
        if not product_id:
            return fail(AppError.validation("AuditEntry requires product_id"))

        return ok(cls(
            product_id=product_id,
            action=action,
            changed_at=utcnow(),
            changed_by_role=changed_by_role,
            changes=tuple(changes),
            version=version,
            product_before_snapshot=product_before_snapshot,
            product_after_snapshot=product_after_snapshot,
        ))

    @classmethod
    def hydrate(cls, data: dict) -> Result["AuditEntry", AppError]:
        """Rebuild a stored entry, keeping its original changed_at."""
        try:
            role = data["changed_by_role"]
            return ok(cls(
                product_id=data["product_id"],
                action=AuditAction(data["action"]),
                changed_at=parse_datetime(data["changed_at"]),
                changed_by_role=role if role == SYSTEM_ACTOR else Role(role),
                changes=tuple(AuditChangeItem.from_dict(c) for c in data.get("changes") or ()),
                version=int(data.get("version", 0)),
                product_before_snapshot=data.get("product_before_snapshot"),
                product_after_snapshot=data.get("product_after_snapshot"),
            ))
        except (KeyError, TypeError, ValueError) as e:
            return fail(AppError.validation("Malformed audit entry", details={"error": str(e)}))

    def to_primitives(self) -> dict:
        """
        Serialize the entry.

        Returns:
            JSON-serializable dictionary.
        """
        role = self.changed_by_role
        return {
            "product_id": self.product_id,
            "action": self.action.value,
            "changed_at": self.changed_at.isoformat(),
            "changed_by_role": role.value if isinstance(role, Role) else role,
            "changes": [c.to_dict() for c in self.changes],
            "version": self.version,
            "product_before_snapshot": self.product_before_snapshot,
            "product_after_snapshot": self.product_after_snapshot,
        }

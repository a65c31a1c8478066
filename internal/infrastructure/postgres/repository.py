"""
PostgreSQL Product and Audit Repositories.

Implements the repository ports for products and audit entries with asyncpg.
Nested values (net weight, audit changes, snapshots) are stored as JSONB.
"""

import json
from typing import Any, List, Optional

import asyncpg
from asyncpg import Pool

from internal.domain.audit import AuditEntry
from internal.domain.product import Product


_PRODUCT_COLUMNS = """
    id, gtin, name, description, brand, manufacturer, net_weight,
    status, created_by_role, created_at, updated_at, version
"""

_AUDIT_COLUMNS = """
    product_id, action, changed_at, changed_by_role, changes, version,
    product_before_snapshot, product_after_snapshot
"""


def _serialize_json(data: Any) -> Optional[str]:
    """Serialize a value for a JSONB parameter."""
    if data is None:
        return None
    return json.dumps(data, ensure_ascii=False, default=str)


def _deserialize_json(value: Any) -> Any:
    """asyncpg returns JSONB as text unless a codec is registered."""
    if isinstance(value, str):
        return json.loads(value)
    return value


class PostgresProductRepository:
    """
    PostgreSQL implementation of the Product Repository.

    update() overwrites the row by id unconditionally; there is no
    version predicate.
    """

    def __init__(self, pool: Pool) -> None:
        """
        Initialize the repository.

        Args:
            pool: asyncpg connection pool.
        """
        self._pool = pool

    async def find_all(self) -> List[Product]:
        """
        Get every product, oldest first.

        Returns:
            List of products.
        """
        async with self._pool.acquire() as conn:
            rows = await conn.fetch(
                f"SELECT {_PRODUCT_COLUMNS} FROM products ORDER BY created_at, id"
            )
            return [self._row_to_entity(row) for row in rows]

    async def find_by_id(self, product_id: str) -> Optional[Product]:
        """
        Get a product by id.

        Args:
            product_id: The product id.

        Returns:
            Product if found, None otherwise.
        """
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(
                f"SELECT {_PRODUCT_COLUMNS} FROM products WHERE id = $1",
                product_id,
            )

            if not row:
                return None

            return self._row_to_entity(row)

    async def save(self, product: Product) -> None:
        """
        Insert a new product.

        Args:
            product: The product to store.
        """
        data = product.to_primitives()
        async with self._pool.acquire() as conn:
            await conn.execute(
                f"""
                INSERT INTO products ({_PRODUCT_COLUMNS})
                VALUES ($1, $2, $3, $4, $5, $6, $7::jsonb, $8, $9, $10, $11, $12)
                """,
                data["id"],
                data["gtin"],
                data["name"],
                data["description"],
                data["brand"],
                data["manufacturer"],
                _serialize_json(data["net_weight"]),
                data["status"],
                data["created_by_role"],
                product.created_at,
                product.updated_at,
                data["version"],
            )

    async def update(self, product: Product) -> None:
        """
        Overwrite the stored state of a product.

        Args:
            product: The product with its new state.
        """
        data = product.to_primitives()
        async with self._pool.acquire() as conn:
            await conn.execute(
                """
                UPDATE products
                SET name = $2,
                    description = $3,
                    brand = $4,
                    manufacturer = $5,
                    net_weight = $6::jsonb,
                    status = $7,
                    updated_at = $8,
                    version = $9
                WHERE id = $1
                """,
                data["id"],
                data["name"],
                data["description"],
                data["brand"],
                data["manufacturer"],
                _serialize_json(data["net_weight"]),
                data["status"],
                product.updated_at,
                data["version"],
            )

    def _row_to_entity(self, row: asyncpg.Record) -> Product:
        """
        Convert a database row to a Product entity.

        Args:
            row: Database row.

        Returns:
            Product entity.
        """
        data = dict(row)
        data["net_weight"] = _deserialize_json(data["net_weight"])
        return Product.hydrate(data).unwrap()


class PostgresAuditRepository:
    """PostgreSQL implementation of the Audit Repository (append-only)."""

    def __init__(self, pool: Pool) -> None:
        """
        Initialize the repository.

        Args:
            pool: asyncpg connection pool.
        """
        self._pool = pool

    async def add(self, entry: AuditEntry) -> None:
        """
        Append an audit entry.

        Args:
            entry: The entry to store.
        """
        data = entry.to_primitives()
        async with self._pool.acquire() as conn:
            await conn.execute(
                f"""
                INSERT INTO product_audit ({_AUDIT_COLUMNS})
                VALUES ($1, $2, $3, $4, $5::jsonb, $6, $7::jsonb, $8::jsonb)
                """,
                data["product_id"],
                data["action"],
                entry.changed_at,
                data["changed_by_role"],
                _serialize_json(data["changes"]),
                data["version"],
                _serialize_json(data["product_before_snapshot"]),
                _serialize_json(data["product_after_snapshot"]),
            )

    async def find_by_product_id(self, product_id: str) -> List[AuditEntry]:
        """
        Get all audit entries of a product.

        Args:
            product_id: The product id.

        Returns:
            Entries ordered by version, then time.
        """
        async with self._pool.acquire() as conn:
            rows = await conn.fetch(
                f"""
                SELECT {_AUDIT_COLUMNS}
                FROM product_audit
                WHERE product_id = $1
                ORDER BY version, changed_at
                """,
                product_id,
            )
            return [self._row_to_entry(row) for row in rows]

    def _row_to_entry(self, row: asyncpg.Record) -> AuditEntry:
        data = dict(row)
        for key in ("changes", "product_before_snapshot", "product_after_snapshot"):
            data[key] = _deserialize_json(data[key])
        return AuditEntry.hydrate(data).unwrap()


async def create_pool(dsn: str, min_size: int = 2, max_size: int = 10) -> Pool:
    """
    Create an asyncpg connection pool.

    Args:
        dsn: Database connection string.
        min_size: Minimum pool size.
        max_size: Maximum pool size.

    Returns:
        asyncpg connection pool.
    """
    return await asyncpg.create_pool(
        dsn=dsn,
        min_size=min_size,
        max_size=max_size,
    )

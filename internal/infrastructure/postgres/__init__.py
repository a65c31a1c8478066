"""
PostgreSQL infrastructure package.
"""
from .repository import PostgresAuditRepository, PostgresProductRepository, create_pool

__all__ = ["PostgresProductRepository", "PostgresAuditRepository", "create_pool"]

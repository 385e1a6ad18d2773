"""
GraphQL endpoint schema (ariadne).
"""

from .resolvers import TYPE_DEFS, schema

__all__ = ["TYPE_DEFS", "schema"]

"""
Persistence adapters for the routing service.
"""
from app.repositories.protocols import OrderRepository, RouteRepository
from app.repositories.sql import SqlOrderRepository, SqlRouteRepository

__all__ = [
    "OrderRepository",
    "RouteRepository",
    "SqlOrderRepository",
    "SqlRouteRepository",
]

"""
Core module for shared domain infrastructure.

This module contains:
- Domain events, exceptions and value objects
- Infrastructure abstractions (event bus, transactions)
- Observability middleware, tracing and metrics
- Health check views
"""

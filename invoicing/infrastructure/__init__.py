"""
Infrastructure layer for the invoicing engine.

This layer contains the implementation details for external systems integration:
- Database persistence (SQLAlchemy)
- Payment link providers
- Event handlers and the web API

It implements the interfaces defined in the domain layer.
"""

"""Infrastructure layer - Adapters implementing domain protocols.

Structure:
- cache/: Redis fast tier (adapter, key layout, session cache)
- persistence/: SQLAlchemy durable tier (models, repositories)
- storage/: Two-tier session store combining both
- logging/: structlog adapter
- jobs/: Background cleanup scheduler

The infrastructure layer depends on the domain layer (implements protocols)
but the domain layer does NOT depend on infrastructure.
"""

"""
Infrastructure Package
======================

Adapters the domain services depend on through small interfaces.

Modules:
    - events: Event bus abstraction (Redis pub/sub, in-memory)
    - notifications: Post-commit query invalidation signals
    - observability: OpenTelemetry tracing setup
    - container: Lazy service locator wiring services to adapters
"""

from .tracing import get_tracer, setup_tracing

__all__ = ["setup_tracing", "get_tracer"]

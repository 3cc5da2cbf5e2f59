import logging

from django.apps import AppConfig

logger = logging.getLogger(__name__)


class AuthenticationConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "authentication"

    def ready(self):
        # Initialize OpenTelemetry tracing
        try:
            from django.conf import settings

            from infrastructure.observability import setup_tracing

            setup_tracing(
                service_name=getattr(settings, "OTEL_SERVICE_NAME", "bazaar-backend"),
                otlp_endpoint=getattr(settings, "OTEL_EXPORTER_OTLP_TRACES_ENDPOINT", None),
                enable=getattr(settings, "OTEL_TRACING_ENABLED", False),
            )
        except Exception as e:
            logger.warning(f"Failed to initialize OpenTelemetry tracing: {e}")

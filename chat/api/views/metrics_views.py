from django.http import HttpResponse
from drf_spectacular.utils import extend_schema
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny

from chat.domain.models import Message
from chat.infra.observability.metrics import pending_messages


@extend_schema(exclude=True)
@api_view(["GET"])
@permission_classes([AllowAny])
def chat_prometheus_metrics(request):
    """Exposes Prometheus metrics for the chat app, with a fresh count of unmoderated messages."""
    pending_messages.set(Message.objects.filter(is_moderated=False).count())
    return HttpResponse(generate_latest(), content_type=CONTENT_TYPE_LATEST)

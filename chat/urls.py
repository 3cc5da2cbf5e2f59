from django.urls import include, path
from rest_framework.routers import DefaultRouter

from chat.api.views import ConversationViewSet, MessageViewSet
from chat.api.views.metrics_views import chat_prometheus_metrics


router = DefaultRouter()
router.register(r"conversations", ConversationViewSet, basename="conversation")
router.register(r"messages", MessageViewSet, basename="message")

app_name = "chat"

urlpatterns = [
    path("metrics/", chat_prometheus_metrics, name="chat-metrics"),
    path("", include(router.urls)),
]

from django.contrib import admin

from .models import Conversation, Message


@admin.register(Conversation)
class ConversationAdmin(admin.ModelAdmin):
    list_display = ("id", "user_low", "user_high", "product_id", "created_at", "updated_at")
    list_filter = ("created_at", "updated_at")
    search_fields = ("user_low__username", "user_low__email", "user_high__username", "user_high__email")
    raw_id_fields = ("user_low", "user_high")
    readonly_fields = ("product", "created_at", "updated_at")


@admin.register(Message)
class MessageAdmin(admin.ModelAdmin):
    list_display = ("id", "conversation", "sender", "is_moderated", "moderator", "created_at", "read_at")
    list_filter = ("is_moderated", "created_at")
    search_fields = ("sender__username", "sender__email")
    raw_id_fields = ("conversation", "sender", "moderator")
    readonly_fields = ("created_at", "moderated_at", "read_at")

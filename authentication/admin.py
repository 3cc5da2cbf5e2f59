from django.contrib import admin
from django.contrib.auth.admin import UserAdmin

from .models import CustomUser


@admin.register(CustomUser)
class CustomUserAdmin(UserAdmin):
    list_display = ("id", "email", "username", "role", "is_banned", "date_joined")
    list_filter = ("role", "is_banned", "is_active")
    search_fields = ("email", "username", "first_name", "last_name")
    ordering = ("date_joined",)
    fieldsets = UserAdmin.fieldsets + (("Moderation", {"fields": ("role", "is_banned", "ban_reason")}),)

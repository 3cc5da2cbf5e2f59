from django.contrib import admin

from .models import Category, Listing, ListingFavorite, Server


@admin.register(Server)
class ServerAdmin(admin.ModelAdmin):
    list_display = ('name', 'display_name')
    search_fields = ('name', 'display_name')


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ('name', 'display_name', 'parent', 'icon', 'color')
    list_filter = ('parent',)
    search_fields = ('name', 'display_name')


@admin.register(Listing)
class ListingAdmin(admin.ModelAdmin):
    list_display = ('title', 'owner', 'category', 'server', 'price', 'status', 'created_at')
    list_filter = ('status', 'category', 'server', 'created_at')
    search_fields = ('title', 'description', 'owner__username', 'owner__email')
    raw_id_fields = ('owner', 'moderator')
    # Status changes go through the moderation endpoints so the rules and notifications apply
    readonly_fields = ('status', 'moderator', 'moderator_note', 'created_at', 'updated_at')

    fieldsets = (
        (None, {
            'fields': ('owner', 'category', 'subcategory', 'server', 'title', 'description', 'price')
        }),
        ('Details', {
            'fields': ('images', 'metadata'),
            'classes': ('collapse',)
        }),
        ('Moderation', {
            'fields': ('status', 'moderator', 'moderator_note')
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        })
    )


@admin.register(ListingFavorite)
class ListingFavoriteAdmin(admin.ModelAdmin):
    list_display = ('user', 'listing', 'created_at')
    raw_id_fields = ('user', 'listing')

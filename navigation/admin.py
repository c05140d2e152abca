from django.contrib import admin

from .models import NavigationItem, NavigationShopSettings, NavigationTree


@admin.register(NavigationItem)
class NavigationItemAdmin(admin.ModelAdmin):
    list_display = ("id", "label", "shop_id", "has_unpublished_changes", "created_at")
    list_filter = ("shop_id", "has_unpublished_changes")
    search_fields = ("shop_id",)
    ordering = ("-created_at",)
    readonly_fields = ("created_at", "updated_at")


@admin.register(NavigationTree)
class NavigationTreeAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "shop_id", "has_unpublished_changes", "updated_at")
    list_filter = ("shop_id", "has_unpublished_changes")
    search_fields = ("name", "shop_id")
    ordering = ("shop_id", "name")
    readonly_fields = ("created_at", "updated_at")


@admin.register(NavigationShopSettings)
class NavigationShopSettingsAdmin(admin.ModelAdmin):
    list_display = (
        "shop_id",
        "default_navigation_tree",
        "should_navigation_tree_items_be_admin_only",
        "should_navigation_tree_items_be_publicly_visible",
        "should_navigation_tree_items_be_secondary_nav_only",
    )
    search_fields = ("shop_id",)

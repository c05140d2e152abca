# backend/navigation/models.py
import copy

from django.db import models


def empty_item_data():
    return {
        "url": "",
        "is_url_relative": True,
        "should_open_in_new_window": False,
        "class_names": "",
        "content": [],
    }


class NavigationItem(models.Model):
    """
    A single link that can be placed in any number of navigation trees.

    `draft_data` is what editors change; `data` is what storefronts see.
    Both hold the same document shape:

        {"url": "/about", "is_url_relative": True,
         "should_open_in_new_window": False, "class_names": "",
         "content": [{"language": "en", "value": "About"}]}
    """

    shop_id = models.CharField(max_length=64, db_index=True)
    data = models.JSONField(default=empty_item_data, blank=True)
    draft_data = models.JSONField(default=empty_item_data, blank=True)
    metadata = models.JSONField(default=dict, blank=True)
    has_unpublished_changes = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        verbose_name = "Navigation Item"
        verbose_name_plural = "Navigation Items"

    def __str__(self) -> str:
        return f"{self.label or self.pk} ({self.shop_id})"

    @property
    def label(self) -> str:
        # first content value, good enough for admin lists
        for entry in (self.draft_data or {}).get("content") or []:
            if entry.get("value"):
                return entry["value"]
        return ""

    def publish(self):
        self.data = copy.deepcopy(self.draft_data)
        self.has_unpublished_changes = False


class NavigationTree(models.Model):
    """
    Ordered hierarchy of navigation items for one shop.

    `items` / `draft_items` are nested lists of nodes:

        {"navigation_item_id": 3, "expanded": False, "is_private": False,
         "is_secondary": False, "is_visible": True, "items": [...]}
    """

    shop_id = models.CharField(max_length=64, db_index=True)
    name = models.CharField(max_length=255)
    items = models.JSONField(default=list, blank=True)
    draft_items = models.JSONField(default=list, blank=True)
    has_unpublished_changes = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["shop_id", "name"]
        verbose_name = "Navigation Tree"
        verbose_name_plural = "Navigation Trees"

    def __str__(self) -> str:
        return f"{self.name} ({self.shop_id})"


class NavigationShopSettings(models.Model):
    shop_id = models.CharField(max_length=64, unique=True)
    default_navigation_tree = models.ForeignKey(
        NavigationTree,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="default_for_shops",
    )

    # defaults for tree nodes saved without explicit flags
    should_navigation_tree_items_be_admin_only = models.BooleanField(
        default=False,
        help_text="New tree items are private (admin only) unless set otherwise.",
    )
    should_navigation_tree_items_be_publicly_visible = models.BooleanField(
        default=True,
        help_text="New tree items are visible to anonymous visitors unless set otherwise.",
    )
    should_navigation_tree_items_be_secondary_nav_only = models.BooleanField(
        default=False,
        help_text="New tree items only show in secondary navigation unless set otherwise.",
    )

    class Meta:
        verbose_name = "Navigation Shop Settings"
        verbose_name_plural = "Navigation Shop Settings"

    def __str__(self) -> str:
        return self.shop_id

    def tree_item_defaults(self) -> dict:
        return {
            "expanded": False,
            "is_private": self.should_navigation_tree_items_be_admin_only,
            "is_secondary": self.should_navigation_tree_items_be_secondary_nav_only,
            "is_visible": self.should_navigation_tree_items_be_publicly_visible,
        }

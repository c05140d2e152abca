# backend/navigation/services.py
"""
Reads and writes for navigation items, trees and shop settings.

Every write runs in a single transaction and locks the rows it touches,
so a failed call leaves nothing half-applied.
"""
import copy
import logging
from dataclasses import dataclass, field
from typing import Optional

from django.conf import settings
from django.db import transaction

from .exceptions import (
    NavigationItemNotFound,
    NavigationTreeNotFound,
    NavigationValidationError,
)
from .models import NavigationItem, NavigationShopSettings, NavigationTree
from .permissions import can_manage_navigation
from .serializers import NavigationItemDataSerializer
from .trees import (
    collect_item_ids,
    filter_tree_items,
    normalize_tree_items,
    parse_item_id,
    prune_tree_items,
    validate_tree_items,
)

logger = logging.getLogger(__name__)

SORT_FIELDS = {
    "_id": "id",
    "createdAt": "created_at",
}


# ---------------------------------------------------------------------------
# Shop settings
# ---------------------------------------------------------------------------


def get_shop_settings(shop_id: str) -> NavigationShopSettings:
    """Saved settings for the shop, or an unsaved instance with defaults."""
    found = NavigationShopSettings.objects.filter(shop_id=shop_id).first()
    return found or NavigationShopSettings(shop_id=shop_id)


def update_shop_settings(shop_id: str, **updates) -> NavigationShopSettings:
    """
    Apply non-None `updates`. `default_navigation_tree_id` must name a tree
    of the same shop.
    """
    with transaction.atomic():
        shop_settings, _ = NavigationShopSettings.objects.select_for_update().get_or_create(
            shop_id=shop_id
        )

        tree_id = updates.pop("default_navigation_tree_id", None)
        if tree_id is not None:
            tree = _find_tree(tree_id, shop_id=shop_id)
            if tree is None:
                raise NavigationValidationError(
                    f"Navigation tree {tree_id} does not exist in shop {shop_id}"
                )
            shop_settings.default_navigation_tree = tree

        for name, value in updates.items():
            if value is not None:
                setattr(shop_settings, name, value)
        shop_settings.save()

    logger.info("Updated navigation settings for shop %s", shop_id)
    return shop_settings


# ---------------------------------------------------------------------------
# Navigation items
# ---------------------------------------------------------------------------


def validate_item_data(data) -> dict:
    serializer = NavigationItemDataSerializer(data=data or {})
    if not serializer.is_valid():
        logger.warning("Rejected navigation item data: %s", serializer.errors)
        raise NavigationValidationError.from_serializer_errors(serializer.errors)
    return dict(serializer.validated_data)


def _validate_metadata(metadata):
    if metadata is not None and not isinstance(metadata, dict):
        raise NavigationValidationError("metadata: must be an object")
    return metadata


def create_navigation_item(shop_id: str, draft_data=None, metadata=None) -> NavigationItem:
    if not shop_id:
        raise NavigationValidationError("shopId: This field is required.")
    cleaned = validate_item_data(draft_data)
    _validate_metadata(metadata)

    item = NavigationItem.objects.create(
        shop_id=shop_id,
        draft_data=cleaned,
        metadata=metadata or {},
        has_unpublished_changes=False,
    )
    logger.info("Created navigation item %s for shop %s", item.pk, shop_id)
    return item


def _find_item(item_id, shop_id=None, for_update=False) -> Optional[NavigationItem]:
    pk = parse_item_id(item_id)
    if pk is None:
        return None
    qs = NavigationItem.objects.all()
    if for_update:
        qs = qs.select_for_update()
    if shop_id:
        qs = qs.filter(shop_id=shop_id)
    return qs.filter(pk=pk).first()


def get_navigation_item(item_id, shop_id=None) -> Optional[NavigationItem]:
    return _find_item(item_id, shop_id=shop_id)


def update_navigation_item(item_id, draft_data=None, metadata=None, shop_id=None) -> NavigationItem:
    """
    Replace the item's draft data (and metadata, when given). Published
    data is untouched until the owning tree is published.
    """
    cleaned = validate_item_data(draft_data) if draft_data is not None else None
    _validate_metadata(metadata)

    with transaction.atomic():
        item = _find_item(item_id, shop_id=shop_id, for_update=True)
        if item is None:
            raise NavigationItemNotFound(item_id)

        if cleaned is not None:
            item.draft_data = cleaned
            item.has_unpublished_changes = item.draft_data != item.data
        if metadata is not None:
            item.metadata = metadata
        item.save()

    logger.info("Updated navigation item %s", item.pk)
    return item


def delete_navigation_item(item_id, shop_id=None) -> NavigationItem:
    """
    Delete the item and drop it from every tree's draft. Returns the item as
    it was before deletion.
    """
    with transaction.atomic():
        item = _find_item(item_id, shop_id=shop_id, for_update=True)
        if item is None:
            raise NavigationItemNotFound(item_id)

        snapshot = copy.deepcopy(item)
        deleted_pk = item.pk

        trees = NavigationTree.objects.select_for_update().filter(shop_id=item.shop_id)
        for tree in trees:
            draft_items, changed = prune_tree_items(
                tree.draft_items, lambda pk: pk != deleted_pk
            )
            if changed:
                tree.draft_items = draft_items
                tree.has_unpublished_changes = True
                tree.save(update_fields=["draft_items", "has_unpublished_changes", "updated_at"])
                logger.info("Removed navigation item %s from tree %s", deleted_pk, tree.pk)

        item.delete()

    logger.info("Deleted navigation item %s", deleted_pk)
    return snapshot


def navigation_items_for_shop(shop_id: str, sort_by="createdAt", sort_order="desc"):
    try:
        field_name = SORT_FIELDS[sort_by]
    except KeyError:
        raise NavigationValidationError(f"sortBy: unsupported field {sort_by!r}")
    prefix = "-" if sort_order == "desc" else ""
    ordering = [f"{prefix}{field_name}"]
    if field_name != "id":
        ordering.append(f"{prefix}id")
    return NavigationItem.objects.filter(shop_id=shop_id).order_by(*ordering)


# ---------------------------------------------------------------------------
# Navigation trees
# ---------------------------------------------------------------------------


def _find_tree(tree_id, shop_id=None, for_update=False) -> Optional[NavigationTree]:
    pk = parse_item_id(tree_id)
    if pk is None:
        return None
    qs = NavigationTree.objects.all()
    if for_update:
        qs = qs.select_for_update()
    if shop_id:
        qs = qs.filter(shop_id=shop_id)
    return qs.filter(pk=pk).first()


def get_navigation_tree(tree_id, shop_id=None) -> Optional[NavigationTree]:
    return _find_tree(tree_id, shop_id=shop_id)


def get_default_navigation_tree(shop_id: str) -> Optional[NavigationTree]:
    shop_settings = NavigationShopSettings.objects.filter(shop_id=shop_id).first()
    if shop_settings is None:
        return None
    return shop_settings.default_navigation_tree


def clean_tree_items(shop_id: str, raw_items) -> list:
    """
    Normalize draft nodes and check them: no item nested inside itself,
    depth within NAVIGATION_MAX_TREE_DEPTH, every item exists and belongs
    to `shop_id`.
    """
    defaults = get_shop_settings(shop_id).tree_item_defaults()
    try:
        nodes = normalize_tree_items(raw_items, defaults)
        validate_tree_items(nodes, max_depth=getattr(settings, "NAVIGATION_MAX_TREE_DEPTH", 10))
        _check_item_owners(shop_id, collect_item_ids(nodes))
    except NavigationValidationError as exc:
        logger.warning("Rejected navigation tree items for shop %s: %s", shop_id, exc)
        raise
    return nodes


def _check_item_owners(shop_id, ids):
    owners = dict(NavigationItem.objects.filter(pk__in=ids).values_list("id", "shop_id"))

    missing = sorted(ids - set(owners))
    if missing:
        raise NavigationValidationError(
            "Unknown navigation items: " + ", ".join(str(pk) for pk in missing)
        )
    foreign = sorted(pk for pk, owner in owners.items() if owner != shop_id)
    if foreign:
        raise NavigationValidationError(
            "Navigation items belong to another shop: " + ", ".join(str(pk) for pk in foreign)
        )


def create_navigation_tree(shop_id: str, name: str, draft_items=None) -> NavigationTree:
    if not shop_id:
        raise NavigationValidationError("shopId: This field is required.")
    if not (name or "").strip():
        raise NavigationValidationError("name: This field may not be blank.")

    with transaction.atomic():
        nodes = clean_tree_items(shop_id, draft_items)
        tree = NavigationTree.objects.create(
            shop_id=shop_id,
            name=name.strip(),
            draft_items=nodes,
            has_unpublished_changes=bool(nodes),
        )

    logger.info("Created navigation tree %s for shop %s", tree.pk, shop_id)
    return tree


def update_navigation_tree(tree_id, name=None, draft_items=None, shop_id=None) -> NavigationTree:
    with transaction.atomic():
        tree = _find_tree(tree_id, shop_id=shop_id, for_update=True)
        if tree is None:
            raise NavigationTreeNotFound(tree_id)

        if name is not None:
            if not name.strip():
                raise NavigationValidationError("name: This field may not be blank.")
            tree.name = name.strip()
        if draft_items is not None:
            tree.draft_items = clean_tree_items(tree.shop_id, draft_items)
        tree.has_unpublished_changes = tree.draft_items != tree.items
        tree.save()

    logger.info("Updated navigation tree %s", tree.pk)
    return tree


def publish_navigation_changes(tree_id, shop_id=None) -> NavigationTree:
    """
    Copy the tree's draft to its published side, and each referenced item's
    draft data to its published data. Flags on the tree and those items are
    cleared.
    """
    with transaction.atomic():
        tree = _find_tree(tree_id, shop_id=shop_id, for_update=True)
        if tree is None:
            raise NavigationTreeNotFound(tree_id)

        items = list(
            NavigationItem.objects.select_for_update().filter(
                pk__in=collect_item_ids(tree.draft_items)
            )
        )
        existing = {item.pk for item in items}
        draft_items, _ = prune_tree_items(tree.draft_items, lambda pk: pk in existing)

        for item in items:
            item.publish()
            item.save(update_fields=["data", "has_unpublished_changes", "updated_at"])

        tree.draft_items = draft_items
        tree.items = copy.deepcopy(draft_items)
        tree.has_unpublished_changes = False
        tree.save()

    logger.info("Published navigation tree %s (%d items)", tree.pk, len(items))
    return tree


def ensure_default_navigation_tree(shop_id: str, name=None):
    """
    Create the shop's default tree unless one is already set.
    Returns (tree, created).
    """
    with transaction.atomic():
        shop_settings, _ = NavigationShopSettings.objects.select_for_update().get_or_create(
            shop_id=shop_id
        )
        if shop_settings.default_navigation_tree is not None:
            return shop_settings.default_navigation_tree, False

        tree = NavigationTree.objects.create(
            shop_id=shop_id,
            name=name or getattr(settings, "NAVIGATION_DEFAULT_TREE_NAME", "Main Navigation"),
        )
        shop_settings.default_navigation_tree = tree
        shop_settings.save(update_fields=["default_navigation_tree"])

    logger.info("Created default navigation tree %s for shop %s", tree.pk, shop_id)
    return tree, True


# ---------------------------------------------------------------------------
# Reading trees for a caller
# ---------------------------------------------------------------------------


@dataclass
class ResolvedTree:
    """A tree as one caller may see it, with its items loaded."""

    tree: NavigationTree
    items: list
    draft_items: Optional[list]
    items_by_id: dict = field(default_factory=dict)
    can_manage: bool = False


def resolve_tree(tree: NavigationTree, user=None, include_secondary=False) -> ResolvedTree:
    """
    Filter the tree for `user`: drafts and private nodes for navigation
    managers only, hidden nodes for signed-in users only, secondary nodes
    only when asked for. Nodes whose item was deleted are dropped with their
    children moved up.
    """
    can_manage = can_manage_navigation(user)
    is_authenticated = bool(user is not None and user.is_authenticated)
    options = {
        "include_secondary": include_secondary,
        "include_private": can_manage,
        "include_hidden": can_manage or is_authenticated,
    }

    items = filter_tree_items(tree.items, **options)
    draft_items = filter_tree_items(tree.draft_items, **options) if can_manage else None

    ids = collect_item_ids(items) | collect_item_ids(draft_items or [])
    items_by_id = NavigationItem.objects.in_bulk(list(ids))

    items, _ = prune_tree_items(items, lambda pk: pk in items_by_id)
    if draft_items is not None:
        draft_items, _ = prune_tree_items(draft_items, lambda pk: pk in items_by_id)

    return ResolvedTree(
        tree=tree,
        items=items,
        draft_items=draft_items,
        items_by_id=items_by_id,
        can_manage=can_manage,
    )

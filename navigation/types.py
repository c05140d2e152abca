# backend/navigation/types.py
"""GraphQL types, inputs and payloads for navigation."""
import datetime
from enum import Enum
from typing import List, NewType, Optional

import strawberry


def _parse_json_object(value):
    if not isinstance(value, dict):
        raise ValueError("JSONObject must be an object")
    return value


JSONObject = NewType("JSONObject", object)
ConnectionCursor = NewType("ConnectionCursor", str)

# passed to the schema as StrawberryConfig(scalar_map=SCALAR_MAP)
SCALAR_MAP = {
    JSONObject: strawberry.scalar(
        name="JSONObject",
        description="A free-form JSON object.",
        serialize=lambda value: value,
        parse_value=_parse_json_object,
    ),
    ConnectionCursor: strawberry.scalar(
        name="ConnectionCursor",
        description="An opaque cursor marking a position in a connection.",
        serialize=str,
        parse_value=str,
    ),
}


@strawberry.enum
class SortOrder(Enum):
    asc = "asc"
    desc = "desc"


@strawberry.enum
class NavigationItemSortByField(Enum):
    _id = "_id"
    createdAt = "createdAt"


# ---------------------------------------------------------------------------
# Output types
# ---------------------------------------------------------------------------


@strawberry.type
class NavigationItemContent:
    language: str
    value: Optional[str] = None


@strawberry.type
class NavigationItemData:
    url: Optional[str] = None
    is_url_relative: Optional[bool] = None
    should_open_in_new_window: Optional[bool] = None
    class_names: Optional[str] = None
    content: Optional[List[NavigationItemContent]] = None

    # language the surrounding query asked for
    language: strawberry.Private[Optional[str]] = None

    @strawberry.field(
        description="Content value for the given language, or the language of the enclosing query."
    )
    def content_for_language(self, language: Optional[str] = None) -> Optional[str]:
        wanted = language or self.language
        if not wanted:
            return None
        for entry in self.content or []:
            if entry.language.lower() == wanted.lower():
                return entry.value
        return None

    @classmethod
    def from_document(cls, data, language=None):
        if data is None:
            return None
        return cls(
            url=data.get("url"),
            is_url_relative=data.get("is_url_relative"),
            should_open_in_new_window=data.get("should_open_in_new_window"),
            class_names=data.get("class_names"),
            content=[
                NavigationItemContent(language=entry["language"], value=entry.get("value"))
                for entry in data.get("content") or []
            ],
            language=language,
        )


@strawberry.type
class NavigationItem:
    id: strawberry.ID = strawberry.field(name="_id")
    shop_id: strawberry.ID
    created_at: datetime.datetime
    data: Optional[NavigationItemData] = None
    draft_data: Optional[NavigationItemData] = None
    has_unpublished_changes: Optional[bool] = None
    metadata: Optional[JSONObject] = None

    @classmethod
    def from_model(cls, item, language=None, include_drafts=True):
        return cls(
            id=strawberry.ID(str(item.pk)),
            shop_id=strawberry.ID(item.shop_id),
            created_at=item.created_at,
            data=NavigationItemData.from_document(item.data, language),
            draft_data=(
                NavigationItemData.from_document(item.draft_data, language)
                if include_drafts
                else None
            ),
            has_unpublished_changes=item.has_unpublished_changes,
            metadata=item.metadata,
        )


@strawberry.type
class NavigationTreeItem:
    navigation_item: NavigationItem
    expanded: Optional[bool] = None
    is_private: Optional[bool] = None
    is_secondary: Optional[bool] = None
    is_visible: Optional[bool] = None
    items: Optional[List["NavigationTreeItem"]] = None


@strawberry.type
class NavigationTree:
    id: strawberry.ID = strawberry.field(name="_id")
    shop_id: strawberry.ID
    name: str
    items: List[NavigationTreeItem]
    draft_items: Optional[List[NavigationTreeItem]] = None
    has_unpublished_changes: Optional[bool] = None

    @classmethod
    def from_resolved(cls, resolved, language=None):
        """Build from a services.ResolvedTree."""

        def build(nodes):
            return [
                NavigationTreeItem(
                    navigation_item=NavigationItem.from_model(
                        resolved.items_by_id[node["navigation_item_id"]],
                        language=language,
                        include_drafts=resolved.can_manage,
                    ),
                    expanded=node.get("expanded"),
                    is_private=node.get("is_private"),
                    is_secondary=node.get("is_secondary"),
                    is_visible=node.get("is_visible"),
                    items=build(node.get("items") or []),
                )
                for node in nodes
            ]

        tree = resolved.tree
        return cls(
            id=strawberry.ID(str(tree.pk)),
            shop_id=strawberry.ID(tree.shop_id),
            name=tree.name,
            items=build(resolved.items),
            draft_items=build(resolved.draft_items) if resolved.draft_items is not None else None,
            has_unpublished_changes=tree.has_unpublished_changes,
        )


@strawberry.type
class PageInfo:
    has_next_page: bool
    has_previous_page: bool
    start_cursor: Optional[ConnectionCursor] = None
    end_cursor: Optional[ConnectionCursor] = None


@strawberry.type
class NavigationItemEdge:
    cursor: ConnectionCursor
    node: Optional[NavigationItem] = None


@strawberry.type
class NavigationItemConnection:
    page_info: PageInfo
    total_count: int
    edges: Optional[List[Optional[NavigationItemEdge]]] = None
    nodes: Optional[List[Optional[NavigationItem]]] = None

    @classmethod
    def from_page(cls, page):
        edges = [
            NavigationItemEdge(cursor=cursor, node=NavigationItem.from_model(item))
            for cursor, item in page.edges
        ]
        return cls(
            page_info=PageInfo(
                has_next_page=page.has_next_page,
                has_previous_page=page.has_previous_page,
                start_cursor=page.start_cursor,
                end_cursor=page.end_cursor,
            ),
            total_count=page.total_count,
            edges=edges,
            nodes=[edge.node for edge in edges],
        )


@strawberry.type
class NavigationShopSettings:
    shop_id: strawberry.ID
    default_navigation_tree_id: Optional[strawberry.ID] = None
    should_navigation_tree_items_be_admin_only: bool = False
    should_navigation_tree_items_be_publicly_visible: bool = True
    should_navigation_tree_items_be_secondary_nav_only: bool = False

    @classmethod
    def from_model(cls, shop_settings):
        tree_id = shop_settings.default_navigation_tree_id
        return cls(
            shop_id=strawberry.ID(shop_settings.shop_id),
            default_navigation_tree_id=strawberry.ID(str(tree_id)) if tree_id else None,
            should_navigation_tree_items_be_admin_only=shop_settings.should_navigation_tree_items_be_admin_only,
            should_navigation_tree_items_be_publicly_visible=shop_settings.should_navigation_tree_items_be_publicly_visible,
            should_navigation_tree_items_be_secondary_nav_only=shop_settings.should_navigation_tree_items_be_secondary_nav_only,
        )


# ---------------------------------------------------------------------------
# Inputs
# ---------------------------------------------------------------------------


@strawberry.input
class NavigationItemContentInput:
    language: str
    value: str


@strawberry.input
class NavigationItemDataInput:
    url: Optional[str] = None
    is_url_relative: Optional[bool] = None
    should_open_in_new_window: Optional[bool] = None
    class_names: Optional[str] = None
    content: Optional[List[NavigationItemContentInput]] = None


@strawberry.input
class NavigationItemInput:
    shop_id: Optional[strawberry.ID] = None
    draft_data: Optional[NavigationItemDataInput] = None
    metadata: Optional[JSONObject] = None


@strawberry.input
class CreateNavigationItemInput:
    navigation_item: NavigationItemInput
    client_mutation_id: Optional[str] = None


@strawberry.input
class UpdateNavigationItemInput:
    id: strawberry.ID = strawberry.field(name="_id")
    navigation_item: NavigationItemInput
    shop_id: Optional[strawberry.ID] = None
    client_mutation_id: Optional[str] = None


@strawberry.input
class DeleteNavigationItemInput:
    id: strawberry.ID = strawberry.field(name="_id")
    shop_id: Optional[strawberry.ID] = None
    client_mutation_id: Optional[str] = None


@strawberry.input
class NavigationTreeItemInput:
    navigation_item_id: strawberry.ID
    expanded: Optional[bool] = None
    is_private: Optional[bool] = None
    is_secondary: Optional[bool] = None
    is_visible: Optional[bool] = None
    items: Optional[List["NavigationTreeItemInput"]] = None


@strawberry.input
class NavigationTreeInput:
    name: Optional[str] = None
    draft_items: Optional[List[NavigationTreeItemInput]] = None


@strawberry.input
class CreateNavigationTreeInput:
    shop_id: strawberry.ID
    name: str
    draft_items: Optional[List[NavigationTreeItemInput]] = None
    client_mutation_id: Optional[str] = None


@strawberry.input
class UpdateNavigationTreeInput:
    id: strawberry.ID = strawberry.field(name="_id")
    navigation_tree: NavigationTreeInput
    shop_id: Optional[strawberry.ID] = None
    client_mutation_id: Optional[str] = None


@strawberry.input
class PublishNavigationChangesInput:
    id: strawberry.ID = strawberry.field(name="_id")
    shop_id: Optional[strawberry.ID] = None
    client_mutation_id: Optional[str] = None


@strawberry.input
class NavigationShopSettingsUpdates:
    default_navigation_tree_id: Optional[strawberry.ID] = None
    should_navigation_tree_items_be_admin_only: Optional[bool] = None
    should_navigation_tree_items_be_publicly_visible: Optional[bool] = None
    should_navigation_tree_items_be_secondary_nav_only: Optional[bool] = None


@strawberry.input
class UpdateNavigationShopSettingsInput:
    shop_id: strawberry.ID
    settings_updates: NavigationShopSettingsUpdates
    client_mutation_id: Optional[str] = None


# ---------------------------------------------------------------------------
# Payloads
# ---------------------------------------------------------------------------


@strawberry.type
class CreateNavigationItemPayload:
    navigation_item: Optional[NavigationItem] = None
    client_mutation_id: Optional[str] = None


@strawberry.type
class UpdateNavigationItemPayload:
    navigation_item: Optional[NavigationItem] = None
    client_mutation_id: Optional[str] = None


@strawberry.type
class DeleteNavigationItemPayload:
    navigation_item: Optional[NavigationItem] = None
    client_mutation_id: Optional[str] = None


@strawberry.type
class CreateNavigationTreePayload:
    navigation_tree: Optional[NavigationTree] = None
    client_mutation_id: Optional[str] = None


@strawberry.type
class UpdateNavigationTreePayload:
    navigation_tree: Optional[NavigationTree] = None
    client_mutation_id: Optional[str] = None


@strawberry.type
class PublishNavigationChangesPayload:
    navigation_tree: Optional[NavigationTree] = None
    client_mutation_id: Optional[str] = None


@strawberry.type
class UpdateNavigationShopSettingsPayload:
    settings: Optional[NavigationShopSettings] = None
    client_mutation_id: Optional[str] = None

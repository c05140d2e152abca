# backend/navigation/schema.py
import dataclasses
from typing import Optional

import strawberry
from strawberry.types import Info

from . import services
from .exceptions import NavigationValidationError
from .pagination import paginate
from .permissions import IsNavigationManager, get_request_user
from .types import (
    ConnectionCursor,
    CreateNavigationItemInput,
    CreateNavigationItemPayload,
    CreateNavigationTreeInput,
    CreateNavigationTreePayload,
    DeleteNavigationItemInput,
    DeleteNavigationItemPayload,
    NavigationItem,
    NavigationItemConnection,
    NavigationItemSortByField,
    NavigationShopSettings,
    NavigationTree,
    PublishNavigationChangesInput,
    PublishNavigationChangesPayload,
    SortOrder,
    UpdateNavigationItemInput,
    UpdateNavigationItemPayload,
    UpdateNavigationShopSettingsInput,
    UpdateNavigationShopSettingsPayload,
    UpdateNavigationTreeInput,
    UpdateNavigationTreePayload,
)


def _as_dict(value):
    """Input object -> plain dict without unset (None) fields."""
    if value is None:
        return None
    return {key: item for key, item in dataclasses.asdict(value).items() if item is not None}


def _as_list(values):
    if values is None:
        return None
    return [dataclasses.asdict(value) for value in values]


def _shop_guard(outer_shop_id, item_shop_id):
    """
    Shop an update is scoped to. `navigationItem.shopId` scopes it too, and
    must agree with the input-level `shopId` when both are given.
    """
    if outer_shop_id and item_shop_id and outer_shop_id != item_shop_id:
        raise NavigationValidationError(
            f"shopId: {outer_shop_id!r} conflicts with navigationItem.shopId {item_shop_id!r}"
        )
    return outer_shop_id or item_shop_id


def _tree_for_editor(info: Info, tree, language=None) -> NavigationTree:
    # editors get the whole tree, secondary nodes included
    resolved = services.resolve_tree(tree, user=get_request_user(info), include_secondary=True)
    return NavigationTree.from_resolved(resolved, language=language)


@strawberry.type
class Query:
    @strawberry.field(description="A navigation tree with its content resolved for `language`.")
    def navigation_tree_by_id(
        self,
        info: Info,
        id: strawberry.ID,
        language: str,
        should_include_secondary: bool = False,
        shop_id: Optional[strawberry.ID] = None,
    ) -> Optional[NavigationTree]:
        tree = services.get_navigation_tree(id, shop_id=shop_id)
        if tree is None:
            return None
        resolved = services.resolve_tree(
            tree,
            user=get_request_user(info),
            include_secondary=should_include_secondary,
        )
        return NavigationTree.from_resolved(resolved, language=language)

    @strawberry.field(description="The shop's default navigation tree.")
    def default_navigation_tree(
        self,
        info: Info,
        shop_id: strawberry.ID,
        language: str,
        should_include_secondary: bool = False,
    ) -> Optional[NavigationTree]:
        tree = services.get_default_navigation_tree(shop_id)
        if tree is None:
            return None
        resolved = services.resolve_tree(
            tree,
            user=get_request_user(info),
            include_secondary=should_include_secondary,
        )
        return NavigationTree.from_resolved(resolved, language=language)

    @strawberry.field(permission_classes=[IsNavigationManager])
    def navigation_items_by_shop_id(
        self,
        shop_id: strawberry.ID,
        after: Optional[ConnectionCursor] = None,
        before: Optional[ConnectionCursor] = None,
        first: Optional[int] = None,
        last: Optional[int] = None,
        sort_order: SortOrder = SortOrder.desc,
        sort_by: NavigationItemSortByField = NavigationItemSortByField.createdAt,
    ) -> NavigationItemConnection:
        queryset = services.navigation_items_for_shop(
            shop_id, sort_by=sort_by.value, sort_order=sort_order.value
        )
        page = paginate(queryset, first=first, last=last, after=after, before=before)
        return NavigationItemConnection.from_page(page)

    @strawberry.field(permission_classes=[IsNavigationManager])
    def navigation_shop_settings(self, shop_id: strawberry.ID) -> NavigationShopSettings:
        return NavigationShopSettings.from_model(services.get_shop_settings(shop_id))


@strawberry.type
class Mutation:
    @strawberry.mutation(permission_classes=[IsNavigationManager])
    def create_navigation_item(self, input: CreateNavigationItemInput) -> CreateNavigationItemPayload:
        navigation_item = input.navigation_item
        item = services.create_navigation_item(
            shop_id=navigation_item.shop_id,
            draft_data=_as_dict(navigation_item.draft_data),
            metadata=navigation_item.metadata,
        )
        return CreateNavigationItemPayload(
            navigation_item=NavigationItem.from_model(item),
            client_mutation_id=input.client_mutation_id,
        )

    @strawberry.mutation(permission_classes=[IsNavigationManager])
    def update_navigation_item(self, input: UpdateNavigationItemInput) -> UpdateNavigationItemPayload:
        navigation_item = input.navigation_item
        item = services.update_navigation_item(
            input.id,
            draft_data=_as_dict(navigation_item.draft_data),
            metadata=navigation_item.metadata,
            shop_id=_shop_guard(input.shop_id, navigation_item.shop_id),
        )
        return UpdateNavigationItemPayload(
            navigation_item=NavigationItem.from_model(item),
            client_mutation_id=input.client_mutation_id,
        )

    @strawberry.mutation(permission_classes=[IsNavigationManager])
    def delete_navigation_item(self, input: DeleteNavigationItemInput) -> DeleteNavigationItemPayload:
        item = services.delete_navigation_item(input.id, shop_id=input.shop_id)
        return DeleteNavigationItemPayload(
            navigation_item=NavigationItem.from_model(item),
            client_mutation_id=input.client_mutation_id,
        )

    @strawberry.mutation(permission_classes=[IsNavigationManager])
    def create_navigation_tree(self, info: Info, input: CreateNavigationTreeInput) -> CreateNavigationTreePayload:
        tree = services.create_navigation_tree(
            shop_id=input.shop_id,
            name=input.name,
            draft_items=_as_list(input.draft_items),
        )
        return CreateNavigationTreePayload(
            navigation_tree=_tree_for_editor(info, tree),
            client_mutation_id=input.client_mutation_id,
        )

    @strawberry.mutation(permission_classes=[IsNavigationManager])
    def update_navigation_tree(self, info: Info, input: UpdateNavigationTreeInput) -> UpdateNavigationTreePayload:
        navigation_tree = input.navigation_tree
        tree = services.update_navigation_tree(
            input.id,
            name=navigation_tree.name,
            draft_items=_as_list(navigation_tree.draft_items),
            shop_id=input.shop_id,
        )
        return UpdateNavigationTreePayload(
            navigation_tree=_tree_for_editor(info, tree),
            client_mutation_id=input.client_mutation_id,
        )

    @strawberry.mutation(permission_classes=[IsNavigationManager])
    def publish_navigation_changes(
        self, info: Info, input: PublishNavigationChangesInput
    ) -> PublishNavigationChangesPayload:
        tree = services.publish_navigation_changes(input.id, shop_id=input.shop_id)
        return PublishNavigationChangesPayload(
            navigation_tree=_tree_for_editor(info, tree),
            client_mutation_id=input.client_mutation_id,
        )

    @strawberry.mutation(permission_classes=[IsNavigationManager])
    def update_navigation_shop_settings(
        self, input: UpdateNavigationShopSettingsInput
    ) -> UpdateNavigationShopSettingsPayload:
        shop_settings = services.update_shop_settings(
            input.shop_id, **dataclasses.asdict(input.settings_updates)
        )
        return UpdateNavigationShopSettingsPayload(
            settings=NavigationShopSettings.from_model(shop_settings),
            client_mutation_id=input.client_mutation_id,
        )

"""End-to-end tests for the navigation GraphQL schema."""

import pytest

from config.schema import schema
from navigation import services
from navigation.models import NavigationItem, NavigationTree
from navigation.pagination import offset_to_cursor

pytestmark = pytest.mark.django_db


CREATE_ITEM = """
mutation CreateItem($input: CreateNavigationItemInput!) {
  createNavigationItem(input: $input) {
    clientMutationId
    navigationItem {
      _id
      shopId
      hasUnpublishedChanges
      metadata
      draftData {
        url
        isUrlRelative
        shouldOpenInNewWindow
        classNames
        content { language value }
        contentForLanguage(language: "en")
      }
    }
  }
}
"""

UPDATE_ITEM = """
mutation UpdateItem($input: UpdateNavigationItemInput!) {
  updateNavigationItem(input: $input) {
    clientMutationId
    navigationItem {
      _id
      hasUnpublishedChanges
      draftData { url content { language value } }
      data { url }
    }
  }
}
"""

DELETE_ITEM = """
mutation DeleteItem($input: DeleteNavigationItemInput!) {
  deleteNavigationItem(input: $input) {
    clientMutationId
    navigationItem { _id draftData { contentForLanguage(language: "en") } }
  }
}
"""

UPDATE_TREE = """
mutation UpdateTree($input: UpdateNavigationTreeInput!) {
  updateNavigationTree(input: $input) {
    clientMutationId
    navigationTree {
      _id
      name
      hasUnpublishedChanges
      items { navigationItem { _id } }
      draftItems {
        isSecondary
        navigationItem { _id }
        items { navigationItem { _id } }
      }
    }
  }
}
"""

PUBLISH = """
mutation Publish($input: PublishNavigationChangesInput!) {
  publishNavigationChanges(input: $input) {
    clientMutationId
    navigationTree {
      hasUnpublishedChanges
      items {
        navigationItem { _id hasUnpublishedChanges data { url } }
        items { navigationItem { _id hasUnpublishedChanges } }
      }
    }
  }
}
"""

TREE_BY_ID = """
query Tree($id: ID!, $language: String!, $secondary: Boolean) {
  navigationTreeById(id: $id, language: $language, shouldIncludeSecondary: $secondary) {
    _id
    shopId
    name
    hasUnpublishedChanges
    items {
      isSecondary
      isPrivate
      navigationItem {
        _id
        data { url contentForLanguage }
        draftData { url }
      }
      items {
        isSecondary
        navigationItem { _id data { contentForLanguage } }
      }
    }
    draftItems { navigationItem { _id } }
  }
}
"""

TREE_DEFAULT_ARGS = """
query Tree($id: ID!) {
  navigationTreeById(id: $id, language: "en") {
    items { navigationItem { _id } items { navigationItem { _id } } }
  }
}
"""

ITEMS_BY_SHOP = """
query Items($shopId: ID!, $first: Int, $last: Int, $after: ConnectionCursor,
            $before: ConnectionCursor, $sortOrder: SortOrder, $sortBy: NavigationItemSortByField) {
  navigationItemsByShopId(shopId: $shopId, first: $first, last: $last, after: $after,
                          before: $before, sortOrder: $sortOrder, sortBy: $sortBy) {
    totalCount
    pageInfo { hasNextPage hasPreviousPage startCursor endCursor }
    edges { cursor node { _id } }
    nodes { _id draftData { contentForLanguage(language: "en") } }
  }
}
"""


def node(item, children=None, **flags):
    return {"navigationItemId": str(item.pk), **flags, "items": children or []}


def stored_node(item, children=None, **flags):
    return {"navigation_item_id": str(item.pk), **flags, "items": children or []}


class TestCreateNavigationItem:
    def test_scenario_create_with_english_content(self, execute):
        result = execute(
            CREATE_ITEM,
            {
                "input": {
                    "clientMutationId": "abc-1",
                    "navigationItem": {
                        "shopId": "shop-1",
                        "draftData": {"content": [{"language": "en", "value": "Home"}]},
                        "metadata": {"icon": "house"},
                    },
                }
            },
        )

        assert result.errors is None
        payload = result.data["createNavigationItem"]
        assert payload["clientMutationId"] == "abc-1"
        item = payload["navigationItem"]
        assert item["shopId"] == "shop-1"
        assert item["hasUnpublishedChanges"] is False
        assert item["metadata"] == {"icon": "house"}
        assert item["draftData"] == {
            "url": "",
            "isUrlRelative": True,
            "shouldOpenInNewWindow": False,
            "classNames": "",
            "content": [{"language": "en", "value": "Home"}],
            "contentForLanguage": "Home",
        }
        assert NavigationItem.objects.filter(pk=int(item["_id"])).exists()

    def test_duplicate_language_is_a_validation_error(self, execute):
        result = execute(
            CREATE_ITEM,
            {
                "input": {
                    "navigationItem": {
                        "shopId": "shop-1",
                        "draftData": {
                            "content": [
                                {"language": "en", "value": "Home"},
                                {"language": "en", "value": "Start"},
                            ]
                        },
                    }
                }
            },
        )

        assert result.errors
        assert "Only one content entry is allowed per language" in result.errors[0].message
        assert NavigationItem.objects.count() == 0

    def test_metadata_must_be_an_object(self, execute):
        result = execute(
            CREATE_ITEM,
            {"input": {"navigationItem": {"shopId": "shop-1", "metadata": [1, 2]}}},
        )

        assert result.errors
        assert NavigationItem.objects.count() == 0

    def test_requires_manage_permission(self, execute, anonymous, staff_without_permission):
        variables = {"input": {"navigationItem": {"shopId": "shop-1"}}}

        for user in (anonymous, staff_without_permission):
            result = execute(CREATE_ITEM, variables, user=user)
            assert result.errors[0].message == "Access denied"

        assert NavigationItem.objects.count() == 0


class TestUpdateAndDeleteNavigationItem:
    def test_update_sets_unpublished_changes(self, execute, make_item):
        item = make_item("Home")

        result = execute(
            UPDATE_ITEM,
            {
                "input": {
                    "_id": str(item.pk),
                    "clientMutationId": "u-1",
                    "navigationItem": {
                        "draftData": {
                            "url": "/start",
                            "content": [{"language": "en", "value": "Start"}],
                        }
                    },
                }
            },
        )

        assert result.errors is None
        payload = result.data["updateNavigationItem"]
        assert payload["clientMutationId"] == "u-1"
        assert payload["navigationItem"]["hasUnpublishedChanges"] is True
        assert payload["navigationItem"]["draftData"]["url"] == "/start"
        assert payload["navigationItem"]["data"]["url"] == ""

    def test_metadata_only_update_is_not_a_draft_change(self, execute, make_item):
        item = make_item("Home")

        result = execute(
            UPDATE_ITEM,
            {
                "input": {
                    "_id": str(item.pk),
                    "navigationItem": {"metadata": {"badge": "new"}},
                }
            },
        )

        assert result.errors is None
        assert result.data["updateNavigationItem"]["navigationItem"]["hasUnpublishedChanges"] is False
        item.refresh_from_db()
        assert item.metadata == {"badge": "new"}
        assert item.has_unpublished_changes is False

    def test_update_missing_item(self, execute):
        result = execute(
            UPDATE_ITEM,
            {"input": {"_id": "9999", "navigationItem": {"draftData": {"url": "/x"}}}},
        )

        assert result.data is None
        assert "Navigation item not found: 9999" in result.errors[0].message

    def test_delete_returns_snapshot(self, execute, make_item):
        item = make_item("Sale")

        result = execute(
            DELETE_ITEM, {"input": {"_id": str(item.pk), "clientMutationId": "d-1"}}
        )

        assert result.errors is None
        payload = result.data["deleteNavigationItem"]
        assert payload["clientMutationId"] == "d-1"
        assert payload["navigationItem"] == {
            "_id": str(item.pk),
            "draftData": {"contentForLanguage": "Sale"},
        }
        assert not NavigationItem.objects.filter(pk=item.pk).exists()

    def test_delete_missing_item(self, execute):
        result = execute(DELETE_ITEM, {"input": {"_id": "424242"}})

        assert "Navigation item not found" in result.errors[0].message


class TestUpdateNavigationTree:
    def test_update_tree_draft(self, execute, make_item, make_tree):
        home = make_item("Home")
        shoes = make_item("Shoes")
        tree = make_tree()

        result = execute(
            UPDATE_TREE,
            {
                "input": {
                    "_id": str(tree.pk),
                    "clientMutationId": "t-1",
                    "navigationTree": {
                        "name": "Header",
                        "draftItems": [node(home, [node(shoes, isSecondary=True)])],
                    },
                }
            },
        )

        assert result.errors is None
        payload = result.data["updateNavigationTree"]
        assert payload["clientMutationId"] == "t-1"
        updated = payload["navigationTree"]
        assert updated["name"] == "Header"
        assert updated["hasUnpublishedChanges"] is True
        assert updated["items"] == []
        assert updated["draftItems"] == [
            {
                "isSecondary": False,
                "navigationItem": {"_id": str(home.pk)},
                "items": [{"navigationItem": {"_id": str(shoes.pk)}}],
            }
        ]

    def test_cycle_is_rejected_and_nothing_changes(self, execute, make_item, make_tree):
        home = make_item("Home")
        tree = make_tree([stored_node(home)])

        result = execute(
            UPDATE_TREE,
            {
                "input": {
                    "_id": str(tree.pk),
                    "navigationTree": {"name": "Changed", "draftItems": [node(home, [node(home)])]},
                }
            },
        )

        assert "nested inside itself" in result.errors[0].message
        tree.refresh_from_db()
        assert tree.name == "Main Navigation"

    def test_unknown_item_is_rejected(self, execute, make_tree):
        tree = make_tree()

        result = execute(
            UPDATE_TREE,
            {
                "input": {
                    "_id": str(tree.pk),
                    "navigationTree": {"draftItems": [{"navigationItemId": "777"}]},
                }
            },
        )

        assert "Unknown navigation items: 777" in result.errors[0].message

    def test_missing_tree(self, execute):
        result = execute(
            UPDATE_TREE, {"input": {"_id": "31337", "navigationTree": {"name": "x"}}}
        )

        assert "Navigation tree not found: 31337" in result.errors[0].message


class TestPublishNavigationChanges:
    def test_publish_copies_draft_and_clears_flags(self, execute, make_item, make_tree):
        parent = make_item("Shop", url="/shop")
        child = make_item("Shoes", url="/shoes")
        tree = make_tree([stored_node(parent, [stored_node(child)])])
        services.update_navigation_item(child.pk, draft_data={"url": "/shoes-new"})

        result = execute(PUBLISH, {"input": {"_id": str(tree.pk), "clientMutationId": "p-1"}})

        assert result.errors is None
        payload = result.data["publishNavigationChanges"]
        assert payload["clientMutationId"] == "p-1"
        published = payload["navigationTree"]
        assert published["hasUnpublishedChanges"] is False
        assert published["items"] == [
            {
                "navigationItem": {
                    "_id": str(parent.pk),
                    "hasUnpublishedChanges": False,
                    "data": {"url": "/shop"},
                },
                "items": [
                    {"navigationItem": {"_id": str(child.pk), "hasUnpublishedChanges": False}}
                ],
            }
        ]
        child.refresh_from_db()
        assert child.data["url"] == "/shoes-new"

        tree.refresh_from_db()
        assert tree.items == tree.draft_items

    def test_publish_missing_tree(self, execute):
        result = execute(PUBLISH, {"input": {"_id": "8080"}})

        assert "Navigation tree not found" in result.errors[0].message


class TestNavigationTreeById:
    @pytest.fixture
    def published_tree(self, make_item, make_tree):
        home = make_item("Home", url="/")
        help_ = make_item("Help", url="/help")
        faq = make_item("FAQ", url="/faq")
        admin_only = make_item("Reports", url="/reports")
        tree = make_tree(
            [
                stored_node(home, [stored_node(faq, is_secondary=True)]),
                stored_node(help_, [stored_node(faq)], is_secondary=True),
                stored_node(admin_only, is_private=True),
            ],
            publish=True,
        )
        return tree, home, help_, faq, admin_only

    def test_secondary_nodes_excluded_by_default(self, execute, published_tree, anonymous):
        tree, home, *_ = published_tree

        result = execute(TREE_DEFAULT_ARGS, {"id": str(tree.pk)}, user=anonymous)

        assert result.errors is None
        assert result.data["navigationTreeById"]["items"] == [
            {"navigationItem": {"_id": str(home.pk)}, "items": []}
        ]

    def test_include_secondary(self, execute, published_tree, anonymous):
        tree, home, help_, faq, _ = published_tree

        result = execute(
            TREE_BY_ID,
            {"id": str(tree.pk), "language": "en", "secondary": True},
            user=anonymous,
        )

        items = result.data["navigationTreeById"]["items"]
        assert [entry["navigationItem"]["_id"] for entry in items] == [str(home.pk), str(help_.pk)]
        assert items[0]["items"][0]["navigationItem"] == {
            "_id": str(faq.pk),
            "data": {"contentForLanguage": "FAQ"},
        }

    def test_anonymous_caller_gets_no_drafts_or_private_nodes(self, execute, published_tree, anonymous):
        tree, home, *_ = published_tree

        result = execute(TREE_BY_ID, {"id": str(tree.pk), "language": "en"}, user=anonymous)

        found = result.data["navigationTreeById"]
        assert found["draftItems"] is None
        assert len(found["items"]) == 1
        assert found["items"][0]["navigationItem"]["draftData"] is None
        assert found["items"][0]["navigationItem"]["data"] == {
            "url": "/",
            "contentForLanguage": "Home",
        }

    def test_manager_sees_private_nodes_and_drafts(self, execute, published_tree):
        tree, home, _, _, admin_only = published_tree

        result = execute(TREE_BY_ID, {"id": str(tree.pk), "language": "en"})

        found = result.data["navigationTreeById"]
        ids = [entry["navigationItem"]["_id"] for entry in found["items"]]
        assert ids == [str(home.pk), str(admin_only.pk)]
        assert found["items"][1]["isPrivate"] is True
        assert [entry["navigationItem"]["_id"] for entry in found["draftItems"]] == ids
        assert found["items"][0]["navigationItem"]["draftData"] == {"url": "/"}

    def test_missing_language_content_is_null(self, execute, published_tree):
        tree, *_ = published_tree

        result = execute(TREE_BY_ID, {"id": str(tree.pk), "language": "de"})

        assert result.errors is None
        item = result.data["navigationTreeById"]["items"][0]["navigationItem"]
        assert item["data"]["contentForLanguage"] is None

    def test_not_found_is_null_not_an_error(self, execute):
        result = execute(TREE_BY_ID, {"id": "123456", "language": "en"})

        assert result.errors is None
        assert result.data == {"navigationTreeById": None}

    def test_unpublished_tree_has_empty_items(self, execute, make_item, make_tree):
        tree = make_tree([stored_node(make_item("Draft only"))])

        result = execute(TREE_BY_ID, {"id": str(tree.pk), "language": "en"})

        found = result.data["navigationTreeById"]
        assert found["items"] == []
        assert found["hasUnpublishedChanges"] is True
        assert len(found["draftItems"]) == 1


class TestNavigationItemsByShopId:
    @pytest.fixture
    def shop_items(self, make_item):
        items = [make_item(f"Link {index}") for index in range(5)]
        make_item("Other shop", shop_id="shop-2")
        return items

    def test_first_page(self, execute, shop_items):
        result = execute(
            ITEMS_BY_SHOP,
            {"shopId": "shop-1", "first": 2, "sortOrder": "asc", "sortBy": "_id"},
        )

        assert result.errors is None
        connection = result.data["navigationItemsByShopId"]
        assert connection["totalCount"] == 5
        assert [n["_id"] for n in connection["nodes"]] == [str(i.pk) for i in shop_items[:2]]
        assert [e["node"]["_id"] for e in connection["edges"]] == [str(i.pk) for i in shop_items[:2]]
        assert connection["pageInfo"] == {
            "hasNextPage": True,
            "hasPreviousPage": False,
            "startCursor": offset_to_cursor(0),
            "endCursor": offset_to_cursor(1),
        }

    def test_walk_to_last_page(self, execute, shop_items):
        result = execute(
            ITEMS_BY_SHOP,
            {
                "shopId": "shop-1",
                "first": 2,
                "after": offset_to_cursor(3),
                "sortOrder": "asc",
                "sortBy": "_id",
            },
        )

        connection = result.data["navigationItemsByShopId"]
        assert [n["_id"] for n in connection["nodes"]] == [str(shop_items[4].pk)]
        assert connection["pageInfo"]["hasNextPage"] is False
        assert connection["pageInfo"]["hasPreviousPage"] is True

    def test_defaults_sort_newest_first(self, execute, shop_items):
        result = execute(ITEMS_BY_SHOP, {"shopId": "shop-1"})

        nodes = result.data["navigationItemsByShopId"]["nodes"]
        assert [n["_id"] for n in nodes] == [str(i.pk) for i in reversed(shop_items)]
        assert nodes[0]["draftData"]["contentForLanguage"] == "Link 4"

    def test_invalid_cursor(self, execute, shop_items):
        result = execute(ITEMS_BY_SHOP, {"shopId": "shop-1", "after": "garbage!!"})

        assert result.data is None
        assert "Invalid cursor" in result.errors[0].message

    def test_first_and_last_together(self, execute, shop_items):
        result = execute(ITEMS_BY_SHOP, {"shopId": "shop-1", "first": 1, "last": 1})

        assert "either first or last" in result.errors[0].message

    def test_requires_manage_permission(self, execute, shop_items, anonymous):
        result = execute(ITEMS_BY_SHOP, {"shopId": "shop-1"}, user=anonymous)

        assert result.errors[0].message == "Access denied"


class TestCreateTreeAndShopSettings:
    CREATE_TREE = """
    mutation CreateTree($input: CreateNavigationTreeInput!) {
      createNavigationTree(input: $input) {
        clientMutationId
        navigationTree { _id shopId name hasUnpublishedChanges draftItems { isVisible isPrivate } }
      }
    }
    """

    UPDATE_SETTINGS = """
    mutation Settings($input: UpdateNavigationShopSettingsInput!) {
      updateNavigationShopSettings(input: $input) {
        clientMutationId
        settings {
          shopId
          defaultNavigationTreeId
          shouldNavigationTreeItemsBeAdminOnly
          shouldNavigationTreeItemsBePubliclyVisible
          shouldNavigationTreeItemsBeSecondaryNavOnly
        }
      }
    }
    """

    DEFAULT_TREE = """
    query Default($shopId: ID!) {
      defaultNavigationTree(shopId: $shopId, language: "en") { _id name }
    }
    """

    def test_settings_drive_new_tree_item_flags(self, execute, make_item):
        item = make_item("Home")

        settings_result = execute(
            self.UPDATE_SETTINGS,
            {
                "input": {
                    "shopId": "shop-1",
                    "clientMutationId": "s-1",
                    "settingsUpdates": {
                        "shouldNavigationTreeItemsBeAdminOnly": True,
                        "shouldNavigationTreeItemsBePubliclyVisible": False,
                    },
                }
            },
        )
        assert settings_result.errors is None
        assert settings_result.data["updateNavigationShopSettings"]["settings"] == {
            "shopId": "shop-1",
            "defaultNavigationTreeId": None,
            "shouldNavigationTreeItemsBeAdminOnly": True,
            "shouldNavigationTreeItemsBePubliclyVisible": False,
            "shouldNavigationTreeItemsBeSecondaryNavOnly": False,
        }

        result = execute(
            self.CREATE_TREE,
            {
                "input": {
                    "shopId": "shop-1",
                    "name": "Header",
                    "draftItems": [{"navigationItemId": str(item.pk)}],
                }
            },
        )

        assert result.errors is None
        created = result.data["createNavigationTree"]["navigationTree"]
        assert created["name"] == "Header"
        assert created["hasUnpublishedChanges"] is True
        assert created["draftItems"] == [{"isVisible": False, "isPrivate": True}]

    def test_default_tree(self, execute, make_tree, anonymous):
        tree = make_tree(name="Main")

        assert execute(self.DEFAULT_TREE, {"shopId": "shop-1"}, user=anonymous).data == {
            "defaultNavigationTree": None
        }

        execute(
            self.UPDATE_SETTINGS,
            {"input": {"shopId": "shop-1", "settingsUpdates": {"defaultNavigationTreeId": str(tree.pk)}}},
        )
        result = execute(self.DEFAULT_TREE, {"shopId": "shop-1"}, user=anonymous)

        assert result.data == {"defaultNavigationTree": {"_id": str(tree.pk), "name": "Main"}}

    def test_default_tree_from_other_shop_is_rejected(self, execute, make_tree):
        tree = make_tree(shop_id="shop-2")

        result = execute(
            self.UPDATE_SETTINGS,
            {"input": {"shopId": "shop-1", "settingsUpdates": {"defaultNavigationTreeId": str(tree.pk)}}},
        )

        assert "does not exist in shop shop-1" in result.errors[0].message
        assert NavigationTree.objects.get(pk=tree.pk).shop_id == "shop-2"

    def test_shop_settings_query_returns_defaults(self, execute, anonymous):
        query = """
        query Settings($shopId: ID!) {
          navigationShopSettings(shopId: $shopId) {
            shopId
            defaultNavigationTreeId
            shouldNavigationTreeItemsBePubliclyVisible
          }
        }
        """

        result = execute(query, {"shopId": "fresh-shop"})

        assert result.errors is None
        assert result.data["navigationShopSettings"] == {
            "shopId": "fresh-shop",
            "defaultNavigationTreeId": None,
            "shouldNavigationTreeItemsBePubliclyVisible": True,
        }
        assert execute(query, {"shopId": "fresh-shop"}, user=anonymous).errors[0].message == "Access denied"


class TestUpdateItemShopScope:
    def test_item_shop_id_scopes_the_update(self, execute, make_item):
        item = make_item("Home", shop_id="shop-1")

        result = execute(
            UPDATE_ITEM,
            {
                "input": {
                    "_id": str(item.pk),
                    "navigationItem": {"shopId": "shop-2", "draftData": {"url": "/x"}},
                }
            },
        )

        assert "Navigation item not found" in result.errors[0].message
        item.refresh_from_db()
        assert item.draft_data["url"] == "/"

    def test_matching_item_shop_id_is_accepted(self, execute, make_item):
        item = make_item("Home", shop_id="shop-1")

        result = execute(
            UPDATE_ITEM,
            {
                "input": {
                    "_id": str(item.pk),
                    "shopId": "shop-1",
                    "navigationItem": {"shopId": "shop-1", "draftData": {"url": "/x"}},
                }
            },
        )

        assert result.errors is None
        assert result.data["updateNavigationItem"]["navigationItem"]["draftData"]["url"] == "/x"

    def test_conflicting_shop_ids_are_rejected(self, execute, make_item):
        item = make_item("Home", shop_id="shop-1")

        result = execute(
            UPDATE_ITEM,
            {
                "input": {
                    "_id": str(item.pk),
                    "shopId": "shop-1",
                    "navigationItem": {"shopId": "shop-2", "draftData": {"url": "/x"}},
                }
            },
        )

        assert "conflicts with navigationItem.shopId" in result.errors[0].message
        item.refresh_from_db()
        assert item.draft_data["url"] == "/"


def test_custom_scalars_are_in_the_schema():
    sdl = str(schema)

    assert "scalar JSONObject" in sdl
    assert "scalar ConnectionCursor" in sdl
    assert "metadata: JSONObject" in sdl

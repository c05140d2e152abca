from types import SimpleNamespace

import pytest
from django.contrib.auth.models import AnonymousUser

from config.schema import schema
from navigation import services


@pytest.fixture
def execute(rf, admin_user):
    """
    Run a GraphQL document against the schema. Runs as a superuser unless
    `user` is given.
    """

    def _execute(query, variables=None, user=None):
        request = rf.post("/graphql/")
        request.user = user if user is not None else admin_user
        return schema.execute_sync(
            query,
            variable_values=variables,
            context_value=SimpleNamespace(request=request),
        )

    return _execute


@pytest.fixture
def anonymous():
    return AnonymousUser()


@pytest.fixture
def staff_without_permission(django_user_model):
    return django_user_model.objects.create_user(
        username="editor", password="secret-pass", is_staff=True
    )


@pytest.fixture
def make_item(db):
    def _make_item(label="Home", shop_id="shop-1", language="en", url="/", **data):
        return services.create_navigation_item(
            shop_id=shop_id,
            draft_data={
                "url": url,
                "content": [{"language": language, "value": label}],
                **data,
            },
        )

    return _make_item


@pytest.fixture
def make_tree(db):
    def _make_tree(draft_items=None, shop_id="shop-1", name="Main Navigation", publish=False):
        tree = services.create_navigation_tree(shop_id=shop_id, name=name, draft_items=draft_items)
        if publish:
            tree = services.publish_navigation_changes(tree.pk)
        return tree

    return _make_tree

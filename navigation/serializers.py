# backend/navigation/serializers.py
from rest_framework import serializers

from .models import NavigationItem, NavigationTree


def content_for_language(data, language):
    """Value of the content entry for `language`, or None."""
    if not language:
        return None
    wanted = language.lower()
    for entry in (data or {}).get("content") or []:
        if (entry.get("language") or "").lower() == wanted:
            return entry.get("value")
    return None


# ---------------------------------------------------------------------------
# Input validation
# ---------------------------------------------------------------------------


class NavigationItemContentSerializer(serializers.Serializer):
    language = serializers.CharField(max_length=16)
    value = serializers.CharField(max_length=255)


class NavigationItemDataSerializer(serializers.Serializer):
    """
    Validates a navigation item's draft data before it is stored.
    Omitted fields fall back to their defaults.
    """

    url = serializers.CharField(max_length=2048, allow_blank=True, default="")
    is_url_relative = serializers.BooleanField(default=True)
    should_open_in_new_window = serializers.BooleanField(default=False)
    class_names = serializers.CharField(max_length=255, allow_blank=True, default="")
    content = NavigationItemContentSerializer(many=True, required=False)

    def validate_content(self, value):
        seen = set()
        for entry in value:
            language = entry["language"].lower()
            if language in seen:
                raise serializers.ValidationError(
                    f"Only one content entry is allowed per language (duplicate: {entry['language']})."
                )
            seen.add(language)
        return value

    def validate(self, attrs):
        attrs["content"] = [
            {"language": entry["language"], "value": entry["value"]}
            for entry in attrs.get("content") or []
        ]
        return attrs


# ---------------------------------------------------------------------------
# Storefront output (REST)
# ---------------------------------------------------------------------------


class PublishedNavigationItemSerializer(serializers.ModelSerializer):
    url = serializers.CharField(source="data.url", default="")
    is_url_relative = serializers.BooleanField(source="data.is_url_relative", default=True)
    should_open_in_new_window = serializers.BooleanField(
        source="data.should_open_in_new_window", default=False
    )
    class_names = serializers.CharField(source="data.class_names", default="")
    content = serializers.SerializerMethodField()

    class Meta:
        model = NavigationItem
        fields = [
            "id",
            "url",
            "is_url_relative",
            "should_open_in_new_window",
            "class_names",
            "content",
        ]

    def get_content(self, obj):
        return content_for_language(obj.data, self.context.get("language"))


class NavigationTreeNodeSerializer(serializers.Serializer):
    expanded = serializers.BooleanField()
    is_secondary = serializers.BooleanField()
    navigation_item = serializers.SerializerMethodField()
    items = serializers.SerializerMethodField()

    def get_navigation_item(self, node):
        item = self.context["items_by_id"].get(node["navigation_item_id"])
        if item is None:
            return None
        return PublishedNavigationItemSerializer(item, context=self.context).data

    def get_items(self, node):
        # keep items_by_id/language in nested serializer too
        return NavigationTreeNodeSerializer(
            node.get("items") or [], many=True, context=self.context
        ).data


class PublishedNavigationTreeSerializer(serializers.ModelSerializer):
    """
    Expects context: language, items_by_id, nodes (already filtered
    published nodes).
    """

    items = serializers.SerializerMethodField()

    class Meta:
        model = NavigationTree
        fields = ["id", "shop_id", "name", "items"]

    def get_items(self, obj):
        return NavigationTreeNodeSerializer(
            self.context["nodes"], many=True, context=self.context
        ).data

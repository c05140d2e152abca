import django.db.models.deletion
from django.db import migrations, models

import navigation.models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="NavigationItem",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("shop_id", models.CharField(db_index=True, max_length=64)),
                ("data", models.JSONField(blank=True, default=navigation.models.empty_item_data)),
                ("draft_data", models.JSONField(blank=True, default=navigation.models.empty_item_data)),
                ("metadata", models.JSONField(blank=True, default=dict)),
                ("has_unpublished_changes", models.BooleanField(default=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Navigation Item",
                "verbose_name_plural": "Navigation Items",
                "ordering": ["-created_at", "-id"],
            },
        ),
        migrations.CreateModel(
            name="NavigationTree",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("shop_id", models.CharField(db_index=True, max_length=64)),
                ("name", models.CharField(max_length=255)),
                ("items", models.JSONField(blank=True, default=list)),
                ("draft_items", models.JSONField(blank=True, default=list)),
                ("has_unpublished_changes", models.BooleanField(default=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Navigation Tree",
                "verbose_name_plural": "Navigation Trees",
                "ordering": ["shop_id", "name"],
            },
        ),
        migrations.CreateModel(
            name="NavigationShopSettings",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("shop_id", models.CharField(max_length=64, unique=True)),
                (
                    "should_navigation_tree_items_be_admin_only",
                    models.BooleanField(
                        default=False,
                        help_text="New tree items are private (admin only) unless set otherwise.",
                    ),
                ),
                (
                    "should_navigation_tree_items_be_publicly_visible",
                    models.BooleanField(
                        default=True,
                        help_text="New tree items are visible to anonymous visitors unless set otherwise.",
                    ),
                ),
                (
                    "should_navigation_tree_items_be_secondary_nav_only",
                    models.BooleanField(
                        default=False,
                        help_text="New tree items only show in secondary navigation unless set otherwise.",
                    ),
                ),
                (
                    "default_navigation_tree",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="default_for_shops",
                        to="navigation.navigationtree",
                    ),
                ),
            ],
            options={
                "verbose_name": "Navigation Shop Settings",
                "verbose_name_plural": "Navigation Shop Settings",
            },
        ),
    ]

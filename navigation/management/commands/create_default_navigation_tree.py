from django.core.management.base import BaseCommand, CommandError

from navigation.services import ensure_default_navigation_tree


class Command(BaseCommand):
    help = "Create a shop's default navigation tree if it doesn't have one yet."

    def add_arguments(self, parser):
        parser.add_argument("shop_id", type=str, help="Shop that owns the tree")
        parser.add_argument(
            "--name",
            help="Tree name (default: NAVIGATION_DEFAULT_TREE_NAME setting)",
        )

    def handle(self, *args, **options):
        shop_id = options["shop_id"].strip()
        if not shop_id:
            raise CommandError("shop_id may not be blank")

        tree, created = ensure_default_navigation_tree(shop_id, name=options.get("name"))

        if created:
            self.stdout.write(
                self.style.SUCCESS(f"Created navigation tree {tree.pk} ({tree.name}) for shop {shop_id}")
            )
        else:
            self.stdout.write(
                self.style.WARNING(
                    f"Shop {shop_id} already has default navigation tree {tree.pk} ({tree.name})"
                )
            )

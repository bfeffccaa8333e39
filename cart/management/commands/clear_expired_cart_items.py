from cart.tasks import ClearExpiredCartItemsTask
from django.conf import settings
from django.core.management.base import BaseCommand


class Command(BaseCommand):
    help = "Delete cart items whose expires_at has passed, once per tenant database."

    def add_arguments(self, parser):
        parser.add_argument(
            "--database",
            action="append",
            dest="databases",
            help="Tenant database alias to sweep (repeatable). Defaults to SHOPCART_TENANT_DATABASES.",
        )

    def handle(self, *args, **options):
        task = ClearExpiredCartItemsTask()
        aliases = options.get("databases") or list(getattr(settings, "SHOPCART_TENANT_DATABASES", ["default"]))
        if not task.tenant_aware:
            aliases = aliases[:1]
        total = 0
        for alias in aliases:
            deleted = task.handle(using=alias)
            total += deleted
            self.stdout.write(f"[{alias}] expired cart items deleted: {deleted}")
        self.stdout.write(self.style.SUCCESS(f"Expired cart items deleted: {total}"))

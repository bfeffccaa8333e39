from cart.modifiers import cart_modifiers
from django.core.management.base import BaseCommand


class Command(BaseCommand):
    help = "List registered cart modifiers in the order they are applied."

    def handle(self, *args, **options):
        modifiers = cart_modifiers.list()
        if not modifiers:
            self.stdout.write(self.style.WARNING("No cart modifiers are registered."))
            return

        rows = [
            (str(m.get_priority()), m.get_name(), f"{type(m).__module__}.{type(m).__qualname__}")
            for m in modifiers
        ]
        headers = ("Priority", "Name", "Class")
        widths = [max(len(h), *(len(r[i]) for r in rows)) for i, h in enumerate(headers)]
        line = "  ".join(h.ljust(w) for h, w in zip(headers, widths))
        self.stdout.write(line)
        self.stdout.write("  ".join("-" * w for w in widths))
        for row in rows:
            self.stdout.write("  ".join(value.ljust(w) for value, w in zip(row, widths)))
        self.stdout.write(self.style.SUCCESS(f"Cart modifiers registered: {len(rows)}"))

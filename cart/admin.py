"""Admin registration for cart items.

Cart rows are listed individually; filters separate owner and guest carts and
expired from live rows so support can inspect reservations.
"""

from django.contrib import admin, messages
from django.db.models import Q
from django.utils import timezone

from .models import CartItem
from .tasks import ClearExpiredCartItemsTask


class OwnerTypeFilter(admin.SimpleListFilter):
    title = "owner type"
    parameter_name = "owner_type"

    def lookups(self, request, model_admin):
        return (
            ("user", "User carts"),
            ("guest", "Guest carts"),
        )

    def queryset(self, request, queryset):
        value = self.value()
        if value == "user":
            return queryset.filter(owner_object_id__isnull=False)
        if value == "guest":
            return queryset.filter(guest_token__isnull=False)
        return queryset


class ExpiryFilter(admin.SimpleListFilter):
    title = "expiry"
    parameter_name = "expiry"

    def lookups(self, request, model_admin):
        return (
            ("expired", "Expired"),
            ("active", "Active"),
            ("never", "Never expires"),
        )

    def queryset(self, request, queryset):
        value = self.value()
        now = timezone.now()
        if value == "expired":
            return queryset.filter(expires_at__isnull=False, expires_at__lt=now)
        if value == "active":
            return queryset.filter(Q(expires_at__isnull=True) | Q(expires_at__gt=now))
        if value == "never":
            return queryset.filter(expires_at__isnull=True)
        return queryset


@admin.register(CartItem)
class CartItemAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "owner_content_type",
        "owner_object_id",
        "guest_token",
        "product_content_type",
        "product_object_id",
        "quantity",
        "expires_at",
        "updated_at",
    )
    list_filter = (OwnerTypeFilter, ExpiryFilter, "product_content_type")
    search_fields = ("guest_token", "=owner_object_id", "=product_object_id")
    ordering = ("id",)
    readonly_fields = ("created_at", "updated_at")
    list_select_related = ("owner_content_type", "product_content_type")

    @admin.action(description="Delete all expired cart items (releases reservations)")
    def action_delete_expired(self, request, queryset):
        deleted = ClearExpiredCartItemsTask().handle(using=queryset.db)
        if deleted:
            messages.success(request, f"Deleted {deleted} expired cart item(s).")
        else:
            messages.info(request, "No expired cart items to delete.")

    actions = ["action_delete_expired"]


# EOF

"""Admin registrations for inventory app."""

from django.contrib import admin

from .models import StockItem


@admin.register(StockItem)
class StockItemAdmin(admin.ModelAdmin):
    list_display = ("id", "product_content_type", "product_object_id", "quantity", "updated_at")
    list_filter = ("product_content_type",)
    search_fields = ("product_object_id",)


# EOF

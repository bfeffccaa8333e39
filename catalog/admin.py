"""Admin registration for catalog models."""

from django.contrib import admin

from .models import Product


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ("title", "slug", "status", "sale_price", "discount_percent", "track_inventory")
    search_fields = ("title", "slug")
    list_filter = ("status", "track_inventory")
    prepopulated_fields = {"slug": ("title",)}

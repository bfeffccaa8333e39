"""Inventory models (single-location, focused).

Tracks on-hand stock per purchasable product. Products are referenced through
content types so any configured product model can be stocked.
"""

from django.contrib.contenttypes.fields import GenericForeignKey
from django.contrib.contenttypes.models import ContentType
from django.db import models


class TimeStampedModel(models.Model):
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class StockItem(TimeStampedModel):
    product_content_type = models.ForeignKey(ContentType, on_delete=models.CASCADE, related_name="+")
    product_object_id = models.PositiveBigIntegerField()
    product = GenericForeignKey("product_content_type", "product_object_id")
    quantity = models.IntegerField(default=0)

    class Meta:
        ordering = ["-updated_at", "id"]
        constraints = [
            models.CheckConstraint(name="stock_non_negative", condition=models.Q(quantity__gte=0)),
            models.UniqueConstraint(
                fields=["product_content_type", "product_object_id"],
                name="unique_stockitem_per_product",
            ),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"StockItem<{self.product_content_type_id}:{self.product_object_id}> q={self.quantity}"

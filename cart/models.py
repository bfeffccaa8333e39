"""Cart app models.

A cart is not a table of its own: it is the set of `CartItem` rows sharing an
identity, either an authenticated owner (any model, via content types) or an
opaque guest token. Rows carry an optional expiry and double as soft stock
reservations until they expire or are removed.
"""

from django.contrib.contenttypes.fields import GenericForeignKey
from django.contrib.contenttypes.models import ContentType
from django.db import models


class TimeStampedModel(models.Model):
    """Abstract base model adding created/updated timestamps."""

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class CartItem(TimeStampedModel):
    """Quantity of one purchasable product held by an owner or a guest."""

    owner_content_type = models.ForeignKey(
        ContentType,
        null=True,
        blank=True,
        on_delete=models.CASCADE,
        related_name="+",
    )
    owner_object_id = models.PositiveBigIntegerField(null=True, blank=True)
    owner = GenericForeignKey("owner_content_type", "owner_object_id")
    guest_token = models.CharField(max_length=255, null=True, blank=True, db_index=True)

    product_content_type = models.ForeignKey(ContentType, on_delete=models.CASCADE, related_name="+")
    product_object_id = models.PositiveBigIntegerField()
    productible = GenericForeignKey("product_content_type", "product_object_id")

    quantity = models.PositiveIntegerField(default=1)
    expires_at = models.DateTimeField(null=True, blank=True, db_index=True)

    class Meta:
        ordering = ["id"]
        constraints = [
            models.CheckConstraint(
                name="cartitem_quantity_positive",
                condition=models.Q(quantity__gte=1),
            ),
            models.CheckConstraint(
                name="cartitem_owner_xor_guest",
                condition=(
                    models.Q(
                        owner_content_type__isnull=False,
                        owner_object_id__isnull=False,
                        guest_token__isnull=True,
                    )
                    | models.Q(
                        owner_content_type__isnull=True,
                        owner_object_id__isnull=True,
                        guest_token__isnull=False,
                    )
                ),
            ),
            models.UniqueConstraint(
                fields=["owner_content_type", "owner_object_id", "product_content_type", "product_object_id"],
                condition=models.Q(owner_object_id__isnull=False),
                name="unique_product_per_owner_cart",
            ),
            models.UniqueConstraint(
                fields=["guest_token", "product_content_type", "product_object_id"],
                condition=models.Q(guest_token__isnull=False),
                name="unique_product_per_guest_cart",
            ),
        ]
        indexes = [
            models.Index(fields=["owner_content_type", "owner_object_id"], name="cartitem_owner_idx"),
            models.Index(fields=["product_content_type", "product_object_id"], name="cartitem_product_idx"),
        ]

    def __str__(self) -> str:  # pragma: no cover
        holder = f"guest={self.guest_token}" if self.guest_token else f"owner={self.owner_object_id}"
        return f"CartItem#{self.id} {holder} product={self.product_object_id} qty={self.quantity}"

    @property
    def product_type(self) -> str:
        content_type = ContentType.objects.get_for_id(self.product_content_type_id)
        return f"{content_type.app_label}.{content_type.model}"

    @property
    def owner_type(self) -> str | None:
        if self.owner_content_type_id is None:
            return None
        content_type = ContentType.objects.get_for_id(self.owner_content_type_id)
        return f"{content_type.app_label}.{content_type.model}"

"""Catalog app models.

Defines the purchasable product that carts reference by default
(`SHOPCART_PRODUCT_MODEL = "catalog.Product"`).
"""

from decimal import ROUND_HALF_UP, Decimal

from common.choices import DraftPublished
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

CENT = Decimal("0.01")


class TimeStampedModel(models.Model):
    """Abstract base model adding created/updated timestamps."""

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class Product(TimeStampedModel):
    """Sellable product.

    Pricing fields:
    - regular_price: list price shown as the "was" price; optional.
    - sale_price: the price the product currently sells at.
    - discount_percent: product-level promotion applied on top of sale_price.
    """

    STATUS_DRAFT = DraftPublished.DRAFT
    STATUS_PUBLISHED = DraftPublished.PUBLISHED
    STATUS_CHOICES = DraftPublished.choices

    title = models.CharField(max_length=200)
    slug = models.SlugField(max_length=220, unique=True)
    description = models.TextField(blank=True)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_DRAFT, db_index=True)
    regular_price = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    sale_price = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    discount_percent = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(0), MaxValueValidator(100)],
    )
    track_inventory = models.BooleanField(default=True)

    class Meta:
        ordering = ["title"]
        constraints = [
            models.CheckConstraint(
                name="product_sale_price_non_negative",
                condition=models.Q(sale_price__gte=0),
            ),
            models.CheckConstraint(
                name="product_discount_percent_range",
                condition=models.Q(discount_percent__gte=0, discount_percent__lte=100),
            ),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return self.title

    def get_final_price(self) -> Decimal:
        """Sale price after the product-level discount, rounded to cents."""
        price = self.sale_price or Decimal("0.00")
        pct = self.discount_percent or Decimal("0.00")
        if not pct:
            return price
        return (price * (Decimal("100") - pct) / Decimal("100")).quantize(CENT, rounding=ROUND_HALF_UP)

    def get_regular_price(self) -> Decimal:
        return self.regular_price if self.regular_price is not None else self.sale_price

    def can_be_purchased(self) -> bool:
        return self.status == self.STATUS_PUBLISHED

    def handles_stock(self) -> bool:
        return bool(self.track_inventory)

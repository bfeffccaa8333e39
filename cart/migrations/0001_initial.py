import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("contenttypes", "0002_remove_content_type_name"),
    ]

    operations = [
        migrations.CreateModel(
            name="CartItem",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("owner_object_id", models.PositiveBigIntegerField(blank=True, null=True)),
                ("guest_token", models.CharField(blank=True, db_index=True, max_length=255, null=True)),
                ("product_object_id", models.PositiveBigIntegerField()),
                ("quantity", models.PositiveIntegerField(default=1)),
                ("expires_at", models.DateTimeField(blank=True, db_index=True, null=True)),
                (
                    "owner_content_type",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="+",
                        to="contenttypes.contenttype",
                    ),
                ),
                (
                    "product_content_type",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="+",
                        to="contenttypes.contenttype",
                    ),
                ),
            ],
            options={
                "ordering": ["id"],
                "indexes": [
                    models.Index(fields=["owner_content_type", "owner_object_id"], name="cartitem_owner_idx"),
                    models.Index(fields=["product_content_type", "product_object_id"], name="cartitem_product_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(condition=models.Q(("quantity__gte", 1)), name="cartitem_quantity_positive"),
                    models.CheckConstraint(
                        condition=models.Q(
                            models.Q(
                                ("owner_content_type__isnull", False),
                                ("owner_object_id__isnull", False),
                                ("guest_token__isnull", True),
                            ),
                            models.Q(
                                ("owner_content_type__isnull", True),
                                ("owner_object_id__isnull", True),
                                ("guest_token__isnull", False),
                            ),
                            _connector="OR",
                        ),
                        name="cartitem_owner_xor_guest",
                    ),
                    models.UniqueConstraint(
                        condition=models.Q(("owner_object_id__isnull", False)),
                        fields=("owner_content_type", "owner_object_id", "product_content_type", "product_object_id"),
                        name="unique_product_per_owner_cart",
                    ),
                    models.UniqueConstraint(
                        condition=models.Q(("guest_token__isnull", False)),
                        fields=("guest_token", "product_content_type", "product_object_id"),
                        name="unique_product_per_guest_cart",
                    ),
                ],
            },
        ),
    ]

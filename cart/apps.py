"""Django app configuration for the Cart app."""

from django.apps import AppConfig

RESERVATIONS_HOOK = "stock.reservations.get"
ANONYMIZE_HOOK = "user.before_anonymize"


def add_cart_reservations(reserved_so_far, context: dict):
    """Add the quantity held by non-expired cart rows to the reserved total."""

    from .selectors import reserved_quantity

    held = reserved_quantity(
        product_type=context["productible_type"],
        product_id=context["productible_id"],
        using=context.get("using", "default"),
    )
    return (reserved_so_far or 0) + held


def purge_owner_cart(data, context: dict):
    """Drop an account's cart rows before the account is anonymized."""

    from .services import delete_items_for_owner

    user_id = context.get("user_id")
    user_class = context.get("user_class")
    if user_id is None or not user_class:
        return data
    # Accept either an "app_label.model" label or the model class itself
    owner_type = user_class if isinstance(user_class, str) else user_class._meta.label_lower
    delete_items_for_owner(owner_type=owner_type, owner_id=user_id)
    return data


class CartConfig(AppConfig):
    """AppConfig for the cart domain (shopping cart)."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "cart"

    def ready(self):
        from common.hooks import hooks

        from .modifiers import register_configured_modifiers

        if add_cart_reservations not in hooks.listeners(RESERVATIONS_HOOK):
            hooks.register(RESERVATIONS_HOOK, add_cart_reservations, priority=10)
        if purge_owner_cart not in hooks.listeners(ANONYMIZE_HOOK):
            hooks.register(ANONYMIZE_HOOK, purge_owner_cart, priority=10)
        register_configured_modifiers()

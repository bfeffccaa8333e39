"""Who a cart belongs to: an authenticated owner or a guest token."""

from dataclasses import dataclass

from django.contrib.contenttypes.models import ContentType

GUEST_TOKEN_HEADER = "X-Guest-Token"


@dataclass(frozen=True)
class CartIdentity:
    """Exactly one of (owner_type_id, owner_id) or guest_token is set."""

    owner_type_id: int | None = None
    owner_id: int | None = None
    guest_token: str | None = None

    @classmethod
    def for_owner(cls, owner) -> "CartIdentity":
        content_type = ContentType.objects.get_for_model(owner)
        return cls(owner_type_id=content_type.id, owner_id=owner.pk)

    @classmethod
    def for_guest(cls, guest_token: str) -> "CartIdentity":
        return cls(guest_token=guest_token)

    @property
    def is_guest(self) -> bool:
        return self.owner_id is None

    def lookup(self) -> dict:
        """Filter kwargs selecting this identity's cart rows."""
        if self.is_guest:
            return {"guest_token": self.guest_token, "owner_object_id__isnull": True}
        return {"owner_content_type_id": self.owner_type_id, "owner_object_id": self.owner_id}

    def create_kwargs(self) -> dict:
        if self.is_guest:
            return {"guest_token": self.guest_token}
        return {"owner_content_type_id": self.owner_type_id, "owner_object_id": self.owner_id}

    def log_context(self) -> dict:
        if self.is_guest:
            return {"guest": True, "guest_token": self.guest_token}
        return {"guest": False, "user_id": self.owner_id}


def resolve_identity(*, user=None, guest_token: str | None = None) -> CartIdentity | None:
    """Prefer the authenticated user; fall back to a non-empty guest token."""

    if user is not None and getattr(user, "is_authenticated", False):
        return CartIdentity.for_owner(user)
    token = (guest_token or "").strip()
    if token:
        return CartIdentity.for_guest(token)
    return None


def identity_from_request(request) -> CartIdentity | None:
    return resolve_identity(
        user=getattr(request, "user", None),
        guest_token=request.headers.get(GUEST_TOKEN_HEADER),
    )

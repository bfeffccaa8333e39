"""Shared enumerations and choices used across apps."""

from django.db import models


class DraftPublished(models.TextChoices):
    DRAFT = "draft", "Draft"
    PUBLISHED = "published", "Published"

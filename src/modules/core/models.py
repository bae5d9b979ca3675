"""Abstract model bases shared by every module.

``TimestampedModel`` gives each table a UUIDv7 primary key (time-ordered,
so index locality is close to an auto-increment) and creation/modification
timestamps.  ``SoftDeleteModel`` adds a nullable ``deleted_at`` column;
a row is deleted when it is set.

The default manager is unfiltered.  Call ``.alive()`` on it, or on any
queryset, to hide soft-deleted rows.
"""

from __future__ import annotations

import uuid6
from django.db import models
from django.utils import timezone


class TimestampedModel(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid6.uuid7, editable=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class SoftDeleteQuerySet(models.QuerySet):
    def alive(self) -> SoftDeleteQuerySet:
        return self.filter(deleted_at__isnull=True)

    def dead(self) -> SoftDeleteQuerySet:
        return self.filter(deleted_at__isnull=False)

    def soft_delete(self, **changes) -> int:
        """Stamp ``deleted_at`` on the live rows of this queryset.

        ``changes`` are extra column assignments written by the same
        UPDATE, e.g. ``version=F("version") + 1``.  Returns the number of
        rows marked.
        """
        stamp = timezone.now()
        return self.alive().update(deleted_at=stamp, updated_at=stamp, **changes)

    def hard_delete(self) -> int:
        """Remove the rows physically, deleted or not; returns the row count."""
        removed, _ = self.delete()
        return removed


SoftDeleteManager = models.Manager.from_queryset(SoftDeleteQuerySet)


class SoftDeleteModel(TimestampedModel):
    deleted_at = models.DateTimeField(null=True, blank=True, default=None, db_index=True)

    objects = SoftDeleteManager()

    class Meta:
        abstract = True

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

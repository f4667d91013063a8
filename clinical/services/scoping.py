"""
Record lookup under the authorization policy.

Every single-record endpoint goes through :func:`load_scoped`: the record
is fetched first and a missing (or malformed) id is a 404 before any
ownership comparison is made, so a caller can never learn who owns a
record that does not exist.
"""
from __future__ import annotations

import uuid
from typing import Optional

from rest_framework.exceptions import NotFound

from clinical.permissions import enforce
from clinical.policy import Action, Identity, Resource, check_ownership, list_scope


def parse_id(pk) -> Optional[uuid.UUID]:
    try:
        return uuid.UUID(str(pk))
    except (TypeError, ValueError, AttributeError):
        return None


def load_scoped(identity: Identity, action: Action, resource: Resource, queryset, pk, *, label: Optional[str]=None):
    """Fetch ``pk`` from ``queryset`` and check ``identity`` may ``action`` it."""
    label = label or resource.value.capitalize()
    record_id = parse_id(pk)
    obj = queryset.filter(pk=record_id).first() if record_id else None
    if obj is None:
        raise NotFound(f'{label} not found')
    enforce(check_ownership(identity, action, resource, obj.ownership))
    return obj


def scoped_list(identity: Identity, resource: Resource, queryset, query=None):
    return list_scope(identity, resource, query).apply(queryset)

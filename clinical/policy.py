"""
Role-scoped authorization policy.

Everything in this module is pure: no ORM, no request objects.  Given
an :class:`Identity` (who is calling) and a target (what they want to do
to which kind of record), the functions here return a structured
decision:

* :class:`Allow`: go ahead.
* :class:`Deny`: refuse, with a human readable reason and the HTTP
  status the refusal maps to (403 unless stated otherwise).
* :class:`ScopeFilter`: for list operations, the field filters that
  restrict a query to what the caller may see.  ``ScopeFilter.nothing()``
  means the caller lacks the context needed to see anything.

Views translate decisions into responses; see
:func:`clinical.permissions.enforce`.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass, field, replace
from typing import Any, Mapping, Optional, Union


class Role(str, enum.Enum):
    SUPER_ADMIN = 'SUPER_ADMIN'
    HOSPITAL = 'HOSPITAL'
    HOSPITAL_ADMIN = 'HOSPITAL_ADMIN'
    DOCTOR = 'DOCTOR'

    @property
    def label(self) -> str:
        return self.value.replace('_', ' ').title()

    @property
    def requires_hospital(self) -> bool:
        return self in (Role.HOSPITAL_ADMIN, Role.DOCTOR)


class Action(str, enum.Enum):
    CREATE = 'create'
    LIST = 'list'
    READ = 'read'
    UPDATE = 'update'
    DELETE = 'delete'

    @property
    def verb(self) -> str:
        return 'view' if self is Action.READ else self.value

    @property
    def is_read(self) -> bool:
        return self in (Action.LIST, Action.READ)


class Resource(str, enum.Enum):
    HOSPITAL = 'hospital'
    HOSPITAL_ADMIN = 'hospital admin'
    DOCTOR = 'doctor'
    PATIENT = 'patient'
    PRESCRIPTION = 'prescription'

    @property
    def plural(self) -> str:
        return f"{self.value}s"


@dataclass(frozen=True)
class Identity:
    """The authenticated caller.

    ``doctor_id`` is only ever set for DOCTOR identities, and only when
    their Doctor profile could be resolved.
    """
    user_id: str
    role: Role
    hospital_id: Optional[str] = None
    doctor_id: Optional[str] = None

    def with_doctor(self, doctor_id: Any) -> 'Identity':
        return replace(self, doctor_id=str(doctor_id) if doctor_id else None)


@dataclass(frozen=True)
class Ownership:
    """Scope fields of a record (existing or about to be created)."""
    hospital_id: Any = None
    doctor_id: Any = None


@dataclass(frozen=True)
class Allow:
    pass


@dataclass(frozen=True)
class Deny:
    reason: str
    status: int = 403


@dataclass(frozen=True)
class ScopeFilter:
    filters: Mapping[str, Any] = field(default_factory=dict)
    empty: bool = False

    @classmethod
    def nothing(cls) -> 'ScopeFilter':
        return cls(empty=True)

    @property
    def unrestricted(self) -> bool:
        return not self.empty and not self.filters

    def apply(self, queryset):
        if self.empty:
            return queryset.none()
        return queryset.filter(**self.filters)


Decision = Union[Allow, Deny, ScopeFilter]

ALLOW = Allow()

SA, H, HA, D = Role.SUPER_ADMIN, Role.HOSPITAL, Role.HOSPITAL_ADMIN, Role.DOCTOR
_READS = (Action.LIST, Action.READ)
_WRITES = (Action.CREATE, Action.UPDATE, Action.DELETE)


def _table() -> dict:
    grants = [
        (Resource.HOSPITAL, _READS, {SA, HA, H}),
        (Resource.HOSPITAL, _WRITES, {SA}),
        (Resource.HOSPITAL_ADMIN, _READS + _WRITES, {SA}),
        (Resource.DOCTOR, _READS, {SA, HA, H}),
        (Resource.DOCTOR, _WRITES, {SA, HA}),
        (Resource.PATIENT, _READS + _WRITES, {SA, HA, D}),
        (Resource.PRESCRIPTION, _READS + _WRITES, {SA, HA, D}),
    ]
    return {(res, act): frozenset(roles) for res, acts, roles in grants for act in acts}


# (resource, action) -> roles admitted by the coarse gate
ROLE_TABLE: dict = _table()

# Logical scope key -> model field used when filtering each resource
SCOPE_FIELDS: dict = {
    Resource.HOSPITAL: {'hospital': 'id'},
    Resource.HOSPITAL_ADMIN: {'hospital': 'hospital_id'},
    Resource.DOCTOR: {'hospital': 'hospital_id', 'doctor': 'id'},
    Resource.PATIENT: {'hospital': 'hospital_id', 'doctor': 'doctor_id'},
    Resource.PRESCRIPTION: {
        'hospital': 'hospital_id',
        'doctor': 'doctor_id',
        'patient': 'patient_enrollment_id',
    },
}

# Query parameter -> logical scope key, honoured for SUPER_ADMIN only
_EXPLICIT_FILTERS = (('hospitalId', 'hospital'), ('doctorId', 'doctor'), ('patientId', 'patient'))


def allowed_roles(resource: Resource, action: Action) -> frozenset:
    return ROLE_TABLE.get((resource, action), frozenset())


def check_role(identity: Identity, action: Action, resource: Resource) -> Decision:
    roles = allowed_roles(resource, action)
    if identity.role in roles:
        return ALLOW
    names = ' or '.join(r.label for r in Role if r in roles) or 'No role'
    return Deny(f"Access denied: {names} privileges required")


def list_scope(identity: Identity, resource: Resource, query: Optional[Mapping[str, Any]] = None) -> ScopeFilter:
    """Filters restricting a list of ``resource`` to what ``identity`` may see.

    SUPER_ADMIN gets exactly the filters named in ``query``.  Every other
    role is narrowed to its hospital, and DOCTOR further to its own
    profile; caller supplied hospital/doctor filters are ignored for them.
    A ``patientId`` filter on prescriptions only ever narrows.
    """
    fields = SCOPE_FIELDS[resource]
    query = query or {}

    if identity.role is Role.SUPER_ADMIN:
        filters = {
            fields[key]: query[param]
            for param, key in _EXPLICIT_FILTERS
            if key in fields and query.get(param)
        }
        return ScopeFilter(filters)

    if identity.role is Role.DOCTOR and 'doctor' in fields:
        if not identity.doctor_id:
            return ScopeFilter.nothing()
        filters = {fields['doctor']: identity.doctor_id}
    elif identity.role in (Role.HOSPITAL_ADMIN, Role.HOSPITAL, Role.DOCTOR):
        if not identity.hospital_id:
            return ScopeFilter.nothing()
        filters = {fields['hospital']: identity.hospital_id}
    else:
        return ScopeFilter.nothing()

    if 'patient' in fields and query.get('patientId'):
        filters[fields['patient']] = query['patientId']
    return ScopeFilter(filters)


def _same(a: Any, b: Any) -> bool:
    return a is not None and b is not None and str(a) == str(b)


def _deny(identity: Identity, action: Action, resource: Resource) -> Deny:
    if action is Action.CREATE:
        whose = 'your own patients' if identity.role is Role.DOCTOR else 'your hospital'
        return Deny(f"You can only add {resource.plural} for {whose}")
    return Deny(f"Unauthorized to {action.verb} this {resource.value}")


def check_ownership(identity: Identity, action: Action, resource: Resource, owner: Ownership) -> Decision:
    """Decide whether ``identity`` may perform ``action`` on a record owned by ``owner``.

    The record must already have been found; a missing record is a
    NotFound for the caller to raise before asking this question.
    For CREATE, ``owner`` describes the record about to be written.
    """
    gate = check_role(identity, action, resource)
    if isinstance(gate, Deny):
        return gate

    role = identity.role
    if role is Role.SUPER_ADMIN:
        return ALLOW

    if role is Role.HOSPITAL:
        if not action.is_read:
            return Deny(f"{role.label} accounts are read-only")
        allowed = _same(owner.hospital_id, identity.hospital_id)
    elif role is Role.HOSPITAL_ADMIN:
        allowed = _same(owner.hospital_id, identity.hospital_id)
    elif role is Role.DOCTOR:
        if 'doctor' in SCOPE_FIELDS[resource]:
            allowed = _same(owner.doctor_id, identity.doctor_id)
        else:
            allowed = _same(owner.hospital_id, identity.hospital_id)
    else:
        allowed = False

    return ALLOW if allowed else _deny(identity, action, resource)


def check_context(identity: Identity) -> Decision:
    """Refuse identities missing the context their role depends on."""
    if identity.role is Role.DOCTOR and not identity.doctor_id:
        return Deny("Doctor profile not found", status=404)
    if identity.role in (Role.HOSPITAL_ADMIN, Role.HOSPITAL) and not identity.hospital_id:
        return Deny("No hospital assigned to this account")
    return ALLOW

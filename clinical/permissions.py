"""
Coarse role gates and the bridge from policy decisions to API errors.

Each gate admits the roles the policy table grants for its resource,
choosing the action from the HTTP method.  Fine-grained ownership and
scoping happen in the views, after the gate, through :func:`enforce`.
"""
from rest_framework.exceptions import NotFound, PermissionDenied
from rest_framework.permissions import BasePermission

from .identity import get_identity
from .policy import Action, Deny, Resource, Role, check_role

_METHOD_ACTIONS = {
    'GET': Action.READ,
    'HEAD': Action.READ,
    'OPTIONS': Action.READ,
    'POST': Action.CREATE,
    'PUT': Action.UPDATE,
    'PATCH': Action.UPDATE,
    'DELETE': Action.DELETE,
}


def enforce(decision) -> None:
    """Raise the API error matching a :class:`Deny`; do nothing otherwise."""
    if isinstance(decision, Deny):
        if decision.status == 404:
            raise NotFound(decision.reason)
        raise PermissionDenied(decision.reason)


class ResourceGate(BasePermission):
    """Admit the roles the policy table grants for ``resource``."""
    resource: Resource

    def has_permission(self, request, view) -> bool:
        user = getattr(request, "user", None)
        if not (user and user.is_authenticated):
            return False
        action = _METHOD_ACTIONS.get(request.method, Action.UPDATE)
        decision = check_role(get_identity(request), action, self.resource)
        if isinstance(decision, Deny):
            self.message = decision.reason
            return False
        return True


class HospitalGate(ResourceGate):
    resource = Resource.HOSPITAL


class DoctorGate(ResourceGate):
    resource = Resource.DOCTOR


class PatientGate(ResourceGate):
    resource = Resource.PATIENT


class PrescriptionGate(ResourceGate):
    resource = Resource.PRESCRIPTION


class HospitalAdminGate(ResourceGate):
    """Hospital admin management is SUPER_ADMIN only."""
    resource = Resource.HOSPITAL_ADMIN


class IsHospitalAdmin(BasePermission):
    """Only hospital admins (their own hospital's dashboard)."""
    message = "Access denied: Hospital Admin privileges required"

    def has_permission(self, request, view) -> bool:
        user = getattr(request, "user", None)
        if not (user and user.is_authenticated):
            return False
        return get_identity(request).role is Role.HOSPITAL_ADMIN

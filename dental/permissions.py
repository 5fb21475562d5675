"""
Role based permission classes for clinic staff.
"""
from rest_framework.permissions import BasePermission

ADMIN_ROLES = {"admin"}
CLINICAL_ROLES = {"admin", "dentist", "dental_assistant"}
FRONT_DESK_ROLES = {"admin", "receptionist"}
FINANCE_ROLES = {"admin", "finance_manager", "receptionist"}
RADIOLOGY_ROLES = {"admin", "radiologist", "technician"}


def has_role(user, roles) -> bool:
    return bool(user and user.is_authenticated and getattr(user, "role", None) in roles)


class _RolePermission(BasePermission):
    roles: set = set()

    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        return has_role(getattr(request, "user", None), self.roles)


class IsAdminRole(_RolePermission):
    """Administrators only."""
    roles = ADMIN_ROLES


class IsClinicalRole(_RolePermission):
    """Dentists and assistants (and admin)."""
    roles = CLINICAL_ROLES


class IsFrontDeskRole(_RolePermission):
    """Reception (and admin)."""
    roles = FRONT_DESK_ROLES


class IsFinanceRole(_RolePermission):
    roles = FINANCE_ROLES


class IsRadiologyRole(_RolePermission):
    """X-ray room staff (and admin)."""
    roles = RADIOLOGY_ROLES

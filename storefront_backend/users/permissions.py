# users/permissions.py

from rest_framework.permissions import SAFE_METHODS, BasePermission


# ---------------- BASE ROLE PERMISSION ----------------
class HasRole(BasePermission):
    """
    Base permission to check user role safely.
    """

    allowed_roles = set()

    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and user.role in self.allowed_roles)


# ---------------- ROLE PERMISSIONS ----------------
class IsAdmin(HasRole):
    allowed_roles = {"admin"}


class IsBuyer(HasRole):
    allowed_roles = {"buyer"}


class IsSeller(HasRole):
    allowed_roles = {"seller"}


class IsSellerOrAdmin(HasRole):
    allowed_roles = {"seller", "admin"}


# ---------------- OBJECT OWNERSHIP ----------------
class IsOwnerOrAdminOrReadOnly(BasePermission):
    """
    Reads are open; writes require owning the object (``owner_field``) or admin role.
    """

    owner_field = "owner_id"

    def has_object_permission(self, request, view, obj):
        if request.method in SAFE_METHODS:
            return True

        user = request.user
        if not (user and user.is_authenticated):
            return False
        if user.role == "admin":
            return True

        return str(getattr(obj, self.owner_field, "")) == str(user.id)

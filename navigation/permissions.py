# backend/navigation/permissions.py
from strawberry.permission import BasePermission

MANAGE_PERMISSION = "navigation.change_navigationtree"


def can_manage_navigation(user) -> bool:
    """Staff who may read drafts and edit navigation."""
    if user is None or not user.is_authenticated:
        return False
    return user.has_perm(MANAGE_PERMISSION)


def get_request_user(info):
    context = info.context
    request = getattr(context, "request", None)
    if request is None and isinstance(context, dict):
        request = context.get("request")
    return getattr(request, "user", None)


class IsNavigationManager(BasePermission):
    """
    Usage:
        @strawberry.mutation(permission_classes=[IsNavigationManager])
    """

    message = "Access denied"

    def has_permission(self, source, info, **kwargs) -> bool:
        return can_manage_navigation(get_request_user(info))

"""
Permission classes for actor-based access control.

The actor is read from the X-Actor header by ActorHeaderMiddleware.
It is NEVER read from the request body or query parameters.
"""

from rest_framework import permissions

ADMIN_ACTOR = "ADMIN"
DEALER_ACTOR_PREFIX = "DEALER:"


def is_admin_actor(actor):
    return actor == ADMIN_ACTOR


def is_dealer_actor(actor):
    return bool(actor) and actor.startswith(DEALER_ACTOR_PREFIX)


class IsAdminActor(permissions.BasePermission):
    """Allow ADMIN actor only."""

    message = "Only ADMIN can perform this action"

    def has_permission(self, request, view):
        return is_admin_actor(getattr(request, "actor", None))


class HasActor(permissions.BasePermission):
    """Allow ADMIN or DEALER actors for mutations; reads are open."""

    def has_permission(self, request, view):
        if request.method in permissions.SAFE_METHODS:
            return True

        actor = getattr(request, "actor", None)
        return is_admin_actor(actor) or is_dealer_actor(actor)

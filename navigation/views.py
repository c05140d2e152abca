# backend/navigation/views.py
import logging

from django.contrib.auth.models import AnonymousUser
from django.http import Http404
from rest_framework.exceptions import AuthenticationFailed
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.authentication import JWTAuthentication
from strawberry.django.views import GraphQLView

from . import services
from .serializers import PublishedNavigationTreeSerializer

logger = logging.getLogger(__name__)


class NavigationTreeView(APIView):
    """
    Returns the published navigation tree, content in one language,
    filtered for the current user.

    Frontend usage:
      GET /api/navigation/trees/3/?language=en
      GET /api/navigation/trees/3/?language=en&secondary=1
    """

    permission_classes = [AllowAny]

    def get_tree(self, **kwargs):
        return services.get_navigation_tree(kwargs["pk"])

    def get(self, request, **kwargs):
        tree = self.get_tree(**kwargs)
        if tree is None:
            raise Http404("Navigation tree not found.")

        language = request.query_params.get("language", "en")
        include_secondary = request.query_params.get("secondary") in ("1", "true", "yes")

        resolved = services.resolve_tree(
            tree,
            user=request.user,
            include_secondary=include_secondary,
        )
        serializer = PublishedNavigationTreeSerializer(
            tree,
            context={
                "language": language,
                "items_by_id": resolved.items_by_id,
                "nodes": resolved.items,
                "request": request,
            },
        )
        return Response(serializer.data)


class DefaultNavigationTreeView(NavigationTreeView):
    """
    GET /api/navigation/shops/<shop_id>/tree/?language=en
    """

    def get_tree(self, **kwargs):
        return services.get_default_navigation_tree(kwargs["shop_id"])


class NavigationGraphQLView(GraphQLView):
    """
    GraphQL endpoint that also accepts `Authorization: Bearer <jwt>`, the
    same access tokens the REST API takes. A session user is kept as is.
    """

    def dispatch(self, request, *args, **kwargs):
        user = getattr(request, "user", None)
        if user is None or not user.is_authenticated:
            request.user = _user_for_bearer_token(request) or AnonymousUser()
        return super().dispatch(request, *args, **kwargs)


def _user_for_bearer_token(request):
    try:
        authenticated = JWTAuthentication().authenticate(request)
    except AuthenticationFailed as exc:
        logger.info("Ignoring invalid bearer token on GraphQL request: %s", exc.detail)
        return None
    return authenticated[0] if authenticated else None

# backend/config/urls.py
from django.conf import settings
from django.contrib import admin
from django.http import HttpResponse
from django.urls import include, path
from django.views.decorators.csrf import csrf_exempt

from navigation.views import NavigationGraphQLView

from .schema import schema

# csrf_exempt is only safe while the view accepts JSON bodies alone:
# multipart (form-encodable) requests stay disabled.
graphql_view = NavigationGraphQLView.as_view(
    schema=schema,
    graphql_ide="graphiql" if settings.DEBUG else None,
    multipart_uploads_enabled=False,
)

urlpatterns = [
    path("", lambda r: HttpResponse("API is running")),
    path("admin/", admin.site.urls),
    path("graphql/", csrf_exempt(graphql_view), name="graphql"),
    path("api/navigation/", include("navigation.urls", namespace="navigation")),
]

# backend/navigation/urls.py
from django.urls import path

from .views import DefaultNavigationTreeView, NavigationTreeView

app_name = "navigation"

urlpatterns = [
    path("trees/<int:pk>/", NavigationTreeView.as_view(), name="tree_detail"),
    path(
        "shops/<str:shop_id>/tree/",
        DefaultNavigationTreeView.as_view(),
        name="shop_default_tree",
    ),
]

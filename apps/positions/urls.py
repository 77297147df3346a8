"""
URL configuration for positions app.
"""

from django.urls import path

from apps.positions import views

app_name = "positions"

urlpatterns = [
    path("", views.position_collection, name="position_collection"),
    path("<int:position_id>/", views.position_detail, name="position_detail"),
    path("batch/", views.delete_batch, name="delete_batch"),
    path("partner/<str:partner_id>/", views.positions_by_partner, name="by_partner"),
    path("account/<str:account_id>/", views.positions_by_account, name="by_account"),
    path(
        "asset-class/<str:asset_class>/",
        views.positions_by_asset_class,
        name="by_asset_class",
    ),
    path("currency/<str:currency>/", views.positions_by_currency, name="by_currency"),
    path("search/", views.search_positions, name="search"),
    path("filter/", views.filter_positions_view, name="filter"),
    path(
        "value-greater-than/<str:amount>/",
        views.positions_above_value,
        name="value_greater_than",
    ),
    path("top-positions/", views.top_positions_view, name="top_positions"),
    path("import/", views.import_positions_view, name="import"),
    path("imports/<int:import_id>/", views.import_status, name="import_status"),
    path("clear-all/", views.clear_all, name="clear_all"),
]

"""
Stockwatch URLs.

    urlpatterns = [
        path('stockwatch/', include('stockwatch.urls')),
    ]
"""

from django.urls import path

from stockwatch.views import UpdateAgingView

app_name = 'stockwatch'

urlpatterns = [
    path('cron/update-aging/', UpdateAgingView.as_view(), name='update-aging'),
]

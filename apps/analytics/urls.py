from django.urls import path
from . import views

app_name = 'analytics'

urlpatterns = [
    # Program analytics (admin)
    path('overview/', views.overview, name='overview'),
    path('top-installers/', views.top_installers, name='top-installers'),

    # Installations over time (own data for installers)
    path('installations/', views.installations_timeseries, name='installations-timeseries'),
]

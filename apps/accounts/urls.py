from django.urls import path
from . import views

app_name = 'accounts'

urlpatterns = [
    # User profile
    path('me/', views.current_user, name='current-user'),

    # Installer review (admin)
    path('installers/<uuid:pk>/review/', views.review_installer, name='review-installer'),
]

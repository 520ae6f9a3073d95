from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'serials'

router = DefaultRouter()
router.register(r'', views.SerialRecordViewSet, basename='serial')

urlpatterns = [
    # GET    /api/serials/       - List serials
    # POST   /api/serials/       - Register serial
    # GET    /api/serials/{id}/  - Serial details
    path('', include(router.urls)),
]

from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'promotions'

# Router for ViewSets
router = DefaultRouter()
router.register(r'', views.PromotionViewSet, basename='promotion')

urlpatterns = [
    # Promotion ViewSet routes
    # GET    /api/promotions/                  - List promotions
    # POST   /api/promotions/                  - Create promotion (admin)
    # GET    /api/promotions/{id}/             - Get promotion details
    # PUT    /api/promotions/{id}/             - Update promotion (admin)
    # PATCH  /api/promotions/{id}/             - Partial update (admin)
    # DELETE /api/promotions/{id}/             - Delete promotion (admin)

    # Custom promotion actions
    # GET    /api/promotions/mine/             - Active promotions for current installer
    # GET    /api/promotions/dashboard/        - Installer promotion summary
    # POST   /api/promotions/{id}/join/        - Join promotion
    # GET    /api/promotions/{id}/progress/    - Recompute own progress
    # GET    /api/promotions/{id}/analytics/   - Participation statistics (admin)

    # Additional endpoints
    path(
        'participations/<uuid:pk>/reward/',
        views.update_participation_reward,
        name='participation-reward',
    ),

    # Include router URLs
    path('', include(router.urls)),
]

from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'payments'

router = DefaultRouter()
router.register(r'', views.PaymentViewSet, basename='payment')

urlpatterns = [
    # GET    /api/payments/                      - List payments (own, or all for admin)
    # GET    /api/payments/{id}/                 - Get payment details
    # GET    /api/payments/milestones/           - Milestone state and request gate
    # POST   /api/payments/milestones/request/   - Request current milestone reward
    # POST   /api/payments/{id}/approve/         - Approve (admin)
    # POST   /api/payments/{id}/reject/          - Reject (admin)
    # POST   /api/payments/{id}/mark_paid/       - Record disbursement (admin)
    # POST   /api/payments/{id}/cancel/          - Withdraw own pending request
    path('', include(router.urls)),
]

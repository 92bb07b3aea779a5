from django.urls import path, include
from rest_framework.routers import DefaultRouter

from . import views

app_name = 'api'

router = DefaultRouter()
router.register('contacts', views.ContactViewSet, basename='contact')
router.register('deals', views.DealViewSet, basename='deal')
router.register('invoices', views.InvoiceViewSet, basename='invoice')
router.register('reminders', views.ReminderViewSet, basename='reminder')
router.register('tickets', views.TicketViewSet, basename='ticket')
router.register('activities', views.ActivityViewSet, basename='activity')

urlpatterns = [
    path('', include(router.urls)),
]

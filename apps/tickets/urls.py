from django.urls import path
from . import views

app_name = 'tickets'

urlpatterns = [
    path('', views.ticket_list_view, name='ticket_list'),
    path('create/', views.ticket_create_view, name='ticket_create'),
    path('<int:pk>/', views.ticket_detail_view, name='ticket_detail'),
    path('<int:pk>/edit/', views.ticket_edit_view, name='ticket_edit'),
    path('<int:pk>/reply/', views.ticket_reply_view, name='ticket_reply'),
    path('<int:pk>/change-status/', views.ticket_change_status_view, name='ticket_change_status'),
    path('<int:pk>/delete/', views.ticket_delete_view, name='ticket_delete'),
]

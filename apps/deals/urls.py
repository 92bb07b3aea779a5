from django.urls import path
from . import views

app_name = 'deals'

urlpatterns = [
    path('', views.deal_list_view, name='deal_list'),
    path('kanban/', views.deal_kanban_view, name='deal_kanban'),
    path('create/', views.deal_create_view, name='deal_create'),
    path('export/', views.deal_export_view, name='deal_export'),
    path('import/', views.deal_import_view, name='deal_import'),
    path('import/map/', views.deal_import_map_view, name='deal_import_map'),
    path('import/template/', views.deal_template_view, name='deal_template'),
    path('<int:pk>/', views.deal_detail_view, name='deal_detail'),
    path('<int:pk>/edit/', views.deal_edit_view, name='deal_edit'),
    path('<int:pk>/change-status/', views.deal_change_status_view, name='deal_change_status'),
    path('<int:pk>/delete/', views.deal_delete_view, name='deal_delete'),
]

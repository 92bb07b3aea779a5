from django.urls import path
from . import views

app_name = 'invoices'

urlpatterns = [
    path('', views.invoice_list_view, name='invoice_list'),
    path('create/', views.invoice_create_view, name='invoice_create'),
    path('export/', views.invoice_export_view, name='invoice_export'),
    path('import/', views.invoice_import_view, name='invoice_import'),
    path('import/map/', views.invoice_import_map_view, name='invoice_import_map'),
    path('import/template/', views.invoice_template_view, name='invoice_template'),
    path('<int:pk>/', views.invoice_detail_view, name='invoice_detail'),
    path('<int:pk>/preview/', views.invoice_preview_view, name='invoice_preview'),
    path('<int:pk>/edit/', views.invoice_edit_view, name='invoice_edit'),
    path('<int:pk>/change-status/', views.invoice_change_status_view, name='invoice_change_status'),
    path('<int:pk>/delete/', views.invoice_delete_view, name='invoice_delete'),
]

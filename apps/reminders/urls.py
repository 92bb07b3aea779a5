from django.urls import path
from . import views

app_name = 'reminders'

urlpatterns = [
    path('', views.reminder_list_view, name='reminder_list'),
    path('create/', views.reminder_create_view, name='reminder_create'),
    path('export/', views.reminder_export_view, name='reminder_export'),
    path('import/', views.reminder_import_view, name='reminder_import'),
    path('import/map/', views.reminder_import_map_view, name='reminder_import_map'),
    path('import/template/', views.reminder_template_view, name='reminder_template'),
    path('<int:pk>/edit/', views.reminder_edit_view, name='reminder_edit'),
    path('<int:pk>/toggle/', views.reminder_toggle_view, name='reminder_toggle'),
    path('<int:pk>/delete/', views.reminder_delete_view, name='reminder_delete'),
]

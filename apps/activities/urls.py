from django.urls import path
from . import views

app_name = 'activities'

urlpatterns = [
    path('', views.activity_list_view, name='activity_list'),
    path('create/', views.activity_create_view, name='activity_create'),
    path('<int:pk>/delete/', views.activity_delete_view, name='activity_delete'),
]

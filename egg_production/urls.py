"""
Egg Production URL Configuration
"""

from django.urls import path

from core.api import with_trailing_slash

from .views import EggProductionDetailView, EggProductionListCreateView, EggProductionSummaryView

app_name = 'egg_production'

urlpatterns = with_trailing_slash([
    path('egg-production', EggProductionListCreateView.as_view(), name='egg-production-list'),
    path('egg-production/summary', EggProductionSummaryView.as_view(), name='egg-production-summary'),
    path('egg-production/<uuid:pk>', EggProductionDetailView.as_view(), name='egg-production-detail'),
])

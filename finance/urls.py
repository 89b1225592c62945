"""
Finance URL Configuration
"""

from django.urls import path

from core.api import with_trailing_slash

from .views import FinancialRecordDetailView, FinancialRecordListCreateView, FinancialSummaryView

app_name = 'finance'

urlpatterns = with_trailing_slash([
    path('financial-records', FinancialRecordListCreateView.as_view(), name='financial-record-list'),
    path('financial-records/summary', FinancialSummaryView.as_view(), name='financial-record-summary'),
    path('financial-records/<uuid:pk>', FinancialRecordDetailView.as_view(), name='financial-record-detail'),
])

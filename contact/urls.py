"""
Contact Management URL Configuration
"""
from django.urls import path

from core.api import with_trailing_slash

from .views import ContactFormSubmitView, ContactEmailTestView

app_name = 'contact'

urlpatterns = with_trailing_slash([
    path('contact', ContactFormSubmitView.as_view(), name='submit'),
    path('contact/test', ContactEmailTestView.as_view(), name='test'),
])

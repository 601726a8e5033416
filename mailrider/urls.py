"""mailrider URL Configuration

The `urlpatterns` list routes URLs to views. For more information please see:
    https://docs.djangoproject.com/en/4.2/topics/http/urls/
"""

from django.conf import settings
from django.urls import path, include

urlpatterns = []

# Dynamically add URL patterns based on enabled apps
if settings.APP_MAILSERVER_ENABLED:
    from app_mailserver import urls as app_mailserver_urls
    urlpatterns.append(path('api/mail/', include(app_mailserver_urls)))

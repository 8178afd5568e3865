"""analysis アプリの URL 設定 — 月度の分析画面."""

from django.urls import path
from . import views

urlpatterns = [
    path("", views.analysis_view, name="analysis"),
]

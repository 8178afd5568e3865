"""dashboard アプリの URL 設定 — ホームと設定画面."""

from django.urls import path
from . import views

urlpatterns = [
    path("", views.home_view, name="home"),                         # ホーム
    path("income/", views.income_update, name="income_update"),     # 手取り収入のクイック編集 (POST)
    path("settings/", views.settings_view, name="settings"),
    path("settings/categories/new/", views.category_create, name="category_create"),
    path("settings/categories/<int:pk>/toggle/", views.category_toggle, name="category_toggle"),
    path("settings/categories/<int:pk>/budget/", views.category_budget, name="category_budget"),
]

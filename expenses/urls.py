"""expenses アプリの URL 設定 — 支出の記録・編集・削除とデータ管理."""

from django.urls import path
from . import views

urlpatterns = [
    path("", views.expense_create, name="expense_create"),
    path("<int:pk>/", views.expense_update, name="expense_update"),
    path("<int:pk>/delete/", views.expense_delete, name="expense_delete"),

    # データ管理
    path("export/", views.export_csv, name="export_csv"),
    path("delete-all/", views.delete_all, name="delete_all"),
]

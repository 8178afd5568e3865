"""salarybook プロジェクトのルート URL 設定.

各 Django アプリの URL 設定を include() で委譲する。
- /            → ホーム・設定 (dashboard アプリ)
- /record/     → 支出の記録・編集・削除、CSV エクスポート (expenses アプリ)
- /analysis/   → 月度の分析 (analysis アプリ)
- /admin/      → Django 管理画面
"""

from django.contrib import admin
from django.urls import path, include

urlpatterns = [
    path("", include("dashboard.urls")),
    path("record/", include("expenses.urls")),
    path("analysis/", include("analysis.urls")),
    path("admin/", admin.site.urls),
]

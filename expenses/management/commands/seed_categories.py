"""初期カテゴリの作成コマンド.

使い方: python manage.py seed_categories

食費・日用品・交通など 8 個の初期カテゴリを作る。同じ名前のカテゴリ（無効なものも含む）があれば作らないので、何度実行しても重複しない。
並び順は定義順。既存カテゴリの並び順やアイコンは変更しない。
"""

from django.core.management.base import BaseCommand
from expenses.models import Category


class Command(BaseCommand):
    help = "初期カテゴリ（食費・日用品・交通など）を作成します。"

    def handle(self, *args, **options):
        defaults = [
            ("食費", "🍚"),
            ("外食", "🍜"),
            ("日用品", "🧴"),
            ("交通", "🚃"),
            ("娯楽", "🎮"),
            ("衣服", "👕"),
            ("医療", "💊"),
            ("その他", "📦"),
        ]

        created = 0
        for order, (name, icon) in enumerate(defaults, start=1):
            # 無効なカテゴリも含めて同名があれば作らない
            if Category.objects.filter(name=name).exists():
                continue
            Category.objects.create(name=name, icon=icon, sort_order=order, is_default=True)
            created += 1

        self.stdout.write(self.style.SUCCESS(f"Done. created={created}"))

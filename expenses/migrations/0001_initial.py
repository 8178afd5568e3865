import django.core.validators
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Category",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=50, verbose_name="カテゴリ名")),
                ("icon", models.CharField(default="📌", max_length=16, verbose_name="アイコン")),
                ("sort_order", models.IntegerField(default=0, verbose_name="並び順")),
                ("is_default", models.BooleanField(default=False, verbose_name="初期カテゴリ")),
                ("is_active", models.BooleanField(default=True, verbose_name="有効")),
                ("budget_amount", models.PositiveIntegerField(blank=True, null=True, verbose_name="予算")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "verbose_name": "カテゴリ",
                "verbose_name_plural": "カテゴリ",
                "db_table": "personal_categories",
                "ordering": ["sort_order", "id"],
            },
        ),
        migrations.CreateModel(
            name="Expense",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("amount", models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(1)], verbose_name="金額")),
                ("category", models.CharField(max_length=50, verbose_name="カテゴリ")),
                ("payment_method", models.CharField(
                    choices=[("cash", "現金"), ("e-pay", "電子決済"), ("ic-card", "交通IC"), ("credit", "クレカ")],
                    default="e-pay", max_length=10, verbose_name="支払い方法",
                )),
                ("memo", models.CharField(blank=True, default="", max_length=255, verbose_name="メモ")),
                ("expense_date", models.DateField(verbose_name="日付")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "db_table": "personal_expenses",
                "ordering": ["-expense_date", "-created_at"],
                "indexes": [models.Index(fields=["expense_date"], name="expense_date_idx")],
            },
        ),
        migrations.CreateModel(
            name="FixedCost",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=50, verbose_name="名前")),
                ("amount", models.PositiveIntegerField(verbose_name="金額")),
                ("payer", models.CharField(blank=True, max_length=50, verbose_name="支払者")),
                ("is_active", models.BooleanField(default=True, verbose_name="有効")),
                ("sort_order", models.IntegerField(default=0, verbose_name="並び順")),
            ],
            options={
                "verbose_name": "固定費",
                "verbose_name_plural": "固定費",
                "db_table": "fixed_costs",
                "ordering": ["sort_order", "id"],
            },
        ),
        migrations.CreateModel(
            name="MonthlySavings",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("year", models.IntegerField(verbose_name="年")),
                ("month", models.IntegerField(verbose_name="月")),
                ("person", models.CharField(max_length=50, verbose_name="名前")),
                ("amount", models.IntegerField(verbose_name="貯蓄額")),
            ],
            options={
                "verbose_name": "月別貯蓄",
                "verbose_name_plural": "月別貯蓄",
                "db_table": "monthly_savings",
            },
        ),
        migrations.CreateModel(
            name="PersonalSettings",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("monthly_income", models.PositiveIntegerField(default=0, verbose_name="月の手取り収入")),
                ("savings_source", models.CharField(
                    choices=[("manual", "手入力"), ("external", "家計簿から取得")],
                    default="manual", max_length=10, verbose_name="貯蓄の取得元",
                )),
                ("savings_amount", models.PositiveIntegerField(default=0, verbose_name="貯蓄額")),
                ("savings_percent", models.DecimalField(
                    blank=True, decimal_places=2, max_digits=5, null=True,
                    validators=[
                        django.core.validators.MinValueValidator(0),
                        django.core.validators.MaxValueValidator(100),
                    ],
                    verbose_name="貯蓄率(%)",
                )),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "設定",
                "verbose_name_plural": "設定",
                "db_table": "personal_settings",
            },
        ),
        migrations.CreateModel(
            name="UtilityBill",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("period", models.CharField(db_index=True, max_length=7, verbose_name="月度")),
                ("type", models.CharField(
                    choices=[("electric", "電気"), ("gas", "ガス"), ("water", "水道")],
                    max_length=10, verbose_name="種類",
                )),
                ("amount", models.PositiveIntegerField(verbose_name="金額")),
                ("payer", models.CharField(blank=True, max_length=50, verbose_name="支払者")),
            ],
            options={
                "verbose_name": "光熱費",
                "verbose_name_plural": "光熱費",
                "db_table": "utility_bills",
            },
        ),
    ]

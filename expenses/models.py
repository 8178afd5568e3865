"""expenses アプリのモデル — 家計管理のデータスキーマ.

自分で記録・編集するもの:
- PersonalSettings : 手取り収入と先取り貯蓄の設定（1 行だけ使う）
- Category         : 支出カテゴリ（アイコン・並び順・予算）
- Expense          : 個々の支出

ワリカン・家計簿アプリ側が持つもの（このアプリからは読むだけ）:
- FixedCost        : 二人で折半する固定費
- UtilityBill      : 月度ごとの光熱費
- MonthlySavings   : 家計簿の月ごとの貯蓄額
"""

from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from budget.calculator import SavingsSource

DEFAULT_CATEGORY_ICON = "📌"
UNKNOWN_CATEGORY_ICON = "📦"


class PersonalSettings(models.Model):
    """収入・貯蓄の設定.

    savings_source が external のときは家計簿の MonthlySavings を使い、
    manual のときは savings_percent（設定があれば優先）か savings_amount を使う。
    """

    SOURCE_CHOICES = [
        (SavingsSource.MANUAL.value, "手入力"),
        (SavingsSource.EXTERNAL.value, "家計簿から取得"),
    ]

    monthly_income = models.PositiveIntegerField("月の手取り収入", default=0)
    savings_source = models.CharField(
        "貯蓄の取得元", max_length=10, choices=SOURCE_CHOICES,
        default=SavingsSource.MANUAL.value,
    )
    savings_amount = models.PositiveIntegerField("貯蓄額", default=0)
    savings_percent = models.DecimalField(
        "貯蓄率(%)", max_digits=5, decimal_places=2, null=True, blank=True,
        validators=[MinValueValidator(0), MaxValueValidator(100)],
    )
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"手取り {self.monthly_income:,}円"

    class Meta:
        db_table = "personal_settings"
        verbose_name = "設定"
        verbose_name_plural = "設定"


class Category(models.Model):
    """支出カテゴリ.

    支出はカテゴリ名で紐づくため、名前を変えると過去の支出はこのカテゴリに集計されなくなる。
    is_active=False のカテゴリは入力画面と集計から外れる（論理削除）。
    """

    name = models.CharField("カテゴリ名", max_length=50)
    icon = models.CharField("アイコン", max_length=16, default=DEFAULT_CATEGORY_ICON)
    sort_order = models.IntegerField("並び順", default=0)
    is_default = models.BooleanField("初期カテゴリ", default=False)
    is_active = models.BooleanField("有効", default=True)
    budget_amount = models.PositiveIntegerField("予算", null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.icon} {self.name}"

    class Meta:
        db_table = "personal_categories"
        ordering = ["sort_order", "id"]
        verbose_name = "カテゴリ"
        verbose_name_plural = "カテゴリ"


class Expense(models.Model):
    """1 件の支出. 削除は物理削除のみ."""

    CASH = "cash"
    E_PAY = "e-pay"
    IC_CARD = "ic-card"
    CREDIT = "credit"
    PAYMENT_CHOICES = [
        (CASH, "現金"),
        (E_PAY, "電子決済"),
        (IC_CARD, "交通IC"),
        (CREDIT, "クレカ"),
    ]
    PAYMENT_ICONS = {
        CASH: "💴",
        E_PAY: "📱",
        IC_CARD: "🚃",
        CREDIT: "💳",
    }

    amount = models.PositiveIntegerField("金額", validators=[MinValueValidator(1)])
    category = models.CharField("カテゴリ", max_length=50)
    payment_method = models.CharField(
        "支払い方法", max_length=10, choices=PAYMENT_CHOICES, default=E_PAY
    )
    memo = models.CharField("メモ", max_length=255, blank=True, default="")
    expense_date = models.DateField("日付")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def payment_icon(self):
        return self.PAYMENT_ICONS[self.payment_method]

    def __str__(self):
        return f"{self.expense_date} {self.category} {self.amount:,}円"

    class Meta:
        db_table = "personal_expenses"
        ordering = ["-expense_date", "-created_at"]
        indexes = [
            models.Index(fields=["expense_date"], name="expense_date_idx"),
        ]


# ──────────────────────────────────
# ワリカン・家計簿アプリのテーブル（読み取り専用）
# ──────────────────────────────────

class FixedCost(models.Model):
    name = models.CharField("名前", max_length=50)
    amount = models.PositiveIntegerField("金額")
    payer = models.CharField("支払者", max_length=50, blank=True)
    is_active = models.BooleanField("有効", default=True)
    sort_order = models.IntegerField("並び順", default=0)

    def __str__(self):
        return f"{self.name} {self.amount:,}円"

    class Meta:
        db_table = "fixed_costs"
        ordering = ["sort_order", "id"]
        verbose_name = "固定費"
        verbose_name_plural = "固定費"


class UtilityBill(models.Model):
    """光熱費. period は月度の 'YYYY-MM'."""

    ELECTRIC = "electric"
    GAS = "gas"
    WATER = "water"
    TYPE_CHOICES = [
        (ELECTRIC, "電気"),
        (GAS, "ガス"),
        (WATER, "水道"),
    ]

    period = models.CharField("月度", max_length=7, db_index=True)
    type = models.CharField("種類", max_length=10, choices=TYPE_CHOICES)
    amount = models.PositiveIntegerField("金額")
    payer = models.CharField("支払者", max_length=50, blank=True)

    def __str__(self):
        return f"{self.period} {self.get_type_display()} {self.amount:,}円"

    class Meta:
        db_table = "utility_bills"
        verbose_name = "光熱費"
        verbose_name_plural = "光熱費"


class MonthlySavings(models.Model):
    year = models.IntegerField("年")
    month = models.IntegerField("月")
    person = models.CharField("名前", max_length=50)
    amount = models.IntegerField("貯蓄額")

    def __str__(self):
        return f"{self.year}-{self.month:02d} {self.person} {self.amount:,}円"

    class Meta:
        db_table = "monthly_savings"
        verbose_name = "月別貯蓄"
        verbose_name_plural = "月別貯蓄"

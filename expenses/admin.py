"""expenses アプリの Django Admin 設定.

自分のデータ（設定・カテゴリ・支出）と、ワリカン・家計簿側のテーブルをすべて登録する。
"""

from django.contrib import admin
from .models import Category, Expense, FixedCost, MonthlySavings, PersonalSettings, UtilityBill


@admin.register(PersonalSettings)
class PersonalSettingsAdmin(admin.ModelAdmin):
    list_display = ["monthly_income", "savings_source", "savings_amount", "savings_percent", "updated_at"]


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    """カテゴリ — 有効/無効で絞り込み、並び順をその場で編集."""
    list_display = ["name", "icon", "sort_order", "is_active", "budget_amount"]
    list_editable = ["sort_order", "is_active"]
    list_filter = ["is_active", "is_default"]


@admin.register(Expense)
class ExpenseAdmin(admin.ModelAdmin):
    """支出 — 支払い方法・日付・カテゴリで絞り込み、メモを検索."""
    list_display = ["expense_date", "category", "amount", "payment_method", "memo"]
    list_filter = ["payment_method", "expense_date", "category"]
    search_fields = ["memo", "category"]
    date_hierarchy = "expense_date"


@admin.register(FixedCost)
class FixedCostAdmin(admin.ModelAdmin):
    list_display = ["name", "amount", "payer", "is_active", "sort_order"]
    list_filter = ["is_active"]


@admin.register(UtilityBill)
class UtilityBillAdmin(admin.ModelAdmin):
    list_display = ["period", "type", "amount", "payer"]
    list_filter = ["period", "type"]


@admin.register(MonthlySavings)
class MonthlySavingsAdmin(admin.ModelAdmin):
    list_display = ["year", "month", "person", "amount"]
    list_filter = ["person"]

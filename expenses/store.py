"""画面と予算計算が使うデータ取得関数.

どの関数も欠けたデータを例外にしない。合計は 0、見つからない行は None を返す。
"""

import logging

from django.conf import settings
from django.db.models import Sum

from .models import (
    UNKNOWN_CATEGORY_ICON,
    Category,
    Expense,
    FixedCost,
    MonthlySavings,
    PersonalSettings,
    UtilityBill,
)

logger = logging.getLogger(__name__)


def expenses_in_range(start, end):
    """start〜end（両端を含む）の支出。新しい順."""
    return Expense.objects.filter(expense_date__gte=start, expense_date__lte=end)


def expense_total_in_range(start, end):
    return expenses_in_range(start, end).aggregate(s=Sum("amount"))["s"] or 0


def active_categories():
    return Category.objects.filter(is_active=True).order_by("sort_order", "id")


def current_settings():
    return PersonalSettings.objects.order_by("id").first()


def fixed_costs():
    return FixedCost.objects.filter(is_active=True)


def shared_fixed_cost_total():
    return fixed_costs().aggregate(s=Sum("amount"))["s"] or 0


def utility_bills(period_key):
    return UtilityBill.objects.filter(period=period_key).order_by("id")


def shared_utility_total(period_key):
    return utility_bills(period_key).aggregate(s=Sum("amount"))["s"] or 0


def external_savings_figure(year, month):
    """家計簿側のその月度の貯蓄額。なければ None."""
    qs = MonthlySavings.objects.filter(year=year, month=month)
    person = settings.SALARYBOOK_SAVINGS_PERSON
    if person:
        qs = qs.filter(person=person)
    row = qs.order_by("id").first()
    if row is None:
        logger.debug("no external savings for %s-%02d", year, month)
        return None
    return row.amount


def with_icons(expenses, categories):
    """各支出にカテゴリのアイコンを付ける。一致するカテゴリがなければ 📦."""
    icons = {c.name: c.icon for c in categories}
    expenses = list(expenses)
    for e in expenses:
        e.icon = icons.get(e.category, UNKNOWN_CATEGORY_ICON)
    return expenses

"""dashboard アプリのビュー — ホーム（今月のお金の流れ）と設定画面.

home_view            : 月度の収入 → 貯蓄・固定費・光熱費 → 使える額 → 残額、1日あたりの予算
income_update        : ホームからの手取り収入のクイック編集 (POST)
settings_view        : 収入・先取り貯蓄の設定、固定費・光熱費・カテゴリの一覧
category_create      : カテゴリ追加 (POST)
category_toggle      : カテゴリの有効/無効の切り替え (POST)
category_budget      : カテゴリ予算の更新 (POST)

「今日」はリクエストごとに一度だけ localdate() で読み、月度と残り日数の両方に使う。
"""

import logging

from django.contrib import messages
from django.db.models import Max
from django.shortcuts import get_object_or_404, redirect, render
from django.urls import reverse
from django.utils.timezone import localdate
from django.views.decorators.http import require_POST

from budget.calculator import (
    SavingsSource,
    category_spending,
    derive_budget,
    resolve_savings,
    shared_share,
    total_amount,
)
from budget.cycle import (
    adjacent_period,
    current_period,
    period_key,
    previous_period_month,
    remaining_days,
    resolve_period,
)
from expenses import store
from expenses.models import Category, PersonalSettings
from .forms import CategoryBudgetForm, CategoryForm, IncomeForm, SettingsForm

logger = logging.getLogger(__name__)

RECENT_EXPENSE_COUNT = 5


def usage_level(usage_percent):
    """使用率バーの色分け: 70% まで ok、90% まで warn、それ以上 over."""
    if usage_percent <= 70:
        return "ok"
    if usage_percent <= 90:
        return "warn"
    return "over"


def _savings_for(settings_row, income, year, month):
    if settings_row is None:
        return 0
    external = None
    if settings_row.savings_source == SavingsSource.EXTERNAL.value:
        external = store.external_savings_figure(year, month)
    return resolve_savings(
        income,
        settings_row.savings_source,
        settings_row.savings_amount,
        settings_row.savings_percent,
        external,
    )


def load_budget(period, today):
    """月度の予算サマリーと、その計算に使った支出・カテゴリをまとめて返す.

    光熱費は請求の遅れに合わせて、表示中の月度の一つ前の月度の分を使う。
    """
    settings_row = store.current_settings()
    income = settings_row.monthly_income if settings_row else 0
    utility_period = adjacent_period(period.year, period.month, -1)
    expenses = list(store.expenses_in_range(period.start, period.end))

    summary = derive_budget(
        income=income,
        savings=_savings_for(settings_row, income, period.year, period.month),
        fixed_cost_total=store.shared_fixed_cost_total(),
        utility_total=store.shared_utility_total(utility_period.key),
        expense_total=total_amount(expenses),
        remaining_days=remaining_days(period.end, today),
    )
    return {
        "settings": settings_row,
        "summary": summary,
        "utility_period": utility_period,
        "expenses": expenses,
    }


def home_view(request):
    """ホーム画面. ?period=YYYY-MM で表示する月度を切り替える."""
    today = localdate()
    period = resolve_period(request.GET.get("period"), today)
    data = load_budget(period, today)
    summary = data["summary"]

    categories = list(store.active_categories())
    spending = category_spending(categories, data["expenses"])
    max_spent = spending[0]["spent"] if spending else 1

    settings_row = data["settings"]
    return render(request, "dashboard/home.html", {
        "period": period,
        "prev_period": adjacent_period(period.year, period.month, -1),
        "next_period": adjacent_period(period.year, period.month, 1),
        "settings": settings_row,
        "is_external_savings": bool(
            settings_row and settings_row.savings_source == SavingsSource.EXTERNAL.value
        ),
        "summary": summary,
        "usage_level": usage_level(summary.usage_percent),
        "usage_bar": min(summary.usage_percent, 100),
        "utility_period": data["utility_period"],
        "category_spending": spending,
        "max_spent": max_spent,
        "recent_expenses": store.with_icons(data["expenses"][:RECENT_EXPENSE_COUNT], categories),
    })


@require_POST
def income_update(request):
    """手取り収入だけを更新してホームに戻る."""
    form = IncomeForm(request.POST, instance=store.current_settings() or PersonalSettings())
    if form.is_valid():
        settings_row = form.save()
        logger.info("monthly income updated to %s", settings_row.monthly_income)
    else:
        messages.error(request, "手取り収入は 0 以上の数字で入力してください。")

    url = reverse("home")
    period = request.POST.get("period")
    if period:
        url += f"?period={period}"
    return redirect(url)


def settings_view(request):
    """設定画面. 固定費・光熱費はワリカンアプリの値を表示するだけで編集はできない."""
    today = localdate()
    settings_row = store.current_settings() or PersonalSettings.objects.create()

    if request.method == "POST":
        form = SettingsForm(request.POST, instance=settings_row)
        if form.is_valid():
            form.save()
            logger.info("settings saved source=%s", settings_row.savings_source)
            messages.success(request, "保存しました")
            return redirect("settings")
    else:
        form = SettingsForm(instance=settings_row)

    period = current_period(today)
    prev_year, prev_month = previous_period_month(today)
    utility_key = period_key(prev_year, prev_month)

    fixed = list(store.fixed_costs())
    fixed_total = sum(c.amount for c in fixed)
    utilities = list(store.utility_bills(utility_key))
    utility_total = sum(u.amount for u in utilities)

    return render(request, "dashboard/settings.html", {
        "form": form,
        "settings": settings_row,
        "period": period,
        "external_savings": store.external_savings_figure(period.year, period.month),
        "fixed_costs": fixed,
        "fixed_total": fixed_total,
        "fixed_share": shared_share(fixed_total),
        "utility_month": prev_month,
        "utilities": utilities,
        "utility_total": utility_total,
        "utility_share": shared_share(utility_total),
        "categories": Category.objects.order_by("sort_order", "id"),
        "category_form": CategoryForm(),
    })


@require_POST
def category_create(request):
    """カテゴリを追加. 並び順は既存カテゴリの最大値 + 1."""
    form = CategoryForm(request.POST)
    if form.is_valid():
        category = form.save(commit=False)
        max_order = Category.objects.aggregate(m=Max("sort_order"))["m"] or 0
        category.sort_order = max_order + 1
        category.is_default = False
        category.is_active = True
        category.save()
        logger.info("category created name=%s", category.name)
    else:
        for errors in form.errors.values():
            for error in errors:
                messages.error(request, error)
    return redirect("settings")


@require_POST
def category_toggle(request, pk):
    """有効/無効の切り替え. 同じ名前の有効なカテゴリがあるときは有効に戻せない."""
    category = get_object_or_404(Category, pk=pk)
    if not category.is_active and Category.objects.filter(
        name=category.name, is_active=True
    ).exclude(pk=pk).exists():
        messages.error(request, "同じ名前のカテゴリがすでにあります。")
        return redirect("settings")
    category.is_active = not category.is_active
    category.save(update_fields=["is_active"])
    return redirect("settings")


@require_POST
def category_budget(request, pk):
    category = get_object_or_404(Category, pk=pk)
    form = CategoryBudgetForm(request.POST, instance=category)
    if form.is_valid():
        form.save()
    else:
        messages.error(request, "予算は 0 以上の数字で入力してください。")
    return redirect("settings")

"""analysis アプリのビュー — 月度の消費分析.

analysis_view() は次をまとめて表示する:
  1. カテゴリ別の割合（円グラフ用の開始・終了パーセント付き）
  2. 前月度とのカテゴリ別比較（↑ / ↓ / ±0、予算オーバー）
  3. 直近 6 月度の消費合計の推移
  4. カテゴリ・支払い方法で絞り込める支出一覧
"""

from django.shortcuts import render
from django.utils.timezone import localdate

from budget.calculator import category_comparison, percent_of, total_amount
from budget.cycle import adjacent_period, resolve_period
from expenses import store
from .forms import ExpenseFilterForm

TREND_PERIODS = 6
COLORS = ["#059669", "#0ea5e9", "#f59e0b", "#ef4444", "#8b5cf6", "#ec4899", "#14b8a6"]


def _period_trend(period, count=TREND_PERIODS):
    """period を含む直近 count 月度の消費合計（古い順）."""
    result = []
    p = period
    for i in range(count):
        if i > 0:
            p = adjacent_period(p.year, p.month, -1)
        result.append({
            "label": f"{p.month}月",
            "key": p.key,
            "total": store.expense_total_in_range(p.start, p.end),
        })
    result.reverse()
    return result


def _pie_data(breakdown, total_spent):
    """今月度に支出のあるカテゴリの割合と、CSS の円グラフ用の累積パーセント."""
    data = []
    cumulative = 0
    for i, row in enumerate(r for r in breakdown if r["spent"] > 0):
        pct = percent_of(row["spent"], total_spent)
        data.append({
            "label": f"{row['icon']}{row['name']}",
            "value": row["spent"],
            "pct": pct,
            "start": cumulative,
            "end": cumulative + pct,
            "color": COLORS[i % len(COLORS)],
        })
        cumulative += pct
    return data


def analysis_view(request):
    today = localdate()
    period = resolve_period(request.GET.get("period"), today)
    prev = adjacent_period(period.year, period.month, -1)

    expenses = list(store.expenses_in_range(period.start, period.end))
    prev_expenses = list(store.expenses_in_range(prev.start, prev.end))
    categories = list(store.active_categories())

    breakdown = category_comparison(categories, expenses, prev_expenses)
    total_spent = total_amount(expenses)

    # ── 絞り込み ──
    # 不正な値のフィールドだけを無視する
    form = ExpenseFilterForm(request.GET)
    form.is_valid()
    selected_category = form.cleaned_data.get("category", "")
    selected_payment = form.cleaned_data.get("payment", "")
    filtered = [
        e for e in expenses
        if (not selected_category or e.category == selected_category)
        and (not selected_payment or e.payment_method == selected_payment)
    ]

    trend = _period_trend(period)
    max_trend = max((t["total"] for t in trend), default=0) or 1

    return render(request, "analysis/analysis.html", {
        "period": period,
        "prev_period": prev,
        "next_period": adjacent_period(period.year, period.month, 1),
        "categories": categories,
        "breakdown": breakdown,
        "total_spent": total_spent,
        "pie_data": _pie_data(breakdown, total_spent),
        "trend": trend,
        "max_trend": max_trend,
        "has_trend": any(t["total"] > 0 for t in trend),
        "expenses": store.with_icons(filtered, categories),
        "selected_category": selected_category,
        "selected_payment": selected_payment,
    })

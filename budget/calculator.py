"""月度ごとの予算計算.

手取り収入から先取り貯蓄・固定費・光熱費（いずれも二人で折半した自分の負担分）を
引いて「今月使える額」を出し、記録済みの支出から残額・使用率・1日あたりの予算を求める。

  available       = income - savings - fixed_cost_share - utility_share
  remaining       = available - expense_total
  usage_percent   = round(expense_total / available * 100)   (available <= 0 のときは 0)
  daily_allowance = floor(remaining / remaining_days)

available / remaining / daily_allowance は負の値もそのまま返す（使いすぎの表示に使う）。
"""

import math
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

SHARE_SPLIT = 2  # 固定費・光熱費を負担する人数


class SavingsSource(str, Enum):
    MANUAL = "manual"
    EXTERNAL = "external"


class Trend(str, Enum):
    UP = "up"
    DOWN = "down"
    FLAT = "flat"


@dataclass(frozen=True)
class BudgetSummary:
    income: int
    savings: int
    fixed_cost_share: int
    utility_share: int
    available: int
    expense_total: int
    remaining: int
    remaining_days: int
    usage_percent: int
    daily_allowance: int


def resolve_savings(income, source, savings_amount=0, savings_percent=None, external_amount=None):
    """先取り貯蓄額を決める.

    1. 家計簿連携 (external) → 家計簿側のその月度の金額（なければ 0）
    2. 貯蓄率が設定されている → floor(income * percent / 100)
    3. それ以外 → 固定の貯蓄額
    """
    source = SavingsSource(source)
    if source is SavingsSource.EXTERNAL:
        return external_amount or 0
    if savings_percent is not None:
        return math.floor(Decimal(income) * Decimal(str(savings_percent)) / 100)
    return savings_amount or 0


def shared_share(total):
    """共有費用の自分の負担分（切り捨て）."""
    return total // SHARE_SPLIT


def percent_of(part, whole):
    """part / whole * 100 を四捨五入 (0.5 は切り上げ)。whole が 0 以下なら 0."""
    if whole <= 0:
        return 0
    # 整数演算で誤差を出さない
    return (part * 200 + whole) // (whole * 2)


def derive_budget(income, savings, fixed_cost_total, utility_total, expense_total, remaining_days):
    fixed_cost_share = shared_share(fixed_cost_total)
    utility_share = shared_share(utility_total)
    available = income - savings - fixed_cost_share - utility_share
    remaining = available - expense_total

    usage_percent = percent_of(expense_total, available)
    if remaining_days > 0:
        daily_allowance = remaining // remaining_days
    else:
        daily_allowance = 0

    return BudgetSummary(
        income=income,
        savings=savings,
        fixed_cost_share=fixed_cost_share,
        utility_share=utility_share,
        available=available,
        expense_total=expense_total,
        remaining=remaining,
        remaining_days=remaining_days,
        usage_percent=usage_percent,
        daily_allowance=daily_allowance,
    )


def total_amount(expenses):
    return sum(e.amount for e in expenses)


def _spent_by_name(expenses):
    totals = {}
    for e in expenses:
        totals[e.category] = totals.get(e.category, 0) + e.amount
    return totals


def category_spending(categories, expenses):
    """カテゴリ別の消費額。支出のあるカテゴリだけを金額の大きい順に返す.

    支出とカテゴリはカテゴリ名で紐づける（名前を変えると過去の支出は紐づかなくなる）。
    """
    totals = _spent_by_name(expenses)
    rows = [
        {"category": cat, "spent": totals.get(cat.name, 0)}
        for cat in categories
    ]
    rows = [r for r in rows if r["spent"] > 0]
    return sorted(rows, key=lambda r: r["spent"], reverse=True)


def trend_of(diff):
    if diff > 0:
        return Trend.UP
    if diff < 0:
        return Trend.DOWN
    return Trend.FLAT


def category_comparison(categories, expenses, previous_expenses):
    """今月度と前月度のカテゴリ別比較。どちらかの月度に支出があるカテゴリのみ."""
    current = _spent_by_name(expenses)
    previous = _spent_by_name(previous_expenses)
    rows = []
    for cat in categories:
        spent = current.get(cat.name, 0)
        prev_spent = previous.get(cat.name, 0)
        if spent <= 0 and prev_spent <= 0:
            continue
        diff = spent - prev_spent
        rows.append({
            "name": cat.name,
            "icon": cat.icon,
            "spent": spent,
            "prev_spent": prev_spent,
            "budget": cat.budget_amount,
            "diff": diff,
            "trend": trend_of(diff).value,
            "over_budget": bool(cat.budget_amount) and spent > cat.budget_amount,
        })
    return rows

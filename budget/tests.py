from datetime import date, timedelta
from decimal import Decimal
from types import SimpleNamespace

from django.test import SimpleTestCase

from .calculator import (
    SavingsSource,
    category_comparison,
    category_spending,
    derive_budget,
    resolve_savings,
    shared_share,
    total_amount,
)
from .cycle import (
    adjacent_period,
    current_period,
    period_for_date,
    period_from_key,
    previous_period_month,
    remaining_days,
)


def _exp(amount, category):
    return SimpleNamespace(amount=amount, category=category)


def _cat(name, icon="📌", budget_amount=None):
    return SimpleNamespace(name=name, icon=icon, budget_amount=budget_amount)


class PeriodForDateTest(SimpleTestCase):
    def test_day_24_belongs_to_previous_period_across_year(self):
        p = period_for_date(date(2024, 1, 24))
        self.assertEqual((p.year, p.month), (2023, 12))
        self.assertEqual(p.start_str, "2023-12-25")
        self.assertEqual(p.end_str, "2024-01-24")

    def test_day_25_starts_new_period(self):
        p = period_for_date(date(2024, 1, 25))
        self.assertEqual((p.year, p.month), (2024, 1))
        self.assertEqual(p.start_str, "2024-01-25")
        self.assertEqual(p.end_str, "2024-02-24")

    def test_december_period_ends_in_january(self):
        p = period_for_date(date(2024, 12, 31))
        self.assertEqual((p.year, p.month), (2024, 12))
        self.assertEqual(p.end, date(2025, 1, 24))
        self.assertEqual(p.label, "12月度（12/25〜1/24）")

    def test_late_days_start_on_25th_of_same_month(self):
        d = date(2023, 1, 25)
        while d < date(2025, 1, 1):
            if d.day >= 25:
                self.assertEqual(period_for_date(d).start, date(d.year, d.month, 25))
            d += timedelta(days=1)

    def test_early_days_match_previous_calendar_month(self):
        for d in [date(2024, 3, 1), date(2024, 1, 10), date(2024, 7, 24)]:
            last_month = d.replace(day=1) - timedelta(days=1)
            self.assertEqual(
                period_for_date(d),
                period_for_date(last_month.replace(day=25)),
            )
            self.assertEqual(period_for_date(d).year, last_month.year)

    def test_periods_tile_the_calendar(self):
        d = date(2023, 11, 1)
        prev = period_for_date(d)
        while d < date(2025, 3, 1):
            d += timedelta(days=1)
            p = period_for_date(d)
            self.assertTrue(p.start <= d <= p.end)
            if p != prev:
                # 切り替わるのは 25 日で、前の月度の翌日から始まる
                self.assertEqual(d.day, 25)
                self.assertEqual(p.start, prev.end + timedelta(days=1))
                self.assertEqual(p, adjacent_period(prev.year, prev.month, 1))
            prev = p

    def test_label_and_key(self):
        p = period_for_date(date(2024, 3, 30))
        self.assertEqual(p.label, "3月度（3/25〜4/24）")
        self.assertEqual(p.key, "2024-03")
        self.assertEqual(p.month_label, "3月度")

    def test_current_period_uses_given_today(self):
        self.assertEqual(current_period(date(2024, 1, 24)).month, 12)


class AdjacentPeriodTest(SimpleTestCase):
    def test_december_to_january(self):
        p = adjacent_period(2024, 12, 1)
        self.assertEqual((p.year, p.month), (2025, 1))
        self.assertEqual(p.month_label, "1月度")
        self.assertEqual(p.start_str, "2025-01-25")
        self.assertEqual(p.end_str, "2025-02-24")

    def test_january_to_december(self):
        p = adjacent_period(2024, 1, -1)
        self.assertEqual((p.year, p.month), (2023, 12))
        self.assertEqual(p.end_str, "2024-01-24")

    def test_round_trip_all_months(self):
        for year in (2023, 2024):
            for month in range(1, 13):
                for direction in (1, -1):
                    p = adjacent_period(year, month, direction)
                    back = adjacent_period(p.year, p.month, -direction)
                    self.assertEqual((back.year, back.month), (year, month))

    def test_invalid_direction(self):
        with self.assertRaises(ValueError):
            adjacent_period(2024, 5, 2)


class PreviousPeriodMonthTest(SimpleTestCase):
    def test_rolls_back_over_year(self):
        # 2024-01-30 は 1月度 → 前は 2023年12月度
        self.assertEqual(previous_period_month(date(2024, 1, 30)), (2023, 12))

    def test_early_january(self):
        # 2024-01-10 は 2023年12月度 → 前は 11月度
        self.assertEqual(previous_period_month(date(2024, 1, 10)), (2023, 11))

    def test_february_before_payday(self):
        self.assertEqual(previous_period_month(date(2024, 2, 5)), (2023, 12))


class PeriodFromKeyTest(SimpleTestCase):
    def test_valid_key(self):
        p = period_from_key("2024-12")
        self.assertEqual(p, adjacent_period(2024, 11, 1))

    def test_invalid_keys(self):
        for key in ["", "2024", "2024-13", "2024-00", "abc-de", "0001-01", None]:
            with self.assertRaises(ValueError):
                period_from_key(key)


class RemainingDaysTest(SimpleTestCase):
    def test_includes_today(self):
        self.assertEqual(remaining_days(date(2024, 2, 24), today=date(2024, 2, 20)), 5)

    def test_last_day_is_one(self):
        self.assertEqual(remaining_days("2024-02-24", today=date(2024, 2, 24)), 1)

    def test_after_end_is_clamped(self):
        self.assertEqual(remaining_days("2024-02-24", today=date(2024, 3, 10)), 1)

    def test_full_period(self):
        p = period_for_date(date(2024, 1, 25))
        self.assertEqual(remaining_days(p.end, today=p.start), 31)


class ResolveSavingsTest(SimpleTestCase):
    def test_external_figure(self):
        self.assertEqual(resolve_savings(300000, "external", 50000, 10, external_amount=40000), 40000)

    def test_external_missing_is_zero(self):
        self.assertEqual(resolve_savings(300000, SavingsSource.EXTERNAL, 50000, 10), 0)

    def test_percent_overrides_amount(self):
        self.assertEqual(resolve_savings(300000, "manual", 50000, 10), 30000)

    def test_percent_is_floored(self):
        self.assertEqual(resolve_savings(123457, "manual", 0, Decimal("12.5")), 15432)

    def test_amount_when_no_percent(self):
        self.assertEqual(resolve_savings(300000, "manual", 50000, None), 50000)

    def test_unknown_source_fails_fast(self):
        with self.assertRaises(ValueError):
            resolve_savings(300000, "kakeibo", 0, None)


class DeriveBudgetTest(SimpleTestCase):
    def test_salary_with_percent_savings(self):
        savings = resolve_savings(300000, "manual", 0, 10)
        s = derive_budget(300000, savings, 40000, 10000, 100000, remaining_days=10)
        self.assertEqual(s.savings, 30000)
        self.assertEqual(s.fixed_cost_share, 20000)
        self.assertEqual(s.utility_share, 5000)
        self.assertEqual(s.available, 245000)
        self.assertEqual(s.remaining, 145000)
        self.assertEqual(s.usage_percent, 41)
        self.assertEqual(s.daily_allowance, 14500)

    def test_negative_available(self):
        s = derive_budget(10000, 0, 20000, 10000, 0, remaining_days=3)
        self.assertEqual(s.available, -5000)
        self.assertEqual(s.usage_percent, 0)
        self.assertEqual(s.daily_allowance, -1667)

    def test_usage_is_zero_when_nothing_available(self):
        s = derive_budget(0, 0, 0, 0, 50000, remaining_days=5)
        self.assertEqual(s.usage_percent, 0)
        self.assertEqual(s.remaining, -50000)

    def test_usage_rounds_half_up(self):
        s = derive_budget(200, 0, 0, 0, 1, remaining_days=1)
        self.assertEqual(s.usage_percent, 1)  # 0.5 → 1

    def test_shares_floor_odd_totals(self):
        self.assertEqual(shared_share(10001), 5000)
        s = derive_budget(100000, 0, 3, 5, 0, remaining_days=1)
        self.assertEqual((s.fixed_cost_share, s.utility_share), (1, 2))


class CategoryBreakdownTest(SimpleTestCase):
    def setUp(self):
        self.food = _cat("食費", "🍚", budget_amount=30000)
        self.daily = _cat("日用品", "🧴")
        self.fun = _cat("娯楽", "🎮")
        self.categories = [self.food, self.daily, self.fun]

    def test_spending_sorted_and_filtered(self):
        expenses = [_exp(1000, "日用品"), _exp(5000, "食費"), _exp(700, "食費"), _exp(99, "旧カテゴリ")]
        rows = category_spending(self.categories, expenses)
        self.assertEqual([r["category"].name for r in rows], ["食費", "日用品"])
        self.assertEqual(rows[0]["spent"], 5700)
        self.assertEqual(total_amount(expenses), 6799)

    def test_comparison_trend(self):
        current = [_exp(40000, "食費"), _exp(1000, "日用品")]
        previous = [_exp(20000, "食費"), _exp(1000, "日用品"), _exp(3000, "娯楽")]
        rows = {r["name"]: r for r in category_comparison(self.categories, current, previous)}
        self.assertEqual(rows["食費"]["trend"], "up")
        self.assertEqual(rows["食費"]["diff"], 20000)
        self.assertTrue(rows["食費"]["over_budget"])
        self.assertEqual(rows["日用品"]["trend"], "flat")
        self.assertEqual(rows["娯楽"]["trend"], "down")
        self.assertEqual(rows["娯楽"]["diff"], -3000)
        self.assertFalse(rows["娯楽"]["over_budget"])

    def test_comparison_skips_unused_categories(self):
        self.assertEqual(category_comparison(self.categories, [], []), [])

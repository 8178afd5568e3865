from datetime import date
from unittest import mock

from django.test import TestCase, Client

from expenses.models import Category, Expense


class AnalysisViewTest(TestCase):
    def setUp(self):
        self.client = Client()
        Category.objects.create(name="食費", icon="🍚", sort_order=1, budget_amount=30000)
        Category.objects.create(name="交通", icon="🚃", sort_order=2)
        Category.objects.create(name="娯楽", icon="🎮", sort_order=3)
        # 1月度
        Expense.objects.create(amount=40000, category="食費", payment_method=Expense.CASH,
                               expense_date=date(2024, 1, 25))
        Expense.objects.create(amount=10000, category="交通", payment_method=Expense.IC_CARD,
                               expense_date=date(2024, 2, 1))
        Expense.objects.create(amount=500, category="削除済み", payment_method=Expense.CASH,
                               expense_date=date(2024, 2, 2))
        # 12月度
        Expense.objects.create(amount=20000, category="食費", expense_date=date(2024, 1, 10))
        Expense.objects.create(amount=10000, category="交通", expense_date=date(2024, 1, 11))
        Expense.objects.create(amount=3000, category="娯楽", expense_date=date(2023, 12, 30))
        # 8月度（6 月度の推移の外）
        Expense.objects.create(amount=7777, category="食費", expense_date=date(2023, 8, 30))

    def get_analysis(self, **params):
        params.setdefault("period", "2024-01")
        with mock.patch("analysis.views.localdate", return_value=date(2024, 2, 15)):
            return self.client.get("/analysis/", params)

    def test_analysis_page(self):
        res = self.get_analysis()
        self.assertEqual(res.status_code, 200)
        self.assertContains(res, "1月度（1/25〜2/24）")

    def test_comparison(self):
        rows = {r["name"]: r for r in self.get_analysis().context["breakdown"]}
        self.assertEqual(set(rows), {"食費", "交通", "娯楽"})

        self.assertEqual(rows["食費"]["diff"], 20000)
        self.assertEqual(rows["食費"]["trend"], "up")
        self.assertTrue(rows["食費"]["over_budget"])

        self.assertEqual(rows["交通"]["trend"], "flat")
        self.assertFalse(rows["交通"]["over_budget"])

        self.assertEqual(rows["娯楽"]["spent"], 0)
        self.assertEqual(rows["娯楽"]["diff"], -3000)
        self.assertEqual(rows["娯楽"]["trend"], "down")

    def test_pie_data(self):
        ctx = self.get_analysis().context
        self.assertEqual(ctx["total_spent"], 50500)
        pie = ctx["pie_data"]
        self.assertEqual([d["label"] for d in pie], ["🍚食費", "🚃交通"])
        self.assertEqual([d["pct"] for d in pie], [79, 20])
        self.assertEqual(pie[1]["start"], pie[0]["end"])

    def test_trend(self):
        ctx = self.get_analysis().context
        trend = ctx["trend"]
        self.assertEqual([t["key"] for t in trend],
                         ["2023-08", "2023-09", "2023-10", "2023-11", "2023-12", "2024-01"])
        self.assertEqual(trend[0]["label"], "8月")
        self.assertEqual(trend[0]["total"], 7777)
        self.assertEqual(trend[-2]["total"], 33000)
        self.assertEqual(trend[-1]["total"], 50500)
        self.assertEqual(ctx["max_trend"], 50500)
        self.assertTrue(ctx["has_trend"])

    def test_empty_period(self):
        ctx = self.get_analysis(period="2020-05").context
        self.assertEqual(ctx["breakdown"], [])
        self.assertEqual(ctx["pie_data"], [])
        self.assertFalse(ctx["has_trend"])
        self.assertEqual(ctx["max_trend"], 1)
        self.assertContains(self.get_analysis(period="2020-05"), "該当する支出なし")

    def test_invalid_period_falls_back_to_today(self):
        ctx = self.get_analysis(period="2024-00").context
        self.assertEqual(ctx["period"].key, "2024-01")
        self.assertEqual(ctx["prev_period"].key, "2023-12")
        self.assertEqual(ctx["next_period"].key, "2024-02")

    def test_expense_list(self):
        expenses = self.get_analysis().context["expenses"]
        self.assertEqual([e.amount for e in expenses], [500, 10000, 40000])
        self.assertEqual([e.icon for e in expenses], ["📦", "🚃", "🍚"])

    def test_filter_by_category(self):
        ctx = self.get_analysis(category="食費").context
        self.assertEqual([e.amount for e in ctx["expenses"]], [40000])
        self.assertEqual(ctx["selected_category"], "食費")
        # 絞り込みは一覧だけ
        self.assertEqual(ctx["total_spent"], 50500)

    def test_filter_by_payment(self):
        ctx = self.get_analysis(payment="cash").context
        self.assertEqual([e.amount for e in ctx["expenses"]], [500, 40000])
        self.assertEqual(ctx["selected_payment"], "cash")

    def test_filter_both(self):
        ctx = self.get_analysis(category="交通", payment="cash").context
        self.assertEqual(ctx["expenses"], [])

    def test_unknown_payment_keeps_category_filter(self):
        ctx = self.get_analysis(category="食費", payment="bitcoin").context
        self.assertEqual([e.amount for e in ctx["expenses"]], [40000])
        self.assertEqual(ctx["selected_category"], "食費")
        self.assertEqual(ctx["selected_payment"], "")

    def test_unknown_payment_ignored(self):
        ctx = self.get_analysis(payment="bitcoin").context
        self.assertEqual(len(ctx["expenses"]), 3)
        self.assertEqual(ctx["selected_payment"], "")

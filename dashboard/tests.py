from datetime import date
from decimal import Decimal
from unittest import mock

from django.test import TestCase, Client

from expenses import store
from expenses.models import Category, Expense, FixedCost, MonthlySavings, PersonalSettings, UtilityBill
from .views import usage_level

TODAY = date(2024, 2, 15)  # 1月度（1/25〜2/24）、残り 10 日


class HomeViewTest(TestCase):
    def setUp(self):
        self.client = Client()
        self.settings = PersonalSettings.objects.create(
            monthly_income=300000, savings_amount=50000, savings_percent=Decimal("10"),
        )
        self.food = Category.objects.create(name="食費", icon="🍚", sort_order=1)
        Category.objects.create(name="交通", icon="🚃", sort_order=2)
        FixedCost.objects.create(name="家賃", amount=40000)
        UtilityBill.objects.create(period="2023-12", type=UtilityBill.ELECTRIC, amount=6000)
        UtilityBill.objects.create(period="2023-12", type=UtilityBill.GAS, amount=4000)
        UtilityBill.objects.create(period="2024-01", type=UtilityBill.WATER, amount=90000)
        Expense.objects.create(amount=70000, category="食費", expense_date=date(2024, 1, 25))
        Expense.objects.create(amount=30000, category="交通", expense_date=date(2024, 2, 10))
        Expense.objects.create(amount=5000, category="食費", expense_date=date(2024, 1, 24))

    def get_home(self, query=""):
        with mock.patch("dashboard.views.localdate", return_value=TODAY):
            return self.client.get("/" + query)

    def test_home_page(self):
        res = self.get_home()
        self.assertEqual(res.status_code, 200)
        self.assertContains(res, "1月度（1/25〜2/24）")

    def test_money_flow(self):
        s = self.get_home().context["summary"]
        self.assertEqual(s.income, 300000)
        self.assertEqual(s.savings, 30000)
        self.assertEqual(s.fixed_cost_share, 20000)
        self.assertEqual(s.utility_share, 5000)
        self.assertEqual(s.available, 245000)
        self.assertEqual(s.expense_total, 100000)
        self.assertEqual(s.remaining, 145000)
        self.assertEqual(s.usage_percent, 41)
        self.assertEqual(s.remaining_days, 10)
        self.assertEqual(s.daily_allowance, 14500)

    def test_utility_uses_previous_period(self):
        res = self.get_home()
        self.assertEqual(res.context["utility_period"].key, "2023-12")
        # 2月度を見ると 1月度の光熱費 (90000) を使う
        res = self.get_home("?period=2024-02")
        self.assertEqual(res.context["summary"].utility_share, 45000)

    def test_period_navigation(self):
        res = self.get_home("?period=2023-12")
        self.assertEqual(res.context["period"].label, "12月度（12/25〜1/24）")
        self.assertEqual(res.context["prev_period"].key, "2023-11")
        self.assertEqual(res.context["next_period"].key, "2024-01")
        self.assertEqual(res.context["summary"].expense_total, 5000)

    def test_invalid_period_falls_back_to_today(self):
        for query in ("?period=2024-13", "?period=abc", "?period="):
            res = self.get_home(query)
            self.assertEqual(res.context["period"].key, "2024-01", query)

    def test_category_spending(self):
        rows = self.get_home().context["category_spending"]
        self.assertEqual([(r["category"].name, r["spent"]) for r in rows], [("食費", 70000), ("交通", 30000)])
        self.assertEqual(self.get_home().context["max_spent"], 70000)

    def test_recent_expenses(self):
        recent = self.get_home().context["recent_expenses"]
        self.assertEqual([e.amount for e in recent], [30000, 70000])
        self.assertEqual([e.icon for e in recent], ["🚃", "🍚"])

    def test_recent_expenses_limit(self):
        for day in range(1, 8):
            Expense.objects.create(amount=day, category="食費", expense_date=date(2024, 2, day))
        self.assertEqual(len(self.get_home().context["recent_expenses"]), 5)

    def test_external_savings(self):
        self.settings.savings_source = "external"
        self.settings.save()
        MonthlySavings.objects.create(year=2024, month=1, person="taro", amount=60000)
        res = self.get_home()
        self.assertTrue(res.context["is_external_savings"])
        self.assertEqual(res.context["summary"].savings, 60000)
        # 家計簿側に行がない月度は 0
        res = self.get_home("?period=2024-02")
        self.assertEqual(res.context["summary"].savings, 0)

    def test_fixed_amount_when_no_percent(self):
        self.settings.savings_percent = None
        self.settings.save()
        self.assertEqual(self.get_home().context["summary"].savings, 50000)

    def test_no_settings_row(self):
        PersonalSettings.objects.all().delete()
        s = self.get_home().context["summary"]
        self.assertEqual(s.income, 0)
        self.assertEqual(s.savings, 0)
        self.assertEqual(s.usage_percent, 0)

    def test_overspent_month(self):
        Expense.objects.create(amount=250000, category="食費", expense_date=date(2024, 2, 1))
        res = self.get_home()
        s = res.context["summary"]
        self.assertEqual(s.remaining, -105000)
        self.assertEqual(s.daily_allowance, -10500)
        self.assertEqual(res.context["usage_level"], "over")
        self.assertEqual(res.context["usage_bar"], 100)

    def test_usage_level(self):
        self.assertEqual(usage_level(0), "ok")
        self.assertEqual(usage_level(70), "ok")
        self.assertEqual(usage_level(71), "warn")
        self.assertEqual(usage_level(90), "warn")
        self.assertEqual(usage_level(91), "over")


class IncomeUpdateTest(TestCase):
    def setUp(self):
        self.client = Client()

    def test_update_creates_settings(self):
        res = self.client.post("/income/", {"monthly_income": 280000})
        self.assertRedirects(res, "/", fetch_redirect_response=False)
        self.assertEqual(PersonalSettings.objects.get().monthly_income, 280000)

    def test_update_existing(self):
        row = PersonalSettings.objects.create(monthly_income=1, savings_amount=1000)
        self.client.post("/income/", {"monthly_income": 310000, "period": "2024-01"})
        row.refresh_from_db()
        self.assertEqual(row.monthly_income, 310000)
        self.assertEqual(row.savings_amount, 1000)
        self.assertEqual(PersonalSettings.objects.count(), 1)

    def test_keeps_period(self):
        res = self.client.post("/income/", {"monthly_income": 1000, "period": "2023-11"})
        self.assertRedirects(res, "/?period=2023-11", fetch_redirect_response=False)

    def test_invalid_income(self):
        for value in ("-1", "abc", "", "99999999999999999999"):
            res = self.client.post("/income/", {"monthly_income": value})
            self.assertEqual(res.status_code, 302)
        self.assertFalse(PersonalSettings.objects.exists())

    def test_get_not_allowed(self):
        res = self.client.get("/income/")
        self.assertEqual(res.status_code, 405)


class SettingsViewTest(TestCase):
    def setUp(self):
        self.client = Client()
        FixedCost.objects.create(name="家賃", amount=80000)
        FixedCost.objects.create(name="ネット", amount=5001)
        UtilityBill.objects.create(period="2023-12", type=UtilityBill.ELECTRIC, amount=7000)
        UtilityBill.objects.create(period="2024-01", type=UtilityBill.GAS, amount=3000)
        MonthlySavings.objects.create(year=2024, month=1, person="taro", amount=40000)

    def get_settings(self):
        with mock.patch("dashboard.views.localdate", return_value=TODAY):
            return self.client.get("/settings/")

    def test_settings_page_creates_row(self):
        res = self.get_settings()
        self.assertEqual(res.status_code, 200)
        self.assertEqual(PersonalSettings.objects.count(), 1)

    def test_shared_costs(self):
        ctx = self.get_settings().context
        self.assertEqual(ctx["fixed_total"], 85001)
        self.assertEqual(ctx["fixed_share"], 42500)
        self.assertEqual(ctx["utility_month"], 12)
        self.assertEqual(ctx["utility_total"], 7000)
        self.assertEqual(ctx["utility_share"], 3500)
        self.assertEqual(ctx["external_savings"], 40000)

    def test_no_utilities(self):
        UtilityBill.objects.all().delete()
        res = self.get_settings()
        self.assertContains(res, "先月分のデータなし")

    def test_save_settings(self):
        res = self.client.post("/settings/", {
            "monthly_income": 320000, "savings_source": "manual",
            "savings_amount": 40000, "savings_percent": "",
        })
        self.assertRedirects(res, "/settings/", fetch_redirect_response=False)
        row = PersonalSettings.objects.get()
        self.assertEqual(row.monthly_income, 320000)
        self.assertEqual(row.savings_amount, 40000)
        self.assertIsNone(row.savings_percent)

    def test_save_settings_invalid(self):
        res = self.client.post("/settings/", {
            "monthly_income": 320000, "savings_source": "kakeibo",
            "savings_amount": 0, "savings_percent": "120",
        })
        self.assertEqual(res.status_code, 200)
        errors = res.context["form"].errors
        self.assertIn("savings_source", errors)
        self.assertIn("savings_percent", errors)


class CategoryManageTest(TestCase):
    def setUp(self):
        self.client = Client()
        self.food = Category.objects.create(name="食費", icon="🍚", sort_order=3)

    def test_create_category(self):
        res = self.client.post("/settings/categories/new/", {"icon": "🐱", "name": " ペット "})
        self.assertRedirects(res, "/settings/", fetch_redirect_response=False)
        cat = Category.objects.get(name="ペット")
        self.assertEqual(cat.sort_order, 4)
        self.assertFalse(cat.is_default)
        self.assertTrue(cat.is_active)

    def test_duplicate_active_name_rejected(self):
        self.client.post("/settings/categories/new/", {"icon": "🍚", "name": "食費"})
        self.assertEqual(Category.objects.filter(name="食費").count(), 1)

    def test_inactive_name_can_be_reused(self):
        self.food.is_active = False
        self.food.save()
        self.client.post("/settings/categories/new/", {"icon": "🍚", "name": "食費"})
        self.assertEqual(Category.objects.filter(name="食費", is_active=True).count(), 1)

    def test_toggle(self):
        self.client.post(f"/settings/categories/{self.food.pk}/toggle/")
        self.food.refresh_from_db()
        self.assertFalse(self.food.is_active)
        self.client.post(f"/settings/categories/{self.food.pk}/toggle/")
        self.food.refresh_from_db()
        self.assertTrue(self.food.is_active)

    def test_reactivate_blocked_by_active_duplicate(self):
        self.client.post(f"/settings/categories/{self.food.pk}/toggle/")
        self.client.post("/settings/categories/new/", {"icon": "🍙", "name": "食費"})
        res = self.client.post(f"/settings/categories/{self.food.pk}/toggle/", follow=True)
        self.assertContains(res, "同じ名前のカテゴリがすでにあります。")
        self.food.refresh_from_db()
        self.assertFalse(self.food.is_active)
        self.assertEqual([c.name for c in store.active_categories()], ["食費"])

        Expense.objects.create(amount=1000, category="食費", expense_date=date(2024, 1, 26))
        with mock.patch("dashboard.views.localdate", return_value=TODAY):
            rows = self.client.get("/").context["category_spending"]
        self.assertEqual([(r["category"].name, r["spent"]) for r in rows], [("食費", 1000)])

    def test_toggle_requires_post(self):
        res = self.client.get(f"/settings/categories/{self.food.pk}/toggle/")
        self.assertEqual(res.status_code, 405)

    def test_toggle_missing(self):
        res = self.client.post("/settings/categories/9999/toggle/")
        self.assertEqual(res.status_code, 404)

    def test_budget(self):
        self.client.post(f"/settings/categories/{self.food.pk}/budget/", {"budget_amount": 30000})
        self.food.refresh_from_db()
        self.assertEqual(self.food.budget_amount, 30000)

        self.client.post(f"/settings/categories/{self.food.pk}/budget/", {"budget_amount": 0})
        self.food.refresh_from_db()
        self.assertIsNone(self.food.budget_amount)

        self.client.post(f"/settings/categories/{self.food.pk}/budget/", {"budget_amount": ""})
        self.food.refresh_from_db()
        self.assertIsNone(self.food.budget_amount)

from datetime import date
from io import StringIO
from unittest import mock

from django.contrib.auth.models import User
from django.core.management import call_command
from django.test import TestCase, Client, override_settings

from . import store
from .models import Category, Expense, FixedCost, MonthlySavings, PersonalSettings, UtilityBill
from .views import LAST_PAYMENT_SESSION_KEY


class ExpenseRecordTest(TestCase):
    def setUp(self):
        self.client = Client()
        self.food = Category.objects.create(name="食費", icon="🍚", sort_order=1)
        Category.objects.create(name="交通", icon="🚃", sort_order=2)
        self.expense = Expense.objects.create(
            amount=1200, category="食費", payment_method=Expense.CASH,
            memo="スーパー", expense_date=date(2024, 1, 26),
        )

    def test_record_page(self):
        res = self.client.get("/record/")
        self.assertEqual(res.status_code, 200)
        self.assertContains(res, "支出を記録")
        self.assertContains(res, "🍚 食費")

    def test_record_create(self):
        res = self.client.post("/record/", {
            "amount": 850, "category": "交通", "payment_method": Expense.IC_CARD,
            "expense_date": "2024-01-27", "memo": "  電車  ",
        })
        self.assertRedirects(res, "/record/", fetch_redirect_response=False)
        exp = Expense.objects.get(category="交通")
        self.assertEqual(exp.amount, 850)
        self.assertEqual(exp.memo, "電車")
        self.assertEqual(exp.expense_date, date(2024, 1, 27))

    def test_record_success_message(self):
        res = self.client.post("/record/", {
            "amount": 12345, "category": "食費", "payment_method": Expense.E_PAY,
            "expense_date": "2024-01-27", "memo": "",
        }, follow=True)
        self.assertContains(res, "✓ ¥12,345 記録しました")

    def test_last_payment_method_remembered(self):
        self.client.post("/record/", {
            "amount": 500, "category": "食費", "payment_method": Expense.CREDIT,
            "expense_date": "2024-01-27", "memo": "",
        })
        self.assertEqual(self.client.session[LAST_PAYMENT_SESSION_KEY], Expense.CREDIT)
        res = self.client.get("/record/")
        self.assertEqual(res.context["form"].initial["payment_method"], Expense.CREDIT)

    def test_default_payment_method_and_date(self):
        with mock.patch("expenses.views.localdate", return_value=date(2024, 2, 3)):
            res = self.client.get("/record/")
        initial = res.context["form"].initial
        self.assertEqual(initial["payment_method"], Expense.E_PAY)
        self.assertEqual(initial["expense_date"], date(2024, 2, 3))

    def test_zero_amount_rejected(self):
        res = self.client.post("/record/", {
            "amount": 0, "category": "食費", "payment_method": Expense.CASH,
            "expense_date": "2024-01-27",
        })
        self.assertEqual(res.status_code, 200)
        self.assertTrue(res.context["form"].errors.get("amount"))
        self.assertEqual(Expense.objects.count(), 1)

    def test_non_numeric_amount_rejected(self):
        res = self.client.post("/record/", {
            "amount": "abc", "category": "食費", "payment_method": Expense.CASH,
            "expense_date": "2024-01-27",
        })
        self.assertEqual(res.status_code, 200)
        self.assertEqual(Expense.objects.count(), 1)

    def test_empty_category_rejected(self):
        res = self.client.post("/record/", {
            "amount": 300, "category": "", "payment_method": Expense.CASH,
            "expense_date": "2024-01-27",
        })
        self.assertEqual(res.status_code, 200)
        self.assertTrue(res.context["form"].errors.get("category"))
        self.assertEqual(Expense.objects.count(), 1)

    def test_inactive_category_not_offered(self):
        self.food.is_active = False
        self.food.save()
        res = self.client.post("/record/", {
            "amount": 300, "category": "食費", "payment_method": Expense.CASH,
            "expense_date": "2024-01-27",
        })
        self.assertEqual(res.status_code, 200)
        self.assertEqual(Expense.objects.count(), 1)

    def test_edit_page(self):
        res = self.client.get(f"/record/{self.expense.pk}/")
        self.assertEqual(res.status_code, 200)
        self.assertContains(res, "支出を編集")
        self.assertContains(res, "スーパー")

    def test_edit_keeps_inactive_category(self):
        self.food.is_active = False
        self.food.save()
        res = self.client.post(f"/record/{self.expense.pk}/", {
            "amount": 1500, "category": "食費", "payment_method": Expense.CASH,
            "expense_date": "2024-01-26", "memo": "スーパー",
        })
        self.assertRedirects(res, "/", fetch_redirect_response=False)
        self.expense.refresh_from_db()
        self.assertEqual(self.expense.amount, 1500)
        self.assertEqual(self.expense.category, "食費")

    def test_edit_missing_record(self):
        res = self.client.get("/record/9999/")
        self.assertEqual(res.status_code, 404)

    def test_delete_confirm_then_delete(self):
        res = self.client.get(f"/record/{self.expense.pk}/delete/")
        self.assertEqual(res.status_code, 200)
        self.assertTrue(Expense.objects.filter(pk=self.expense.pk).exists())

        res = self.client.post(f"/record/{self.expense.pk}/delete/")
        self.assertRedirects(res, "/", fetch_redirect_response=False)
        self.assertFalse(Expense.objects.filter(pk=self.expense.pk).exists())

    def test_payment_icon(self):
        self.assertEqual(self.expense.payment_icon(), "💴")
        self.assertEqual(self.expense.get_payment_method_display(), "現金")


class StoreTest(TestCase):
    def setUp(self):
        Expense.objects.create(amount=1000, category="食費", expense_date=date(2024, 1, 24))
        Expense.objects.create(amount=2000, category="食費", expense_date=date(2024, 1, 25))
        Expense.objects.create(amount=3000, category="交通", expense_date=date(2024, 2, 24))
        Expense.objects.create(amount=4000, category="交通", expense_date=date(2024, 2, 25))

    def test_expenses_in_range_inclusive(self):
        rows = list(store.expenses_in_range(date(2024, 1, 25), date(2024, 2, 24)))
        self.assertEqual([e.amount for e in rows], [3000, 2000])
        self.assertEqual(store.expense_total_in_range(date(2024, 1, 25), date(2024, 2, 24)), 5000)

    def test_empty_range_total(self):
        self.assertEqual(store.expense_total_in_range(date(2023, 1, 25), date(2023, 2, 24)), 0)

    def test_current_settings_missing(self):
        self.assertIsNone(store.current_settings())

    def test_current_settings_first_row(self):
        first = PersonalSettings.objects.create(monthly_income=300000)
        PersonalSettings.objects.create(monthly_income=1)
        self.assertEqual(store.current_settings().pk, first.pk)

    def test_active_categories_order(self):
        Category.objects.create(name="B", sort_order=2)
        Category.objects.create(name="A", sort_order=1)
        Category.objects.create(name="X", sort_order=0, is_active=False)
        self.assertEqual([c.name for c in store.active_categories()], ["A", "B"])

    def test_shared_fixed_cost_total(self):
        self.assertEqual(store.shared_fixed_cost_total(), 0)
        FixedCost.objects.create(name="家賃", amount=80000)
        FixedCost.objects.create(name="ネット", amount=5000)
        FixedCost.objects.create(name="解約済み", amount=9999, is_active=False)
        self.assertEqual(store.shared_fixed_cost_total(), 85000)

    def test_shared_utility_total(self):
        UtilityBill.objects.create(period="2023-12", type=UtilityBill.ELECTRIC, amount=8000)
        UtilityBill.objects.create(period="2023-12", type=UtilityBill.GAS, amount=4000)
        UtilityBill.objects.create(period="2024-01", type=UtilityBill.WATER, amount=3000)
        self.assertEqual(store.shared_utility_total("2023-12"), 12000)
        self.assertEqual(store.shared_utility_total("2022-01"), 0)

    def test_external_savings_missing(self):
        self.assertIsNone(store.external_savings_figure(2024, 1))

    def test_external_savings_found(self):
        MonthlySavings.objects.create(year=2024, month=1, person="taro", amount=30000)
        self.assertEqual(store.external_savings_figure(2024, 1), 30000)

    @override_settings(SALARYBOOK_SAVINGS_PERSON="hanako")
    def test_external_savings_person_filter(self):
        MonthlySavings.objects.create(year=2024, month=1, person="taro", amount=30000)
        self.assertIsNone(store.external_savings_figure(2024, 1))
        MonthlySavings.objects.create(year=2024, month=1, person="hanako", amount=20000)
        self.assertEqual(store.external_savings_figure(2024, 1), 20000)

    def test_with_icons_fallback(self):
        cats = [Category.objects.create(name="食費", icon="🍚")]
        rows = store.with_icons(Expense.objects.order_by("expense_date"), cats)
        self.assertEqual([e.icon for e in rows], ["🍚", "🍚", "📦", "📦"])


class ExportCsvTest(TestCase):
    def setUp(self):
        self.client = Client()
        Expense.objects.create(amount=300, category="交通", payment_method=Expense.IC_CARD,
                               expense_date=date(2024, 2, 1))
        Expense.objects.create(amount=1000, category="食費", payment_method=Expense.CASH,
                               memo="昼ごはん", expense_date=date(2024, 1, 25))
        Expense.objects.create(amount=9999, category="食費", expense_date=date(2024, 1, 24))

    def test_export_period(self):
        res = self.client.get("/record/export/?period=2024-01")
        self.assertEqual(res.status_code, 200)
        self.assertTrue(res["Content-Type"].startswith("text/csv"))
        self.assertIn("attachment", res["Content-Disposition"])
        self.assertIn("filename*=utf-8''", res["Content-Disposition"])

        body = res.content.decode("utf-8")
        self.assertTrue(body.startswith("\ufeff"))
        lines = body.lstrip("\ufeff").splitlines()
        self.assertEqual(lines[0], "日付,カテゴリ,金額,支払方法,メモ")
        self.assertEqual(lines[1], "2024-01-25,食費,1000,cash,昼ごはん")
        self.assertEqual(lines[2], "2024-02-01,交通,300,ic-card,")
        self.assertEqual(len(lines), 3)

    def test_export_defaults_to_today(self):
        with mock.patch("expenses.views.localdate", return_value=date(2024, 1, 20)):
            res = self.client.get("/record/export/")
        lines = res.content.decode("utf-8").lstrip("\ufeff").splitlines()
        self.assertEqual(lines[1:], ["2024-01-24,食費,9999,e-pay,"])

    def test_export_empty_period(self):
        res = self.client.get("/record/export/?period=2020-05")
        lines = res.content.decode("utf-8").lstrip("\ufeff").splitlines()
        self.assertEqual(lines, ["日付,カテゴリ,金額,支払方法,メモ"])


class DeleteAllTest(TestCase):
    def setUp(self):
        self.client = Client()
        for i in range(3):
            Expense.objects.create(amount=100 + i, category="食費", expense_date=date(2024, 1, 25))

    def test_confirm_page(self):
        res = self.client.get("/record/delete-all/")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.context["count"], 3)
        self.assertEqual(Expense.objects.count(), 3)

    def test_delete_all(self):
        res = self.client.post("/record/delete-all/")
        self.assertRedirects(res, "/settings/", fetch_redirect_response=False)
        self.assertEqual(Expense.objects.count(), 0)

    def test_delete_all_keeps_categories(self):
        Category.objects.create(name="食費")
        self.client.post("/record/delete-all/")
        self.assertEqual(Category.objects.count(), 1)


class SeedCategoriesCommandTest(TestCase):
    def test_seed(self):
        out = StringIO()
        call_command("seed_categories", stdout=out)
        self.assertIn("created=8", out.getvalue())
        names = [c.name for c in Category.objects.order_by("sort_order")]
        self.assertEqual(names[0], "食費")
        self.assertEqual(names[-1], "その他")
        self.assertTrue(all(c.is_default for c in Category.objects.all()))

    def test_seed_idempotent(self):
        call_command("seed_categories", stdout=StringIO())
        out = StringIO()
        call_command("seed_categories", stdout=out)
        self.assertIn("created=0", out.getvalue())
        self.assertEqual(Category.objects.count(), 8)

    def test_seed_after_name_reused(self):
        call_command("seed_categories", stdout=StringIO())
        Category.objects.filter(name="食費").update(is_active=False)
        Category.objects.create(name="食費", icon="🍙", sort_order=9)
        out = StringIO()
        call_command("seed_categories", stdout=out)
        self.assertIn("created=0", out.getvalue())
        self.assertEqual(Category.objects.filter(name="食費").count(), 2)
        self.assertEqual(Category.objects.filter(name="食費", is_active=True).count(), 1)


class AdminTest(TestCase):
    def setUp(self):
        self.client = Client()
        User.objects.create_superuser(username="admin", password="pass1234!", email="a@example.com")
        self.client.login(username="admin", password="pass1234!")

    def test_changelists(self):
        for model in ("personalsettings", "category", "expense", "fixedcost",
                      "utilitybill", "monthlysavings"):
            res = self.client.get(f"/admin/expenses/{model}/")
            self.assertEqual(res.status_code, 200, model)

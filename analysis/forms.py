"""analysis アプリのフォーム — 支出一覧の絞り込み."""

from django import forms
from expenses.models import Expense


class ExpenseFilterForm(forms.Form):
    """カテゴリ・支払い方法での絞り込み. 空は「全て」."""

    category = forms.CharField(required=False)
    payment = forms.ChoiceField(
        required=False,
        choices=[("", "全て")] + Expense.PAYMENT_CHOICES,
    )

"""expenses アプリのフォーム — 支出の記録・編集.

カテゴリは有効なカテゴリの名前から選ぶ。編集時は、今は無効になったカテゴリ名でも
その支出に付いている名前だけは選択肢に残す。
"""

from django import forms

from .models import Expense
from .store import active_categories


class ExpenseForm(forms.ModelForm):
    """支出の記録・編集フォーム. 金額は 1 円以上、カテゴリは必須."""

    category = forms.ChoiceField(label="カテゴリ")

    class Meta:
        model = Expense
        fields = ["amount", "category", "payment_method", "expense_date", "memo"]
        widgets = {
            "amount": forms.NumberInput(attrs={"inputmode": "numeric", "placeholder": "0"}),
            "expense_date": forms.DateInput(attrs={"type": "date"}),
            "memo": forms.TextInput(attrs={"placeholder": "メモ（任意）"}),
        }

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        choices = [(c.name, f"{c.icon} {c.name}") for c in active_categories()]
        current = self.instance.category if self.instance.pk else None
        if current and current not in {name for name, _ in choices}:
            choices.append((current, current))
        self.fields["category"].choices = [("", "---------")] + choices

    def clean_memo(self):
        return (self.cleaned_data.get("memo") or "").strip()

"""dashboard アプリのフォーム — 収入・貯蓄の設定とカテゴリ管理."""

from django import forms

from expenses.models import Category, PersonalSettings


class IncomeForm(forms.ModelForm):
    """ホーム画面での手取り収入のクイック編集. 範囲はモデルのフィールドに従う."""

    class Meta:
        model = PersonalSettings
        fields = ["monthly_income"]


class SettingsForm(forms.ModelForm):
    """収入・先取り貯蓄の設定フォーム."""

    class Meta:
        model = PersonalSettings
        fields = ["monthly_income", "savings_source", "savings_amount", "savings_percent"]
        widgets = {
            "savings_source": forms.RadioSelect,
        }


class CategoryForm(forms.ModelForm):
    """カテゴリ追加フォーム. 有効なカテゴリと同じ名前は登録できない."""

    class Meta:
        model = Category
        fields = ["icon", "name"]

    def clean_name(self):
        name = self.cleaned_data["name"].strip()
        if not name:
            raise forms.ValidationError("カテゴリ名を入力してください。")
        if Category.objects.filter(name=name, is_active=True).exists():
            raise forms.ValidationError("同じ名前のカテゴリがすでにあります。")
        return name


class CategoryBudgetForm(forms.ModelForm):
    """カテゴリ予算. 空欄か 0 は「予算なし」."""

    class Meta:
        model = Category
        fields = ["budget_amount"]

    def clean_budget_amount(self):
        return self.cleaned_data.get("budget_amount") or None

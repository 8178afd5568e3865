"""expenses アプリのビュー — 支出の記録・編集・削除と CSV エクスポート.

  expense_create  : 支出を記録（最後に使った支払い方法をセッションに覚える）
  expense_update  : 支出を編集
  expense_delete  : 確認画面 → POST で削除
  export_csv      : 月度の支出を CSV でダウンロード（BOM 付き UTF-8）
  delete_all      : 確認画面 → POST で全支出を削除
"""

import csv
import logging

from django.contrib import messages
from django.http import HttpResponse
from django.shortcuts import get_object_or_404, redirect, render
from django.utils.http import content_disposition_header
from django.utils.timezone import localdate

from budget.cycle import resolve_period
from .forms import ExpenseForm
from .models import Expense
from .store import expenses_in_range

logger = logging.getLogger(__name__)

LAST_PAYMENT_SESSION_KEY = "last_payment_method"
CSV_HEADER = ["日付", "カテゴリ", "金額", "支払方法", "メモ"]


def expense_create(request):
    """支出の記録. 保存後は同じ画面に戻って続けて入力できる."""
    if request.method == "POST":
        form = ExpenseForm(request.POST)
        if form.is_valid():
            expense = form.save()
            request.session[LAST_PAYMENT_SESSION_KEY] = expense.payment_method
            logger.info("expense recorded id=%s amount=%s category=%s",
                        expense.pk, expense.amount, expense.category)
            messages.success(request, f"✓ ¥{expense.amount:,} 記録しました")
            return redirect("expense_create")
    else:
        form = ExpenseForm(initial={
            "expense_date": localdate(),
            "payment_method": request.session.get(LAST_PAYMENT_SESSION_KEY, Expense.E_PAY),
        })
    return render(request, "expenses/expense_form.html", {"form": form})


def expense_update(request, pk):
    expense = get_object_or_404(Expense, pk=pk)
    if request.method == "POST":
        form = ExpenseForm(request.POST, instance=expense)
        if form.is_valid():
            form.save()
            logger.info("expense updated id=%s", expense.pk)
            return redirect("home")
    else:
        form = ExpenseForm(instance=expense)
    return render(request, "expenses/expense_form.html", {"form": form, "expense": expense})


def expense_delete(request, pk):
    expense = get_object_or_404(Expense, pk=pk)
    if request.method == "POST":
        expense.delete()
        logger.info("expense deleted id=%s", pk)
        return redirect("home")
    return render(request, "expenses/expense_confirm_delete.html", {"expense": expense})


def export_csv(request):
    """?period=YYYY-MM の月度（なければ今日の月度）の支出を日付順に書き出す."""
    period = resolve_period(request.GET.get("period"), localdate())

    rows = expenses_in_range(period.start, period.end).order_by("expense_date", "created_at")
    filename = f"消費記録_{period.month_label}.csv"
    response = HttpResponse(
        content_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": content_disposition_header(True, filename)},
    )
    response.write("\ufeff")
    writer = csv.writer(response, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for e in rows:
        writer.writerow([e.expense_date.isoformat(), e.category, e.amount, e.payment_method, e.memo])
    logger.info("csv exported period=%s rows=%s", period.key, len(rows))
    return response


def delete_all(request):
    if request.method == "POST":
        deleted, _ = Expense.objects.all().delete()
        logger.warning("all expenses deleted count=%s", deleted)
        messages.success(request, "全データを削除しました")
        return redirect("settings")
    return render(request, "expenses/confirm_delete_all.html", {
        "count": Expense.objects.count(),
    })

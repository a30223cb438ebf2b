from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.db.models import Sum
from django.shortcuts import get_object_or_404, redirect, render
from django.utils import timezone
from django.views.decorators.http import require_http_methods, require_POST

from common.csvutils import stream_csv
from common.dates import format_date, parse_date
from inventory.forms import DateRangeForm
from org.models import BarProfile

from .forms import CounterBalanceForm, ReportDateForm, SpendingForm
from .models import CounterBalance, Spending
from .services.daily_report import compute_daily_report, daily_report_rows, opening_balance_for, set_counter_balance


def _report_date(request):
    """?report_date=YYYY-MM-DD, falling back to today."""
    return parse_date(request.GET.get("report_date")) or timezone.localdate()


@login_required
def daily_report(request):
    day = _report_date(request)
    report = compute_daily_report(day)
    return render(request, "reports/daily_report.html", {
        "form": ReportDateForm(initial={"report_date": day}),
        "report": report,
        "profile": BarProfile.current(),
    })


@login_required
def daily_report_export(request):
    day = _report_date(request)
    report = compute_daily_report(day)
    profile = BarProfile.current()
    return stream_csv(daily_report_rows(report, bar_name=profile.bar_name), f"daily-report-{format_date(day)}.csv")


@require_http_methods(["GET", "POST"])
@login_required
def spendings(request):
    """Spendings list (date range, default today) with an add form."""
    form = SpendingForm(request.POST or None, initial={"spending_date": timezone.localdate()})
    if request.method == "POST":
        if form.is_valid():
            form.save()
            messages.success(request, "Spending recorded.")
            return redirect("reports:spendings")
        messages.error(request, "Could not save spending. Please fix the errors below.")

    range_form = DateRangeForm(request.GET or None)
    start = end = timezone.localdate()
    if range_form.is_valid():
        start = range_form.cleaned_data.get("date_from") or start
        end = range_form.cleaned_data.get("date_to") or end
    rows = Spending.objects.filter(spending_date__range=(start, end))
    return render(request, "reports/spendings.html", {
        "form": form,
        "range_form": range_form,
        "spendings": rows,
        "total": rows.aggregate(t=Sum("amount"))["t"],
        "categories": Spending.objects.order_by("category").values_list("category", flat=True).distinct(),
        "date_from": start,
        "date_to": end,
    })


@require_POST
@login_required
def spending_delete(request, pk: int):
    get_object_or_404(Spending, pk=pk).delete()
    messages.success(request, "Spending deleted.")
    return redirect("reports:spendings")


@require_http_methods(["GET", "POST"])
@login_required
def counter_balance(request):
    day = _report_date(request)
    if request.method == "POST":
        form = CounterBalanceForm(request.POST)
        if form.is_valid():
            cd = form.cleaned_data
            set_counter_balance(
                cd["balance_date"],
                opening_balance=cd["opening_balance"],
                closing_balance=cd["closing_balance"],
                notes=cd["notes"],
            )
            messages.success(request, f"Counter balance saved for {cd['balance_date']:%d/%m/%Y}.")
            return redirect(f"{request.path}?report_date={cd['balance_date']:%Y-%m-%d}")
        messages.error(request, "Could not save counter balance. Please fix the errors below.")
    else:
        row = CounterBalance.objects.filter(balance_date=day).first()
        if row is not None:
            form = CounterBalanceForm(instance=row)
        else:
            form = CounterBalanceForm(initial={"balance_date": day, "opening_balance": opening_balance_for(day)})
    return render(request, "reports/counter_balance.html", {
        "form": form,
        "report_date": day,
        "recent": CounterBalance.objects.all()[:14],
    })

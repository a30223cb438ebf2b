from decimal import Decimal

from django import forms

from .models import CounterBalance, Spending


def _input_class():
    return "w-full px-3 py-2 border rounded"


class ReportDateForm(forms.Form):
    report_date = forms.DateField(required=False, label="Date",
                                  widget=forms.DateInput(attrs={"class": _input_class(), "type": "date"}))


class SpendingForm(forms.ModelForm):
    class Meta:
        model = Spending
        fields = ["description", "amount", "category", "spending_date", "payment_method", "notes"]
        widgets = {
            "description": forms.TextInput(attrs={"class": _input_class()}),
            "amount": forms.NumberInput(attrs={"class": _input_class(), "step": "0.01", "min": 0}),
            "category": forms.TextInput(attrs={"class": _input_class(), "list": "spending-categories"}),
            "spending_date": forms.DateInput(attrs={"class": _input_class(), "type": "date"}),
            "payment_method": forms.Select(attrs={"class": _input_class()}),
            "notes": forms.Textarea(attrs={"class": _input_class(), "rows": 2}),
        }
        labels = {"spending_date": "Date"}

    def clean_amount(self):
        amount = self.cleaned_data.get("amount")
        if amount is not None and amount <= Decimal("0"):
            raise forms.ValidationError("Amount must be greater than zero.")
        return amount

    def clean_description(self):
        value = (self.cleaned_data.get("description") or "").strip()
        if not value:
            raise forms.ValidationError("Description is required.")
        return value


class CounterBalanceForm(forms.ModelForm):
    class Meta:
        model = CounterBalance
        fields = ["balance_date", "opening_balance", "closing_balance", "notes"]
        widgets = {
            "balance_date": forms.DateInput(attrs={"class": _input_class(), "type": "date"}),
            "opening_balance": forms.NumberInput(attrs={"class": _input_class(), "step": "0.01"}),
            "closing_balance": forms.NumberInput(attrs={"class": _input_class(), "step": "0.01"}),
            "notes": forms.Textarea(attrs={"class": _input_class(), "rows": 2}),
        }
        labels = {"balance_date": "Date"}

    def validate_unique(self):
        # An existing date is updated in place by set_counter_balance
        pass

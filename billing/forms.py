from decimal import Decimal

from django import forms

from inventory.models import Product
from inventory.services.queries import sellable_products

from .models import PaymentMethod, SaleType, Table


def _bill_input_class():
    return "w-full px-2 py-1.5 border rounded text-sm"


class SaleForm(forms.Form):
    """Bill header: table or parcel, customer, payment, tax and discount percentages."""
    sale_type = forms.ChoiceField(choices=SaleType.choices, initial=SaleType.TABLE,
                                  widget=forms.Select(attrs={"class": _bill_input_class()}))
    table = forms.ModelChoiceField(queryset=Table.objects.none(), required=False, empty_label="No table picked",
                                   widget=forms.Select(attrs={"class": _bill_input_class()}))
    table_number = forms.CharField(required=False, max_length=32,
                                   widget=forms.TextInput(attrs={"class": _bill_input_class()}))
    customer_name = forms.CharField(required=False, max_length=200,
                                    widget=forms.TextInput(attrs={"class": _bill_input_class(), "placeholder": "Optional"}))
    customer_phone = forms.CharField(required=False, max_length=32,
                                     widget=forms.TextInput(attrs={"class": _bill_input_class(), "placeholder": "Optional"}))
    payment_method = forms.ChoiceField(choices=PaymentMethod.choices, initial=PaymentMethod.CASH,
                                       widget=forms.Select(attrs={"class": _bill_input_class()}))
    tax_percent = forms.DecimalField(max_digits=5, decimal_places=2, min_value=Decimal("0"), max_value=Decimal("100"),
                                     initial=Decimal("0"), required=False,
                                     widget=forms.NumberInput(attrs={"class": _bill_input_class(), "step": "0.01"}))
    discount_percent = forms.DecimalField(max_digits=5, decimal_places=2, min_value=Decimal("0"), max_value=Decimal("100"),
                                          initial=Decimal("0"), required=False,
                                          widget=forms.NumberInput(attrs={"class": _bill_input_class(), "step": "0.01"}))
    notes = forms.CharField(required=False, max_length=500,
                            widget=forms.Textarea(attrs={"class": _bill_input_class(), "rows": 2}))

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields["table"].queryset = Table.objects.all()

    def clean(self):
        data = super().clean()
        if data.get("sale_type") == SaleType.TABLE and not data.get("table") \
                and not (data.get("table_number") or "").strip():
            self.add_error("table_number", "Table number is required for table sales.")
        data["tax_percent"] = data.get("tax_percent") or Decimal("0")
        data["discount_percent"] = data.get("discount_percent") or Decimal("0")
        return data


class SaleRowForm(forms.Form):
    product = forms.ModelChoiceField(queryset=Product.objects.none(), required=False,
                                     widget=forms.Select(attrs={"class": _bill_input_class()}))
    quantity = forms.IntegerField(min_value=1, required=False,
                                  widget=forms.NumberInput(attrs={"class": _bill_input_class(), "min": 1}))
    unit_price = forms.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal("0"), required=False,
                                    widget=forms.NumberInput(attrs={"class": _bill_input_class(), "step": "0.01",
                                                                    "placeholder": "List price"}))

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields["product"].queryset = sellable_products()

    def clean(self):
        data = super().clean()
        if data.get("product") and not data.get("quantity"):
            self.add_error("quantity", "Enter a quantity.")
        return data


def sale_row_formset(data=None, initial=None):
    FormSet = forms.formset_factory(SaleRowForm, extra=3, min_num=1, validate_min=True)
    return FormSet(data=data, initial=initial, prefix="rows")


class TableForm(forms.ModelForm):
    class Meta:
        model = Table
        fields = ["name", "capacity", "area", "status"]
        widgets = {
            "name": forms.TextInput(attrs={"class": _bill_input_class()}),
            "capacity": forms.NumberInput(attrs={"class": _bill_input_class(), "min": 1}),
            "area": forms.Select(attrs={"class": _bill_input_class()}),
            "status": forms.Select(attrs={"class": _bill_input_class()}),
        }

    def clean_name(self):
        name = (self.cleaned_data.get("name") or "").strip()
        if not name:
            raise forms.ValidationError("Table name is required.")
        return name

    def clean_capacity(self):
        capacity = self.cleaned_data.get("capacity")
        if capacity is not None and capacity < 1:
            raise forms.ValidationError("Capacity must be at least 1.")
        return capacity

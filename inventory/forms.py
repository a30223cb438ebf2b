from decimal import Decimal

from django import forms

from .models import Location, Product, Stock


def _input_class():
    return "w-full px-3 py-2 border rounded"


class ProductForm(forms.ModelForm):
    class Meta:
        model = Product
        fields = ["name", "variant", "sku", "barcode", "price", "cost", "category", "unit", "description"]
        widgets = {
            "name": forms.TextInput(attrs={"class": _input_class()}),
            "variant": forms.TextInput(attrs={"class": _input_class(), "placeholder": "e.g. 750ml"}),
            "sku": forms.TextInput(attrs={"class": _input_class()}),
            "barcode": forms.TextInput(attrs={"class": _input_class(), "placeholder": "Optional"}),
            "price": forms.NumberInput(attrs={"class": _input_class(), "step": "0.01", "min": 0}),
            "cost": forms.NumberInput(attrs={"class": _input_class(), "step": "0.01", "min": 0}),
            "category": forms.TextInput(attrs={"class": _input_class()}),
            "unit": forms.TextInput(attrs={"class": _input_class()}),
            "description": forms.Textarea(attrs={"class": _input_class(), "rows": 2}),
        }
        labels = {
            "sku": "SKU",
            "price": "Selling price",
            "cost": "Cost price",
        }

    def clean(self):
        data = super().clean()
        for name in ("price", "cost"):
            value = data.get(name)
            if value is not None and value < Decimal("0"):
                self.add_error(name, "Must be zero or more.")
        return data


class StockLevelsForm(forms.ModelForm):
    """Reorder thresholds shown on the product form."""
    class Meta:
        model = Stock
        fields = ["min_stock_level", "max_stock_level"]
        widgets = {
            "min_stock_level": forms.NumberInput(attrs={"class": _input_class(), "min": 0}),
            "max_stock_level": forms.NumberInput(attrs={"class": _input_class(), "min": 0}),
        }
        labels = {
            "min_stock_level": "Minimum stock",
            "max_stock_level": "Maximum stock",
        }

    def clean(self):
        data = super().clean()
        lo = data.get("min_stock_level")
        hi = data.get("max_stock_level")
        if lo is not None and hi is not None and lo > hi:
            raise forms.ValidationError("Minimum stock cannot be above maximum stock.")
        return data


class StockEditForm(forms.Form):
    """Absolute correction of both counters."""
    godown_stock = forms.IntegerField(min_value=0, widget=forms.NumberInput(attrs={"class": _input_class(), "min": 0}))
    counter_stock = forms.IntegerField(min_value=0, widget=forms.NumberInput(attrs={"class": _input_class(), "min": 0}))


class StockTransferForm(forms.Form):
    """Single transfer between the two locations (either direction)."""
    from_location = forms.ChoiceField(choices=Location.choices, initial=Location.GODOWN,
                                      widget=forms.Select(attrs={"class": _input_class()}), label="From")
    to_location = forms.ChoiceField(choices=Location.choices, initial=Location.COUNTER,
                                    widget=forms.Select(attrs={"class": _input_class()}), label="To")
    quantity = forms.IntegerField(min_value=1, widget=forms.NumberInput(attrs={"class": _input_class(), "min": 1}))

    def __init__(self, *args, **kwargs):
        self.stock = kwargs.pop("stock", None)
        super().__init__(*args, **kwargs)

    def clean(self):
        data = super().clean()
        src = data.get("from_location")
        dst = data.get("to_location")
        qty = data.get("quantity")
        if src and dst and src == dst:
            raise forms.ValidationError("From and To locations must be different.")
        if self.stock is not None and src and qty:
            available = self.stock.quantity_at(src)
            if qty > available:
                self.add_error("quantity", f"Insufficient stock in {src}. Available: {available}.")
        return data


class StagedQuantityForm(forms.Form):
    product_id = forms.IntegerField(widget=forms.HiddenInput)
    quantity = forms.IntegerField(widget=forms.NumberInput(attrs={"class": "w-20 px-2 py-1 border rounded"}))


class DateRangeForm(forms.Form):
    date_from = forms.DateField(required=False, widget=forms.DateInput(attrs={"class": _input_class(), "type": "date"}))
    date_to = forms.DateField(required=False, widget=forms.DateInput(attrs={"class": _input_class(), "type": "date"}))

    def clean(self):
        data = super().clean()
        start, end = data.get("date_from"), data.get("date_to")
        if start and end and start > end:
            raise forms.ValidationError("Start date must be on or before end date.")
        return data

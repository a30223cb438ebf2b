from django import forms

from .models import BarProfile


class BarProfileForm(forms.ModelForm):
    class Meta:
        model = BarProfile
        fields = ["bar_name", "contact_number", "gst_number", "address", "thank_you_message"]
        widgets = {
            "bar_name": forms.TextInput(attrs={"class": "w-full px-3 py-2 border rounded"}),
            "contact_number": forms.TextInput(attrs={"class": "w-full px-3 py-2 border rounded"}),
            "gst_number": forms.TextInput(attrs={"class": "w-full px-3 py-2 border rounded"}),
            "address": forms.Textarea(attrs={"class": "w-full px-3 py-2 border rounded", "rows": 3}),
            "thank_you_message": forms.TextInput(attrs={"class": "w-full px-3 py-2 border rounded"}),
        }
        labels = {
            "bar_name": "Bar name",
            "gst_number": "GST number",
        }

    def clean_bar_name(self):
        name = (self.cleaned_data.get("bar_name") or "").strip()
        if not name:
            raise forms.ValidationError("Bar name is required.")
        return name

from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.shortcuts import redirect, render
from django.views.decorators.http import require_http_methods

from .forms import BarProfileForm
from .models import BarProfile


@require_http_methods(["GET", "POST"])
@login_required
def bar_profile(request):
    """Edit the active bar profile; the first save creates it."""
    profile = BarProfile.current()
    form = BarProfileForm(request.POST or None, instance=profile)
    if request.method == "POST":
        if form.is_valid():
            form.save()
            messages.success(request, "Bar settings saved.")
            return redirect("org:bar_profile")
        messages.error(request, "Could not save bar settings. Please fix the errors below.")
    return render(request, "org/bar_profile.html", {"form": form, "profile": profile})

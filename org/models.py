from django.db import models


class BarProfile(models.Model):
    """Bar details printed on bills and exported reports. The latest row is the active one."""
    bar_name = models.CharField(max_length=200)
    contact_number = models.CharField(max_length=32, blank=True, default="")
    gst_number = models.CharField(max_length=32, blank=True, default="")
    address = models.TextField(blank=True, default="")
    thank_you_message = models.CharField(max_length=255, blank=True, default="Thank you for visiting!")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-id"]

    def __str__(self):
        return self.bar_name

    @classmethod
    def current(cls):
        """Active profile, or an unsaved placeholder when none has been configured."""
        return cls.objects.order_by("-id").first() or cls(bar_name="My Bar")

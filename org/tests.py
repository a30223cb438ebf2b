from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse

from org.models import BarProfile


class BarProfileTests(TestCase):
    def test_placeholder_when_unconfigured(self):
        profile = BarProfile.current()
        self.assertIsNone(profile.pk)
        self.assertEqual(profile.bar_name, "My Bar")
        self.assertEqual(profile.thank_you_message, "Thank you for visiting!")

    def test_latest_row_is_current(self):
        BarProfile.objects.create(bar_name="Old Name")
        newer = BarProfile.objects.create(bar_name="The Tap Room")
        self.assertEqual(BarProfile.current(), newer)

    def test_settings_page_saves_profile(self):
        user = get_user_model().objects.create_user("owner", password="pass")
        self.client.force_login(user)
        url = reverse("org:bar_profile")
        resp = self.client.post(url, {
            "bar_name": "  The Tap Room ",
            "contact_number": "98450 00000",
            "gst_number": "29ABCDE1234F1Z5",
            "address": "MG Road",
            "thank_you_message": "Cheers!",
        })
        self.assertRedirects(resp, url)
        self.assertEqual(BarProfile.objects.count(), 1)
        self.assertEqual(BarProfile.current().bar_name, "The Tap Room")

        self.client.post(url, {"bar_name": "Tap Room II", "thank_you_message": "Cheers!"})
        self.assertEqual(BarProfile.objects.count(), 1)

    def test_bar_name_required(self):
        user = get_user_model().objects.create_user("owner", password="pass")
        self.client.force_login(user)
        resp = self.client.post(reverse("org:bar_profile"), {"bar_name": "   "})
        self.assertEqual(resp.status_code, 200)
        self.assertIn("bar_name", resp.context["form"].errors)
        self.assertFalse(BarProfile.objects.exists())

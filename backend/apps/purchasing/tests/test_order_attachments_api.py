import shutil
import tempfile

from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import override_settings
from rest_framework import status
from rest_framework.test import APITestCase

from apps.accounts.models import User
from apps.purchasing.models import OrderAttachment
from apps.purchasing.tests.helpers import make_order, make_project, make_user, make_vendor


class OrderAttachmentApiTests(APITestCase):
    def setUp(self):
        self.media_root = tempfile.mkdtemp()
        media_override = override_settings(MEDIA_ROOT=self.media_root)
        media_override.enable()
        self.addCleanup(media_override.disable)
        self.addCleanup(shutil.rmtree, self.media_root, ignore_errors=True)

        self.user = make_user()
        self.order = make_order(self.user, make_project(), make_vendor())
        self.url = f"/api/v1/orders/{self.order.id}/attachments/"
        self.client.credentials(HTTP_X_API_KEY="dev-api-key", HTTP_X_USER_ID=str(self.user.id))

    def upload(self, *files):
        return self.client.post(self.url, {"files": list(files)}, format="multipart")

    def test_upload_attachments_returns_201(self):
        drawing = SimpleUploadedFile("drawing.pdf", b"%PDF-1.4 plan", content_type="application/pdf")
        quote = SimpleUploadedFile("quote.txt", b"rebar 10t", content_type="text/plain")

        response = self.upload(drawing, quote)

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(
            sorted((item["original_name"], item["mime_type"], item["file_size"]) for item in response.json()),
            [("drawing.pdf", "application/pdf", 13), ("quote.txt", "text/plain", 9)],
        )
        self.assertEqual(OrderAttachment.objects.filter(order=self.order, uploaded_by=self.user).count(), 2)

    def test_list_attachments(self):
        self.upload(SimpleUploadedFile("drawing.pdf", b"%PDF-1.4", content_type="application/pdf"))

        response = self.client.get(self.url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([item["original_name"] for item in response.json()], ["drawing.pdf"])

    def test_upload_without_files_returns_400(self):
        response = self.client.post(self.url, {}, format="multipart")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("files", response.json()["field_errors"])

    def test_other_users_cannot_attach_files(self):
        self.client.credentials(
            HTTP_X_API_KEY="dev-api-key", HTTP_X_USER_ID=str(make_user(name="Choi Yuna").id)
        )

        response = self.upload(SimpleUploadedFile("note.txt", b"x", content_type="text/plain"))

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(OrderAttachment.objects.count(), 0)

    def test_admin_can_attach_files_to_any_order(self):
        admin = make_user(name="Park Jiwoo", role=User.Role.ADMIN)
        self.client.credentials(HTTP_X_API_KEY="dev-api-key", HTTP_X_USER_ID=str(admin.id))

        response = self.upload(SimpleUploadedFile("note.txt", b"x", content_type="text/plain"))

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

    def test_deleting_order_removes_attachments(self):
        self.upload(SimpleUploadedFile("note.txt", b"x", content_type="text/plain"))

        response = self.client.delete(f"/api/v1/orders/{self.order.id}/")

        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertEqual(OrderAttachment.objects.count(), 0)

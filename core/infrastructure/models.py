"""
Core models.
"""
import uuid

from django.db import models


class AuthLog(models.Model):
    """
    Append-only audit trail of client actions.

    References are plain UUID columns so entries outlive deleted codes and
    devices.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    tenant_id = models.UUIDField(null=True, blank=True, db_index=True)
    action = models.CharField(max_length=32, db_index=True)
    success = models.BooleanField(default=True)
    message = models.CharField(max_length=255, blank=True, default="")
    code = models.CharField(max_length=64, blank=True, default="", db_index=True)
    code_id = models.UUIDField(null=True, blank=True)
    device_id = models.UUIDField(null=True, blank=True)
    fingerprint = models.CharField(max_length=64, blank=True, default="")
    ip = models.GenericIPAddressField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        app_label = "core"
        db_table = "auth_logs"
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.action} {self.code} ({'ok' if self.success else 'rejected'})"

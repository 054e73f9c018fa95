"""
Online session model.
"""
import uuid

from django.db import models


class OnlineSession(models.Model):
    """
    Presence record of a device for an authorization code.

    ``token_hash`` holds the SHA-256 digest of the client token.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    tenant = models.ForeignKey(
        "tenants.Tenant", on_delete=models.CASCADE, related_name="online_sessions"
    )
    device = models.ForeignKey(
        "devices.Device", on_delete=models.CASCADE, related_name="online_sessions"
    )
    code = models.ForeignKey(
        "licenses.AuthorizationCode", on_delete=models.CASCADE, related_name="online_sessions"
    )
    token_hash = models.CharField(max_length=64, db_index=True)
    ip = models.GenericIPAddressField(null=True, blank=True)
    user_agent = models.CharField(max_length=500, blank=True, default="")
    is_valid = models.BooleanField(default=True)
    force_offline = models.BooleanField(default=False)
    login_time = models.DateTimeField()
    last_heartbeat = models.DateTimeField()
    token_expire_time = models.DateTimeField(null=True, blank=True)

    class Meta:
        app_label = "presence"
        db_table = "online_sessions"
        ordering = ["-last_heartbeat"]
        indexes = [
            models.Index(fields=["is_valid", "last_heartbeat"]),
            models.Index(fields=["code", "is_valid"]),
            models.Index(fields=["device", "code"]),
        ]

    def __str__(self):
        return f"{self.device_id} @ {self.code_id}"

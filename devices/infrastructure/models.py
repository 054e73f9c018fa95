"""
Device model.
"""
import uuid

from django.db import models


class Device(models.Model):
    """
    A client machine identified by its hardware fingerprint.

    Rows are never deleted when a binding changes; ``bound_code`` is
    re-pointed or cleared instead.
    """

    STATUS_CHOICES = [
        ("active", "Active"),
        ("inactive", "Inactive"),
        ("blacklisted", "Blacklisted"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    tenant = models.ForeignKey("tenants.Tenant", on_delete=models.CASCADE, related_name="devices")
    fingerprint = models.CharField(max_length=64, unique=True)
    bound_code = models.ForeignKey(
        "licenses.AuthorizationCode",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="devices",
    )
    platform = models.CharField(max_length=100, blank=True, default="")
    os_version = models.CharField(max_length=100, blank=True, default="")
    cpu_id = models.CharField(max_length=255, blank=True, default="")
    board_serial = models.CharField(max_length=255, blank=True, default="")
    disk_serial = models.CharField(max_length=255, blank=True, default="")
    mac_address = models.CharField(max_length=64, blank=True, default="")
    region = models.CharField(max_length=100, blank=True, default="")
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default="active")
    last_heartbeat = models.DateTimeField(null=True, blank=True)
    last_ip = models.GenericIPAddressField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        app_label = "devices"
        db_table = "devices"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["bound_code", "fingerprint"]),
            models.Index(fields=["tenant", "status"]),
        ]

    def __str__(self):
        return self.fingerprint

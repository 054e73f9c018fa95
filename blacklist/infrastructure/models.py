"""
Device and IP blacklist models.
"""
import uuid

from django.db import models


class DeviceBlacklistEntry(models.Model):
    """
    A banned fingerprint, scoped to a tenant or global when tenant is null.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    tenant = models.ForeignKey(
        "tenants.Tenant",
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="device_blacklist",
    )
    fingerprint = models.CharField(max_length=64, db_index=True)
    reason = models.CharField(max_length=255, blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        app_label = "blacklist"
        db_table = "device_blacklist"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["fingerprint", "tenant"]),
        ]

    def __str__(self):
        return self.fingerprint


class IpBlacklistEntry(models.Model):
    """
    A banned IP address, scoped to a tenant or global when tenant is null.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    tenant = models.ForeignKey(
        "tenants.Tenant",
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="ip_blacklist",
    )
    ip = models.GenericIPAddressField(db_index=True)
    reason = models.CharField(max_length=255, blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        app_label = "blacklist"
        db_table = "ip_blacklist"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["ip", "tenant"]),
        ]

    def __str__(self):
        return self.ip

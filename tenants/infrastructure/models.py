"""
Tenant model.
"""

import uuid

from django.db import models


class Tenant(models.Model):
    """
    Represents a software tenant that issues authorization codes.
    """

    STATUS_CHOICES = [
        ("enabled", "Enabled"),
        ("disabled", "Disabled"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255, help_text="Tenant display name")
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default="enabled")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        app_label = "tenants"
        db_table = "tenants"
        ordering = ["name"]

    def __str__(self):
        return self.name

"""
AuthorizationCode and PointDeductionRecord models.
"""
import uuid

from django.db import models


class AuthorizationCode(models.Model):
    """
    One license grant, billed by duration or by points.

    The ``billing_model`` tag selects which group of nullable billing
    columns is meaningful for the row.
    """

    STATUS_CHOICES = [
        ("unused", "Unused"),
        ("active", "Active"),
        ("expired", "Expired"),
        ("disabled", "Disabled"),
    ]

    BILLING_MODEL_CHOICES = [
        ("duration", "Duration"),
        ("points", "Points"),
    ]

    CARD_TYPE_CHOICES = [
        ("minute", "Minute"),
        ("hour", "Hour"),
        ("day", "Day"),
        ("week", "Week"),
        ("month", "Month"),
        ("quarter", "Quarter"),
        ("year", "Year"),
        ("permanent", "Permanent"),
    ]

    ACTIVATE_MODE_CHOICES = [
        ("first_use", "First use"),
        ("scheduled", "Scheduled"),
    ]

    DEDUCT_TYPE_CHOICES = [
        ("per_use", "Per use"),
        ("per_hour", "Per hour"),
        ("per_day", "Per day"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    tenant = models.ForeignKey(
        "tenants.Tenant", on_delete=models.CASCADE, related_name="authorization_codes"
    )
    code = models.CharField(max_length=64, unique=True)
    billing_model = models.CharField(max_length=20, choices=BILLING_MODEL_CHOICES)

    # Duration billing
    card_type = models.CharField(max_length=20, choices=CARD_TYPE_CHOICES, null=True, blank=True)
    duration = models.PositiveIntegerField(null=True, blank=True)
    activate_mode = models.CharField(
        max_length=20, choices=ACTIVATE_MODE_CHOICES, null=True, blank=True
    )
    start_time = models.DateTimeField(null=True, blank=True)
    expire_time = models.DateTimeField(null=True, blank=True, db_index=True)

    # Points billing
    total_points = models.PositiveIntegerField(null=True, blank=True)
    remaining_points = models.PositiveIntegerField(null=True, blank=True)
    deduct_type = models.CharField(max_length=20, choices=DEDUCT_TYPE_CHOICES, null=True, blank=True)
    deduct_amount = models.PositiveIntegerField(null=True, blank=True)

    device_quota = models.PositiveIntegerField(default=1, help_text="Maximum bound devices")
    rebind_quota = models.PositiveIntegerField(default=0, help_text="Maximum rebinds")
    rebind_count = models.PositiveIntegerField(default=0)
    single_online = models.BooleanField(default=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default="unused")
    used_time = models.DateTimeField(null=True, blank=True)
    remark = models.CharField(max_length=500, blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        app_label = "licenses"
        db_table = "authorization_codes"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["tenant", "status"]),
            models.Index(fields=["billing_model"]),
        ]

    def __str__(self):
        return self.code


class PointDeductionRecord(models.Model):
    """
    Immutable audit row of a point deduction.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    authorization_code = models.ForeignKey(
        AuthorizationCode,
        on_delete=models.SET_NULL,
        null=True,
        related_name="point_deductions",
    )
    code = models.CharField(max_length=64, help_text="Code value at deduction time")
    device_id = models.UUIDField(null=True, blank=True)
    deduct_type = models.CharField(max_length=20, choices=AuthorizationCode.DEDUCT_TYPE_CHOICES)
    amount = models.PositiveIntegerField()
    remaining_points = models.PositiveIntegerField(help_text="Balance after the deduction")
    reason = models.CharField(max_length=255, blank=True, default="")
    ip = models.GenericIPAddressField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        app_label = "licenses"
        db_table = "point_deduction_records"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["authorization_code", "created_at"]),
        ]

    def __str__(self):
        return f"{self.code} -{self.amount} ({self.remaining_points})"

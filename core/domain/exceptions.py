"""
Domain exceptions.

Domain exceptions represent business rule violations
and domain-specific error conditions. Every exception carries a
machine-readable code and a category so the outcome layer can report
failures without callers parsing messages.
"""

from enum import Enum


class ErrorCategory(Enum):
    """Broad failure categories shared by every operation."""

    NOT_FOUND = "not_found"
    INVALID_INPUT = "invalid_input"
    CONFLICT = "conflict"
    FORBIDDEN = "forbidden"
    STALE = "stale"
    UNSUPPORTED = "unsupported"

    def __str__(self) -> str:
        return self.value


class DomainException(Exception):
    """Base exception for all domain exceptions."""

    category = ErrorCategory.INVALID_INPUT
    default_message = "Domain rule violated"
    default_code = None

    def __init__(self, message: str = None, code: str = None):
        """
        Initialize domain exception.

        Args:
            message: Human-readable error message
            code: Machine-readable error code
        """
        message = message or self.default_message
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code or self.__class__.__name__


# Not found


class NotFoundError(DomainException):
    """Base exception for missing entities."""

    category = ErrorCategory.NOT_FOUND
    default_message = "Resource not found"
    default_code = "NOT_FOUND"


class TenantNotFoundError(NotFoundError):
    default_message = "Tenant not found"
    default_code = "TENANT_NOT_FOUND"


class AuthorizationCodeNotFoundError(NotFoundError):
    default_message = "Authorization code not found"
    default_code = "CODE_NOT_FOUND"


class DeviceNotFoundError(NotFoundError):
    default_message = "Device not found"
    default_code = "DEVICE_NOT_FOUND"


class DeviceNotBoundError(NotFoundError):
    default_message = "Device is not bound to this authorization code"
    default_code = "DEVICE_NOT_BOUND"


class SessionNotFoundError(NotFoundError):
    default_message = "Session does not exist or is no longer valid"
    default_code = "SESSION_NOT_FOUND"


class BlacklistEntryNotFoundError(NotFoundError):
    default_message = "Blacklist entry not found"
    default_code = "BLACKLIST_ENTRY_NOT_FOUND"


# Invalid input


class InvalidFingerprintError(DomainException):
    default_message = "Invalid device fingerprint format"
    default_code = "INVALID_FINGERPRINT"


class InvalidIpAddressError(DomainException):
    default_message = "Invalid IP address"
    default_code = "INVALID_IP"


class InvalidAmountError(DomainException):
    default_message = "Amount must be greater than 0"
    default_code = "INVALID_AMOUNT"


class InvalidTimeUnitError(DomainException):
    default_message = "Invalid time unit"
    default_code = "INVALID_TIME_UNIT"


class InvalidAdjustmentError(DomainException):
    default_message = "Adjustment direction must be 'add' or 'subtract'"
    default_code = "INVALID_ADJUSTMENT"


class InvalidBillingConfigError(DomainException):
    default_message = "Invalid billing configuration"
    default_code = "INVALID_BILLING_CONFIG"


class InvalidBatchSizeError(DomainException):
    default_message = "Batch size must be at least 1"
    default_code = "INVALID_COUNT"


class InvalidUpdateError(DomainException):
    default_message = "Invalid update"
    default_code = "INVALID_UPDATE"


class InvalidFilterError(DomainException):
    default_message = "Invalid filter value"
    default_code = "INVALID_FILTER"


class SameFingerprintError(DomainException):
    default_message = "Old and new fingerprints must differ"
    default_code = "SAME_FINGERPRINT"


# Conflict / quota


class ConflictError(DomainException):
    category = ErrorCategory.CONFLICT
    default_message = "Conflicting state"
    default_code = "CONFLICT"


class DeviceLimitReachedError(ConflictError):
    default_message = "Device limit reached"
    default_code = "DEVICE_LIMIT_REACHED"


class RebindLimitReachedError(ConflictError):
    default_message = "Rebind limit reached"
    default_code = "REBIND_LIMIT_REACHED"


class InsufficientPointsError(ConflictError):
    default_message = "Insufficient points"
    default_code = "INSUFFICIENT_POINTS"


class DeviceAlreadyBoundError(ConflictError):
    default_message = "New device is already bound to this authorization code"
    default_code = "DEVICE_ALREADY_BOUND"


class AlreadyBlacklistedError(ConflictError):
    default_message = "Entry is already blacklisted"
    default_code = "ALREADY_BLACKLISTED"


class CodeGenerationExhaustedError(ConflictError):
    default_message = "Could not generate enough unique codes"
    default_code = "CODE_GENERATION_EXHAUSTED"


# Forbidden


class ForbiddenError(DomainException):
    category = ErrorCategory.FORBIDDEN
    default_message = "Operation forbidden"
    default_code = "FORBIDDEN"


class TenantDisabledError(ForbiddenError):
    default_message = "Tenant is disabled"
    default_code = "TENANT_DISABLED"


class CodeDisabledError(ForbiddenError):
    default_message = "Authorization code is disabled"
    default_code = "CODE_DISABLED"


class DeviceBlacklistedError(ForbiddenError):
    default_message = "Device is blacklisted"
    default_code = "DEVICE_BLACKLISTED"


class IpBlacklistedError(ForbiddenError):
    default_message = "IP is blacklisted"
    default_code = "IP_BLACKLISTED"


class DeviceInactiveError(ForbiddenError):
    default_message = "Device is deactivated"
    default_code = "DEVICE_INACTIVE"


# Stale


class StaleError(DomainException):
    category = ErrorCategory.STALE
    default_message = "State is no longer current"
    default_code = "STALE"


class CodeExpiredError(StaleError):
    default_message = "Authorization code has expired"
    default_code = "CODE_EXPIRED"


class PointsExhaustedError(StaleError):
    default_message = "Points are exhausted"
    default_code = "POINTS_EXHAUSTED"


class CodeNotActivatedError(StaleError):
    default_message = "Authorization code has not been activated"
    default_code = "CODE_NOT_ACTIVATED"


class SessionExpiredError(StaleError):
    default_message = "Session token has expired"
    default_code = "SESSION_EXPIRED"


class SessionForcedOfflineError(StaleError):
    default_message = "Device has been forced offline"
    default_code = "FORCED_OFFLINE"


# Unsupported


class UnsupportedOperationError(DomainException):
    category = ErrorCategory.UNSUPPORTED
    default_message = "Operation not supported for this authorization code"
    default_code = "UNSUPPORTED"


class NotPointsCodeError(UnsupportedOperationError):
    default_message = "Authorization code is not points-billed"
    default_code = "NOT_POINTS_CODE"


class TimeAdjustmentNotAllowedError(UnsupportedOperationError):
    default_message = "Time adjustment is not allowed for this authorization code"
    default_code = "TIME_ADJUSTMENT_NOT_ALLOWED"

"""
Device fingerprint generation and validation.

A fingerprint is the SHA-256 hex digest of the lower-cased, trimmed,
pipe-joined tuple (cpu_id, board_serial, disk_serial, mac_address, platform).
"""

import hashlib
import re
from dataclasses import fields
from typing import Any, List, Mapping, Optional, Tuple, Union

from devices.domain.device import DeviceInfo

FINGERPRINT_PATTERN = re.compile(r"[a-f0-9]{64}", re.IGNORECASE)

FINGERPRINT_FIELDS = ("cpu_id", "board_serial", "disk_serial", "mac_address", "platform")

DeviceComponents = Union[DeviceInfo, Mapping[str, Any]]


def _field(components: DeviceComponents, name: str) -> str:
    if isinstance(components, DeviceInfo):
        value = getattr(components, name)
    else:
        value = components.get(name)
    return "" if value is None else str(value)


class FingerprintValidator:
    """Stateless fingerprint helpers. Every method is pure."""

    @staticmethod
    def generate(components: DeviceComponents) -> str:
        """
        Generate a device fingerprint.

        Args:
            components: DeviceInfo or mapping of hardware descriptors;
                missing fields serialize as an empty string

        Returns:
            64-character lower-case hex digest
        """
        joined = "|".join(
            _field(components, name).strip().lower() for name in FINGERPRINT_FIELDS
        )
        return hashlib.sha256(joined.encode("utf-8")).hexdigest()

    @staticmethod
    def verify_format(value: Any) -> bool:
        """
        Check that a value looks like a fingerprint.

        Args:
            value: Candidate fingerprint

        Returns:
            True for a 64-character hex string (case-insensitive)
        """
        if not isinstance(value, str):
            return False
        return FINGERPRINT_PATTERN.fullmatch(value) is not None

    @staticmethod
    def normalize(value: Any) -> Any:
        """
        Canonical form used for storage and lookups.

        Args:
            value: Candidate fingerprint

        Returns:
            The lower-cased string; non-strings are returned unchanged
            so ``verify_format`` can reject them
        """
        if not isinstance(value, str):
            return value
        return value.lower()

    @staticmethod
    def validate_completeness(components: DeviceComponents) -> List[str]:
        """
        List the required descriptors that are missing or blank.

        Args:
            components: DeviceInfo or mapping of hardware descriptors

        Returns:
            Missing field names in fingerprint order (empty when complete)
        """
        return [
            name for name in FINGERPRINT_FIELDS if not _field(components, name).strip()
        ]

    @staticmethod
    def compare(first: Optional[str], second: Optional[str]) -> bool:
        """Case-insensitive fingerprint equality; blanks never match."""
        if not first or not second:
            return False
        return first.lower() == second.lower()

    @staticmethod
    def normalize_device_info(components: DeviceComponents) -> DeviceInfo:
        """Trim every descriptor field."""
        return DeviceInfo(
            **{f.name: _field(components, f.name).strip() for f in fields(DeviceInfo)}
        )

    @staticmethod
    def generate_and_validate(
        components: DeviceComponents,
    ) -> Tuple[Optional[str], List[str]]:
        """
        Generate a fingerprint when the descriptors are complete.

        Args:
            components: DeviceInfo or mapping of hardware descriptors

        Returns:
            Tuple of (fingerprint or None, missing field names)
        """
        missing = FingerprintValidator.validate_completeness(components)
        if missing:
            return None, missing
        return FingerprintValidator.generate(components), []

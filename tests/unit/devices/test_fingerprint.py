"""
Unit tests for FingerprintValidator.
"""

import hashlib

from devices.domain.device import DeviceInfo
from devices.domain.fingerprint import FINGERPRINT_FIELDS, FingerprintValidator

COMPONENTS = {
    "cpu_id": " BFEBFBFF000906EA ",
    "board_serial": "Board-01",
    "disk_serial": "DISK-XYZ",
    "mac_address": "00:1A:2B:3C:4D:5E",
    "platform": "Windows",
}


class TestFingerprintGenerate:
    """Tests for fingerprint generation."""

    def test_digest_of_normalized_tuple(self):
        """Test fingerprint is sha256 of the trimmed, lower-cased, pipe-joined fields."""
        expected = hashlib.sha256(
            "bfebfbff000906ea|board-01|disk-xyz|00:1a:2b:3c:4d:5e|windows".encode("utf-8")
        ).hexdigest()

        assert FingerprintValidator.generate(COMPONENTS) == expected

    def test_deterministic_and_case_insensitive(self):
        """Test equal descriptors differing only in case and spaces give one fingerprint."""
        shouted = {key: value.upper() + "  " for key, value in COMPONENTS.items()}

        assert FingerprintValidator.generate(COMPONENTS) == FingerprintValidator.generate(shouted)

    def test_missing_fields_serialize_empty(self):
        """Test missing fields count as empty strings."""
        expected = hashlib.sha256("cpu||||".encode("utf-8")).hexdigest()

        assert FingerprintValidator.generate({"cpu_id": "CPU"}) == expected

    def test_accepts_device_info(self):
        """Test DeviceInfo and mapping inputs agree."""
        info = DeviceInfo.from_mapping(COMPONENTS)

        assert FingerprintValidator.generate(info) == FingerprintValidator.generate(COMPONENTS)

    def test_output_passes_format_check(self):
        """Test a generated fingerprint is well-formed."""
        assert FingerprintValidator.verify_format(FingerprintValidator.generate(COMPONENTS))


class TestFingerprintFormat:
    """Tests for format verification and comparison."""

    def test_verify_format(self):
        """Test only 64-character hex strings pass."""
        assert FingerprintValidator.verify_format("a" * 64)
        assert FingerprintValidator.verify_format("ABCDEF0123" + "0" * 54)
        assert not FingerprintValidator.verify_format("a" * 63)
        assert not FingerprintValidator.verify_format("a" * 65)
        assert not FingerprintValidator.verify_format("g" * 64)
        assert not FingerprintValidator.verify_format("")
        assert not FingerprintValidator.verify_format(None)
        assert not FingerprintValidator.verify_format(12345)

    def test_compare(self):
        """Test comparison is case-insensitive and blanks never match."""
        assert FingerprintValidator.compare("ab" * 32, "AB" * 32)
        assert not FingerprintValidator.compare("ab" * 32, "cd" * 32)
        assert not FingerprintValidator.compare("", "")
        assert not FingerprintValidator.compare(None, "ab" * 32)

    def test_normalize(self):
        """Test fingerprints are lower-cased and other values pass through."""
        assert FingerprintValidator.normalize("AB" * 32) == "ab" * 32
        assert FingerprintValidator.normalize("ab" * 32) == "ab" * 32
        assert FingerprintValidator.normalize(None) is None


class TestFingerprintCompleteness:
    """Tests for completeness validation."""

    def test_complete(self):
        """Test complete descriptors report nothing missing."""
        assert FingerprintValidator.validate_completeness(COMPONENTS) == []

    def test_blank_and_missing_fields_reported(self):
        """Test blank and absent fields are listed in fingerprint order."""
        partial = {"cpu_id": "x", "board_serial": "   ", "platform": "linux"}

        missing = FingerprintValidator.validate_completeness(partial)

        assert missing == ["board_serial", "disk_serial", "mac_address"]

    def test_generate_and_validate(self):
        """Test fingerprint is produced only for complete descriptors."""
        fingerprint, missing = FingerprintValidator.generate_and_validate(COMPONENTS)
        assert fingerprint == FingerprintValidator.generate(COMPONENTS)
        assert missing == []

        fingerprint, missing = FingerprintValidator.generate_and_validate({})
        assert fingerprint is None
        assert missing == list(FINGERPRINT_FIELDS)

    def test_normalize_device_info(self):
        """Test descriptors are trimmed and unknown keys dropped."""
        info = FingerprintValidator.normalize_device_info(
            {"cpu_id": "  abc ", "region": " eu ", "unknown": "x"}
        )

        assert info.cpu_id == "abc"
        assert info.region == "eu"
        assert info.board_serial == ""

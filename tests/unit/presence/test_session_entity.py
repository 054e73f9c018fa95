"""
Unit tests for OnlineSession domain entity.
"""

import hashlib
import uuid
from dataclasses import replace
from datetime import timedelta

from django.utils import timezone

from presence.domain.session import OnlineSession, hash_token


def open_session(now, ttl=24):
    return OnlineSession.create(
        device_id=uuid.uuid4(),
        code_id=uuid.uuid4(),
        tenant_id=uuid.uuid4(),
        token="secret-token",
        now=now,
        token_ttl_hours=ttl,
        ip="10.0.0.1",
    )


class TestOnlineSession:
    """Tests for OnlineSession."""

    def test_only_hash_is_kept(self):
        """Test the raw token is not stored."""
        session = open_session(timezone.now())

        assert session.token_hash == hashlib.sha256(b"secret-token").hexdigest()
        assert session.token_hash == hash_token("secret-token")
        assert "secret-token" not in session.__dict__.values()

    def test_liveness(self):
        """Test live means valid, not forced and token not expired."""
        now = timezone.now()
        session = open_session(now, ttl=1)

        assert session.is_live(now)
        assert session.is_live(now + timedelta(hours=1))
        assert not session.is_live(now + timedelta(hours=1, seconds=1))
        assert not replace(session, is_valid=False).is_live(now)
        assert not replace(session, force_offline=True).is_live(now)

    def test_no_ttl_never_expires(self):
        """Test a session without token expiry stays live."""
        now = timezone.now()
        session = open_session(now, ttl=None)

        assert session.token_expire_time is None
        assert session.is_live(now + timedelta(days=365))

    def test_refreshed(self):
        """Test refreshing resets the token, timestamps and offline flag."""
        now = timezone.now()
        kicked = replace(open_session(now), force_offline=True, is_valid=False)
        later = now + timedelta(minutes=5)

        fresh = kicked.refreshed("new-token", later, 24)

        assert fresh.id == kicked.id
        assert fresh.token_hash == hash_token("new-token")
        assert fresh.is_live(later)
        assert fresh.login_time == later
        assert fresh.last_heartbeat == later

    def test_durations(self):
        """Test online duration and heartbeat age in seconds."""
        now = timezone.now()
        session = replace(open_session(now), last_heartbeat=now + timedelta(seconds=40))

        assert session.online_seconds(now + timedelta(seconds=90)) == 90
        assert session.heartbeat_age_seconds(now + timedelta(seconds=90)) == 50

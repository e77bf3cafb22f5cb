"""Tests for connection resolution."""

from datetime import datetime, timedelta

import pytest

from socials_publisher.constants import AuthScheme, ErrorKind, Provider
from socials_publisher.publishing.connections import resolve, select_scheme
from socials_publisher.publishing.exceptions import ConnectionResolutionError

from conftest import FIXED_NOW, make_record


class TestResolve:
    """Tests for resolve()."""

    def test_missing_record_is_not_connected(self):
        with pytest.raises(ConnectionResolutionError) as exc_info:
            resolve(Provider.FACEBOOK, None, now=FIXED_NOW)
        assert exc_info.value.kind == ErrorKind.NOT_CONNECTED

    def test_record_for_other_provider_is_not_connected(self):
        record = make_record(Provider.INSTAGRAM)
        with pytest.raises(ConnectionResolutionError) as exc_info:
            resolve(Provider.FACEBOOK, record, now=FIXED_NOW)
        assert exc_info.value.kind == ErrorKind.NOT_CONNECTED

    def test_record_without_token_is_not_connected(self):
        record = make_record(Provider.TWITTER, access_token=None)
        with pytest.raises(ConnectionResolutionError) as exc_info:
            resolve(Provider.TWITTER, record, now=FIXED_NOW)
        assert exc_info.value.kind == ErrorKind.NOT_CONNECTED

    def test_expired_one_second_ago(self):
        record = make_record(Provider.TIKTOK, expires_at=FIXED_NOW - timedelta(seconds=1))
        with pytest.raises(ConnectionResolutionError) as exc_info:
            resolve(Provider.TIKTOK, record, now=FIXED_NOW)
        assert exc_info.value.kind == ErrorKind.TOKEN_EXPIRED
        assert exc_info.value.kind.http_status == 401

    def test_expiring_exactly_now_is_expired(self):
        record = make_record(Provider.TIKTOK, expires_at=FIXED_NOW)
        with pytest.raises(ConnectionResolutionError) as exc_info:
            resolve(Provider.TIKTOK, record, now=FIXED_NOW)
        assert exc_info.value.kind == ErrorKind.TOKEN_EXPIRED

    def test_expiring_in_one_second_is_usable(self):
        record = make_record(Provider.TIKTOK, expires_at=FIXED_NOW + timedelta(seconds=1))
        connection = resolve(Provider.TIKTOK, record, now=FIXED_NOW)
        assert connection.access_token == "tiktok-token"

    def test_no_expiry_is_usable(self):
        record = make_record(Provider.AMAZON, expires_at=None)
        connection = resolve("amazon", record, now=FIXED_NOW)
        assert connection.provider == Provider.AMAZON
        assert connection.expires_at is None

    def test_naive_expiry_is_treated_as_utc(self):
        naive = datetime(2026, 3, 1, 11, 59, 59)
        record = make_record(Provider.FACEBOOK, expires_at=naive)
        with pytest.raises(ConnectionResolutionError):
            resolve(Provider.FACEBOOK, record, now=FIXED_NOW)

    def test_account_fields_carried_over(self):
        record = make_record(Provider.TWITTER, account_id="42", account_name="acme")
        connection = resolve(Provider.TWITTER, record, now=FIXED_NOW)
        assert connection.account_id == "42"
        assert connection.account_name == "acme"


class TestSelectScheme:
    """Tests for auth scheme selection."""

    def test_bearer_only_is_primary(self):
        record = make_record(Provider.TWITTER)
        assert select_scheme(record) == AuthScheme.PRIMARY

    def test_token_secret_is_secondary(self):
        record = make_record(Provider.TWITTER, token_secret="s3cret")
        assert select_scheme(record) == AuthScheme.SECONDARY
        connection = resolve(Provider.TWITTER, record, now=FIXED_NOW)
        assert connection.scheme == AuthScheme.SECONDARY
        assert connection.token_secret == "s3cret"

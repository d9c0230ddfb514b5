#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#

# pylint: disable=redefined-outer-name,missing-docstring

from datetime import datetime, timedelta, timezone

import pytest
from freezegun import freeze_time

from awsprof import refresh
from awsprof.identity import (
    IdentityProvider,
    SessionCredentials,
    SessionTokenExchangeError,
)
from awsprof.refresh import RefreshResult, SessionRefresher
from awsprof.secret import Secret

NOW = datetime(2026, 10, 19, 12, 0, 0, tzinfo=timezone.utc)
DEVICE_ARN = "arn:aws:iam::000000000000:mfa/x"
SESSION_KEYS = ["access_key_id", "secret_access_key", "session_token", "expiration"]


@pytest.fixture(autouse=True)
def frozen_now():
    with freeze_time(NOW) as frozen_datetime:
        yield frozen_datetime


@pytest.fixture
def provider(mocker):
    provider = mocker.MagicMock(spec=IdentityProvider)
    provider.get_session_token.return_value = SessionCredentials(
        access_key_id="ASIANEW",
        secret_access_key=Secret("new-secret"),
        session_token=Secret("new-token"),
        expiration=NOW + timedelta(hours=36),
    )
    return provider


@pytest.fixture
def code_provider(mocker):
    return mocker.Mock(return_value="123456")


@pytest.fixture
def refresher(linker, store, provider):
    linker.create_iam_profile("work", "AKIAWORK", Secret("work-secret"))
    linker.create_mfa_profile("work", DEVICE_ARN)
    linker.create_assume_role_profile(
        "dev", "arn:aws:iam::0:role/P", "ap-southeast-2", "work:mfa"
    )
    return SessionRefresher(store, provider)


def existing_session(store, expires_in):
    store.update(
        "work:mfa",
        {
            "access_key_id": "ASIAOLD",
            "secret_access_key": "old-secret",
            "session_token": "old-token",
            "expiration": refresh.format_expiration(NOW + expires_in),
        },
    )


def session_attrs(store):
    return {k: store.get("work:mfa", k) for k in SESSION_KEYS}


def test_refresh_without_prior_session(refresher, store, provider, code_provider):
    result = refresher.refresh("work:dev", code_provider)

    provider.get_session_token.assert_called_once()
    args, kwargs = provider.get_session_token.call_args
    assert args[0] == DEVICE_ARN
    assert args[1] == "123456"
    assert args[2].access_key_id == "AKIAWORK"
    assert args[2].secret_access_key == Secret("work-secret")
    assert kwargs["duration_seconds"] == 129600

    assert session_attrs(store) == {
        "access_key_id": "ASIANEW",
        "secret_access_key": "new-secret",
        "session_token": "new-token",
        "expiration": "2026-10-21T00:00:00Z",
    }
    assert result == RefreshResult.refreshed(
        "work:mfa", datetime(2026, 10, 21, 0, 0, tzinfo=timezone.utc)
    )
    assert result.is_refreshed


def test_refresh_skipped_while_session_valid(refresher, store, provider, code_provider):
    existing_session(store, timedelta(hours=2))
    before = session_attrs(store)

    result = refresher.refresh("work:dev", code_provider)

    assert result.status == RefreshResult.ALREADY_VALID
    assert result.expiration == NOW + timedelta(hours=2)
    provider.get_session_token.assert_not_called()
    code_provider.assert_not_called()
    assert session_attrs(store) == before


@pytest.mark.parametrize(
    "expires_in",
    [timedelta(hours=1), timedelta(minutes=59), timedelta(0), timedelta(hours=-3)],
)
def test_refresh_when_near_expiry(refresher, store, provider, code_provider, expires_in):
    existing_session(store, expires_in)
    result = refresher.refresh("work:dev", code_provider)
    assert result.is_refreshed
    provider.get_session_token.assert_called_once()


def test_refresh_forced(refresher, store, provider, code_provider):
    existing_session(store, timedelta(hours=2))

    result = refresher.refresh("work:dev", code_provider, force=True)

    assert result.is_refreshed
    provider.get_session_token.assert_called_once()
    assert session_attrs(store) == {
        "access_key_id": "ASIANEW",
        "secret_access_key": "new-secret",
        "session_token": "new-token",
        "expiration": "2026-10-21T00:00:00Z",
    }


def test_refreshed_session_is_then_valid(refresher, provider, code_provider, frozen_now):
    refresher.refresh("work:dev", code_provider)
    frozen_now.tick(delta=timedelta(hours=30))
    result = refresher.refresh("work:iam", code_provider)
    assert result.status == RefreshResult.ALREADY_VALID
    assert provider.get_session_token.call_count == 1


def test_failed_exchange_writes_nothing(refresher, store, provider, code_provider):
    existing_session(store, timedelta(minutes=10))
    before = session_attrs(store)
    provider.get_session_token.side_effect = SessionTokenExchangeError(
        DEVICE_ARN, "AccessDenied - invalid MFA one time pass code"
    )

    with pytest.raises(refresh.SessionTokenExchangeFailedError) as e:
        refresher.refresh("work:dev", code_provider)

    assert e.value.profile == "work:mfa"
    assert "AccessDenied" in str(e.value)
    assert isinstance(e.value.__cause__, SessionTokenExchangeError)
    assert session_attrs(store) == before


@pytest.mark.parametrize("active", [None, ""])
def test_no_active_profile(refresher, code_provider, active):
    with pytest.raises(refresh.NoActiveProfileError):
        refresher.refresh(active, code_provider)


@pytest.mark.parametrize("code", [None, "", "   "])
def test_missing_code(refresher, store, provider, code):
    with pytest.raises(refresh.MissingCodeError):
        refresher.refresh("work:dev", lambda: code)
    provider.get_session_token.assert_not_called()
    assert store.get("work:mfa", "session_token") is None


def test_code_is_stripped(refresher, provider):
    refresher.refresh("work:dev", lambda: " 123456\n")
    assert provider.get_session_token.call_args[0][1] == "123456"


def test_missing_device_arn(linker, store, provider, code_provider):
    linker.create_iam_profile("home", "k", "s")
    with pytest.raises(refresh.MissingDeviceArnError) as e:
        SessionRefresher(store, provider).refresh("home:iam", code_provider)
    assert "add-mfa home" in str(e.value)
    provider.get_session_token.assert_not_called()


def test_missing_source_credentials(linker, store, provider, code_provider):
    linker.create_mfa_profile("home", DEVICE_ARN)
    with pytest.raises(refresh.MissingSourceCredentialsError):
        SessionRefresher(store, provider).refresh("home:mfa", code_provider)
    provider.get_session_token.assert_not_called()


def test_invalid_stored_expiration_is_ignored(refresher, store, provider, code_provider):
    store.set("work:mfa", "expiration", "tomorrow")
    assert refresher.refresh("work:dev", code_provider).is_refreshed


def test_secrets_not_logged(refresher, code_provider, caplog):
    caplog.set_level("DEBUG")
    refresher.refresh("work:dev", code_provider)
    assert "new-secret" not in caplog.text
    assert "new-token" not in caplog.text
    assert "work-secret" not in caplog.text


@pytest.mark.parametrize(
    "expires_in, expected",
    [
        (None, refresh.NO_SESSION),
        (timedelta(hours=2), refresh.VALID),
        (timedelta(minutes=30), refresh.EXPIRING),
        (timedelta(hours=-1), refresh.EXPIRING),
    ],
)
def test_session_status(refresher, store, expires_in, expected):
    if expires_in is not None:
        existing_session(store, expires_in)
    state, expiration = refresher.session_status("work:dev")
    assert state == expected
    if expires_in is None:
        assert expiration is None
    else:
        assert expiration == NOW + expires_in


@pytest.mark.parametrize(
    "value, expected",
    [
        ("2026-10-21T00:00:00Z", datetime(2026, 10, 21, tzinfo=timezone.utc)),
        ("2026-10-21T02:00:00+02:00", datetime(2026, 10, 21, tzinfo=timezone.utc)),
        ("2026-10-21T00:00:00", datetime(2026, 10, 21, tzinfo=timezone.utc)),
    ],
)
def test_parse_expiration(value, expected):
    assert refresh.parse_expiration(value) == expected


def test_format_expiration_converts_to_utc():
    est = timezone(timedelta(hours=-5))
    assert (
        refresh.format_expiration(datetime(2026, 10, 20, 19, 0, 0, 750, tzinfo=est))
        == "2026-10-21T00:00:00Z"
    )

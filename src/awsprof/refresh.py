#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Refresh the MFA session token of a domain.

## Overview

An assume-role profile such as `work:dev` uses `work:mfa` as its source
profile. The credentials of `work:mfa` are temporary: they are obtained by
exchanging an MFA code and the long-lived keys of `work:iam` for a session
token that lasts 36 hours. The `SessionRefresher` performs that exchange and
saves the result in the `work:mfa` profile:

    refresher = SessionRefresher(ProfileStore(), StsIdentityProvider())
    result = refresher.refresh("work:dev", lambda: input("MFA code: "))
    print(result)

Any profile of the domain can be passed, typically the active profile.

## Skipping the MFA prompt

Each refresh stores the expiration of the session next to its credentials. As
long as the session is valid for more than `REFRESH_MARGIN` (one hour), a
refresh returns immediately with a result of `RefreshResult.ALREADY_VALID`.
The MFA code provider is not called and nothing is written. Pass `force=True`
to obtain a new session regardless of the expiration.

## Failures

Credentials are only written after a successful exchange and all four
attributes are written together, so a failed refresh never replaces a working
session with a partial one. The following exceptions are defined in this
module:

`NoActiveProfileError`
:  Raised if no profile was given to identify the domain.

`MissingCodeError`
:  Raised if the MFA code provider returned no code.

`MissingDeviceArnError`
:  Raised if the MFA profile of the domain has no device ARN.

`MissingSourceCredentialsError`
:  Raised if the IAM profile of the domain has no access key pair.

`SessionTokenExchangeFailedError`
:  Raised if the identity provider failed to issue a session token.
"""

import logging
from datetime import datetime, timedelta, timezone

from awsprof import naming
from awsprof.errors import ProfileError
from awsprof.identity import SessionTokenExchangeError, SourceCredentials
from awsprof.secret import Secret

LOG = logging.getLogger(__name__)

SESSION_DURATION = 129600
"""Duration in seconds requested for every session token (36 hours)."""

REFRESH_MARGIN = timedelta(hours=1)
"""A session expiring later than this is not refreshed unless forced."""

EXPIRATION_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

NO_SESSION = "no-session"
VALID = "valid"
EXPIRING = "expiring"


class RefreshResult:
    """The outcome of `SessionRefresher.refresh`.

    `status` is either `RefreshResult.ALREADY_VALID` or
    `RefreshResult.REFRESHED`. `profile` is the name of the MFA profile and
    `expiration` the UTC `datetime` at which its session expires.
    """

    ALREADY_VALID = "already-valid"
    REFRESHED = "refreshed"

    def __init__(self, status, profile, expiration):
        self.status = status
        self.profile = profile
        self.expiration = expiration

    @classmethod
    def already_valid(cls, profile, expiration):
        return cls(cls.ALREADY_VALID, profile, expiration)

    @classmethod
    def refreshed(cls, profile, expiration):
        return cls(cls.REFRESHED, profile, expiration)

    @property
    def is_refreshed(self):
        return self.status == self.REFRESHED

    def __eq__(self, other):
        if not isinstance(other, RefreshResult):
            return NotImplemented
        return (self.status, self.profile, self.expiration) == (
            other.status,
            other.profile,
            other.expiration,
        )

    def __repr__(self):
        return f"RefreshResult({self.status!r}, {self.profile!r}, {self.expiration!r})"

    def __str__(self):
        verb = "refreshed" if self.is_refreshed else "still valid"
        expires = format_expiration(self.expiration)
        return f"Session for {self.profile} {verb}, expires {expires}"


class SessionRefresher:
    """Refreshes MFA session tokens stored in a `awsprof.store.ProfileStore`.

    The `identity_provider` is an `awsprof.identity.IdentityProvider` used to
    exchange MFA codes for temporary credentials. It is only needed by
    `refresh`, so `None` is fine for callers that only read `session_status`.
    """

    def __init__(self, store, identity_provider):
        self.store = store
        self.identity_provider = identity_provider

    def refresh(self, active_profile, mfa_code_provider, force=False):
        """Refreshes the session of the domain of `active_profile`.

        `mfa_code_provider` is a function of zero arguments returning the
        current MFA code. It is only called when a new session is requested.
        Returns a `RefreshResult`. Refer to the module documentation for the
        exceptions that may be raised.
        """
        if not active_profile:
            raise NoActiveProfileError()

        domain, _ = naming.parse(active_profile)
        iam_profile = naming.iam_profile(domain)
        mfa_profile = naming.mfa_profile(domain)

        expiration = self._expiration(mfa_profile)
        if not force and expiration and expiration - _now() > REFRESH_MARGIN:
            LOG.info("session for %s valid until %s", mfa_profile, expiration)
            return RefreshResult.already_valid(mfa_profile, expiration)

        code = mfa_code_provider()
        code = code.strip() if code else code
        if not code:
            raise MissingCodeError(mfa_profile)

        device_arn = self.store.get(mfa_profile, "device_arn")
        if not device_arn:
            raise MissingDeviceArnError(mfa_profile)

        source_credentials = self._source_credentials(iam_profile)

        try:
            creds = self.identity_provider.get_session_token(
                device_arn, code, source_credentials, duration_seconds=SESSION_DURATION
            )
        except SessionTokenExchangeError as e:
            raise SessionTokenExchangeFailedError(mfa_profile, e) from e

        # Truncated to whole seconds, the precision kept in the store.
        expiration = parse_expiration(format_expiration(creds.expiration))
        self.store.update(
            mfa_profile,
            {
                "access_key_id": creds.access_key_id,
                "secret_access_key": creds.secret_access_key,
                "session_token": creds.session_token,
                "expiration": format_expiration(expiration),
            },
        )
        LOG.info("refreshed session for %s until %s", mfa_profile, expiration)
        return RefreshResult.refreshed(mfa_profile, expiration)

    def session_status(self, active_profile):
        """Returns a tuple of `(state, expiration)` for the domain's session.

        `state` is one of `NO_SESSION`, `VALID`, or `EXPIRING`. The latter means
        the next refresh will request a new session.
        """
        if not active_profile:
            raise NoActiveProfileError()

        domain, _ = naming.parse(active_profile)
        expiration = self._expiration(naming.mfa_profile(domain))
        if expiration is None:
            return NO_SESSION, None
        if expiration - _now() > REFRESH_MARGIN:
            return VALID, expiration
        return EXPIRING, expiration

    def _expiration(self, mfa_profile):
        value = self.store.get(mfa_profile, "expiration")
        if not value:
            return None
        try:
            return parse_expiration(value)
        except ValueError:
            LOG.warning("ignoring invalid expiration %r of %s", value, mfa_profile)
            return None

    def _source_credentials(self, iam_profile):
        access_key_id = self.store.get(iam_profile, "access_key_id")
        secret_access_key = self.store.get(iam_profile, "secret_access_key")
        if not (access_key_id and secret_access_key):
            raise MissingSourceCredentialsError(iam_profile)
        return SourceCredentials(access_key_id, Secret(secret_access_key))


def format_expiration(expiration):
    """Returns the RFC 3339 UTC string stored for `expiration`."""
    return expiration.astimezone(timezone.utc).strftime(EXPIRATION_FORMAT)


def parse_expiration(value):
    """Returns the UTC `datetime` of an expiration string.

    Accepts the format written by `format_expiration` as well as other ISO 8601
    timestamps with an offset. Timestamps without an offset are taken as UTC.
    Raises `ValueError` if `value` is not a timestamp.
    """
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    dt = datetime.fromisoformat(value)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _now():
    return datetime.now(timezone.utc)


class NoActiveProfileError(ProfileError):
    """Raised if a refresh is requested without a profile to identify the domain."""

    def __init__(self):
        super().__init__(
            "No active profile, select one with 'awsprof use' or pass --profile"
        )


class MissingCodeError(ProfileError):
    """Raised if no MFA code was provided."""

    def __init__(self, profile):
        self.profile = profile
        super().__init__(f"Cannot refresh {profile}: no MFA code provided")


class MissingDeviceArnError(ProfileError):
    """Raised if the MFA profile has no device ARN."""

    def __init__(self, profile):
        self.profile = profile
        domain, _ = naming.parse(profile)
        super().__init__(
            f"Cannot refresh {profile}: no MFA device ARN, "
            f"run 'awsprof add-mfa {domain} DEVICE_ARN' first"
        )


class MissingSourceCredentialsError(ProfileError):
    """Raised if the IAM profile has no access key pair."""

    def __init__(self, profile):
        self.profile = profile
        domain, _ = naming.parse(profile)
        super().__init__(
            f"Cannot refresh session: {profile} has no access keys, "
            f"run 'awsprof add-iam {domain}' first"
        )


class SessionTokenExchangeFailedError(ProfileError):
    """Raised if the identity provider could not issue a session token.

    The `profile` attribute contains the MFA profile that was not refreshed. The
    original `awsprof.identity.SessionTokenExchangeError` is chained.
    """

    def __init__(self, profile, cause):
        self.profile = profile
        super().__init__(f"Cannot refresh {profile}: {cause}")

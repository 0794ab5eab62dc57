"""
Tests for the Sentry event filter.
"""

from fastapi import HTTPException

from sfmanager.auth import AuthenticationFailedError, TokenExpiredError
from sfmanager.config import Settings
from sfmanager.integrations.sentry import filter_event, init_sentry


def _hint(exc):
    return {"exc_info": (type(exc), exc, None)}


class TestFilterEvent:
    def test_drops_client_auth_errors(self):
        assert filter_event({}, _hint(TokenExpiredError())) is None
        assert filter_event({}, _hint(HTTPException(status_code=404))) is None

    def test_keeps_server_errors(self):
        event = {"message": "boom"}
        assert filter_event(event, _hint(AuthenticationFailedError("db down"))) is event

    def test_scrubs_credentials(self):
        event = {
            "request": {
                "headers": {
                    "Authorization": "Bearer abc",
                    "X-Auth-Token": "abc",
                    "Accept": "application/json",
                }
            }
        }

        headers = filter_event(event, {})["request"]["headers"]

        assert headers["Authorization"] == "[Filtered]"
        assert headers["X-Auth-Token"] == "[Filtered]"
        assert headers["Accept"] == "application/json"


def test_init_skipped_without_dsn():
    assert init_sentry(Settings(_env_file=None, jwt_secret="x", sentry_dsn="")) is False

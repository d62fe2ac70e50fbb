"""Unit tests for the session identity provider."""

from groupaccess.core.context import clear_current_account, set_current_account
from groupaccess.domain.entities import Account
from groupaccess.infrastructure.auth import SessionIdentityProvider


def test_current_user_defaults_to_anonymous():
    provider = SessionIdentityProvider(superuser_id="1")

    assert provider.current_user().is_anonymous()


def test_current_user_from_context():
    provider = SessionIdentityProvider(superuser_id="1")
    set_current_account(Account(id="7"))

    try:
        assert provider.current_user().id == "7"
    finally:
        clear_current_account()


def test_is_superuser():
    provider = SessionIdentityProvider(superuser_id=1)

    assert provider.is_superuser(Account(id="1"))
    assert not provider.is_superuser(Account(id="2"))


def test_superuser_id_from_settings(monkeypatch):
    monkeypatch.setenv("GROUPACCESS_SUPERUSER_ID", "42")

    provider = SessionIdentityProvider()

    assert provider.is_superuser(Account(id="42"))


def test_has_permission():
    provider = SessionIdentityProvider(superuser_id="1")
    account = Account(id="7", permissions={"administer group"})

    assert provider.has_permission(account, "administer group")
    assert not provider.has_permission(account, "manage roles")

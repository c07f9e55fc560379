# Integration tests against the in-process resource API and status server
import base64
import json
from datetime import datetime, timedelta, timezone
from unittest.mock import Mock

import pytest
from conftest import FakeStore, make_response

from lcpconsole.client.infrastructure.config_loader import ConfigLoader
from lcpconsole.client.license_status import (
    REVOKE_INCOMPATIBLE,
    REVOKE_INTERNAL_ERROR,
    REVOKE_NOT_FOUND,
    LicenseStatusService,
)
from lcpconsole.common.crypto import CryptoUtils
from lcpconsole.common.exceptions import LicenseStatusError, ResourceError
from lcpconsole.common.models import LOAN, Publication, Purchase, User


def seed(loader: ConfigLoader, email: str = "ann@example.org") -> tuple[User, Publication]:
    loader.users.add(User(name="Ann", email=email, clear_password="secret"))
    loader.publications.add(Publication(title=f"Book of {email}"))
    return (
        loader.users.find_by_email(email),
        loader.publications.check_by_title(f"Book of {email}"),
    )


def add_loan(loader: ConfigLoader, days: int = 7) -> Purchase:
    user, publication = seed(loader)
    loader.purchases.add(
        Purchase(
            user=user,
            publication=publication,
            type=LOAN,
            end_date=datetime.now(timezone.utc) + timedelta(days=days),
        )
    )
    return loader.purchases.for_user(user.id)[0]


def test_created_user_is_listed(loader: ConfigLoader) -> None:
    loader.users.add(User(name="Ann", email="ann@example.org", clear_password="pw"))
    emails = [user.email for user in loader.users.list()]
    assert "ann@example.org" in emails


def test_deleted_purchase_leaves_list(loader: ConfigLoader) -> None:
    purchase = add_loan(loader)
    assert purchase.id in [p.id for p in loader.purchases.list()]

    assert loader.purchases.delete(purchase.id) is True

    assert purchase.id not in [p.id for p in loader.purchases.list()]


def test_deleting_twice_fails(loader: ConfigLoader) -> None:
    purchase = add_loan(loader)
    loader.purchases.delete(purchase.id)
    with pytest.raises(ResourceError) as exc_info:
        loader.purchases.delete(purchase.id)
    assert exc_info.value.status_code == 404  # noqa: PLR2004


def test_renew_moves_potential_rights_end(loader: ConfigLoader) -> None:
    purchase = add_loan(loader)
    new_end = datetime.now(timezone.utc).replace(microsecond=0) + timedelta(days=30)

    loader.license_status.renew(purchase.license_uuid, new_end)

    status = loader.license_status.get(purchase.license_uuid)
    assert status.potential_rights.end == new_end


@pytest.mark.parametrize(
    ("status_code", "expected"),
    [
        (400, REVOKE_INCOMPATIBLE),
        (401, REVOKE_NOT_FOUND),
        (404, REVOKE_NOT_FOUND),
        (500, REVOKE_INTERNAL_ERROR),
        (502, REVOKE_INTERNAL_ERROR),
    ],
)
def test_revoke_status_messages(status_code: int, expected: str) -> None:
    session = Mock()
    session.patch.return_value = make_response(status_code, None, text="")
    with pytest.raises(LicenseStatusError, match=expected):
        LicenseStatusService("http://lsd.test", session).revoke("lic-1")


def test_revoke_with_wrong_credentials(loader: ConfigLoader) -> None:
    purchase = add_loan(loader)
    lsd = LicenseStatusService(
        "http://testserver", loader.lsd_session, auth=("lsd-admin", "wrong")
    )
    with pytest.raises(LicenseStatusError) as exc_info:
        lsd.revoke(purchase.license_uuid)
    assert exc_info.value.status_code == 401  # noqa: PLR2004
    assert str(exc_info.value) == REVOKE_NOT_FOUND


def test_partial_license_has_provider_and_key(
    loader: ConfigLoader, store: FakeStore
) -> None:
    purchase = add_loan(loader)

    partial = json.loads(store.purchases[purchase.id]["partialLicense"])

    assert partial["provider"]
    value = partial["encryption"]["user_key"]["value"]
    assert value
    assert base64.b64decode(value).hex() == CryptoUtils.hash_passphrase("secret")
    assert partial["rights"]["end"]

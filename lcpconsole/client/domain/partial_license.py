"""Domain layer: assembling the partial license sent with a new purchase.
"""

from __future__ import annotations

from datetime import datetime, timezone

from lcpconsole.common.crypto import CryptoUtils
from lcpconsole.common.exceptions import ValidationError
from lcpconsole.common.models import (
    Encryption,
    PartialLicense,
    Purchase,
    UserInfo,
    UserKey,
    UserRights,
    as_utc,
)

ENCRYPTED_USER_FIELDS = ["email", "name"]


class PartialLicenseBuilder:
    """Builds the license fragment the license server completes later."""

    def __init__(
        self,
        provider: str,
        right_print: int,
        right_copy: int,
        default_hint: str,
    ) -> None:
        if not provider:
            msg = "A provider URI is required to build licenses"
            raise ValueError(msg)
        self.provider = provider
        self.right_print = right_print
        self.right_copy = right_copy
        self.default_hint = default_hint

    @staticmethod
    def _password_hash(purchase: Purchase) -> str:
        user = purchase.user
        if user.clear_password:
            return CryptoUtils.hash_passphrase(user.clear_password)
        if user.password:
            return user.password
        msg = f"User {user.id} has no passphrase to derive a license key from"
        raise ValidationError(msg)

    def _rights(self, purchase: Purchase) -> UserRights:
        if not purchase.is_loan:
            # no rights window for a buy
            return UserRights(print=self.right_print, copies=self.right_copy)
        if purchase.end_date is None:
            msg = "A loan needs an end date"
            raise ValidationError(msg)
        start = as_utc(purchase.start_date or datetime.now(timezone.utc))
        try:
            return UserRights(
                print=self.right_print,
                copies=self.right_copy,
                start=start,
                end=purchase.end_date,
            )
        except ValueError as e:
            msg = "Loan end date must not be before its start date"
            raise ValidationError(msg) from e

    def build(self, purchase: Purchase) -> PartialLicense:
        user = purchase.user
        try:
            key_value = CryptoUtils.user_key_value(self._password_hash(purchase))
        except ValueError as e:
            raise ValidationError(str(e)) from e
        user_key = UserKey(text_hint=user.hint or self.default_hint, value=key_value)
        return PartialLicense(
            provider=self.provider,
            user=UserInfo(
                id=user.uuid or f"_{user.id}",
                email=user.email,
                name=user.name,
                encrypted=list(ENCRYPTED_USER_FIELDS),
            ),
            encryption=Encryption(user_key=user_key),
            rights=self._rights(purchase),
        )

    def build_json(self, purchase: Purchase) -> str:
        return self.build(purchase).model_dump_json(by_alias=True, exclude_none=True)

"""Domain layer: views combining resource API data with license status.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from lcpconsole.common.models import RENEWABLE_STATUSES, PartialLicense, UserRights

if TYPE_CHECKING:
    from datetime import datetime

    from lcpconsole.common.models import LicenseStatus, Purchase, RegisteredDevice


def rights_from_partial_license(partial_license: str | None) -> UserRights | None:
    """Extract the rights of a serialized partial license, if it has any."""
    if not partial_license:
        return None
    return PartialLicense.model_validate(json.loads(partial_license)).rights


def rights_summary(rights: UserRights | None) -> str:
    """One line description of a rights block, as shown in purchase lists."""
    if rights is None:
        return ""
    parts = []
    if rights.copies:
        parts.append(f"copy={rights.copies}, print={rights.print}")
    if rights.start and rights.end:
        parts.append(
            f"available from {rights.start.isoformat()} to {rights.end.isoformat()}"
        )
    return " ".join(parts)


@dataclass
class PurchaseStatusView:
    """Domain entity for the purchase status screen."""

    purchase: Purchase
    license_status: LicenseStatus | None = None
    devices: list[RegisteredDevice] = field(default_factory=list)

    @property
    def license_id(self) -> str | None:
        return self.purchase.license_uuid

    @property
    def end(self) -> datetime | None:
        """Current end of the loan, preferring the license status document."""
        status = self.license_status
        if status and status.potential_rights and status.potential_rights.end:
            return status.potential_rights.end
        return self.purchase.end_date

    @property
    def can_renew(self) -> bool:
        return (
            self.purchase.is_loan
            and self.purchase.has_license
            and self.license_status is not None
            and self.license_status.status in RENEWABLE_STATUSES
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "purchase": self.purchase.model_dump(mode="json", by_alias=True),
            "license_status": (
                self.license_status.model_dump(mode="json", exclude_none=True)
                if self.license_status
                else None
            ),
            "devices": [d.model_dump(mode="json") for d in self.devices],
            "end": self.end.isoformat() if self.end else None,
            "can_renew": self.can_renew,
            "rights": rights_summary(
                rights_from_partial_license(self.purchase.partial_license)
            ),
        }

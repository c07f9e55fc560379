"""
Purchase request handler: creation, status screen and license actions.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pydantic

from lcpconsole.client.domain.entities import PurchaseStatusView
from lcpconsole.common.decorators import requires_issued_license, requires_loan
from lcpconsole.common.exceptions import LicenseStatusError, ValidationError
from lcpconsole.common.models import Purchase, as_utc

if TYPE_CHECKING:
    from lcpconsole.client.publications import PublicationService
    from lcpconsole.client.purchases import PurchaseService
    from lcpconsole.client.users import UserService
    from lcpconsole.common.interfaces import ILicenseStatusService
    from lcpconsole.common.models import (
        DeviceRequest,
        PurchaseRequest,
        PurchaseUpdateRequest,
        RenewRequest,
    )


class PurchaseHandler:
    """Handles purchase screens and the license actions started from them."""

    def __init__(
        self,
        users: UserService,
        publications: PublicationService,
        purchases: PurchaseService,
        license_status: ILicenseStatusService,
        page_size: int,
    ):
        self.users = users
        self.publications = publications
        self.purchases = purchases
        self.license_status = license_status
        self.page_size = page_size

    def list(self, page: int | None = None) -> list[Purchase]:
        return self.purchases.list(page, self.page_size if page is not None else None)

    def status_view(self, purchase_id: int) -> PurchaseStatusView:
        """Purchase with its license status and registered devices."""
        purchase = self.purchases.get(purchase_id)
        view = PurchaseStatusView(purchase=purchase)
        if purchase.has_license:
            view.license_status = self.license_status.get(purchase.license_uuid)
            try:
                view.devices = self.license_status.registered_devices(
                    purchase.license_uuid
                ).devices
            except LicenseStatusError:
                # the device list needs credentials the console may lack
                view.devices = []
        return view

    def create(self, req: PurchaseRequest) -> Purchase:
        user = self.users.get(req.user_id)
        publication = self.publications.get(req.publication_id)
        try:
            purchase = Purchase(
                user=user,
                publication=publication,
                type=req.type,
                start_date=req.start_date,
                end_date=req.end_date,
            )
        except pydantic.ValidationError as e:
            raise ValidationError(str(e)) from e
        return self.purchases.add(purchase)

    def update(self, purchase_id: int, req: PurchaseUpdateRequest) -> Purchase:
        """Edit the end of a purchase and flag it for the license server."""
        if req.no_end_date and req.end_date:
            msg = "An end date cannot be set together with no_end_date"
            raise ValidationError(msg)
        purchase = self.purchases.get(purchase_id)
        if req.no_end_date:
            purchase.end_date = None
        elif req.end_date:
            end = as_utc(req.end_date)
            if purchase.start_date and end < purchase.start_date:
                msg = "The end date must not be before the start date"
                raise ValidationError(msg)
            purchase.end_date = end
        purchase.status = req.status
        return self.purchases.update(purchase)

    def delete(self, purchase_id: int) -> dict:
        return {"deleted": self.purchases.delete(purchase_id)}

    def license_document(self, purchase_id: int) -> dict[str, Any]:
        return self._license_document(self.purchases.get(purchase_id))

    @requires_issued_license()
    def _license_document(self, purchase: Purchase) -> dict[str, Any]:
        return self.purchases.license(purchase.id)

    def renew(self, purchase_id: int, req: RenewRequest) -> PurchaseStatusView:
        purchase = self.purchases.get(purchase_id)
        self._renew(purchase, req)
        return self.status_view(purchase_id)

    @requires_issued_license()
    @requires_loan()
    def _renew(self, purchase: Purchase, req: RenewRequest) -> None:
        if req.end_date and purchase.max_end_date:
            if as_utc(req.end_date) > purchase.max_end_date:
                msg = "The new end date is beyond the maximum end date of this loan"
                raise ValidationError(msg)
        self.license_status.renew(
            purchase.license_uuid, req.end_date, req.device_id, req.device_name
        )

    def return_license(
        self, purchase_id: int, req: DeviceRequest
    ) -> PurchaseStatusView:
        purchase = self.purchases.get(purchase_id)
        self._return(purchase, req)
        return self.status_view(purchase_id)

    @requires_issued_license()
    @requires_loan("License cannot be returned (it was bought)")
    def _return(self, purchase: Purchase, req: DeviceRequest) -> None:
        self.license_status.return_license(
            purchase.license_uuid, req.device_id, req.device_name
        )

    def revoke(self, fragment: str) -> dict:
        """Revoke the single license whose id starts with ``fragment``."""
        matches = self.purchases.by_license_prefix(fragment)
        if not matches:
            msg = f"No license matches '{fragment}'"
            raise ValidationError(msg, 404)
        if len(matches) > 1:
            msg = f"{len(matches)} licenses match '{fragment}', be more specific"
            raise ValidationError(msg)
        license_id = matches[0].license_uuid
        message = self.license_status.revoke(license_id)
        return {"license_id": license_id, "message": message}

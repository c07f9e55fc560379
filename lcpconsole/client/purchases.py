"""
Purchase resource client.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from lcpconsole.client.crud import API_PREFIX, CrudService
from lcpconsole.common.models import Purchase

if TYPE_CHECKING:
    from lcpconsole.client.domain.partial_license import PartialLicenseBuilder
    from lcpconsole.common.interfaces import IHttpSession


class PurchaseService(CrudService[Purchase]):
    """CRUD client for /purchases.

    New purchases are sent together with a partial license built for their
    user; the resource API forwards it to the license server.
    """

    path = "/purchases"

    def __init__(
        self,
        api_url: str,
        license_builder: PartialLicenseBuilder,
        session: IHttpSession | None = None,
        auth: tuple[str, str] | None = None,
        api_prefix: str = API_PREFIX,
    ) -> None:
        super().__init__(api_url, session, auth, api_prefix)
        self.license_builder = license_builder

    def decode(self, json_obj: dict[str, Any]) -> Purchase:
        return Purchase.model_validate(json_obj)

    def encode(self, obj: Purchase) -> dict[str, Any]:
        payload = obj.model_dump(
            mode="json",
            by_alias=True,
            exclude_none=True,
            exclude={"max_end_date"},
        )
        if obj.id is not None:
            # a stored purchase without end date has it cleared upstream
            payload.setdefault("endDate", None)
        return payload

    def add(self, obj: Purchase) -> Purchase:
        obj.partial_license = self.license_builder.build_json(obj)
        return super().add(obj)

    def for_user(
        self, user_id: int, page: int | None = None, per_page: int | None = None
    ) -> list[Purchase]:
        response = self.request(
            "get",
            f"{self.resource_root}/users/{user_id}/purchases",
            params=self.page_params(page, per_page),
        )
        return self.decode_list(self.json_or_none(response))

    def license(self, purchase_id: int) -> dict[str, Any]:
        """Fetch the full license document generated for a purchase."""
        response = self.request("get", f"{self.item_url(purchase_id)}/license")
        return response.json()

    def by_license_prefix(self, fragment: str) -> list[Purchase]:
        """Purchases whose license id starts with the given fragment."""
        fragment = fragment.strip().lower()
        return [
            purchase
            for purchase in self.iter_all()
            if purchase.license_uuid
            and purchase.license_uuid.lower().startswith(fragment)
        ]

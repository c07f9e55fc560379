"""
Generic create/read/update/delete client for resource API collections.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from lcpconsole.client.http import ApiClient
from lcpconsole.common.exceptions import ValidationError

if TYPE_CHECKING:
    from collections.abc import Iterator

    from lcpconsole.common.interfaces import IHttpSession

T = TypeVar("T")

API_PREFIX = "/api/v1"
# page size the resource API applies when none is requested
DEFAULT_PAGE_SIZE = 30


class CrudService(ApiClient, ABC, Generic[T]):
    """Maps list/get/add/update/delete onto GET/GET/POST/PUT/DELETE.

    Subclasses set ``path`` and provide the decode/encode pair that turns API
    JSON into models and back.
    """

    path: str = ""

    def __init__(
        self,
        api_url: str,
        session: IHttpSession | None = None,
        auth: tuple[str, str] | None = None,
        api_prefix: str = API_PREFIX,
    ) -> None:
        super().__init__(api_url, session, auth)
        self.resource_root = self.api_url + api_prefix
        self.base_url = self.resource_root + self.path

    @abstractmethod
    def decode(self, json_obj: dict[str, Any]) -> T:
        """Build a model from API JSON."""

    @abstractmethod
    def encode(self, obj: T) -> dict[str, Any]:
        """Encode a model as API JSON."""

    @staticmethod
    def item_id(obj: T) -> Any:
        return getattr(obj, "id", None)

    def item_url(self, item_id: int | str) -> str:
        return f"{self.base_url}/{item_id}"

    @staticmethod
    def page_params(page: int | None, per_page: int | None) -> dict[str, int] | None:
        params = {}
        if page is not None:
            params["page"] = page
        if per_page is not None:
            params["per_page"] = per_page
        return params or None

    def decode_list(self, payload: list[dict[str, Any]] | None) -> list[T]:
        return [self.decode(json_obj) for json_obj in payload or []]

    def list(self, page: int | None = None, per_page: int | None = None) -> list[T]:
        response = self.request(
            "get", self.base_url, params=self.page_params(page, per_page)
        )
        return self.decode_list(self.json_or_none(response))

    def iter_all(self, per_page: int = DEFAULT_PAGE_SIZE) -> Iterator[T]:
        """Walk every page of the collection until a short page comes back."""
        seen: set[Any] = set()
        page = 1
        while True:
            items = self.list(page=page, per_page=per_page)
            ids = {self.item_id(item) for item in items}
            # a server that ignores paging keeps answering the same page
            if not items or (ids <= seen and None not in ids):
                return
            seen |= ids
            yield from items
            if len(items) < per_page:
                return
            page += 1

    def get(self, item_id: int | str) -> T:
        response = self.request("get", self.item_url(item_id))
        return self.decode(response.json())

    def add(self, obj: T) -> T:
        self.request("post", self.base_url, json=self.encode(obj))
        self.logger.info("Created %s", self.path.strip("/"))
        return obj

    def update(self, obj: T) -> T:
        item_id = self.item_id(obj)
        if item_id is None:
            msg = "cannot update an item without id"
            raise ValidationError(msg)
        self.request("put", self.item_url(item_id), json=self.encode(obj))
        self.logger.info("Updated %s %s", self.path.strip("/"), item_id)
        return obj

    def delete(self, item_id: int | str) -> bool:
        self.request("delete", self.item_url(item_id))
        self.logger.info("Deleted %s %s", self.path.strip("/"), item_id)
        return True

"""Mutation gateway: validated, fire-and-forget writes to the user's subtree.

Each operation returns a MutationTicket right away. Rejected input or a missing
user never reaches the store; the ticket is marked rejected and a notice is
published. Accepted writes carry the store's pending future, and the outcome is
announced as a notice once it settles. Nothing is retried.

Record layout written here:
  users/{uid}/groceryLists/{listId}                 {id, name, timestamp}
  users/{uid}/groceryLists/{listId}/items/{itemId}  {id, name, imageUrl}
"""
from __future__ import annotations
import logging
import time
from concurrent.futures import Future
from dataclasses import dataclass
from typing import Optional

from grocery.domain.GroceryItem import GroceryItem
from grocery.domain.GroceryList import GroceryList
from grocery.events.Event_Bus import EventBus
from grocery.events.event_helpers import publish_notice
from grocery.infra import paths
from grocery.infra.Auth_Provider import Auth
from grocery.infra.Remote_Store import RemoteStore
from grocery.utilities.constants import (
    NOTICE_LIST_NAME_REQUIRED, NOTICE_ITEM_NAME_REQUIRED, NOTICE_LOGIN_REQUIRED, NOTICE_KEY_FAILED,
    NOTICE_LIST_ADDED, NOTICE_LIST_ADD_FAILED, NOTICE_LIST_DELETED, NOTICE_LIST_DELETE_FAILED,
    NOTICE_ITEM_ADDED, NOTICE_ITEM_ADD_FAILED, NOTICE_ITEM_RENAMED, NOTICE_ITEM_RENAME_FAILED,
    NOTICE_ITEM_DELETED, NOTICE_ITEM_DELETE_FAILED,
)
from grocery.utilities.validators import clean_name

logger = logging.getLogger(__name__)


@dataclass
class MutationTicket:
    accepted: bool
    entity_id: Optional[str] = None
    future: Optional[Future] = None
    notice: Optional[str] = None

    def wait(self, timeout: Optional[float] = None) -> bool:
        """True once the write was acknowledged; False if rejected or failed."""
        if not self.accepted or self.future is None:
            return False
        try:
            self.future.result(timeout)
        except Exception:
            return False
        return True


def _now_ms() -> int:
    return int(time.time() * 1000)


class MutationGateway:
    def __init__(self, store: RemoteStore, auth: Auth, bus: Optional[EventBus] = None):
        self.store = store
        self.auth = auth
        self.bus = bus

    # --- helpers ------------------------------------------------------------
    def _notify(self, user_id: Optional[str], message: str, level: str = "info"):
        publish_notice(user_id, message, level, bus=self.bus)

    def _reject(self, user_id: Optional[str], message: str) -> MutationTicket:
        logger.warning("Mutation rejected: %s", message)
        self._notify(user_id, message, "error")
        return MutationTicket(accepted=False, notice=message)

    def _user(self) -> Optional[str]:
        return self.auth.current_user_id()

    def _submit(self, user_id: str, entity_id: Optional[str], future: Future,
                ok_message: str, fail_message: str, what: str) -> MutationTicket:
        def _settled(fut: Future):
            error = fut.exception()
            if error is None:
                logger.info("%s acknowledged", what)
                self._notify(user_id, ok_message)
            else:
                logger.error("%s failed: %s", what, error)
                self._notify(user_id, fail_message, "error")

        future.add_done_callback(_settled)
        return MutationTicket(accepted=True, entity_id=entity_id, future=future)

    def _new_key(self) -> Optional[str]:
        key = self.store.push_key()
        return key or None

    # --- lists --------------------------------------------------------------
    def create_list(self, name) -> MutationTicket:
        name = clean_name(name)
        user_id = self._user()
        if name is None:
            return self._reject(user_id, NOTICE_LIST_NAME_REQUIRED)
        if user_id is None:
            return self._reject(None, NOTICE_LOGIN_REQUIRED)
        list_id = self._new_key()
        if list_id is None:
            return self._reject(user_id, NOTICE_KEY_FAILED)

        record = GroceryList(id=list_id, name=name, timestamp=_now_ms()).to_dict()
        future = self.store.set(paths.list_path(user_id, list_id), record)
        return self._submit(user_id, list_id, future,
                            NOTICE_LIST_ADDED.format(name=name), NOTICE_LIST_ADD_FAILED,
                            f"create list {list_id}")

    def delete_list(self, grocery_list: GroceryList) -> MutationTicket:
        user_id = self._user()
        if user_id is None:
            return self._reject(None, NOTICE_LOGIN_REQUIRED)
        # Removes the list and every item below it
        future = self.store.remove(paths.list_path(user_id, grocery_list.id))
        return self._submit(user_id, grocery_list.id, future,
                            NOTICE_LIST_DELETED, NOTICE_LIST_DELETE_FAILED,
                            f"delete list {grocery_list.id}")

    # --- items --------------------------------------------------------------
    def create_item(self, list_id: str, name, image_url: str = "") -> MutationTicket:
        name = clean_name(name)
        user_id = self._user()
        if name is None:
            return self._reject(user_id, NOTICE_ITEM_NAME_REQUIRED)
        if user_id is None:
            return self._reject(None, NOTICE_LOGIN_REQUIRED)
        item_id = self._new_key()
        if item_id is None:
            return self._reject(user_id, NOTICE_KEY_FAILED)

        record = GroceryItem(id=item_id, name=name, image_url=image_url or "").to_dict()
        future = self.store.set(paths.item_path(user_id, list_id, item_id), record)
        return self._submit(user_id, item_id, future,
                            NOTICE_ITEM_ADDED.format(name=name), NOTICE_ITEM_ADD_FAILED,
                            f"create item {item_id} in {list_id}")

    def rename_item(self, list_id: str, item: GroceryItem, new_name) -> MutationTicket:
        """Overwrite the whole item record; id and imageUrl are carried over."""
        name = clean_name(new_name)
        user_id = self._user()
        if name is None:
            return self._reject(user_id, NOTICE_ITEM_NAME_REQUIRED)
        if user_id is None:
            return self._reject(None, NOTICE_LOGIN_REQUIRED)

        record = item.renamed(name).to_dict()
        future = self.store.set(paths.item_path(user_id, list_id, item.id), record)
        return self._submit(user_id, item.id, future,
                            NOTICE_ITEM_RENAMED, NOTICE_ITEM_RENAME_FAILED,
                            f"rename item {item.id}")

    def delete_item(self, list_id: str, item: GroceryItem) -> MutationTicket:
        user_id = self._user()
        if user_id is None:
            return self._reject(None, NOTICE_LOGIN_REQUIRED)
        future = self.store.remove(paths.item_path(user_id, list_id, item.id))
        return self._submit(user_id, item.id, future,
                            NOTICE_ITEM_DELETED, NOTICE_ITEM_DELETE_FAILED,
                            f"delete item {item.id}")


__all__ = ['MutationGateway', 'MutationTicket']

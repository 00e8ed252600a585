# shopadmin/__init__.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import httpx

from .api_client import APIClient
from .config import Config
from .services import (
    AssignmentStore,
    CategoryStore,
    ItemStore,
    OptionGroupStore,
    OptionStore,
    SessionStore,
    ShopStore,
    UserStore,
)
from .storage import KeyValueStorage


@dataclass
class Console:
    """Every store of one console session, wired to a shared HTTP client."""
    config: type
    api: APIClient
    storage: KeyValueStorage
    session: SessionStore
    shops: ShopStore
    categories: CategoryStore
    items: ItemStore
    option_groups: OptionGroupStore
    options: OptionStore
    assignments: AssignmentStore
    users: UserStore

    def resource_stores(self) -> list:
        return [self.shops, self.categories, self.items, self.option_groups, self.options, self.users]

    def reset(self) -> None:
        """Drop all cached resource state (e.g. after logout)."""
        for store in self.resource_stores():
            store.clear()
        self.assignments.clear()

    def close(self) -> None:
        self.items.cancel_searches()
        self.api.close()
        self.storage.close()


def create_console(config: Optional[type] = None, *, transport: Optional[httpx.BaseTransport] = None) -> Console:
    """
    Build a fresh, fully wired console. Nothing is module-global: each call
    returns independent stores, so tests construct their own.
    """
    config = config or Config

    api = APIClient(config.API_BASE_URL, timeout=config.REQUEST_TIMEOUT, transport=transport)
    storage = KeyValueStorage(config.STORAGE_URL)
    session = SessionStore(api, storage, storage_key=config.SESSION_STORAGE_KEY)

    # The token is read fresh from the session on every request
    api.token_provider = session.current_token
    token = session.current_token
    # a 401 from any store means the token is dead: drop the session
    expire = session.expire

    return Console(
        config=config,
        api=api,
        storage=storage,
        session=session,
        shops=ShopStore(api, token, on_unauthorized=expire),
        categories=CategoryStore(api, token, on_unauthorized=expire),
        items=ItemStore(api, token, on_unauthorized=expire),
        option_groups=OptionGroupStore(api, token, on_unauthorized=expire),
        options=OptionStore(api, token, on_unauthorized=expire),
        assignments=AssignmentStore(api, token, on_unauthorized=expire),
        users=UserStore(api, token, on_unauthorized=expire),
    )

from .assignment_service import AssignmentStore
from .category_service import CategoryStore
from .item_service import DebouncedSearch, ItemStore
from .option_group_service import OptionGroupStore
from .option_service import OptionStore
from .resource_store import ResourceStore
from .session_service import SessionStore
from .shop_service import ShopStore
from .user_service import UserStore

__all__ = [
    "AssignmentStore",
    "CategoryStore",
    "DebouncedSearch",
    "ItemStore",
    "OptionGroupStore",
    "OptionStore",
    "ResourceStore",
    "SessionStore",
    "ShopStore",
    "UserStore",
]

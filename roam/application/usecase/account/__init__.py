"""Account linking use cases."""

from .get_link_nonce import GetLinkNonceUseCase
from .get_linked_account_token import GetLinkedAccountTokenUseCase
from .get_linked_accounts import GetLinkedAccountsUseCase
from .link_account import LINK_ACCOUNT_ACTION, LinkAccountUseCase
from .unlink_account import UnlinkAccountUseCase

__all__ = [
    "GetLinkNonceUseCase",
    "GetLinkedAccountTokenUseCase",
    "GetLinkedAccountsUseCase",
    "LINK_ACCOUNT_ACTION",
    "LinkAccountUseCase",
    "UnlinkAccountUseCase",
]

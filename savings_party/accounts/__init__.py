"""Account mutation engine package."""

from savings_party.accounts.engine import DEFAULT_MAX_ACCOUNTS, AccountEngine, PartyMember

__all__ = ["DEFAULT_MAX_ACCOUNTS", "AccountEngine", "PartyMember"]

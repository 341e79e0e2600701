"""
Account Mutation Engine

Owns the party (the collection of savings accounts) and applies every
change to it: create and release accounts, add and delete entries.

DESIGN DECISION: Expected failures are return values, not exceptions.
- Party full / unknown creature → create_account returns None
- Unknown account or entry → None / False
These are everyday UI conditions (a double-clicked delete button), so the
caller checks the result instead of catching anything.

Milestones are returned, not broadcast. add_entry hands back a
TransitionEvent when the level or stage went up; the caller decides whether
that means a sound, an overlay or an activity log line.
"""

import math
import threading
from typing import Optional

import structlog
from pydantic import BaseModel

from savings_party.catalog import CreatureCatalogInterface, CreatureLine, StarterCatalog
from savings_party.models.savings import (
    BackgroundConfig,
    ProgressStats,
    SavingsAccount,
    SavingsEntry,
    TransitionEvent,
)
from savings_party.progression import account_stats, total_saved
from savings_party.services.storage import (
    AccountRepository,
    InMemoryKeyValueStore,
    KeyValueAccountRepository,
    StorageError,
)

DEFAULT_MAX_ACCOUNTS = 6

logger = structlog.get_logger(__name__)


class PartyMember(BaseModel):
    """An account together with its current stats and creature line."""

    account: SavingsAccount
    stats: ProgressStats
    creature: Optional[CreatureLine] = None


class AccountEngine:
    """
    Canonical owner of all accounts and their entries.

    Concurrency:
    - A collection lock guards the account list.
    - Each account has its own lock; add_entry holds it across the
      before-stats / append / after-stats sequence so transitions are never
      computed against an interleaved entry list.
    - Entry and background changes also hold the collection lock and
      re-check that the account is still in the party, so a concurrent
      release cannot leave them writing to a detached account.
    Locks are always taken account-first, collection-second.
    """

    def __init__(
        self,
        repository: Optional[AccountRepository] = None,
        catalog: Optional[CreatureCatalogInterface] = None,
        max_accounts: int = DEFAULT_MAX_ACCOUNTS,
    ):
        """
        Initialize the engine and load the stored party.

        Args:
            repository: Where the party is persisted. Defaults to memory only.
            catalog: Creature catalog used to validate new accounts.
            max_accounts: Party size cap.

        Raises:
            StorageError: If the stored party cannot be loaded.
        """
        self._repository = repository or KeyValueAccountRepository(InMemoryKeyValueStore())
        self._catalog = catalog or StarterCatalog()
        self._max_accounts = max_accounts

        self._lock = threading.RLock()
        self._account_locks: dict[str, threading.RLock] = {}
        self._accounts: list[SavingsAccount] = self._repository.load_accounts()
        self.last_storage_error: Optional[str] = None

        logger.info("party_loaded", accounts=len(self._accounts), max_accounts=max_accounts)

    # ==================== QUERIES ====================

    @property
    def max_accounts(self) -> int:
        return self._max_accounts

    def list_accounts(self) -> list[SavingsAccount]:
        """Copies of all accounts, in insertion order."""
        with self._lock:
            return [account.model_copy(deep=True) for account in self._accounts]

    def get_account(self, account_id: str) -> Optional[SavingsAccount]:
        """Copy of one account, or None."""
        with self._lock:
            account = self._find(account_id)
            return account.model_copy(deep=True) if account else None

    def get_stats(self, account_id: str) -> Optional[ProgressStats]:
        with self._lock:
            account = self._find(account_id)
            return account_stats(account) if account else None

    def accounts_with_stats(self) -> list[PartyMember]:
        """Every account with freshly computed stats and its creature line."""
        with self._lock:
            return [
                PartyMember(
                    account=account.model_copy(deep=True),
                    stats=account_stats(account),
                    creature=self._catalog.resolve(account.creature_ref),
                )
                for account in self._accounts
            ]

    def total_saved_all_accounts(self) -> float:
        with self._lock:
            return sum((total_saved(a.entries) for a in self._accounts), 0.0)

    def can_add_account(self) -> bool:
        with self._lock:
            return len(self._accounts) < self._max_accounts

    def available_slots(self) -> int:
        with self._lock:
            return max(0, self._max_accounts - len(self._accounts))

    # ==================== ACCOUNT OPERATIONS ====================

    def create_account(
        self,
        creature_ref: str,
        nickname: str,
        target_amount: float,
    ) -> Optional[SavingsAccount]:
        """
        Add a new account to the party.

        Returns:
            The new account, or None if the party is full, the creature is
            unknown, or the target is not a finite number.
        """
        creature = self._catalog.resolve(creature_ref)
        if creature is None:
            logger.warning("create_rejected", reason="unknown_creature", creature_ref=creature_ref)
            return None
        if not _is_finite(target_amount):
            logger.warning("create_rejected", reason="invalid_target", creature_ref=creature_ref)
            return None

        with self._lock:
            if len(self._accounts) >= self._max_accounts:
                logger.warning(
                    "create_rejected",
                    reason="party_full",
                    creature_ref=creature_ref,
                    max_accounts=self._max_accounts,
                )
                return None

            account = SavingsAccount(
                nickname=(nickname or "").strip()[:100] or creature.base_name,
                creature_ref=creature_ref,
                target_amount=float(target_amount),
            )
            self._accounts.append(account)
            self._persist()

        logger.info(
            "account_created",
            account_id=account.id,
            creature_ref=creature_ref,
            target_amount=account.target_amount,
        )
        return account.model_copy(deep=True)

    def delete_account(self, account_id: str) -> bool:
        """Remove an account and all of its entries. Returns whether it existed."""
        with self._lock:
            account = self._find(account_id)
            if account is None:
                return False
            self._accounts = [a for a in self._accounts if a.id != account_id]
            self._account_locks.pop(account_id, None)
            self._persist()

        logger.info("account_deleted", account_id=account_id, entries=len(account.entries))
        return True

    def update_account_background(
        self,
        account_id: str,
        background: Optional[BackgroundConfig],
    ) -> bool:
        """Change (or clear, with None) an account's card background."""
        account, lock = self._locked_account(account_id)
        if account is None:
            return False

        with lock, self._lock:
            if not self._is_current(account_id, account):
                return False
            account.background = background
            self._persist()
        return True

    def clear_all_data(self) -> None:
        """Release every account and wipe the stored party."""
        with self._lock:
            self._accounts = []
            self._account_locks.clear()
            try:
                self._repository.clear()
            except StorageError as e:
                self._record_storage_error("clear", e)
        logger.info("party_cleared")

    # ==================== ENTRY OPERATIONS ====================

    def add_entry(
        self,
        account_id: str,
        amount: float,
        note: Optional[str] = None,
    ) -> Optional[TransitionEvent]:
        """
        Record a deposit (amount > 0) or withdrawal (amount < 0).

        Returns:
            A TransitionEvent if the level or evolution stage went up,
            otherwise None. Unknown accounts and non-finite amounts also
            give None and change nothing.

        Level decreases never produce an event.
        """
        if not _is_finite(amount):
            logger.warning("entry_rejected", account_id=account_id, reason="invalid_amount")
            return None

        account, lock = self._locked_account(account_id)
        if account is None:
            return None

        with lock, self._lock:
            if not self._is_current(account_id, account):
                return None

            before = account_stats(account)
            entry = SavingsEntry(amount=float(amount), note=note[:500] if note else None)
            account.entries = [*account.entries, entry]
            after = account_stats(account)
            self._persist()

        logger.info(
            "entry_added",
            account_id=account_id,
            entry_id=entry.id,
            amount=entry.amount,
            total_saved=after.total_saved,
            level=after.level,
        )

        evolved = after.evolution_stage > before.evolution_stage
        if after.level > before.level or evolved:
            event = TransitionEvent(
                account_id=account_id,
                old_level=before.level,
                new_level=after.level,
                evolved=evolved,
                old_stage=before.evolution_stage,
                new_stage=after.evolution_stage,
            )
            logger.info("level_up", **event.model_dump())
            return event

        return None

    def delete_entry(self, account_id: str, entry_id: str) -> bool:
        """
        Remove one entry. Returns whether it was found.

        Deleting is a correction, so no transition is reported either way.
        """
        account, lock = self._locked_account(account_id)
        if account is None:
            return False

        with lock, self._lock:
            if not self._is_current(account_id, account):
                return False
            if account.find_entry(entry_id) is None:
                return False

            account.entries = [e for e in account.entries if e.id != entry_id]
            self._persist()

        logger.info("entry_deleted", account_id=account_id, entry_id=entry_id)
        return True

    # ==================== INTERNALS ====================

    def _find(self, account_id: str) -> Optional[SavingsAccount]:
        for account in self._accounts:
            if account.id == account_id:
                return account
        return None

    def _locked_account(
        self,
        account_id: str,
    ) -> tuple[Optional[SavingsAccount], Optional[threading.RLock]]:
        """Live account and its lock, or (None, None) if unknown."""
        with self._lock:
            account = self._find(account_id)
            if account is None:
                return None, None
            lock = self._account_locks.setdefault(account_id, threading.RLock())
            return account, lock

    def _is_current(self, account_id: str, account: SavingsAccount) -> bool:
        """Still the party's account? Caller holds the collection lock."""
        return self._find(account_id) is account

    def _persist(self) -> None:
        """
        Save the whole collection. Caller holds the collection lock.

        A failed save is logged and remembered, not raised: the in-memory
        party stays authoritative and the next successful save catches up.
        """
        try:
            self._repository.save_accounts(self._accounts)
            self.last_storage_error = None
        except StorageError as e:
            self._record_storage_error("save_accounts", e)

    def _record_storage_error(self, operation: str, error: Exception) -> None:
        self.last_storage_error = str(error)
        logger.error("storage_failed", operation=operation, error=str(error))


def _is_finite(value: float) -> bool:
    try:
        return math.isfinite(value)
    except TypeError:
        return False

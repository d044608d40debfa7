"""External collaborators of the pool.

The pool never tracks share balances or moves assets itself. It talks to:
- a ShareLedger for pool-share supply, mint and burn
- an AssetVault for pulling assets from callers and paying them out
- an AccessControl gate for administrative operations
- a Clock for the current unix time

Protocols define the interfaces; the in-memory implementations back the
tests, the CLI simulation and the quote API.

Ledgers and vaults are transactional: every pool operation runs inside
their `transaction()` context, and a failing operation reverts whatever
the collaborator did during it along with the pool's own state.
"""

from __future__ import annotations

import threading
import time
from collections import defaultdict
from collections.abc import Callable, Iterator
from contextlib import AbstractContextManager, contextmanager
from dataclasses import dataclass
from typing import Protocol

from stableswap.constants import NATIVE_ASSET
from stableswap.errors import InsufficientBalanceError, InvalidParameterError, UnauthorizedError
from stableswap.models.types import normalize_address

Clock = Callable[[], int]


def system_clock() -> int:
    """Wall-clock unix time in whole seconds."""
    return int(time.time())


class ShareLedger(Protocol):
    """Fungible ledger of pool shares."""

    def total_supply(self) -> int:
        """Total outstanding pool shares."""
        ...

    def mint(self, to: str, amount: int) -> None:
        """Create `amount` shares for `to`."""
        ...

    def burn_from(self, holder: str, amount: int) -> None:
        """Destroy `amount` of `holder`'s shares.

        Raises:
            InsufficientBalanceError: If holder owns fewer than `amount` shares
        """
        ...

    def transaction(self) -> AbstractContextManager[None]:
        """Scope whose mints and burns are undone if it exits with an exception."""
        ...


class AssetVault(Protocol):
    """Moves the pool's underlying assets."""

    def transfer_in(self, asset: str, amount: int, *, sender: str, value: int = 0) -> None:
        """Pull `amount` of `asset` from `sender` into the pool.

        For the native asset nothing is pulled; the attached `value` must
        equal `amount`.
        """
        ...

    def transfer_out(
        self, asset: str, amount: int, *, recipient: str, gas_limit: int | None = None
    ) -> None:
        """Push `amount` of `asset` from the pool to `recipient`.

        Native-asset transfers carry a bounded gas stipend (`gas_limit`).
        """
        ...

    def holdings(self, asset: str) -> int:
        """Real amount of `asset` held by the pool."""
        ...

    def transaction(self) -> AbstractContextManager[None]:
        """Scope whose transfers are undone if it exits with an exception."""
        ...


class AccessControl(Protocol):
    """Gate for administrative operations."""

    def require_admin(self, caller: str) -> None:
        """Raise UnauthorizedError unless `caller` may administer the pool."""
        ...


# =============================================================================
# In-memory implementations
# =============================================================================


class InMemoryShareLedger:
    """Share ledger kept in a dict.

    Attributes:
        balances: Shares held per (lowercase) account
    """

    def __init__(self) -> None:
        self.balances: dict[str, int] = defaultdict(int)
        self._total_supply = 0
        self._tx_lock = threading.RLock()

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """Snapshot balances and supply; restore them if the block raises.

        Transactions nest and are serialized across threads.
        """
        with self._tx_lock:
            balances = dict(self.balances)
            total_supply = self._total_supply
            try:
                yield
            except BaseException:
                self.balances.clear()
                self.balances.update(balances)
                self._total_supply = total_supply
                raise

    def total_supply(self) -> int:
        return self._total_supply

    def balance_of(self, holder: str) -> int:
        return self.balances.get(normalize_address(holder), 0)

    def mint(self, to: str, amount: int) -> None:
        if amount < 0:
            raise InvalidParameterError(f"Cannot mint a negative amount: {amount}")
        self.balances[normalize_address(to)] += amount
        self._total_supply += amount

    def burn_from(self, holder: str, amount: int) -> None:
        key = normalize_address(holder)
        held = self.balances.get(key, 0)
        if held < amount:
            raise InsufficientBalanceError(f"{key} holds {held} shares, cannot burn {amount}")
        self.balances[key] = held - amount
        self._total_supply -= amount

    def transfer(self, sender: str, recipient: str, amount: int) -> None:
        """Move shares between accounts."""
        self.burn_from(sender, amount)
        self.mint(recipient, amount)


@dataclass(frozen=True)
class NativeTransfer:
    """Record of a native-asset payout and the gas stipend it carried."""

    recipient: str
    amount: int
    gas_limit: int | None


class InMemoryVault:
    """Asset accounts for callers plus the pool's own holdings.

    Args:
        on_native_receive: Optional hook called as (recipient, amount,
            gas_limit) after every native-asset payout; models code that runs
            on the recipient side of a native transfer.
    """

    def __init__(
        self,
        *,
        on_native_receive: Callable[[str, int, int | None], None] | None = None,
    ) -> None:
        self._accounts: dict[tuple[str, str], int] = defaultdict(int)
        self._holdings: dict[str, int] = defaultdict(int)
        self.on_native_receive = on_native_receive
        self.native_transfers: list[NativeTransfer] = []
        self._tx_lock = threading.RLock()

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """Snapshot accounts and holdings; restore them if the block raises.

        Native payouts recorded inside a failed transaction are dropped too.
        """
        with self._tx_lock:
            accounts = dict(self._accounts)
            holdings = dict(self._holdings)
            transfers = len(self.native_transfers)
            try:
                yield
            except BaseException:
                self._accounts.clear()
                self._accounts.update(accounts)
                self._holdings.clear()
                self._holdings.update(holdings)
                del self.native_transfers[transfers:]
                raise

    def fund(self, account: str, asset: str, amount: int) -> None:
        """Credit `amount` of `asset` to `account` (test and simulation setup)."""
        self._accounts[(normalize_address(account), normalize_address(asset))] += amount

    def gift_to_pool(self, asset: str, amount: int) -> None:
        """Send assets to the pool outside any pool operation."""
        self._holdings[normalize_address(asset)] += amount

    def balance_of(self, account: str, asset: str) -> int:
        return self._accounts.get((normalize_address(account), normalize_address(asset)), 0)

    def holdings(self, asset: str) -> int:
        return self._holdings.get(normalize_address(asset), 0)

    def transfer_in(self, asset: str, amount: int, *, sender: str, value: int = 0) -> None:
        asset = normalize_address(asset)
        if asset == NATIVE_ASSET and value != amount:
            raise InvalidParameterError(
                f"Attached value {value} does not match native amount {amount}"
            )
        key = (normalize_address(sender), asset)
        held = self._accounts.get(key, 0)
        if held < amount:
            raise InsufficientBalanceError(f"{key[0]} holds {held} of {asset}, needs {amount}")
        self._accounts[key] = held - amount
        self._holdings[asset] += amount

    def transfer_out(
        self, asset: str, amount: int, *, recipient: str, gas_limit: int | None = None
    ) -> None:
        asset = normalize_address(asset)
        held = self._holdings.get(asset, 0)
        if held < amount:
            raise InsufficientBalanceError(f"Pool holds {held} of {asset}, cannot pay {amount}")
        self._holdings[asset] = held - amount
        self._accounts[(normalize_address(recipient), asset)] += amount

        if asset == NATIVE_ASSET:
            self.native_transfers.append(NativeTransfer(recipient, amount, gas_limit))
            if self.on_native_receive is not None:
                self.on_native_receive(recipient, amount, gas_limit)


class OwnerAccessControl:
    """Single-owner gate: only `owner` passes."""

    def __init__(self, owner: str) -> None:
        self.owner = normalize_address(owner)

    def require_admin(self, caller: str) -> None:
        if normalize_address(caller) != self.owner:
            raise UnauthorizedError(f"{caller} is not the pool owner")

# lockbox/client/engine.py
"""
Synchronization engine: the client's single source of truth.

The engine owns
- the canonical list of lockboxes (unique by id, sorted by name, case-insensitive)
- the selected lockbox id
- the last error of an explicit command
- the cache of decrypted content

Explicit commands wait for the store and splice the authoritative record
into the list; nothing is applied optimistically. reconcile() merges the
store's recomputed list and never raises.

Concurrent responses for the same id are merged by updated_at: the
greater one wins, a tie goes to the write applied last. Every apply step
is a plain synchronous method, so compare-and-write cannot interleave
with another response on the event loop.

Reconcile responses requested before a create/delete finished cannot
drop the new record or resurrect the deleted one; the engine numbers its
applies and compares against the number seen when the poll started.

Once close()d the engine stays empty: responses that land after logout
are dropped, decrypted content included.
"""
import logging
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional, Tuple, TypeVar

from lockbox.app.security.timelock import now_ms
from lockbox.client.errors import LockboxError, TransportError
from lockbox.client.models import CreateLockboxInput, Lockbox, LockboxStatus
from lockbox.client.status import resolve_status
from lockbox.client.store import SecretStore
from lockbox.client.validation import validate_create, validate_update

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _sorted(lockboxes: Iterable[Lockbox]) -> List[Lockbox]:
    return sorted(lockboxes, key=lambda lb: lb.sort_key)


def _newer(current: Lockbox, incoming: Lockbox) -> Lockbox:
    """The record to keep for one id: greater updated_at, ties to incoming."""
    if current.updated_at > incoming.updated_at:
        return current
    return incoming


class SyncEngine:
    def __init__(self, store: SecretStore, clock: Callable[[], int] = now_ms):
        self._store = store
        self._clock = clock

        self._lockboxes: List[Lockbox] = []
        self._selected_id: Optional[int] = None
        self._decrypted: Dict[int, str] = {}

        self.last_error: Optional[str] = None
        self._in_flight = 0
        self._closed = False

        # Apply bookkeeping for reconcile races
        self._seq = 0
        self._touched: Dict[int, int] = {}
        self._deleted: Dict[int, int] = {}
        self._polls_started: List[int] = []
        self.reconcile_failures = 0

    # ─────────────────────────────────────────────────────────────
    # Read side (snapshots only)
    # ─────────────────────────────────────────────────────────────
    @property
    def lockboxes(self) -> Tuple[Lockbox, ...]:
        return tuple(self._lockboxes)

    @property
    def clock(self) -> Callable[[], int]:
        return self._clock

    @property
    def is_loading(self) -> bool:
        return self._in_flight > 0

    @property
    def selected_id(self) -> Optional[int]:
        return self._selected_id

    @property
    def selected(self) -> Optional[Lockbox]:
        if self._selected_id is None:
            return None
        return self.get(self._selected_id)

    def get(self, lockbox_id: int) -> Optional[Lockbox]:
        for lb in self._lockboxes:
            if lb.id == lockbox_id:
                return lb
        return None

    def status_of(self, lockbox_id: int, now: Optional[int] = None) -> Optional[LockboxStatus]:
        lockbox = self.get(lockbox_id)
        if lockbox is None:
            return None
        return resolve_status(lockbox, self._clock() if now is None else now)

    def select(self, lockbox_id: Optional[int]) -> Optional[Lockbox]:
        """Select by id. Unknown ids clear the selection."""
        if lockbox_id is not None and self.get(lockbox_id) is None:
            lockbox_id = None
        self._selected_id = lockbox_id
        return self.selected

    def clear_error(self) -> None:
        self.last_error = None

    def decrypted_content(self, lockbox_id: int) -> Optional[str]:
        """
        Cached plaintext for a lockbox, only while it is still unlocked.

        Reading after the relock window elapsed purges the entry.
        """
        if lockbox_id not in self._decrypted:
            return None
        if self.status_of(lockbox_id) is not LockboxStatus.UNLOCKED:
            self.purge_decrypted(lockbox_id)
            return None
        return self._decrypted[lockbox_id]

    def purge_decrypted(self, lockbox_id: Optional[int] = None) -> None:
        if lockbox_id is None:
            self._decrypted.clear()
        else:
            self._decrypted.pop(lockbox_id, None)

    def clear(self) -> None:
        """Drop every piece of session state, decrypted content included."""
        self._lockboxes = []
        self._selected_id = None
        self._decrypted.clear()
        self._touched.clear()
        self._deleted.clear()
        self.last_error = None

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """
        Wipe all state and ignore every response that lands afterwards.

        Calls still in flight at logout may resolve later; none of them
        may repopulate the list or the decrypted cache.
        """
        self._closed = True
        self.clear()

    # ─────────────────────────────────────────────────────────────
    # Explicit commands
    # ─────────────────────────────────────────────────────────────
    async def _call(self, action: str, call: Callable[[], Awaitable[T]]) -> T:
        """Run a store call, recording any failure in the error slot."""
        self.last_error = None
        self._in_flight += 1
        try:
            return await call()
        except LockboxError as e:
            self.last_error = str(e)
            logger.warning(f"{action} failed: {e}")
            raise
        except Exception as e:
            # The store contract only promises an opaque rejection
            self.last_error = str(e) or e.__class__.__name__
            logger.warning(f"{action} failed: {e!r}")
            raise TransportError(self.last_error) from e
        finally:
            self._in_flight -= 1

    async def fetch_all(self) -> Tuple[Lockbox, ...]:
        records = await self._call("fetch_all", self._store.list_all)
        self._replace_all(records)
        return self.lockboxes

    async def fetch_decrypted(self, lockbox_id: int) -> Optional[Lockbox]:
        """
        Fetch one lockbox with its content decrypted by the store.

        Never raises: failures are recorded and None is returned. The
        plaintext is cached only if the returned record is unlocked.
        """
        try:
            record = await self._call(
                f"fetch_decrypted({lockbox_id})",
                lambda: self._store.get_decrypted(lockbox_id),
            )
        except LockboxError:
            return None

        if self._closed:
            return None
        if record is not None and resolve_status(record, self._clock()) is LockboxStatus.UNLOCKED:
            self._decrypted[lockbox_id] = record.content
        return record

    async def create(self, fields: CreateLockboxInput) -> Lockbox:
        fields = validate_create(fields)
        record = await self._call("create", lambda: self._store.create(
            fields.name,
            fields.content,
            fields.category,
            fields.unlock_delay_seconds,
            fields.relock_delay_seconds,
        ))
        # A fresh record, even if the store reused the id of a deleted one
        self._deleted.pop(record.id, None)
        return self._apply(record)

    async def update(self, lockbox_id: int, fields: Dict[str, Any]) -> Lockbox:
        fields = validate_update(fields)
        record = await self._call(
            f"update({lockbox_id})",
            lambda: self._store.update(lockbox_id, fields),
        )
        if "content" in fields:
            self.purge_decrypted(lockbox_id)
        return self._apply(record)

    async def delete(self, lockbox_id: int) -> None:
        await self._call(f"delete({lockbox_id})", lambda: self._store.delete(lockbox_id))
        self._remove(lockbox_id)

    async def unlock(self, lockbox_id: int) -> Lockbox:
        record = await self._call(f"unlock({lockbox_id})", lambda: self._store.unlock(lockbox_id))
        return self._apply(record)

    async def relock(self, lockbox_id: int) -> Lockbox:
        record = await self._call(f"relock({lockbox_id})", lambda: self._store.relock(lockbox_id))
        self.purge_decrypted(lockbox_id)
        return self._apply(record)

    async def export_all(self) -> str:
        return await self._call("export", self._store.export_all)

    async def import_all(self, blob: str) -> List[str]:
        """Import an export blob, then refresh the list from the store."""
        imported = await self._call("import", lambda: self._store.import_all(blob))
        if imported:
            await self.fetch_all()
        return imported

    # ─────────────────────────────────────────────────────────────
    # Background reconciliation
    # ─────────────────────────────────────────────────────────────
    async def reconcile(self) -> bool:
        """
        Merge the store's recomputed list into the canonical list.

        Failures are logged and counted, never raised: the next tick
        retries. Returns True when a response was applied.
        """
        started = self._seq
        self._polls_started.append(started)
        try:
            records = await self._store.reconcile_all()
        except Exception as e:
            self.reconcile_failures += 1
            if self.reconcile_failures == 1:
                logger.warning(f"Reconcile failed, will retry: {e}")
            else:
                logger.debug(f"Reconcile failed ({self.reconcile_failures} in a row): {e}")
            return False
        finally:
            self._polls_started.remove(started)

        if self.reconcile_failures:
            logger.info(f"Reconcile recovered after {self.reconcile_failures} failure(s)")
            self.reconcile_failures = 0

        self._merge(records, started)
        return True

    # ─────────────────────────────────────────────────────────────
    # Apply steps: synchronous, never await in here
    # ─────────────────────────────────────────────────────────────
    def _next_seq(self) -> int:
        self._seq += 1
        return self._seq

    def _replace_all(self, records: Iterable[Lockbox]) -> None:
        if self._closed:
            return
        by_id: Dict[int, Lockbox] = {}
        for record in records:
            by_id[record.id] = record

        # A full list is newer than any poll still in flight: stamp what
        # it contains as touched and what it dropped as deleted.
        seq = self._next_seq()
        for lb in self._lockboxes:
            if lb.id not in by_id:
                self._deleted[lb.id] = seq
        for lockbox_id in by_id:
            self._touched[lockbox_id] = seq
            self._deleted.pop(lockbox_id, None)

        self._lockboxes = _sorted(by_id.values())
        self._reselect()
        self._purge_stale_decrypted()
        self._prune_bookkeeping()

    def _apply(self, record: Lockbox) -> Lockbox:
        """Splice one authoritative record in, subject to the updated_at rule."""
        if self._closed:
            return record
        if record.id in self._deleted:
            logger.debug(f"Dropping late response for deleted lockbox {record.id}")
            return record
        self._touched[record.id] = self._next_seq()

        for index, current in enumerate(self._lockboxes):
            if current.id != record.id:
                continue
            kept = _newer(current, record)
            if kept is current:
                logger.debug(
                    f"Ignoring stale response for lockbox {record.id} "
                    f"({record.updated_at} < {current.updated_at})"
                )
                return current
            self._lockboxes[index] = kept
            if kept.sort_key != current.sort_key:
                self._lockboxes = _sorted(self._lockboxes)
            return kept

        self._lockboxes = _sorted([*self._lockboxes, record])
        return record

    def _remove(self, lockbox_id: int) -> None:
        if self._closed:
            return
        self._deleted[lockbox_id] = self._next_seq()
        self._touched.pop(lockbox_id, None)
        self._lockboxes = [lb for lb in self._lockboxes if lb.id != lockbox_id]
        self.purge_decrypted(lockbox_id)
        if self._selected_id == lockbox_id:
            self._selected_id = None

    def _merge(self, records: Iterable[Lockbox], started: int) -> None:
        if self._closed:
            return
        incoming: Dict[int, Lockbox] = {}
        for record in records:
            incoming[record.id] = record

        merged: List[Lockbox] = []
        for current in self._lockboxes:
            record = incoming.pop(current.id, None)
            if record is not None:
                merged.append(_newer(current, record))
            elif self._touched.get(current.id, 0) > started:
                # Created or changed after this poll was requested
                merged.append(current)

        for record in incoming.values():
            if self._deleted.get(record.id, 0) > started:
                continue
            merged.append(record)

        self._next_seq()
        self._lockboxes = _sorted(merged)
        self._reselect()
        self._purge_stale_decrypted()
        self._prune_bookkeeping()

    def _reselect(self) -> None:
        if self._selected_id is not None and self.get(self._selected_id) is None:
            self._selected_id = None

    def _purge_stale_decrypted(self) -> None:
        now = self._clock()
        for lockbox_id in list(self._decrypted):
            lockbox = self.get(lockbox_id)
            if lockbox is None or resolve_status(lockbox, now) is not LockboxStatus.UNLOCKED:
                del self._decrypted[lockbox_id]

    def _prune_bookkeeping(self) -> None:
        # Entries older than every in-flight poll can no longer matter
        floor = min(self._polls_started, default=self._seq)
        self._touched = {k: v for k, v in self._touched.items() if v > floor}
        self._deleted = {k: v for k, v in self._deleted.items() if v > floor}

"""
Monitor Service.

Consumes the chain event feed, keeps the record trackers in step with
finalized blocks, runs hook scripts and sends chat reports.

::

    Feed (async iterator)
       |
    Monitor.handle (pattern matching dispatch)
       |
       +-- SnapshotEvent  --> fresh trackers, init hook, init report
       +-- BlockEvent     --> session change, staking, offline and referenda handlers
                              then authored block record

All tracker calls are synchronous. Only hooks and chat delivery are awaited.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Sequence

from scouty import metrics
from scouty.config import Config
from scouty.consensus import AuthorityIndex, decode_authority_index, decode_digest_logs
from scouty.errors import FeedError, HookError, MatrixError, SubscriptionFinished
from scouty.hooks import (
    HOOK_DEMOCRACY_STARTED,
    HOOK_INIT,
    HOOK_NEW_ERA,
    HOOK_NEW_SESSION,
    HOOK_VALIDATOR_CHILLED,
    HOOK_VALIDATOR_OFFLINE,
    HOOK_VALIDATOR_SLASHED,
    HOOK_VALIDATOR_STARTS_ACTIVE_NEXT_ERA,
    HOOK_VALIDATOR_STARTS_INACTIVE_NEXT_ERA,
    Hook,
)
from scouty.identity import IdentityRecord, resolve_display_name
from scouty.matrix import Matrix
from scouty.records import AuthorityRecords, BlockNumber, ParaRecords, RecordOutcome
from scouty.report import (
    Network,
    Referendum,
    Report,
    Session,
    Slash,
    Validator,
    chill_report,
    init_report,
    offline_report,
    on_hold_report,
    referendum_report,
    session_report,
    slash_report,
)

from . import arguments
from .events import (
    BlockEvent,
    ChainEventSource,
    Chilled,
    ReferendumSubmitted,
    Slashed,
    SnapshotEvent,
    SomeOffline,
    ValidatorSets,
)

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ChainView:
    """Latest chain state known to the monitor."""

    network: Network
    session: Session
    active_validators: list[str]
    queued_keys: dict[str, str]
    identities: dict[str, IdentityRecord]

    def update_sets(self, sets: ValidatorSets) -> None:
        self.session = sets.session
        self.active_validators = list(sets.active_validators)
        self.queued_keys = dict(sets.queued_keys)


@dataclass(slots=True)
class Monitor:
    """
    Event handler for one monitoring run.

    A snapshot resets the trackers, so state never leaks across restarts.
    """

    config: Config
    """Validated settings."""

    matrix: Matrix
    """Chat delivery. May be disabled."""

    authority_records: AuthorityRecords = field(init=False)
    """Authored block counts."""

    para_records: ParaRecords = field(init=False)
    """Parachain validator membership."""

    view: ChainView | None = field(default=None, init=False)
    """Chain state, set by the first snapshot."""

    _blocks_processed: int = field(default=0, init=False, repr=False)

    def __post_init__(self) -> None:
        self._reset_records()

    def _reset_records(self) -> None:
        self.authority_records = AuthorityRecords.watching(self.config.stashes)
        self.para_records = ParaRecords.watching(self.config.stashes)

    @property
    def blocks_processed(self) -> int:
        """Blocks handled since the last snapshot."""
        return self._blocks_processed

    async def run(self, source: ChainEventSource) -> None:
        """
        Handle events until the source ends.

        Raises:
            SubscriptionFinished: When the source is exhausted.
            FeedError: When the source delivers a malformed event.
        """
        async for event in source:
            await self.handle(event)
        raise SubscriptionFinished("Chain event feed finished")

    async def handle(self, event: SnapshotEvent | BlockEvent) -> None:
        match event:
            case SnapshotEvent():
                await self.initialize(event)
            case BlockEvent() if self.view is None:
                logger.debug("Block #%s skipped, waiting for a snapshot", event.block_number)
            case BlockEvent():
                await self.on_block(event)

    # -------------------------------------------------------------------------
    # Initialization
    # -------------------------------------------------------------------------

    async def initialize(self, snapshot: SnapshotEvent) -> None:
        """Seed fresh trackers from a snapshot, then run the init hook."""
        self._reset_records()
        self._blocks_processed = 0
        self.view = ChainView(
            network=snapshot.network,
            session=snapshot.session,
            active_validators=list(snapshot.active_validators),
            queued_keys=dict(snapshot.queued_keys),
            identities=dict(snapshot.identities),
        )
        session = snapshot.session

        self.authority_records.set_block(snapshot.block_number)
        self.authority_records.set_session(session.current_session_index)
        self.authority_records.set_authorities(snapshot.active_validators)
        for stash, count in snapshot.authored_blocks.items():
            self.authority_records.seed(stash, count)

        self.para_records.reset_watchlist(snapshot.active_validators)
        self.para_records.insert_record(
            session.current_session_index, snapshot.para_validator_indices
        )

        self._update_gauges(snapshot.block_number)
        await self._authenticate(snapshot.network)
        logger.info(
            "Initialized at block #%s, session %s of era %s",
            snapshot.block_number,
            session.current_session_index,
            session.active_era_index,
        )

        validators = self._collect_validators()
        for v in validators:
            args = arguments.init_args(
                self.config,
                snapshot.network,
                session,
                snapshot.block_number,
                v,
                self.authority_records,
                self.para_records,
            )
            v.hooks.append(await self._run_hook(HOOK_INIT, self.config.hook_init_path, args))

        await self._send(
            init_report(
                snapshot.network,
                session,
                validators,
                int(snapshot.block_number),
                is_short=self.config.is_short,
            )
        )

    # -------------------------------------------------------------------------
    # Blocks
    # -------------------------------------------------------------------------

    async def on_block(self, event: BlockEvent) -> None:
        """Process one finalized block."""
        authority_index = decode_authority_index(decode_digest_logs(event.logs))

        if event.session is not None:
            await self._on_new_session(event.block_number, authority_index, event.session)

        for slashed in event.slashed:
            await self._on_slashed(slashed)
        for chilled in event.chilled:
            await self._on_chilled(chilled)
        if event.some_offline is not None:
            await self._on_some_offline(event.some_offline)
        for submitted in event.referendum_submitted:
            await self._on_referendum_submitted(submitted)

        # A session change already counted this block.
        self._record(
            event.block_number, authority_index, duplicate_expected=event.session is not None
        )

        self._blocks_processed += 1
        metrics.blocks_processed.inc()
        metrics.last_block.set(int(event.block_number))

    def _record(
        self,
        block_number: BlockNumber,
        authority_index: AuthorityIndex | None,
        *,
        duplicate_expected: bool = False,
    ) -> RecordOutcome:
        outcome = self.authority_records.insert_record(block_number, authority_index)
        match outcome:
            case RecordOutcome.RECORDED:
                metrics.authored_blocks_recorded.inc()
            case RecordOutcome.DUPLICATE if not duplicate_expected:
                logger.debug("Block #%s already recorded", block_number)
                metrics.duplicate_blocks.inc()
            case RecordOutcome.NO_AUTHORITY | RecordOutcome.UNKNOWN_AUTHORITY:
                logger.debug("Block #%s author unresolved: %s", block_number, outcome.value)
                metrics.unresolved_authorities.labels(reason=outcome.value).inc()
        return outcome

    async def _on_new_session(
        self,
        block_number: BlockNumber,
        authority_index: AuthorityIndex | None,
        sets: ValidatorSets,
    ) -> None:
        view = self._view
        view.update_sets(sets)
        session = sets.session
        eras_session_index = session.eras_session_index

        # New authority set and para positions once per era.
        if eras_session_index == 1:
            self.authority_records.set_authorities(sets.active_validators)
            self.para_records.reset_watchlist(sets.active_validators)

        self.authority_records.set_session(session.current_session_index)
        self._record(block_number, authority_index)

        if self.para_records.insert_record(
            session.current_session_index, sets.para_validator_indices
        ):
            metrics.para_sessions_recorded.inc()
        self._update_gauges(block_number)

        logger.info(
            "New session %s (%s of era %s)",
            session.current_session_index,
            eras_session_index,
            session.active_era_index,
        )

        validators = self._collect_validators()
        for v in validators:
            args = arguments.session_args(
                self.config,
                view.network,
                session,
                block_number,
                v,
                self.authority_records,
                self.para_records,
            )
            v.hooks.append(
                await self._run_hook(HOOK_NEW_SESSION, self.config.hook_new_session_path, args)
            )

            if eras_session_index == 1:
                v.hooks.append(
                    await self._run_hook(
                        HOOK_NEW_ERA,
                        self.config.hook_new_era_path,
                        arguments.new_era_args(args),
                    )
                )

            if eras_session_index == 6 and session.queued_session_keys_changed:
                next_args = arguments.next_era_args(self.config, view.network, session, v)
                if not v.is_active and v.is_queued:
                    v.hooks.append(
                        await self._run_hook(
                            HOOK_VALIDATOR_STARTS_ACTIVE_NEXT_ERA,
                            self.config.hook_validator_starts_active_next_era_path,
                            next_args,
                        )
                    )
                if v.is_active and not v.is_queued:
                    v.hooks.append(
                        await self._run_hook(
                            HOOK_VALIDATOR_STARTS_INACTIVE_NEXT_ERA,
                            self.config.hook_validator_starts_inactive_next_era_path,
                            next_args,
                        )
                    )

        await self._send(
            session_report(view.network, session, validators, is_short=self.config.is_short)
        )

    async def _on_slashed(self, event: Slashed) -> None:
        view = self._view
        validators = self._collect_validators()
        for v in validators:
            v.is_slashed = v.stash == event.staker

        args = [event.staker, str(event.amount), *arguments.network_args(self.config, view.network)]
        hook = await self._run_hook(
            HOOK_VALIDATOR_SLASHED, self.config.hook_validator_slashed_path, args
        )
        slash = Slash(who=event.staker, amount=event.amount, hook=hook)
        await self._send(
            slash_report(view.network, slash, validators, is_short=self.config.is_short)
        )

    async def _on_chilled(self, event: Chilled) -> None:
        view = self._view
        validators = self._collect_validators()
        for v in validators:
            if v.stash != event.stash:
                continue
            v.is_chilled = True
            args = arguments.status_args(self.config, view.network, v)
            v.hooks.append(
                await self._run_hook(
                    HOOK_VALIDATOR_CHILLED, self.config.hook_validator_chilled_path, args
                )
            )

        # Only watched stashes are reported.
        if any(v.is_chilled for v in validators):
            await self._send(chill_report(view.network, validators, is_short=self.config.is_short))

    async def _on_some_offline(self, event: SomeOffline) -> None:
        view = self._view
        offline = set(event.offline)
        validators = self._collect_validators()
        for v in validators:
            if v.stash not in offline:
                continue
            v.is_offline = True
            args = arguments.status_args(self.config, view.network, v)
            v.hooks.append(
                await self._run_hook(
                    HOOK_VALIDATOR_OFFLINE, self.config.hook_validator_offline_path, args
                )
            )

        if any(v.is_offline for v in validators):
            await self._send(
                offline_report(view.network, validators, is_short=self.config.is_short)
            )

    async def _on_referendum_submitted(self, event: ReferendumSubmitted) -> None:
        view = self._view
        args = [
            str(event.index),
            event.track,
            *arguments.network_args(self.config, view.network),
        ]
        hook = await self._run_hook(
            HOOK_DEMOCRACY_STARTED, self.config.hook_democracy_started_path, args
        )
        referendum = Referendum(index=event.index, track=event.track, hook=hook)
        await self._send(
            referendum_report(view.network, referendum, is_short=self.config.is_short)
        )

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    @property
    def _view(self) -> ChainView:
        if self.view is None:
            raise FeedError("No snapshot received")
        return self.view

    def _collect_validators(self) -> list[Validator]:
        """Current status of every watched stash."""
        view = self._view
        active = set(view.active_validators)
        return [
            Validator(
                stash=stash,
                name=resolve_display_name(stash, view.identities),
                is_active=stash in active,
                is_queued=stash in view.queued_keys,
                queued_session_keys=view.queued_keys.get(stash, "0x"),
            )
            for stash in self.config.stashes
        ]

    def _update_gauges(self, block_number: BlockNumber) -> None:
        session = self._view.session
        metrics.current_session.set(int(session.current_session_index))
        metrics.current_era.set(int(session.active_era_index))
        metrics.last_block.set(int(block_number))

    async def _run_hook(self, name: str, filename: str, args: Sequence[str]) -> Hook:
        """Run a hook, turning failures into a failed `Hook`."""
        try:
            hook = await Hook.try_run(name, filename, args)
        except HookError as e:
            logger.error("%s", e)
            metrics.hooks_failed.labels(hook=name).inc()
            return Hook(name=name, filename=filename, filename_exists=True, failed=True)

        if hook.filename_exists:
            metrics.hooks_run.labels(hook=name).inc()
        return hook

    async def _authenticate(self, network: Network) -> None:
        """Set up the private room once the chain name is known."""
        if self.matrix.disabled or self.matrix.private_room_id is not None:
            return
        try:
            await self.matrix.authenticate(network.name)
        except MatrixError as e:
            logger.error("Matrix authentication failed: %s", e)

    async def _send(self, report: Report) -> None:
        try:
            event_id = await self.matrix.send_message(report.message(), report.formatted_message())
        except MatrixError as e:
            logger.warning("Matrix message skipped: %s", e)
            return
        if event_id is not None:
            metrics.messages_sent.inc()


def configured_hooks(config: Config) -> dict[str, str]:
    """Script path of every hook, by hook name."""
    return {
        HOOK_INIT: config.hook_init_path,
        HOOK_NEW_SESSION: config.hook_new_session_path,
        HOOK_NEW_ERA: config.hook_new_era_path,
        HOOK_VALIDATOR_STARTS_ACTIVE_NEXT_ERA: config.hook_validator_starts_active_next_era_path,
        HOOK_VALIDATOR_STARTS_INACTIVE_NEXT_ERA: (
            config.hook_validator_starts_inactive_next_era_path
        ),
        HOOK_VALIDATOR_CHILLED: config.hook_validator_chilled_path,
        HOOK_VALIDATOR_SLASHED: config.hook_validator_slashed_path,
        HOOK_VALIDATOR_OFFLINE: config.hook_validator_offline_path,
        HOOK_DEMOCRACY_STARTED: config.hook_democracy_started_path,
    }


def check_hooks(config: Config) -> list[str]:
    """Warn about missing hook scripts. Returns the names of hooks that will run."""
    return [name for name, path in configured_hooks(config).items() if Hook.exists(name, path)]


Sleep = Callable[[float], Awaitable[None]]


async def supervise(
    config: Config,
    matrix: Matrix,
    source: ChainEventSource,
    *,
    sleep: Sleep = asyncio.sleep,
) -> None:
    """
    Run monitors over `source` until it ends.

    A feed error puts monitoring on hold for `error_interval` minutes. A new
    monitor then waits for the next snapshot on the same source.
    """
    network_name = "unknown"
    while True:
        monitor = Monitor(config=config, matrix=matrix)
        try:
            await monitor.run(source)
        except SubscriptionFinished as e:
            logger.warning("%s", e)
            return
        except FeedError as e:
            if monitor.view is not None:
                network_name = monitor.view.network.name
            logger.error("%s", e)
            metrics.monitor_restarts.inc()

            report = on_hold_report(network_name, e, config.error_interval)
            try:
                await matrix.send_message(report.message(), report.formatted_message())
            except MatrixError as matrix_error:
                logger.warning("Matrix message skipped: %s", matrix_error)

            logger.info("On hold for %d min", config.error_interval)
            await sleep(config.error_interval * 60)

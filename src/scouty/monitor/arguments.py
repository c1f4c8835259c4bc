"""
Positional arguments passed to hook scripts.

Optional groups are replaced by `-` placeholders when their exposure is
disabled, so every argument keeps its position. Nominator, APR and era
points slots are not available from the event feed and are always `-`.
"""

from __future__ import annotations

from scouty.config import Config
from scouty.records import AuthorityRecords, BlockNumber, ParaRecords
from scouty.report import Network, Session, Validator

DISABLED = "-"
"""Placeholder for an argument that is not exposed."""

NOMINATOR_SLOTS = 5
"""APR, active stake, own stake, nominators, nominator stakes."""

ALL_NOMINATOR_SLOTS = 2
"""All nominator stashes, total and raw nominee stake."""

ERA_POINTS_SLOTS = 2
"""Validator era points, era average."""


def flag(value: bool) -> str:
    return "true" if value else "false"


def network_args(config: Config, network: Network) -> list[str]:
    """Chain name, token symbol, token decimals."""
    if not config.exposes_network:
        return [DISABLED] * 3
    return [network.name, network.token_symbol, str(network.token_decimals)]


def validator_args(validator: Validator) -> list[str]:
    """Stash, display name, queued session keys, active, queued."""
    return [
        validator.stash,
        validator.name,
        validator.queued_session_keys,
        flag(validator.is_active),
        flag(validator.is_queued),
    ]


def _session_position_args(session: Session, block_number: BlockNumber) -> list[str]:
    return [
        str(session.active_era_index),
        str(session.current_session_index),
        str(session.eras_session_index),
        str(block_number),
    ]


def init_args(
    config: Config,
    network: Network,
    session: Session,
    block_number: BlockNumber,
    validator: Validator,
    authority_records: AuthorityRecords,
    para_records: ParaRecords,
) -> list[str]:
    """Arguments of the init hook."""
    args = validator_args(validator)
    args += _session_position_args(session, block_number)
    args += network_args(config, network)
    args += [DISABLED] * NOMINATOR_SLOTS

    if validator.is_active and config.exposes_authored_blocks:
        args += [str(authority_records.current_session_total(validator.stash)), DISABLED]
    else:
        args += [DISABLED, DISABLED]
    args += [DISABLED] * ALL_NOMINATOR_SLOTS

    if validator.is_active and config.exposes_para_validator:
        args += [flag(para_records.is_para_validator(validator.stash)), DISABLED]
    else:
        args += [DISABLED, DISABLED]
    args += [DISABLED] * ERA_POINTS_SLOTS

    return args


def session_args(
    config: Config,
    network: Network,
    session: Session,
    block_number: BlockNumber,
    validator: Validator,
    authority_records: AuthorityRecords,
    para_records: ParaRecords,
) -> list[str]:
    """Arguments of the new session hook."""
    args = validator_args(validator)
    args += _session_position_args(session, block_number)
    args += network_args(config, network)
    args += [DISABLED] * NOMINATOR_SLOTS

    if validator.is_active and config.exposes_authored_blocks:
        args += [
            str(authority_records.previous_session_total(validator.stash)),
            str(authority_records.previous_six_sessions_total(validator.stash)),
        ]
    else:
        args += [DISABLED, DISABLED]
    args += [DISABLED] * ALL_NOMINATOR_SLOTS

    if validator.is_active and config.exposes_para_validator:
        args += [
            flag(para_records.is_para_validator(validator.stash)),
            str(para_records.previous_six_sessions_total(validator.stash)),
        ]
    else:
        args += [DISABLED, DISABLED]

    return args


def new_era_args(session_arguments: list[str]) -> list[str]:
    """Arguments of the new era hook: the new session arguments plus era points."""
    return session_arguments + [DISABLED] * ERA_POINTS_SLOTS


def next_era_args(
    config: Config, network: Network, session: Session, validator: Validator
) -> list[str]:
    """Arguments of the starts active and starts inactive next era hooks."""
    return [
        validator.stash,
        validator.name,
        validator.queued_session_keys,
        str(int(session.active_era_index) + 1),
        str(int(session.current_session_index) + 1),
        *network_args(config, network),
    ]


def status_args(config: Config, network: Network, validator: Validator) -> list[str]:
    """Arguments of the chilled and offline hooks."""
    return validator_args(validator) + network_args(config, network)

"""
Report builders, one per chain event.

Every report starts with the scouty version and a network line, lists the
affected validators with the hooks run for them, and ends with a rule.
"""

from __future__ import annotations

from typing import Iterable

import scouty
from scouty.hooks import Hook

from .data import Network, Referendum, Session, Slash, Validator
from .report import Report


def session_flag(eras_session_index: int) -> str:
    """Flag of a session within its era: start, end, or in between."""
    match eras_session_index:
        case 1:
            return "🏁"
        case 6:
            return "🏳️"
        case _:
            return "🚩"


def session_ordinal_number(eras_session_index: int) -> str:
    match eras_session_index:
        case 1:
            return "1st"
        case 2:
            return "2nd"
        case 3:
            return "3rd"
        case 6:
            return "<b>last</b>"
        case _:
            return f"{eras_session_index}th"


def validator_link(network: Network, validator: Validator) -> str:
    return (
        f'<b><a href="https://{network.slug}.subscan.io/validator/{validator.stash}">'
        f"{validator.name}</a></b>"
    )


def _new_report(is_short: bool) -> Report:
    report = Report(is_short=is_short)
    report.add_raw_text(f"🤖 <code>scouty v{scouty.__version__}</code>")
    report.add_break()
    return report


def _add_hook(report: Report, hook: Hook) -> None:
    if not hook.filename_exists:
        exists_desc = "❌"
    elif hook.failed:
        exists_desc = "⚠️"
    else:
        exists_desc = ""
    report.add_text(f"🪝 <code>{hook.filename}</code> {exists_desc}")
    for line in hook.highlights:
        report.add_raw_text(f"‣ {line}")


def _finish(report: Report) -> Report:
    report.add_break()
    report.add_raw_text("___")
    report.add_break()
    report.log()
    return report


def _add_validators(report: Report, network: Network, validators: Iterable[Validator]) -> None:
    for validator in validators:
        report.add_break()
        is_active_desc = "🟢" if validator.is_active else "🔴"
        report.add_raw_text(f"{is_active_desc} {validator_link(network, validator)}")
        for hook in validator.hooks:
            _add_hook(report, hook)


def session_report(
    network: Network,
    session: Session,
    validators: Iterable[Validator],
    *,
    is_short: bool = False,
) -> Report:
    """Report for a new session, listing every watched validator."""
    report = _new_report(is_short)
    report.add_raw_text(
        f"🔗 <b>{network.name}</b> -> {session_flag(session.eras_session_index)} "
        f"{session_ordinal_number(session.eras_session_index)} session "
        f"({session.current_session_index}) of era {session.active_era_index}"
    )
    _add_validators(report, network, validators)
    return _finish(report)


def init_report(
    network: Network,
    session: Session,
    validators: Iterable[Validator],
    block_number: int,
    *,
    is_short: bool = False,
) -> Report:
    """Report sent once monitoring starts."""
    report = _new_report(is_short)
    report.add_raw_text(
        f"🔗 <b>{network.name}</b> -> 👀 Scouty initialized at block #{block_number}, "
        f"{session_ordinal_number(session.eras_session_index)} session "
        f"({session.current_session_index}) of era {session.active_era_index}"
    )
    _add_validators(report, network, validators)
    return _finish(report)


def slash_report(
    network: Network, slash: Slash, validators: Iterable[Validator], *, is_short: bool = False
) -> Report:
    """Report for a slash, highlighting watched validators that were slashed."""
    report = _new_report(is_short)
    report.add_raw_text(
        f'🔗 <b>{network.name}</b> -> <a href="https://{network.slug}.subscan.io/'
        f'event?module=staking&event=slashed">🏴‍☠️ Slash occurred!</a>'
    )

    slashed_amount = network.format_amount(slash.amount)
    for validator in validators:
        if validator.is_slashed:
            report.add_break()
            report.add_raw_text(f"🤬 {validator_link(network, validator)}")
            report.add_raw_text(f"😱 Slashed amount -> 💸 <b>{slashed_amount}</b>")

    if slash.hook is not None:
        report.add_break()
        _add_hook(report, slash.hook)
    return _finish(report)


def chill_report(
    network: Network, validators: Iterable[Validator], *, is_short: bool = False
) -> Report:
    """Report for watched validators that were chilled."""
    report = _new_report(is_short)
    report.add_raw_text(f"🔗 <b>{network.name}</b> -> 🧊 Validator has been chilled")
    _add_validators(report, network, (v for v in validators if v.is_chilled))
    return _finish(report)


def offline_report(
    network: Network, validators: Iterable[Validator], *, is_short: bool = False
) -> Report:
    """Report for watched validators reported offline."""
    report = _new_report(is_short)
    report.add_raw_text(f"🔗 <b>{network.name}</b> -> 🚨 Validator has been offline")
    _add_validators(report, network, (v for v in validators if v.is_offline))
    return _finish(report)


def referendum_report(
    network: Network, referendum: Referendum, *, is_short: bool = False
) -> Report:
    """Report for a referendum submission."""
    report = _new_report(is_short)
    report.add_raw_text(
        f"🔗 <b>{network.name}</b> -> 🗳️ Referendum {referendum.index} "
        f"({referendum.track}) has been submitted."
    )
    report.add_break()
    report.add_raw_text(
        f'Vote here -> <a href="https://{network.slug}.polkassembly.io/referenda/'
        f'{referendum.index}">Polkassembly</a>'
    )
    report.add_raw_text(
        f'Or here -> <a href="https://{network.slug}.subsquare.io/referenda/'
        f'{referendum.index}">Subsquare</a>'
    )
    if referendum.hook is not None:
        report.add_break()
        _add_hook(report, referendum.hook)
    return _finish(report)


def on_hold_report(network_name: str, error: Exception, minutes: int) -> Report:
    """Report sent when monitoring stops on an error and will restart."""
    report = Report()
    report.add_raw_text(
        f"🤖 <code>scouty v{scouty.__version__}</code> is on hold for {minutes} min "
        f"({network_name}): {error}"
    )
    report.log()
    return report

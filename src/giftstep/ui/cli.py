# ruff: noqa: T201

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from giftstep.app import build_recipient_step
from giftstep.config import configure_logging
from giftstep.domain.errors import NoEligibleRecipientsError, UnknownRecipientError
from giftstep.domain.model import CampaignMode, RemotePrecedence

if TYPE_CHECKING:
    from collections.abc import Callable, Coroutine, Sequence
    from types import FrameType

    from giftstep.app import RecipientStep
    from giftstep.domain.model import Recipient

log = logging.getLogger(__name__)

type Command = Callable[[RecipientStep, argparse.Namespace], Coroutine[object, object, int]]


def _add_filter_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--search", type=str, default="", help="Match name, email, company or title")
    parser.add_argument("--company", type=str, default="", help="Narrow by company")
    parser.add_argument("--title", type=str, default="", help="Narrow by job title")


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--campaign-id", type=str, required=True, help="Campaign to work on")
    common.add_argument(
        "--event-id",
        type=str,
        help="Hosting event whose contact lists are offered alongside the general ones",
    )
    common.add_argument(
        "--precedence",
        choices=[str(choice) for choice in RemotePrecedence],
        default=str(RemotePrecedence.ALWAYS),
        help="When committed remote recipients replace the cached selection (default: %(default)s)",
    )
    common.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    parser = argparse.ArgumentParser(description="Pick, enrich and commit campaign recipients")
    subparsers = parser.add_subparsers(dest="command", required=True)

    lists = subparsers.add_parser("lists", parents=[common], help="Show available contact lists")
    lists.add_argument("--search", type=str, default="", help="Match list name or description")
    lists.add_argument("--tag", action="append", default=[], help="Required tag (repeatable)")

    select = subparsers.add_parser("select", parents=[common], help="Switch the active list")
    select.add_argument("list_id", type=str, help="Contact list id")

    show = subparsers.add_parser("show", parents=[common], help="Show recipients and budget")
    _add_filter_arguments(show)

    toggle = subparsers.add_parser("toggle", parents=[common], help="Toggle recipients")
    toggle.add_argument("recipient_ids", nargs="+", help="Recipient ids to toggle")

    toggle_all = subparsers.add_parser(
        "toggle-all",
        parents=[common],
        help="Select every visible recipient, or clear the selection if all are selected",
    )
    _add_filter_arguments(toggle_all)

    subparsers.add_parser("enrich", parents=[common], help="Enrich the selected recipients")

    submit = subparsers.add_parser("submit", parents=[common], help="Commit budget and recipients")
    submit.add_argument(
        "--desired-count",
        type=int,
        help="Headcount for target-count campaigns (defaults to the campaign's value)",
    )

    return parser.parse_args(list(argv))


def _print_recipients(recipients: Sequence[Recipient]) -> None:
    for recipient in recipients:
        marker = "[x]" if recipient.selected else "[ ]"
        details = ", ".join(value for value in (recipient.title, recipient.company) if value)
        handle = f" @{recipient.linkedin_handle}" if recipient.linkedin_handle else ""
        print(f"{marker} {recipient.id}  {recipient.name} <{recipient.email}> {details}{handle}")


def _print_notices(step: RecipientStep) -> None:
    for scope, message in step.notices.as_dict().items():
        print(f"! {scope}: {message}", file=sys.stderr)


def _print_budget(step: RecipientStep) -> None:
    budget = step.budget()
    print(
        f"Budget: {budget.total_budget} {budget.currency} "
        f"(max {budget.max_per_gift} per gift, {len(step.selection.selected_ids)} selected)"
    )


async def _cmd_lists(step: RecipientStep, args: argparse.Namespace) -> int:
    await step.registry.refresh(context_id=step.context_id)
    for contact_list in step.registry.catalog(search=args.search, tags=args.tag):
        scope = f" (event {contact_list.context_id})" if contact_list.is_scoped else ""
        print(
            f"{contact_list.id}  {contact_list.name}{scope}: "
            f"{contact_list.recipient_count} contacts"
        )
    return 0


async def _cmd_select(step: RecipientStep, args: argparse.Namespace) -> int:
    await step.open()
    recipients = await step.selection.select_list(args.list_id)
    if recipients is None:
        return 1
    _print_recipients(recipients)
    return 0


async def _cmd_show(step: RecipientStep, args: argparse.Namespace) -> int:
    await step.open()
    print(f"Mode: {step.selection.mode}  List: {step.selection.active_list_id or '-'}")
    _print_recipients(step.selection.filter(None, args.search, args.company, args.title))
    if step.selection.mode is CampaignMode.TARGET_COUNT:
        print(f"Desired recipients: {step.selection.desired_count}")
    _print_budget(step)
    return 0


async def _cmd_toggle(step: RecipientStep, args: argparse.Namespace) -> int:
    await step.open()
    for recipient_id in args.recipient_ids:
        selected = step.selection.toggle(recipient_id)
        print(f"{recipient_id}: {'selected' if selected else 'unselected'}")
    _print_budget(step)
    return 0


async def _cmd_toggle_all(step: RecipientStep, args: argparse.Namespace) -> int:
    await step.open()
    visible = step.selection.filter(None, args.search, args.company, args.title)
    step.selection.toggle_all(recipient.id for recipient in visible)
    _print_budget(step)
    return 0


async def _cmd_enrich(step: RecipientStep, args: argparse.Namespace) -> int:  # noqa: ARG001
    await step.open()
    summary = await step.enrich_selected()
    print(
        f"Enriched {summary.success_count}, failed {summary.failure_count}, "
        f"skipped {summary.skipped_count}"
    )
    for record in summary.records:
        if not record.success:
            print(f"  {record.recipient_id}: {record.error}", file=sys.stderr)
    return 0 if summary.failure_count == 0 else 1


async def _cmd_submit(step: RecipientStep, args: argparse.Namespace) -> int:
    await step.open()
    if args.desired_count is not None:
        step.selection.set_desired_count(args.desired_count)
    result = await step.submit()
    if result.field_errors:
        for field_name, message in result.field_errors.items():
            print(f"{field_name}: {message}", file=sys.stderr)
        return 1
    if not result.ok:
        print(result.error, file=sys.stderr)
        return 1
    budget = result.budget
    total = f"{budget.total_budget} {budget.currency}" if budget is not None else "-"
    print(f"Committed {result.total_recipients} recipient(s), budget {total}")
    return 0


COMMANDS: dict[str, Command] = {
    "lists": _cmd_lists,
    "select": _cmd_select,
    "show": _cmd_show,
    "toggle": _cmd_toggle,
    "toggle-all": _cmd_toggle_all,
    "enrich": _cmd_enrich,
    "submit": _cmd_submit,
}


async def _run(args: argparse.Namespace) -> int:
    step = build_recipient_step(
        args.campaign_id,
        context_id=args.event_id,
        precedence=RemotePrecedence(args.precedence),
    )
    try:
        return await COMMANDS[args.command](step, args)
    except (NoEligibleRecipientsError, UnknownRecipientError) as exc:
        print(exc, file=sys.stderr)
        return 1
    finally:
        _print_notices(step)


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)

    try:
        exit_code = asyncio.run(_run(parsed_args))
    except Exception:
        log.exception("Fatal error in %s", parsed_args.command)
        sys.exit(1)
    sys.exit(exit_code)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()

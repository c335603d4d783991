"""Command-line interface for propsync."""

import argparse
import logging
import sys
from pathlib import Path

from propsync.config import Config
from propsync.exceptions import ConfigError, ManifestError, OrchestrationError
from propsync.orchestrator.manifest import SyncManifest, load_manifest
from propsync.orchestrator.runner import Orchestrator
from propsync.plans import get_plan_by_id
from propsync.smtp_check import SmtpSettings, verify_smtp_connection
from propsync.subtypes import SUB_PROPERTY_TYPES, SubTypeSelector, is_known_sub_type


def _add_orchestrator_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--scripts-dir",
        help="Directory of migration scripts (default: scripts, or PROPSYNC_SCRIPTS_DIR)",
    )
    parser.add_argument(
        "--root-dir",
        help="Directory of root-level scripts (default: ., or PROPSYNC_ROOT_DIR)",
    )
    parser.add_argument(
        "--manifest",
        help="YAML manifest with priority/depends_on/exclude/root_scripts",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        help="Per-script timeout in seconds (default: 60)",
    )
    parser.add_argument(
        "--interpreter",
        help="Program used to run each script (default: node)",
    )


def main() -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        prog="propsync",
        description="Property builder database script sync",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    sync_parser = subparsers.add_parser("sync", help="Run all migration scripts")
    _add_orchestrator_args(sync_parser)
    sync_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show the execution plan without running anything",
    )
    sync_parser.add_argument(
        "--no-tls-relax",
        action="store_true",
        help="Keep certificate validation for script database connections",
    )

    plan_parser = subparsers.add_parser("plan", help="Show the execution plan")
    _add_orchestrator_args(plan_parser)

    subscription_parser = subparsers.add_parser(
        "subscription", help="Show a subscription plan"
    )
    subscription_parser.add_argument("plan_id", help="Plan identifier, e.g. ind_6m")

    subparsers.add_parser("smtp-check", help="Verify SMTP credentials")

    subtypes_parser = subparsers.add_parser(
        "subtypes", help="List mixed-use sub-property types"
    )
    subtypes_parser.add_argument(
        "--selected",
        nargs="*",
        default=[],
        help="Currently selected sub-type identifiers",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO, format="%(message)s"
    )

    if args.command == "sync":
        return cmd_sync(args)
    elif args.command == "plan":
        return cmd_plan(args)
    elif args.command == "subscription":
        return cmd_subscription(args)
    elif args.command == "smtp-check":
        return cmd_smtp_check(args)
    elif args.command == "subtypes":
        return cmd_subtypes(args)
    else:
        print(f"Command '{args.command}' not yet implemented", file=sys.stderr)
        return 1


def build_orchestrator(args: argparse.Namespace) -> Orchestrator:
    """Resolve config from args/env and build an Orchestrator.

    Raises:
        ConfigError: If the resolved configuration is invalid.
        ManifestError: If the manifest cannot be loaded.
    """
    tls_insecure = False if getattr(args, "no_tls_relax", False) else None
    config = Config.from_env(
        scripts_dir=args.scripts_dir,
        root_dir=args.root_dir,
        manifest_path=args.manifest,
        timeout=args.timeout,
        interpreter=args.interpreter,
        tls_insecure=tls_insecure,
    )
    config.validate()

    if config.manifest_path:
        manifest = load_manifest(Path(config.manifest_path))
    else:
        manifest = SyncManifest.default()

    return Orchestrator(
        scripts_dir=config.scripts_path,
        root_dir=config.root_path,
        manifest=manifest,
        timeout=config.timeout,
        interpreter=config.interpreter,
        extensions=config.extensions,
        self_name=config.self_name,
        tls_insecure=config.tls_insecure,
    )


def cmd_sync(args: argparse.Namespace) -> int:
    """Run every script; unit failures are reported but do not fail the command."""
    try:
        orchestrator = build_orchestrator(args)
        report = orchestrator.run(dry_run=args.dry_run)
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2
    except (ManifestError, OrchestrationError) as e:
        print(f"Sync error: {e}", file=sys.stderr)
        return 1

    if args.dry_run:
        print("\nDry run - no scripts executed")
    elif report.failed:
        print(f"\nProcessed {len(report.all_results)} script(s), {len(report.failed)} failed")
    else:
        print(f"\nSuccessfully processed {len(report.all_results)} script(s)")
    return 0


def cmd_plan(args: argparse.Namespace) -> int:
    """Show the execution plan."""
    try:
        orchestrator = build_orchestrator(args)
        units = orchestrator.plan_units()
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2
    except (ManifestError, OrchestrationError) as e:
        print(f"Plan error: {e}", file=sys.stderr)
        return 1

    if not units:
        print("No scripts to run")
        return 0

    print(f"Execution plan ({len(units)}):")
    for position, unit in enumerate(units, start=1):
        marker = " [priority]" if unit.is_priority else ""
        print(f"  {position}. {unit.name}{marker}")
    return 0


def cmd_subscription(args: argparse.Namespace) -> int:
    """Show a subscription plan by identifier."""
    plan = get_plan_by_id(args.plan_id)
    if plan is None:
        print(f"Unknown plan: {args.plan_id}", file=sys.stderr)
        return 1

    print(f"{plan.name} ({plan.id})")
    print(f"  Duration: {plan.duration} month(s)")
    print(f"  Price: {plan.price}")
    print(f"  Properties allowed: {plan.properties_allowed}")
    print(f"  User type: {plan.user_type}")
    return 0


def cmd_smtp_check(args: argparse.Namespace) -> int:
    """Verify SMTP credentials."""
    try:
        settings = SmtpSettings.from_env()
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    print("Configuration:")
    print(f"  Host: {settings.host}")
    print(f"  Port: {settings.port}")
    print(f"  User: {settings.user}")
    print(f"  Pass: {settings.masked_password()}")

    try:
        settings.validate()
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    result = verify_smtp_connection(settings)
    if not result.ok:
        print("✗ SMTP connection failed:")
        print(f"  Error: {result.error}")
        if result.code is not None:
            print(f"  Code: {result.code}")
        return 1

    print("✓ SMTP connection successful, server is ready to send emails")
    return 0


def cmd_subtypes(args: argparse.Namespace) -> int:
    """List sub-property types, marking the selected ones."""
    unknown = [s for s in args.selected if not is_known_sub_type(s)]
    if unknown:
        print(f"Unknown sub-property type(s): {', '.join(unknown)}", file=sys.stderr)
        return 1

    selector = SubTypeSelector(args.selected, on_toggle=lambda type_id: None)
    print(f"Sub-property types ({len(SUB_PROPERTY_TYPES)}):")
    for card in selector.cards():
        status = "✓" if card.is_active else "○"
        print(f"  {status} {card.id}: {card.label}")
    return 0


if __name__ == "__main__":
    sys.exit(main())

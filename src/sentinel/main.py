"""
Sentinel command-line interface

Shows current codes for enrolled services and edits the service registry:

    sentinel codes                 current code for every service
    sentinel code SECRET           code for a bare secret
    sentinel list                  enrolled services
    sentinel add NAME SECRET       enroll a service
    sentinel delete ID             remove a service
    sentinel tag ID TAG            toggle a tag
    sentinel note ID TEXT          replace the note
    sentinel slot ID INDEX VALUE   set one recovery slot
    sentinel paste ID START TEXT   fill recovery slots from pasted text
    sentinel use ID INDEX          take a recovery code out of its slot
    sentinel export [PATH]         write a backup
    sentinel import PATH           replace the registry from a backup
"""

import argparse
import getpass
import logging
import sys

from .config import APP_NAME, APP_VERSION
from .exceptions import RegistryError, StorageError
from .security.exporters import BackupExporter
from .security.importers import restore_backup
from .security.registry import ServiceRegistry
from .security.storage import JsonFileStore
from .totp.engine import TotpEngine
from .utils.colorprint import print_error, print_info, print_success, print_warning
from .utils.debug import debug_print, set_debug
from .utils.logger import setup_logger


def build_parser():
    parser = argparse.ArgumentParser(prog="sentinel", description=f"{APP_NAME}: TOTP authenticator")
    parser.add_argument("--store", type=str, help="Path of the service store file")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--version", action="version", version=f"{APP_NAME} {APP_VERSION}")

    commands = parser.add_subparsers(dest="command", required=True)

    codes = commands.add_parser("codes", help="Show the current code for every service")
    codes.add_argument("--tag", help="Only services carrying this tag")

    code = commands.add_parser("code", help="Show the current code for a secret")
    code.add_argument("secret")
    code.add_argument("--offset", type=int, default=0, help="Adjacent time step to use (e.g. -1, 1)")

    listing = commands.add_parser("list", help="List enrolled services")
    listing.add_argument("--tag", help="Only services carrying this tag")

    add = commands.add_parser("add", help="Enroll a service")
    add.add_argument("name")
    add.add_argument("secret")
    add.add_argument("--issuer")
    add.add_argument("--note", default="")
    add.add_argument("--tag", dest="tags", action="append", default=[], help="Tag (repeatable)")

    delete = commands.add_parser("delete", help="Remove a service")
    delete.add_argument("id")

    tag = commands.add_parser("tag", help="Toggle a tag on a service")
    tag.add_argument("id")
    tag.add_argument("tag")

    note = commands.add_parser("note", help="Replace the note of a service")
    note.add_argument("id")
    note.add_argument("text")

    slot = commands.add_parser("slot", help="Set one recovery slot (empty value clears it)")
    slot.add_argument("id")
    slot.add_argument("index", type=int)
    slot.add_argument("value")

    paste = commands.add_parser("paste", help="Fill recovery slots from pasted codes")
    paste.add_argument("id")
    paste.add_argument("start", type=int)
    paste.add_argument("text")

    use = commands.add_parser("use", help="Take a recovery code out of its slot")
    use.add_argument("id")
    use.add_argument("index", type=int)

    export = commands.add_parser("export", help="Write a backup file")
    export.add_argument("path", nargs="?")
    export.add_argument("--password", action="store_true", help="Prompt for a password and encrypt the backup")

    restore = commands.add_parser("import", help="Replace the registry with a backup file")
    restore.add_argument("path")
    restore.add_argument("--password", action="store_true", help="Prompt for the backup password")

    return parser


def _format_code(code):
    return f"{code[:3]} {code[3:]}"


def cmd_codes(args, registry, engine):
    services = registry.filter_by_tag(args.tag)
    if not services:
        print_warning("No services enrolled")
        return 0
    remaining = engine.remaining_seconds()
    width = max(len(service.name) for service in services)
    for service in services:
        print(f"{service.name:<{width}}  {_format_code(engine.generate_code(service.secret))}")
    print_info(f"Codes rotate in {remaining}s")
    return 0


def cmd_code(args, registry, engine):
    print(_format_code(engine.generate_code(args.secret, args.offset)))
    print_info(f"Rotates in {engine.remaining_seconds()}s")
    return 0


def cmd_list(args, registry, engine):
    for service in registry.filter_by_tag(args.tag):
        issuer = f" ({service.issuer})" if service.issuer else ""
        tags = f" [{', '.join(service.tags)}]" if service.tags else ""
        print(f"{service.id}  {service.name}{issuer}{tags}  recovery codes: {service.filled_slots}/10")
    return 0


def cmd_add(args, registry, engine):
    service = registry.add_service(args.name, args.secret, issuer=args.issuer, note=args.note, tags=args.tags)
    print_success(f"Enrolled {service.name} ({service.id})")
    return 0


def cmd_delete(args, registry, engine):
    if not registry.delete_service(args.id):
        print_error(f"No service with id {args.id}")
        return 1
    print_success("Service removed")
    return 0


def cmd_tag(args, registry, engine):
    service = registry.toggle_tag(args.id, args.tag)
    print_success(f"Tags for {service.name}: {', '.join(service.tags) or '(none)'}")
    return 0


def cmd_note(args, registry, engine):
    registry.update_note(args.id, args.text)
    print_success("Note updated")
    return 0


def cmd_slot(args, registry, engine):
    registry.set_recovery_slot(args.id, args.index, args.value)
    print_success("Vault slot updated")
    return 0


def cmd_paste(args, registry, engine):
    filled = registry.paste_recovery_codes(args.id, args.start, args.text)
    print_success(f"{len(filled)} codes pasted")
    return 0


def cmd_use(args, registry, engine):
    print(registry.consume_recovery_code(args.id, args.index))
    return 0


def cmd_export(args, registry, engine):
    password = None
    if args.password:
        password = getpass.getpass("Backup password: ")
        if password != getpass.getpass("Confirm backup password: "):
            print_error("Passwords don't match")
            return 1
    path, message = BackupExporter().export_to_file(registry.load_all(), args.path, password=password)
    if path is None:
        print_error(message)
        return 1
    print_success(f"Backup written to {path}")
    return 0


def cmd_import(args, registry, engine):
    password = getpass.getpass("Backup password: ") if args.password else None
    backup, message = restore_backup(registry, args.path, password)
    if backup is None:
        print_error(message)
        return 1
    print_success(f"Restored {len(backup.services)} services")
    if backup.observer:
        print_info(f"Backup also holds {len(backup.observer)} observer records (not restored here)")
    return 0


COMMANDS = {
    "codes": cmd_codes,
    "code": cmd_code,
    "list": cmd_list,
    "add": cmd_add,
    "delete": cmd_delete,
    "tag": cmd_tag,
    "note": cmd_note,
    "slot": cmd_slot,
    "paste": cmd_paste,
    "use": cmd_use,
    "export": cmd_export,
    "import": cmd_import,
}


def main(argv=None, registry=None, engine=None):
    """
    Run the CLI.

    ``registry`` and ``engine`` can be injected (tests); otherwise they are
    built from ``--store`` and the system clock.

    Returns:
        int: Process exit code
    """
    args = build_parser().parse_args(argv)

    setup_logger(console_level=logging.DEBUG if args.debug else None)
    if args.debug:
        set_debug(True)

    if registry is None:
        registry = ServiceRegistry(JsonFileStore(args.store) if args.store else None)
    engine = engine or TotpEngine()
    debug_print(f"Running command {args.command!r}")

    try:
        return COMMANDS[args.command](args, registry, engine)
    except (RegistryError, StorageError) as e:
        print_error(str(e))
        return 1


if __name__ == "__main__":
    sys.exit(main())

from __future__ import annotations
import argparse
import logging
import sys
from dotenv import load_dotenv

from dbmeta.db.builder import build_database, format_build_report
from dbmeta.db.connection import ConnectionParams, open_session
from dbmeta.db.updater import update_database
from dbmeta.db_introspect.exporter import export_scripts

EXIT_OK = 0
EXIT_USAGE = 1
EXIT_FAILURE = -1


class _ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that exits with status 1 on usage errors."""

    def error(self, message: str) -> None:
        self.print_usage(sys.stderr)
        self.exit(EXIT_USAGE, f"{self.prog}: error: {message}\n")


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="dbmeta",
        description="dbmeta - Build Firebird databases from DDL scripts and export schemas back to scripts"
    )
    sub = parser.add_subparsers(dest="cmd", required=True)

    build = sub.add_parser("build-db", help="Create a new database and run the build scripts")
    build.add_argument("--db-dir", required=True, help="Directory for the new database file")
    build.add_argument("--scripts-dir", required=True, help="Directory with domains.sql and tables.sql")
    build.add_argument("--include-procedures", action="store_true",
                       help="Also run procedures.sql (one block per CREATE OR ALTER PROCEDURE)")
    build.add_argument("--config", default=None,
                       help="Credentials file with SYSDBA_USER/SYSDBA_PASSWORD (default: config.json)")

    export = sub.add_parser("export-scripts", help="Export domains, tables and procedures to scripts")
    export.add_argument("--connection-string", required=True, help="Firebird DSN or Key=Value connection string")
    export.add_argument("--output-dir", required=True, help="Directory for the generated scripts")

    update = sub.add_parser("update-db", help="Update an existing database from scripts (not implemented)")
    update.add_argument("--connection-string", required=True, help="Firebird DSN or Key=Value connection string")
    update.add_argument("--scripts-dir", required=True, help="Directory with the updated scripts")

    return parser


def main(argv: list[str] | None = None) -> int:
    """Parse arguments and dispatch a command.

    Returns:
        Process exit code: 0 on success, -1 on an unhandled error.
        Usage errors exit with 1 from inside argparse.
    """
    # Load environment variables first
    load_dotenv()

    # Import settings after load_dotenv to ensure env vars are loaded
    from dbmeta.config import settings

    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format=settings.log_format,
        handlers=[
            logging.StreamHandler(sys.stderr)
        ]
    )

    try:
        if args.cmd == "build-db":
            build_db(args.db_dir, args.scripts_dir, args.config, args.include_procedures)
        elif args.cmd == "export-scripts":
            export_db(args.connection_string, args.output_dir)
        elif args.cmd == "update-db":
            update_db(args.connection_string, args.scripts_dir)
    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        return 130
    except Exception as e:
        print(f"Error: {e}")
        return EXIT_FAILURE

    return EXIT_OK


def run() -> None:
    """Console script entry point."""
    sys.exit(main())


def build_db(
    db_dir: str,
    scripts_dir: str,
    credentials_file: str | None = None,
    include_procedures: bool = False
) -> None:
    """Create a database and apply build scripts, then print the report.

    Script failures are listed in the report; they do not fail the command.
    """
    report = build_database(
        db_dir,
        scripts_dir,
        credentials_file=credentials_file,
        include_procedures=include_procedures,
    )
    print(format_build_report(report))

    if report.ok:
        print("✓ Database built successfully")
    else:
        print(f"⚠ Database built with {len(report.errors)} failed script(s)")


def export_db(connection_string: str, output_dir: str) -> None:
    """Export the schema behind a connection string into script files."""
    params = ConnectionParams.from_connection_string(connection_string)

    with open_session(params) as session:
        result = export_scripts(session, output_dir)

    print("✓ Scripts exported successfully")
    print(f"  Output: {result.output_dir}")
    for path in result.files:
        print(f"  - {path.name}")


def update_db(connection_string: str, scripts_dir: str) -> None:
    """Reserved: raises NotImplementedError."""
    update_database(connection_string, scripts_dir)
    print("✓ Database updated successfully")

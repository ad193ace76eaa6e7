import argparse
import json
import os
import sys

import config_paths
from _version import __version__
from editor_session import EditorSession
from file_type_handler import FileTypeHandler
from logger import get_logger, setup_logging

logger = get_logger(__name__)


def _print_status(msg, _seconds=3):
    print(msg, file=sys.stderr)


def _open_session(path, config):
    session = EditorSession(set_status_cb=_print_status, config=config)
    if not session.load_file(path):
        return None
    return session


def _resolve_column(session, col: str):
    headers = session.document.headers
    if col in headers:
        return headers.index(col)
    if col.isdigit() and 1 <= int(col) <= len(headers):
        return int(col) - 1
    return None


# ---------- subcommands ----------
def cmd_info(args, config) -> int:
    session = _open_session(args.path, config)
    if session is None:
        return 1
    doc = session.document
    print(f"file: {session.file_name}")
    print(f"type: {session.file_type} ({session.json_format})")
    print(f"rows: {doc.row_count}")
    print(f"cols: {doc.column_count}")
    for name, col_type in zip(doc.headers, doc.column_types):
        print(f"  {name}: {col_type.value}")
    return 0


def cmd_show(args, config) -> int:
    session = _open_session(args.path, config)
    if session is None:
        return 1
    if args.search:
        session.set_search(args.search)
    if args.page is not None and not session.go_to_page(args.page - 1):
        _print_status(f"No page {args.page} (1-{session.view.total_pages})")
        return 1

    view = session.visible()
    print("\t".join(["#"] + session.document.headers))
    for index, row in view.visible_rows:
        print("\t".join([str(index + 1)] + row))
    info = view.page_info
    print(f"page {info.page + 1}/{info.total_pages}: {info.label}", file=sys.stderr)
    return 0


def cmd_convert(args, config) -> int:
    session = _open_session(args.src, config)
    if session is None:
        return 1
    fmt = args.format
    ext = os.path.splitext(args.dst)[1].lower()
    if fmt is None and ext not in FileTypeHandler.SUPPORTED:
        fmt = config["DEFAULT_EXPORT_FORMAT"]
    return 0 if session.export(args.dst, fmt) else 1


def cmd_paste(args, config) -> int:
    session = _open_session(args.path, config)
    if session is None:
        return 1
    if args.clipboard:
        ok = session.paste_from_clipboard()
    else:
        ok = session.paste(sys.stdin.read())
    if not ok:
        return 1
    return 0 if session.save() else 1


def cmd_set(args, config) -> int:
    session = _open_session(args.path, config)
    if session is None:
        return 1
    col = _resolve_column(session, args.col)
    if col is None:
        _print_status(f"No column {args.col}")
        return 1
    if not 1 <= args.row <= session.document.row_count:
        _print_status(f"No row {args.row}")
        return 1
    if not session.edit_cell(args.row - 1, col, args.value):
        _print_status("No changes")
        return 0
    return 0 if session.save() else 1


def cmd_config(args, config) -> int:
    if args.init:
        try:
            created = config_paths.write_default_config()
        except OSError as exc:
            _print_status(f"Could not write config: {exc}")
            return 1
        _print_status(
            f"Wrote {config_paths.CONFIG_JSON}"
            if created
            else f"{config_paths.CONFIG_JSON} already exists"
        )
        config = config_paths.load_config()
    print(json.dumps(config, indent=2))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tabedit", description="tabedit - edit CSV, JSON and NDJSON tables"
    )
    parser.add_argument("-v", "--version", action="version", version=__version__)
    parser.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING or ERROR")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("info", help="show file type, size and inferred column types")
    p.add_argument("path")
    p.set_defaults(func=cmd_info)

    p = sub.add_parser("show", help="print one page of rows")
    p.add_argument("path")
    p.add_argument("--page", type=int, default=None, help="1-based page number")
    p.add_argument("--search", default="", help="case-insensitive row filter")
    p.set_defaults(func=cmd_show)

    p = sub.add_parser("convert", help="export to another file or format")
    p.add_argument("src")
    p.add_argument("dst")
    p.add_argument("--format", choices=sorted(FileTypeHandler.FORMATS), default=None)
    p.set_defaults(func=cmd_convert)

    p = sub.add_parser("paste", help="append pasted text (stdin) and save")
    p.add_argument("path")
    p.add_argument("--clipboard", action="store_true", help="read the system clipboard")
    p.set_defaults(func=cmd_paste)

    p = sub.add_parser("set", help="set one cell and save")
    p.add_argument("path")
    p.add_argument("row", type=int, help="1-based row number")
    p.add_argument("col", help="column name or 1-based column number")
    p.add_argument("value")
    p.set_defaults(func=cmd_set)

    p = sub.add_parser("config", help="print the effective configuration")
    p.add_argument("--init", action="store_true", help="write config.json with defaults")
    p.set_defaults(func=cmd_config)

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    config = config_paths.load_config()
    setup_logging(args.log_level or config["LOG_LEVEL"])
    logger.debug("Running %s", args.command)
    return args.func(args, config)


if __name__ == "__main__":
    sys.exit(main())

"""Command line interface for driveuploader package."""
from __future__ import annotations

import argparse
import asyncio
import json
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from rich.logging import RichHandler

from . import __version__
from .cli_progress import (
    render_batch_result,
    render_configuration_summary,
    render_models,
)
from .errors import UploaderError, ValidationError
from .models import IncomingFile, UploadConfig
from .orchestrator import UploadOrchestrator
from .utils.formatting import format_file_size

ACCESS_TOKEN_ENV = "DRIVE_ACCESS_TOKEN"


class CLIError(RuntimeError):
    """Raised when CLI validation/execution fails."""


def _setup_logging(debug: bool, silent: bool, log_level: Optional[str]) -> str:
    """
    Configure logging.

    Default behavior is silent unless --debug or --log-level is provided.
    Returns a string describing effective mode.
    """
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    logging.disable(logging.NOTSET)

    if silent or (not debug and not log_level):
        logging.disable(logging.CRITICAL)
        root_logger.setLevel(logging.CRITICAL + 1)
        return "silent"

    if debug:
        level = logging.DEBUG
    else:
        level = getattr(logging, log_level.upper(), logging.INFO)

    handler = RichHandler(
        rich_tracebacks=True,
        markup=False,
        show_time=False,
        show_path=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(handler)
    root_logger.setLevel(level)
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(max(level, logging.WARNING))
    return logging.getLevelName(level)


def _strip_optional_quotes(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in {"'", '"'}:
        return value[1:-1]
    return value


def _load_env_file(path: Path, override: bool = False) -> None:
    if not path.exists():
        raise CLIError(f"env file not found: {path}")
    if not path.is_file():
        raise CLIError(f"env path is not a file: {path}")

    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise CLIError(f"could not read env file {path}: {exc}") from exc

    for raw_line in content.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if line.startswith("export "):
            line = line[len("export ") :].strip()
        if "=" not in line:
            continue

        key, value = line.split("=", 1)
        key = key.strip()
        if not key:
            continue

        value = _strip_optional_quotes(value.strip())
        if override or key not in os.environ:
            os.environ[key] = value


def _resolve_default_env_file() -> Optional[Path]:
    default_env = Path(".env")
    return default_env if default_env.exists() and default_env.is_file() else None


def _load_config() -> UploadConfig:
    try:
        return UploadConfig.from_env()
    except ValueError as exc:
        raise CLIError(f"invalid configuration: {exc}") from exc


def _require_access_token() -> str:
    token = os.getenv(ACCESS_TOKEN_ENV, "").strip()
    if not token:
        raise CLIError(f"{ACCESS_TOKEN_ENV} environment variable is not set")
    return token


def _read_files(paths: Sequence[Path]) -> List[IncomingFile]:
    files = []
    for path in paths:
        path = Path(path).expanduser()
        if not path.is_file():
            raise CLIError(f"not a file: {path}")
        try:
            files.append(IncomingFile.from_path(path))
        except OSError as exc:
            raise CLIError(f"could not read {path}: {exc}") from exc
    return files


def _print_json(payload) -> None:
    print(json.dumps(payload, indent=2, ensure_ascii=False))


async def _run_models(config: UploadConfig, token: str, as_json: bool) -> int:
    async with UploadOrchestrator(config, access_token=token) as orchestrator:
        models = await orchestrator.list_models()
    if as_json:
        _print_json({"success": True, "models": models})
    else:
        render_models(models)
    return 0


async def _run_resolve(config: UploadConfig, token: str, args: argparse.Namespace) -> int:
    async with UploadOrchestrator(config, access_token=token) as orchestrator:
        folder_id = await orchestrator.resolve_path(
            args.model, args.platform, args.category, args.title
        )
    if args.json:
        _print_json({"success": True, "folderId": folder_id})
    else:
        print(folder_id)
    return 0


async def _run_upload(config: UploadConfig, token: str, args: argparse.Namespace) -> int:
    files = _read_files(args.files)

    async with UploadOrchestrator(config, access_token=token) as orchestrator:
        folder_id = args.folder_id
        if not folder_id:
            if not (args.model and args.platform and args.category):
                raise CLIError("either --folder-id or --model/--platform/--category is required")
            folder_id = await orchestrator.resolve_path(
                args.model, args.platform, args.category, args.title
            )

        result = await orchestrator.upload_batch(files, folder_id)

    if args.json:
        _print_json(result.to_dict())
    else:
        render_batch_result(result)
    return 0 if result.success else 1


def _add_path_arguments(parser: argparse.ArgumentParser, required: bool) -> None:
    if required:
        parser.add_argument("model", help="Model name (first folder level)")
        parser.add_argument("platform", help="Platform key, e.g. of, instagram, tiktok")
        parser.add_argument("category", help="Category folder, e.g. Stories, Scripts")
    else:
        parser.add_argument("--model", default=None, help="Model name (first folder level)")
        parser.add_argument("--platform", default=None, help="Platform key, e.g. of, instagram")
        parser.add_argument("--category", default=None, help="Category folder, e.g. Stories")
    parser.add_argument(
        "--title",
        default=None,
        help="Script title (extra folder level for the Scripts category)",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="drive-up",
        description="Upload files into a Google Drive folder hierarchy.",
    )
    parser.add_argument(
        "--env-file",
        type=Path,
        default=None,
        help="Load environment variables from this .env file",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logs")
    parser.add_argument("--silent", action="store_true", help="Only print errors")
    parser.add_argument(
        "--log-level",
        default=None,
        help="Explicit log level (DEBUG/INFO/WARNING/ERROR)",
    )
    parser.add_argument("--json", action="store_true", help="Print machine-readable JSON")
    parser.add_argument(
        "--version",
        action="version",
        version=f"drive-up {__version__}",
    )

    commands = parser.add_subparsers(dest="command")

    commands.add_parser("models", help="List model folders under the root folder")

    resolve = commands.add_parser("resolve", help="Get or create a destination folder")
    _add_path_arguments(resolve, required=True)

    upload = commands.add_parser("upload", help="Upload files into one folder")
    upload.add_argument("files", nargs="+", type=Path, help="Files to upload")
    upload.add_argument("--folder-id", default=None, help="Target folder id")
    _add_path_arguments(upload, required=False)

    return parser


def run_cli(argv: Optional[Sequence[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    used_env_file = args.env_file or _resolve_default_env_file()
    if used_env_file is not None:
        try:
            _load_env_file(Path(used_env_file))
        except CLIError as exc:
            print(f"ERROR: {exc}", file=sys.stderr)
            return 1

    effective_log_mode = _setup_logging(
        debug=args.debug,
        silent=args.silent,
        log_level=args.log_level,
    )

    if args.command is None:
        parser.print_help()
        return 0

    try:
        config = _load_config()
        token = _require_access_token()

        if not args.json and not args.silent:
            render_configuration_summary(
                {
                    "Command": args.command,
                    "Root Folder": config.root_folder_id,
                    "Per-file Limit": format_file_size(config.max_file_size),
                    "Total Limit": format_file_size(config.max_total_size),
                    "Max Files": config.max_files,
                    "Chunk Size": format_file_size(config.chunk_size),
                    "Env File": str(used_env_file) if used_env_file else "-",
                    "Logging": effective_log_mode,
                }
            )

        if args.command == "models":
            return asyncio.run(_run_models(config, token, args.json))
        if args.command == "resolve":
            return asyncio.run(_run_resolve(config, token, args))
        return asyncio.run(_run_upload(config, token, args))
    except (CLIError, ValidationError) as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1
    except UploaderError as exc:
        print(f"ERROR: {type(exc).__name__}: {exc}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("Cancelled.", file=sys.stderr)
        return 130


def main() -> None:
    raise SystemExit(run_cli())


if __name__ == "__main__":
    main()

"""Command parser for CLI input."""

import shlex

from cli.models import (
    CommandRequest,
    ExportCommand,
    ListCommand,
    UploadCommand,
    UserCommand,
)


class ParseError(Exception):
    """Raised when command parsing fails."""

    pass


def parse_command(input_line: str) -> CommandRequest:
    """Parse user input into a CommandRequest object.

    Args:
        input_line: Raw user input from REPL

    Returns:
        CommandRequest object (one of User/Upload/List/Export)

    Raises:
        ParseError: If command syntax is invalid
    """
    if not input_line.strip():
        raise ParseError("Empty command")

    try:
        tokens = shlex.split(input_line)
    except ValueError as e:
        raise ParseError(f"Invalid syntax: {e}")

    if not tokens:
        raise ParseError("Empty command")

    command_name = tokens[0]

    if command_name == "user":
        return _parse_user(tokens[1:])
    elif command_name == "upload":
        return _parse_upload(tokens[1:])
    elif command_name == "list":
        return _parse_list(tokens[1:])
    elif command_name == "export":
        return _parse_export(tokens[1:])
    else:
        raise ParseError(f"Unknown command: {command_name}")


def _parse_user(args: list[str]) -> UserCommand:
    """Parse 'user <name>' command."""
    if len(args) != 1:
        raise ParseError("user requires exactly 1 argument: <name>")
    return UserCommand(name=args[0])


def _parse_upload(args: list[str]) -> UploadCommand:
    """Parse 'upload <path>...' command."""
    if not args:
        raise ParseError("upload requires at least one file or folder")
    return UploadCommand(paths=tuple(args))


def _parse_list(args: list[str]) -> ListCommand:
    """Parse 'list [query] [--type <prefix>]' command."""
    query_terms = []
    type_prefix = ""

    index = 0
    while index < len(args):
        arg = args[index]
        if arg == "--type":
            if index + 1 >= len(args):
                raise ParseError("--type requires a MIME type prefix (e.g. image/)")
            type_prefix = args[index + 1]
            index += 2
            continue
        query_terms.append(arg)
        index += 1

    return ListCommand(query=" ".join(query_terms), type_prefix=type_prefix)


def _parse_export(args: list[str]) -> ExportCommand:
    """Parse 'export [output_path]' command."""
    if len(args) > 1:
        raise ParseError("export takes at most 1 argument: [output_path]")
    return ExportCommand(output_path=args[0] if args else None)

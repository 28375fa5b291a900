"""CLI constants and configuration."""

from prompt_toolkit.styles import Style

COMMANDS = ["user", "upload", "list", "export", "clear", "exit", "help"]

STYLE = Style.from_dict(
    {
        "prompt": "#2E9AFE bold",
        "command": "#0088ff bold",
    }
)

BLUE = "\033[38;2;46;154;254m"
GREEN = "\033[32m"
RED = "\033[31m"
RESET = "\033[0m"

LOGO = f"""{BLUE}
 __  __          _ _    __     __          _ _
|  \\/  | ___  __| (_) __\\ \\   / /_ _ _   _| | |_
| |\\/| |/ _ \\/ _` | |/ _` \\ \\ / / _` | | | | | __|
| |  | |  __/ (_| | | (_| |\\ V / (_| | |_| | | |_
|_|  |_|\\___|\\__,_|_|\\__,_| \\_/ \\__,_|\\__,_|_|\\__|
{RESET}"""

WELCOME_TITLE = "MediaVault CLI - upload, browse and export your media"
WELCOME_HELP = "Type 'help' for commands or 'exit' to quit.\n"

PROMPT_TEXT = "mediavault> "

HELP_TEXT = """Available commands:
  user <name>                         Choose the namespace to work in
  upload <file-or-folder>...          Upload files; folders keep their structure
  list [query] [--type <prefix>]      List files, optionally filtered by name and type
  export [output_path]                Download everything as <user>.zip
  clear                               Clear screen and redisplay welcome message
  help                                Show this help
  exit                                Exit REPL

Examples:
  user alice
  upload holiday/ notes.pdf
  list beach --type image/
  export backups/alice.zip"""

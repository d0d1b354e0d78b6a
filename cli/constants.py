"""CLI constants and configuration."""

from prompt_toolkit.styles import Style

COMMANDS = ["upload", "list", "download", "delete", "rename", "clear", "exit", "help"]

STYLE = Style.from_dict(
    {
        "prompt": "#2E9AFE bold",
        "command": "#0088ff bold",
    }
)

BLUE = "\033[38;2;46;154;254m"
GREEN = "\033[32m"
RESET = "\033[0m"

LOGO = f"""{BLUE}
 ███████╗██╗██╗     ███████╗██╗  ██╗ ██████╗ ███████╗████████╗
 ██╔════╝██║██║     ██╔════╝██║  ██║██╔═══██╗██╔════╝╚══██╔══╝
 █████╗  ██║██║     █████╗  ███████║██║   ██║███████╗   ██║
 ██╔══╝  ██║██║     ██╔══╝  ██╔══██║██║   ██║╚════██║   ██║
 ██║     ██║███████╗███████╗██║  ██║╚██████╔╝███████║   ██║
 ╚═╝     ╚═╝╚══════╝╚══════╝╚═╝  ╚═╝ ╚═════╝ ╚══════╝   ╚═╝
{RESET}"""

WELCOME_TITLE = "Filehost CLI - Simple File Hosting"
WELCOME_HELP = "Type 'help' for commands or 'exit' to quit.\n"

PROMPT_TEXT = "filehost> "

HELP_TEXT = """Available commands:
  upload <path> [<path> ...]          Upload local files (a taken name gets a (1), (2), ... suffix)
  list                                List files on the server
  download <name> [output_path]       Download a file (defaults to ./<name>)
  delete <name>                       Delete a file
  rename <name> <new-name>            Rename a file (the original extension is kept)
  clear                               Clear screen and redisplay welcome message
  help                                Show this help
  exit                                Exit REPL

Examples:
  upload report.pdf notes/todo.txt
  list
  download report.pdf
  download report.pdf backups/report-copy.pdf
  rename report.pdf final
  delete notes.txt"""

DOWNLOAD_PIECE_SIZE = 8192

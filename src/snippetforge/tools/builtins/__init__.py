"""Built-in sandbox tools."""

from snippetforge.tools.builtins.create_or_update_files import CreateOrUpdateFilesTool
from snippetforge.tools.builtins.list_files import ListFilesTool
from snippetforge.tools.builtins.read_files import ReadFilesTool
from snippetforge.tools.builtins.terminal import TerminalTool

__all__ = ["CreateOrUpdateFilesTool", "ListFilesTool", "ReadFilesTool", "TerminalTool"]

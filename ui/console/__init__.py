"""Console screen components.

- log_list_model: QListView model and delegate mirroring the log store
- console_window: the console dialog (header, log list, badge and actions)
"""

from ui.console.log_list_model import LogListModel, LogLineDelegate
from ui.console.console_window import ConsoleWindow

__all__ = [
    "LogListModel",
    "LogLineDelegate",
    "ConsoleWindow",
]

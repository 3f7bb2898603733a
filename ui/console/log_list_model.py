"""List model and item delegate rendering console entries."""

from typing import Any, List, Optional

from PyQt6.QtCore import QAbstractListModel, QModelIndex, QObject, QSize, Qt
from PyQt6.QtWidgets import QStyle, QStyledItemDelegate

from ui.style_manager import StyleManager
from utils.console_models import LogEntry
from utils.log_formatting import format_log_line, format_timestamp
from utils.log_store import LogStore


class LogListModel(QAbstractListModel):
    """Read-only view of a :class:`LogStore` for QListView rendering.

    The model keeps its own row list and mirrors the store's append, evict and
    reset signals, so views only receive the row changes that actually happened.
    """

    EntryRole = Qt.ItemDataRole.UserRole

    def __init__(self, store: LogStore, parent: Optional[QObject] = None):
        super().__init__(parent)
        self._store = store
        self._entries: List[LogEntry] = store.entries()

        store.entries_appended.connect(self._on_entries_appended)
        store.entries_evicted.connect(self._on_entries_evicted)
        store.entries_reset.connect(self._on_entries_reset)

    @property
    def store(self) -> LogStore:
        return self._store

    def rowCount(self, parent: QModelIndex = QModelIndex()) -> int:  # type: ignore[override]
        if parent.isValid():
            return 0
        return len(self._entries)

    def data(self, index: QModelIndex, role: int = Qt.ItemDataRole.DisplayRole) -> Any:  # type: ignore[override]
        if not index.isValid() or not (0 <= index.row() < len(self._entries)):
            return None
        entry = self._entries[index.row()]
        if role == Qt.ItemDataRole.DisplayRole:
            return format_log_line(entry)
        if role == Qt.ItemDataRole.ForegroundRole:
            return StyleManager.severity_color(entry.severity)
        if role == Qt.ItemDataRole.ToolTipRole:
            return entry.message
        if role == self.EntryRole:
            return entry
        return None

    def get_entry(self, row: int) -> Optional[LogEntry]:
        if 0 <= row < len(self._entries):
            return self._entries[row]
        return None

    def to_list(self) -> List[LogEntry]:
        return list(self._entries)

    def _on_entries_appended(self, entries: List[LogEntry]) -> None:
        if not entries:
            return
        start = len(self._entries)
        self.beginInsertRows(QModelIndex(), start, start + len(entries) - 1)
        self._entries.extend(entries)
        self.endInsertRows()

    def _on_entries_evicted(self, count: int) -> None:
        if count <= 0 or not self._entries:
            return
        actual = min(count, len(self._entries))
        self.beginRemoveRows(QModelIndex(), 0, actual - 1)
        del self._entries[:actual]
        self.endRemoveRows()

    def _on_entries_reset(self) -> None:
        self.beginResetModel()
        self._entries = self._store.entries()
        self.endResetModel()


class LogLineDelegate(QStyledItemDelegate):
    """Paints ``[HH:MM:SS] [SEVERITY] message`` in three colors.

    The timestamp is muted, the severity tag uses the severity color and the
    message uses the primary text color. Rows never elide; the size hint
    covers the full line so long messages scroll horizontally.
    """

    PADDING = 4

    def sizeHint(self, option, index):  # type: ignore[override]
        base = super().sizeHint(option, index)
        text = index.data(Qt.ItemDataRole.DisplayRole)
        if text is None:
            return base
        fm = option.fontMetrics
        width = fm.horizontalAdvance(str(text)) + self.PADDING * 3
        return QSize(width, base.height())

    def paint(self, painter, option, index):  # type: ignore[override]
        entry = index.data(LogListModel.EntryRole)
        if not isinstance(entry, LogEntry):
            super().paint(painter, option, index)
            return

        segments = (
            (format_timestamp(entry) + ' ', StyleManager.timestamp_color()),
            (entry.severity.tag + ' ', StyleManager.severity_color(entry.severity)),
            (entry.message, StyleManager.message_color()),
        )

        painter.save()
        try:
            if option.state & QStyle.StateFlag.State_Selected:
                painter.fillRect(option.rect, option.palette.highlight())

            painter.setFont(option.font)
            fm = option.fontMetrics
            text_rect = option.rect.adjusted(self.PADDING, 0, -self.PADDING, 0)
            baseline = text_rect.top() + (text_rect.height() + fm.ascent() - fm.descent()) // 2

            x = text_rect.left()
            for text, color in segments:
                painter.setPen(color)
                painter.drawText(x, baseline, text)
                x += fm.horizontalAdvance(text)
        finally:
            painter.restore()


__all__ = ['LogListModel', 'LogLineDelegate']

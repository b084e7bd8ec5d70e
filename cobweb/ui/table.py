from PyQt5.QtCore import Qt, QAbstractTableModel, QModelIndex

from ..sequence import SequenceSnapshot


class IterateTableModel(QAbstractTableModel):

    COLUMNS = ("n", "X_n", "Z_n")

    def __init__(self, parent=None):
        super().__init__(parent)
        self._rows = SequenceSnapshot((), (), ())
        self._zColumnVisible = False

    def setSnapshot(self, snapshot: SequenceSnapshot):
        self.beginResetModel()
        self._rows = snapshot
        self.endResetModel()

    def setZColumnVisible(self, visible: bool):
        if visible == self._zColumnVisible:
            return
        self.beginResetModel()
        self._zColumnVisible = visible
        self.endResetModel()

    def isZColumnVisible(self) -> bool:
        return self._zColumnVisible

    def rowCount(self, parent=QModelIndex()):
        return 0 if parent.isValid() else len(self._rows.nValues)

    def columnCount(self, parent=QModelIndex()):
        if parent.isValid():
            return 0
        return len(self.COLUMNS) if self._zColumnVisible else len(self.COLUMNS) - 1

    def headerData(self, section, orientation, role=Qt.DisplayRole):
        if role == Qt.DisplayRole and orientation == Qt.Horizontal and 0 <= section < self.columnCount():
            return self.COLUMNS[section]
        return None

    def value(self, row: int, column: int):
        if column == 0:
            return self._rows.nValues[row]
        if column == 1:
            return self._rows.xValues[row]
        if column == 2 and self._zColumnVisible:
            return self._rows.zValues[row]
        return None

    def data(self, index, role=Qt.DisplayRole):
        if not index.isValid() or role not in (Qt.DisplayRole, Qt.TextAlignmentRole):
            return None
        if role == Qt.TextAlignmentRole:
            return int(Qt.AlignRight | Qt.AlignVCenter)
        v = self.value(index.row(), index.column())
        return "" if v is None else str(v)

    def rowsAsText(self, rows) -> str:
        # tab-separated, pastes into spreadsheets
        lines = []
        for row in sorted(set(rows)):
            cells = (self.value(row, column) for column in range(self.columnCount()))
            lines.append("\t".join("" if v is None else str(v) for v in cells))
        return "\n".join(lines)

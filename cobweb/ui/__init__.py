from PyQt5.QtWidgets import QVBoxLayout, QHBoxLayout, QLayout


def vStack(*args, cm=(0, 0, 0, 0), sp=0):
    l = QVBoxLayout()
    l.setContentsMargins(*cm)
    l.setSpacing(sp)
    for a in args:
        if isinstance(a, QLayout):
            l.addLayout(a)
        else:
            l.addWidget(a)
    return l


def hStack(*args, cm=(0, 0, 0, 0), sp=0):
    l = QHBoxLayout()
    l.setContentsMargins(*cm)
    l.setSpacing(sp)
    for a in args:
        if isinstance(a, QLayout):
            l.addLayout(a)
        else:
            l.addWidget(a)
    return l


# panel imports vStack and hStack from this package
from .plot_widget import PlotWidget
from .table import IterateTableModel
from .panel import CobwebPanel

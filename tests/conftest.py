"""Shared pytest setup: offscreen Qt and one QApplication for the whole session.

Widget tests need a QApplication, and Qt allows only one application object
per process, so it is created here before any test module can create a
plain QCoreApplication.
"""

import os
import sys

os.environ.setdefault('QT_QPA_PLATFORM', 'offscreen')
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from PyQt6.QtWidgets import QApplication

_app = QApplication.instance() or QApplication([])

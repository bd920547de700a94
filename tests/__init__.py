"""
Test package for the flashcard study app.

The modules under test live at the repository root, so the parent
directory is put on sys.path to make them importable.
"""

import sys
import os

parent_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if parent_dir not in sys.path:
    sys.path.insert(0, parent_dir)

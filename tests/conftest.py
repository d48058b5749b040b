import os
import sys

# Modules live at the repository root (flat layout).
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

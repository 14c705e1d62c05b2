"""
Pedometer - step detection and run archive for walking sessions
"""

__version__ = "0.1.0"

from pedometer.archive import RunArchive
from pedometer.config import Settings
from pedometer.session import SessionController

__all__ = ["RunArchive", "Settings", "SessionController"]

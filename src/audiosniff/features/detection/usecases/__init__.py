"""
Summary: Public surface for detection use cases.
Why: Provide a stable import path for the service layer and tests.
"""

from .format_detector import AudioSource, FormatDetector
from .magic_sniffer import MIN_SNIFF_BYTES, MagicByteSniffer

__all__ = ["AudioSource", "FormatDetector", "MagicByteSniffer", "MIN_SNIFF_BYTES"]

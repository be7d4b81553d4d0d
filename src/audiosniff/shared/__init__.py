# Where: audiosniff.shared.__init__
# What: Provide a concise import surface for shared enums, ports and errors.
# Why: Encourage consistent reuse of shared types across features.

from .audio_format import AudioProperties, FormatKind
from .events import InspectionEvent
from .introspection import AudioTrackInfo, IntrospectionReport, Introspector

__all__ = [
    "AudioProperties",
    "AudioTrackInfo",
    "FormatKind",
    "InspectionEvent",
    "IntrospectionReport",
    "Introspector",
]

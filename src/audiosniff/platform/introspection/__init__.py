"""Summary: Concrete Introspector adapters.
Why: Keep the third-party prober behind the shared Introspector port."""

from .mutagen_introspector import MutagenIntrospector

__all__ = ["MutagenIntrospector"]

"""Sample ingestion: backend-native encodings to canonical units."""

from ndpbridge.ingestion.normalize import normalize, normalize_poll, normalize_push

__all__ = ["normalize", "normalize_poll", "normalize_push"]

"""doc-searcher — Search-service façade over pluggable search engines."""

__version__ = "0.1.0"

"""Message history -> flattened spreadsheet exporter.

Flow responses embedded in message records are expanded into a stable column
set (one indicator column per multi-select option) and written as one row per
record.
"""

__version__ = "0.1.0"

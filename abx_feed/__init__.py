"""
ABX feed client.

Downloads the full record stream from an ABX feed server, backfills
missing sequence numbers over individual re-send connections, and exports
the dataset in ascending sequence order.
"""

__version__ = "1.0.0"

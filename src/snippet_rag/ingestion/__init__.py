"""
Ingestion — markdown chunking, tagging, and embedding.

This package turns raw snippet documents into ordered, tagged chunks,
vectorizes each document's chunks in one provider request, and hands
the result to a chunk store.
"""

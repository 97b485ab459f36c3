"""
Read Pass
=========
Drives the model from source nodes.

1. Input: `SourceNode`, the typed attribute accessor handed over by the markup layer.
2. Readers: one function per 2D primitive, registered by tag.
3. Session: cursor, definition registry and deferred attachment of one import.
"""

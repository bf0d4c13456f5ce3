"""
CSOM ProcessQuery protocol helpers.

- encoder: builds the XML action batch
- decoder: parses the JSON array response and surfaces ErrorInfo
- normalize: unwraps /Date()/ and /Guid()/ values, strips identity fields
"""

from spo.csom.decoder import decode
from spo.csom.encoder import ActionBatch, Parameter

__all__ = ["ActionBatch", "Parameter", "decode"]

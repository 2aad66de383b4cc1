"""
Verifying client seam.

LogTransport is implemented by whatever talks to the remote log;
VerifiedLogClient verifies everything it returns and maintains the
trust anchor store.
"""
from .transport import LogTransport
from .client import VerifiedLogClient

__all__ = [
    "LogTransport",
    "VerifiedLogClient",
]

"""
credvault — API credential vault for agent runtimes.

Attach externally issued service credentials to an agent runtime, resolve
operator input against a catalog of known services, and manage the remote
key store through an async, error-tolerant lifecycle.
"""

__version__ = "0.1.0"

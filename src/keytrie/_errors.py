"""Keytrie error types."""


class KeytrieError(Exception):
    """Base error for all keytrie failures."""


class KeytrieVersionError(KeytrieError):
    """Snapshot format version mismatch."""


class KeytrieChecksumError(KeytrieError):
    """Snapshot checksum verification failed."""


class KeytrieInputError(KeytrieError):
    """Empty keyword list or scan text given to the runner."""


class KeytrieRunError(KeytrieError):
    """A run was started while another one is still in progress."""

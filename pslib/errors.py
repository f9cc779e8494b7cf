"""Exception hierarchy shared by every pslib module.

Numeric inputs never raise (they are clamped).  Exceptions here signal
programmer errors -- a document built without a sink, a page added after
close -- or invalid configuration files.  Sink I/O errors are not wrapped;
they propagate unchanged as ``OSError``.
"""


class PSLibError(Exception):
    """Base class for all pslib errors."""

    pass


class DocumentConfigError(PSLibError):
    """Raised when a document is built from an incomplete configuration."""

    pass


class DocumentStateError(PSLibError):
    """Raised on an operation the document or page state forbids."""

    pass


class ConfigError(PSLibError):
    """Raised when settings validation fails."""

    pass


class SceneError(PSLibError):
    """Raised when a scene file cannot be loaded or validated."""

    pass

"""Cross-cutting utilities (lowest dependency layer).

This package provides shared primitives for:
    - Atomic I/O and YAML loading (fs)
    - Unified logging (logging_config)
    - Scene file validation (validators)
    - Offline markup checking (markup_vm)

No module in utils/ imports from document, ir or scene.

Convenience imports:
    from pslib.utils import fs, validators
    from pslib.utils.logging_config import setup_logging
"""

from . import fs
from . import logging_config
from . import markup_vm
from . import validators

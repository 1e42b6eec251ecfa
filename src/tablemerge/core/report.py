from __future__ import annotations

import logging
import warnings
from typing import List, Optional, Type

from tablemerge.core.types import MergeWarning

logger = logging.getLogger(__name__)

WarningSink = List[MergeWarning]


def emit(
    category: Type[Warning],
    message: str,
    sink: Optional[WarningSink] = None,
) -> None:
    """Report a recoverable condition to the warnings machinery, the log and *sink*."""
    logger.info("%s: %s", category.__name__, message)
    if sink is not None:
        sink.append(MergeWarning(category=category, message=message))
    warnings.warn(message, category, stacklevel=2)

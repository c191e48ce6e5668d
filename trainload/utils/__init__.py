"""
trainload Utils Package
"""
from .core import (
    LoggingConfig,
    setup_trainload_logging,
    get_logger,
)

__all__ = [
    'LoggingConfig',
    'setup_trainload_logging',
    'get_logger',
]

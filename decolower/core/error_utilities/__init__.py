"""
Error handling utilities for decolower.

Batch operations (many files, many independent declarations) continue
past individual failures and report them together.
"""
from .batch import BatchOperationError, ErrorCollection, batch_process

__all__ = ['BatchOperationError', 'ErrorCollection', 'batch_process']

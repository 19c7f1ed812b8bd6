"""
Batch error handling utilities for decolower.

This module provides utilities for managing errors during batch operations,
allowing operations to continue when some items fail while collecting the
errors for later reporting.
"""
import logging
import time
from typing import Any, Callable, Dict, List, Optional, Tuple

from decolower.core.error_handling import DecoLowerError

logger = logging.getLogger('decolower')

RECOVERABLE_ERRORS = (DecoLowerError, OSError, UnicodeDecodeError)


class ErrorCollection:
    """
    Container for collecting multiple errors during batch operations.
    """

    def __init__(self):
        self.errors: List[Dict[str, Any]] = []
        self.logger = logging.getLogger('decolower.error_collection')

    def add(self, error: Exception, item: Optional[Any] = None, operation: Optional[str] = None) -> None:
        """
        Add an error to the collection.

        Args:
            error: The exception to add
            item: The item being processed when the error occurred
            operation: The operation being performed when the error occurred
        """
        self.errors.append({
            'error': error,
            'item': item,
            'operation': operation,
            'timestamp': time.time()
        })
        self.logger.error(
            f"Error {len(self.errors)} collected for batch operation: "
            f"{type(error).__name__}: {str(error)}"
        )

    def is_empty(self) -> bool:
        return len(self.errors) == 0

    def get_exceptions(self) -> List[Exception]:
        return [entry['error'] for entry in self.errors]

    def items(self) -> List[Any]:
        return [entry['item'] for entry in self.errors]

    def format(self) -> str:
        """
        Format all errors as a string.

        Returns:
            A formatted string with all errors
        """
        if not self.errors:
            return "No errors collected"

        lines = [f"Collected {len(self.errors)} errors:"]
        for i, entry in enumerate(self.errors, 1):
            lines.append(f"Error {i}:")
            if entry['operation']:
                lines.append(f"  Operation: {entry['operation']}")
            if entry['item'] is not None:
                item_str = repr(entry['item'])
                if len(item_str) >= 100:
                    item_str = f"{item_str[:97]}..."
                lines.append(f"  Item: {item_str}")
            lines.append(f"  {type(entry['error']).__name__}: {entry['error']}")
        return '\n'.join(lines)

    def raise_combined_error(self) -> None:
        """
        Raise a BatchOperationError aggregating all collected errors.

        Raises:
            BatchOperationError: If there are any errors in the collection
        """
        if self.errors:
            raise BatchOperationError(self)

    def __bool__(self) -> bool:
        return bool(self.errors)

    def __len__(self) -> int:
        return len(self.errors)

    def __iter__(self):
        return iter(self.errors)


class BatchOperationError(DecoLowerError):
    """
    Exception raised when a batch operation encounters one or more errors.
    """

    def __init__(self, error_collection: ErrorCollection):
        self.error_collection = error_collection
        super().__init__(f"Batch operation failed with {len(error_collection)} errors")

    def __str__(self) -> str:
        return self.error_collection.format()


def batch_process(
    items: List[Any],
    process_func: Callable[[Any], Any],
    operation_name: Optional[str] = None,
    raise_on_error: bool = False,
) -> Tuple[List[Any], ErrorCollection]:
    """
    Process a batch of independent items, collecting errors for failures.

    Only decolower errors and I/O errors are collected; anything else is a
    programming error and propagates.

    Args:
        items: The items to process
        process_func: Function to process each item
        operation_name: Name of the operation for logging and error messages
        raise_on_error: Whether to raise once all items were attempted

    Returns:
        A tuple of (successful_results, error_collection)

    Raises:
        BatchOperationError: If raise_on_error is True and any errors occur
    """
    errors = ErrorCollection()
    results = []
    for i, item in enumerate(items):
        try:
            results.append(process_func(item))
            logger.debug(f"Successfully processed item {i + 1}/{len(items)}")
        except RECOVERABLE_ERRORS as e:
            errors.add(e, item, operation_name)
    if raise_on_error:
        errors.raise_combined_error()
    return results, errors

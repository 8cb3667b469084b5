"""
Utility functions for the PDF Chat Backend.
"""

import os
import time
import functools
from typing import Any, Dict, Optional
from datetime import datetime
import logging

from .config import settings

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


class ServiceError(Exception):
    """Raised when a collaborating service (store, index, model) fails."""


def return_success(data: Any, success: bool, message: str, status_code: int) -> Dict[str, Any]:
    """Build the success response envelope."""
    return {
        "data": data,
        "success": success,
        "message": message,
        "statusCode": status_code,
    }


def return_error(message: str, status_code: int) -> Dict[str, Any]:
    """Build the error response envelope."""
    return {
        "data": None,
        "success": False,
        "message": message,
        "statusCode": status_code,
    }


def format_timestamp() -> str:
    """Get current timestamp in ISO format."""
    return datetime.utcnow().isoformat()


def measure_time(func):
    """Decorator to measure function execution time."""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        start_time = time.time()
        result = func(*args, **kwargs)
        end_time = time.time()
        execution_time = end_time - start_time
        
        logger.info(f"{func.__name__} executed in {execution_time:.2f} seconds")
        return result
    return wrapper


def validate_file_type(filename: Optional[str]) -> bool:
    """Validate if the file type is allowed."""
    if not filename or '.' not in filename:
        return False
    
    file_extension = filename.lower().rsplit('.', 1)[-1]
    return file_extension in settings.allowed_file_types


def validate_file_size(file_size: int) -> bool:
    """Validate if the file size is within limits."""
    max_size_bytes = settings.max_file_size_mb * 1024 * 1024
    return file_size <= max_size_bytes


def sanitize_filename(filename: str) -> str:
    """Sanitize filename for safe storage."""
    # Remove or replace dangerous characters
    dangerous_chars = ['/', '\\', ':', '*', '?', '"', '<', '>', '|']
    sanitized = filename
    
    for char in dangerous_chars:
        sanitized = sanitized.replace(char, '_')
    
    return sanitized


def build_storage_filename(original_filename: str, timestamp_ms: Optional[int] = None) -> str:
    """
    Build the on-disk name of an upload: ``<base>-<epoch millis><ext>``.

    The timestamp keeps two uploads of the same file from overwriting each other.
    """
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    
    base_name, extension = os.path.splitext(os.path.basename(original_filename or ""))
    return f"{sanitize_filename(base_name)}-{timestamp_ms}{extension}"


def log_processing_info(operation: str, details: Dict[str, Any]) -> None:
    """Log processing information."""
    logger.info(f"{operation}: {details}")


def handle_processing_error(operation: str, error: Exception, context: Dict[str, Any] = None) -> Dict[str, Any]:
    """Handle and log processing errors."""
    error_info = {
        'operation': operation,
        'error_type': type(error).__name__,
        'error_message': str(error),
        'timestamp': format_timestamp()
    }
    
    if context:
        error_info.update(context)
    
    logger.error(f"Processing error: {error_info}")
    return error_info

"""
================================================================================
Test Data Providers
================================================================================

Spreadsheet-backed login data and random HR fixtures.

================================================================================
"""

from .excel_data_reader import DataFileError, ExcelDataReader, LoginRow, UserRow
from .test_data_generator import TestDataGenerator

__all__ = [
    "DataFileError",
    "ExcelDataReader",
    "LoginRow",
    "TestDataGenerator",
    "UserRow",
]

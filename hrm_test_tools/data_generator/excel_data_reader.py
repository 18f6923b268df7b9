"""
================================================================================
Excel Test Data Reader
================================================================================

Spreadsheet-backed data provider for data-driven UI tests.

Workbook layout (sheet ``Login Data``, first row is a header):

    | testType     | username | password | expectedResult | firstName | lastName | ...
    | ValidLogin   | Admin    | admin123 | Success        |
    | InvalidLogin | admin    | wrong    | Invalid credentials |

Numeric cells are returned as ``int``, empty cells as ``""``. When the
workbook or sheet is missing, the login providers fall back to built-in
tables so the data-driven tests still run.

================================================================================
"""

import zipfile
from pathlib import Path
from typing import Any, Dict, List, NamedTuple, Optional, Sequence, Tuple, Union

from loguru import logger
from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException


DEFAULT_TEST_DATA_FILE = Path("test-data") / "TestData.xlsx"
LOGIN_DATA_SHEET = "Login Data"

VALID_LOGIN = "ValidLogin"
INVALID_LOGIN = "InvalidLogin"
USER_DATA = "UserData"

MAP_HEADERS: Tuple[str, ...] = (
    "testType", "username", "password", "expectedResult", "firstName",
    "lastName", "email", "phone", "department", "jobTitle",
)


class DataFileError(Exception):
    """Raised when the workbook or a sheet cannot be read."""
    pass


class LoginRow(NamedTuple):
    username: Any
    password: Any
    expected_result: Any


class UserRow(NamedTuple):
    first_name: Any
    last_name: Any
    username: Any
    password: Any
    confirm_password: Any


FALLBACK_VALID_LOGINS: Tuple[LoginRow, ...] = (
    LoginRow("Admin", "admin123", "Success"),
    LoginRow("admin", "admin123", "Success"),
    LoginRow("ADMIN", "admin123", "Success"),
)

FALLBACK_INVALID_LOGINS: Tuple[LoginRow, ...] = (
    LoginRow("invaliduser", "invalidpass", "Invalid credentials"),
    LoginRow("", "admin123", "Required"),
    LoginRow("Admin", "", "Required"),
    LoginRow("", "", "Required"),
    LoginRow("Admin", "wrongpassword", "Invalid credentials"),
    LoginRow("testuser", "testpass", "Invalid credentials"),
    LoginRow("user123", "pass456", "Invalid credentials"),
    LoginRow("admin", "wrongpass", "Invalid credentials"),
    LoginRow("ADMIN", "wrongpass", "Invalid credentials"),
)

FALLBACK_USERS: Tuple[UserRow, ...] = (
    UserRow("John", "Doe", "Admin", "admin123", "admin123"),
    UserRow("Jane", "Smith", "janesmith", "password456", "password456"),
    UserRow("Bob", "Johnson", "bobjohnson", "password789", "password789"),
)


def cell_value(cell: Any) -> Any:
    """
    Normalize one openpyxl cell.

    Returns:
        ``str`` text, ``int`` for numbers, ``bool`` for booleans, the formula
        text for formulas, ``""`` for empty or missing cells
    """
    if cell is None:
        return ""
    value = cell.value
    if value is None:
        return ""
    if getattr(cell, "data_type", None) == "f":
        return str(value).lstrip("=")
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return int(value)
    if isinstance(value, str):
        return value
    return str(value)


def _cell_at(row: Sequence[Any], index: int) -> Any:
    return cell_value(row[index]) if index < len(row) else ""


class ExcelDataReader:
    """
    Reads test rows from an ``.xlsx`` workbook.

    Usage:
        reader = ExcelDataReader("test-data/TestData.xlsx")
        for username, password, expected in reader.get_valid_login_data():
            ...
    """

    def __init__(self, file_path: Union[str, Path, None] = None):
        self.file_path = Path(file_path) if file_path else DEFAULT_TEST_DATA_FILE

    def _read_sheet(self, sheet_name: str) -> List[Tuple[Any, ...]]:
        """Data rows (header skipped) as tuples of openpyxl cells."""
        if not self.file_path.exists():
            raise DataFileError(f"Test data file not found: {self.file_path}")
        try:
            workbook = load_workbook(self.file_path, read_only=True)
        except (InvalidFileException, zipfile.BadZipFile, OSError) as e:
            raise DataFileError(f"Cannot open test data file {self.file_path}: {e}") from e

        try:
            if sheet_name not in workbook.sheetnames:
                raise DataFileError(f"Sheet '{sheet_name}' not found in Excel file")
            return [tuple(row) for row in workbook[sheet_name].iter_rows(min_row=2)]
        finally:
            workbook.close()

    def read_rows(self, sheet_name: str) -> List[List[Any]]:
        """
        Every data row of a sheet with normalized cell values.

        Raises:
            DataFileError: Missing file or sheet
        """
        rows = []
        for row in self._read_sheet(sheet_name):
            values = [cell_value(cell) for cell in row]
            while values and values[-1] == "":
                values.pop()
            if values:
                rows.append(values)
        return rows

    def read_rows_by_type(self, sheet_name: str, test_type: str) -> List[Tuple[Any, ...]]:
        """
        Rows whose first column equals ``test_type``.

        Login types yield ``LoginRow``; anything else yields ``UserRow``.

        Raises:
            DataFileError: Missing file or sheet
        """
        rows: List[Tuple[Any, ...]] = []
        for row in self._read_sheet(sheet_name):
            if not row or str(_cell_at(row, 0)) != test_type:
                continue
            if test_type in (VALID_LOGIN, INVALID_LOGIN):
                rows.append(LoginRow(_cell_at(row, 1), _cell_at(row, 2), _cell_at(row, 3)))
            else:
                password = _cell_at(row, 2)
                rows.append(UserRow(_cell_at(row, 4), _cell_at(row, 5), _cell_at(row, 1), password, password))
        logger.debug(f"Read {len(rows)} '{test_type}' rows from {self.file_path}")
        return rows

    def _rows_or_fallback(self, test_type: str, fallback: Sequence[Tuple[Any, ...]]) -> List[Tuple[Any, ...]]:
        try:
            return self.read_rows_by_type(LOGIN_DATA_SHEET, test_type)
        except DataFileError as e:
            logger.warning(f"{e}. Using built-in {test_type} data")
            return list(fallback)

    def get_valid_login_data(self) -> List[LoginRow]:
        """Valid login rows, or the built-in table if the workbook is unavailable."""
        return self._rows_or_fallback(VALID_LOGIN, FALLBACK_VALID_LOGINS)

    def get_invalid_login_data(self) -> List[LoginRow]:
        """Invalid login rows, or the built-in table if the workbook is unavailable."""
        return self._rows_or_fallback(INVALID_LOGIN, FALLBACK_INVALID_LOGINS)

    def get_user_data(self) -> List[UserRow]:
        """User creation rows, or the built-in table if the workbook is unavailable."""
        return self._rows_or_fallback(USER_DATA, FALLBACK_USERS)

    def get_test_data_as_maps(self, sheet_name: str = LOGIN_DATA_SHEET) -> List[Dict[str, Any]]:
        """
        Rows as dictionaries keyed by the standard column names.

        Returns:
            One dict per row; empty list if the workbook cannot be read
        """
        try:
            rows = self.read_rows(sheet_name)
        except DataFileError as e:
            logger.warning(f"Error reading Excel data: {e}")
            return []
        return [dict(zip(MAP_HEADERS, row)) for row in rows]

    def get_test_data_by_key(self, sheet_name: str, key: str) -> Dict[str, Any]:
        """First row whose ``testType`` column equals ``key``, or an empty dict."""
        for data in self.get_test_data_as_maps(sheet_name):
            if data.get("testType") == key:
                return data
        return {}


__all__ = [
    "DataFileError",
    "ExcelDataReader",
    "FALLBACK_INVALID_LOGINS",
    "FALLBACK_USERS",
    "FALLBACK_VALID_LOGINS",
    "INVALID_LOGIN",
    "LOGIN_DATA_SHEET",
    "LoginRow",
    "UserRow",
    "VALID_LOGIN",
    "cell_value",
]

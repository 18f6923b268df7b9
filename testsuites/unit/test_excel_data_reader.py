import pytest
from openpyxl import Workbook

from hrm_test_tools.data_generator import DataFileError, ExcelDataReader, LoginRow, UserRow
from hrm_test_tools.data_generator.excel_data_reader import (
    FALLBACK_INVALID_LOGINS,
    FALLBACK_VALID_LOGINS,
    LOGIN_DATA_SHEET,
)


HEADER = ["testType", "username", "password", "expectedResult", "firstName", "lastName"]


@pytest.fixture
def workbook_path(tmp_path):
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = LOGIN_DATA_SHEET
    sheet.append(HEADER)
    sheet.append(["ValidLogin", "Admin", "admin123", "Success"])
    sheet.append(["InvalidLogin", None, "admin123", "Required"])
    sheet.append(["InvalidLogin", 12345, 678.0, "Invalid credentials"])
    sheet.append(["UserData", "jdoe", "secret1", None, "John", "Doe"])
    sheet.append(["InvalidLogin", "=CONCAT(\"ad\",\"min\")", "wrong", "Invalid credentials"])
    workbook.create_sheet("Empty")
    path = tmp_path / "TestData.xlsx"
    workbook.save(path)
    return path


def test_rows_are_filtered_by_test_type(workbook_path):
    reader = ExcelDataReader(workbook_path)

    assert reader.get_valid_login_data() == [LoginRow("Admin", "admin123", "Success")]
    invalid = reader.get_invalid_login_data()
    assert len(invalid) == 3
    assert invalid[0] == LoginRow("", "admin123", "Required")


def test_numeric_cells_become_integers(workbook_path):
    row = ExcelDataReader(workbook_path).get_invalid_login_data()[1]

    assert row.username == 12345
    assert row.password == 678
    assert isinstance(row.password, int)


def test_formula_cells_yield_formula_text(workbook_path):
    row = ExcelDataReader(workbook_path).get_invalid_login_data()[2]

    assert row.username == "CONCAT(\"ad\",\"min\")"


def test_user_rows(workbook_path):
    users = ExcelDataReader(workbook_path).get_user_data()

    assert users == [UserRow("John", "Doe", "jdoe", "secret1", "secret1")]


def test_rows_as_maps(workbook_path):
    reader = ExcelDataReader(workbook_path)

    maps = reader.get_test_data_as_maps()
    assert maps[0] == {"testType": "ValidLogin", "username": "Admin", "password": "admin123", "expectedResult": "Success"}

    assert reader.get_test_data_by_key(LOGIN_DATA_SHEET, "UserData")["firstName"] == "John"
    assert reader.get_test_data_by_key(LOGIN_DATA_SHEET, "Nothing") == {}


def test_missing_sheet_raises_for_raw_reads(workbook_path):
    reader = ExcelDataReader(workbook_path)

    with pytest.raises(DataFileError):
        reader.read_rows("Payroll")
    assert reader.read_rows("Empty") == []


def test_missing_file_falls_back_to_built_in_tables(tmp_path):
    reader = ExcelDataReader(tmp_path / "absent.xlsx")

    assert reader.get_valid_login_data() == list(FALLBACK_VALID_LOGINS)
    assert len(reader.get_invalid_login_data()) == 9
    assert reader.get_invalid_login_data() == list(FALLBACK_INVALID_LOGINS)
    assert len(reader.get_user_data()) == 3
    assert reader.get_test_data_as_maps() == []


def test_corrupt_file_falls_back(tmp_path):
    path = tmp_path / "TestData.xlsx"
    path.write_bytes(b"not a zip archive")

    assert len(ExcelDataReader(path).get_valid_login_data()) == 3

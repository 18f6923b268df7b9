"""
================================================================================
HRM Test Tools
================================================================================

Support utilities for the OrangeHRM UI automation suite.

Modules:
    - common: Logging setup and shared helpers
    - report_tools: Allure helpers and pluggable report sinks
    - data_generator: Excel-backed login data and random HR fixtures

Example:
    from hrm_test_tools.common import init_logger
    from hrm_test_tools.data_generator import ExcelDataReader, TestDataGenerator

    init_logger(level="DEBUG")
    rows = ExcelDataReader("test-data/TestData.xlsx").get_valid_login_data()
    profile = TestDataGenerator(seed=7).generate_user_profile()

================================================================================
"""

__version__ = "1.0.0"

__all__ = [
    "common",
    "report_tools",
    "data_generator",
]

"""
OrangeHRM test suites.

Importable so the runner and the unit tests can reach the UI framework
(``testsuites.ui_testing.framework``) and the page objects directly.
"""

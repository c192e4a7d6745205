"""HR payroll package.

Organized by feature modules (employees, attendance, payroll, timesheets, reports, ...)
with a thin Flask controller layer on top of service/repository layers. The
computation core (hours, overtime, overrides, enrichment, batch generation and period
reports) has no Flask or database dependency of its own.
"""

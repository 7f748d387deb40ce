"""Kajian Attendance package.

Feature modules (sessions, participants, attendance, provisioning, ...) sit
behind a thin Flask controller layer, with services depending on repository
interfaces and a generic data-access contract.
"""

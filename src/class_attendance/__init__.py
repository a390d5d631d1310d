"""Class Attendance package.

Feature modules (sessions, enrollments, attendance, reports) follow a
service/repository split with a thin Flask controller layer on top.
The attendance engine itself has no Flask dependency.
"""

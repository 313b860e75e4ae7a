"""Class Attendance package.

This package is organized by feature modules (students, timetable, attendance,
users, reports) with a thin Flask JSON controller layer over service and
repository layers.
"""

"""Shift Attendance package.

Organized by feature modules (schedules, shifts, attendance, geofence, sweep, ...)
with a thin Flask controller layer over service/repository layers.
"""

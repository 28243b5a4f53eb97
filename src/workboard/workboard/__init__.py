"""Workboard package.

Weekly work schedule board: tasks and vacations of one user laid out on a
Monday-Sunday grid, with drag-to-reschedule and an audit history per task.
Organized by feature modules with a thin Flask controller layer on top of
service/repository layers.
"""

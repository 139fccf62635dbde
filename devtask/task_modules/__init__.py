"""Shared modules for devtask: types, errors, I/O boundary, commands."""

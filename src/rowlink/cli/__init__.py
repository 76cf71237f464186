"""rowlink command line -- ``rowlink`` entry point.

Usage::

    rowlink tables -d app.db
    rowlink rows Users --filter age:>:35 --order name
    rowlink related Users 1 tasks
"""

"""Membership rules: tier benefits, booking eligibility, member pricing and tokens.

Everything here is pure. Services load data from the database and pass plain
values in; nothing in this package performs I/O or holds mutable state.
"""

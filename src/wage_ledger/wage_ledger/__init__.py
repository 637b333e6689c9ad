"""Wage Ledger package.

Organized by feature modules (access, profiles, ledger, reports) with a thin
Flask JSON controller layer over service/repository layers.
"""

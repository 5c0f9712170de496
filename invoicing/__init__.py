"""
Invoicing document engine.
Money arithmetic, tax and discount resolution, totals and the invoice lifecycle.
"""

__version__ = "1.0.0"

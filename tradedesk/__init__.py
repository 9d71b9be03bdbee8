"""Trading desk state: order books, open orders, order form, positions, scanner formulas, templates and strategy portfolios."""

__version__ = "0.1.0"
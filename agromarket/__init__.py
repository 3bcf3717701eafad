"""
AgroMarket - API du marketplace entre producteurs et consommateurs.
"""

__version__ = "1.0.0"

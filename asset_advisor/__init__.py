"""
Asset Advisor
Ranks assets against an investor profile and explains the rankings.
"""

__version__ = "0.1.0"

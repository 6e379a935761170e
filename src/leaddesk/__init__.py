"""
Leaddesk: lead management backend (CSV imports, categories, lead tracking, analytics)
"""
__version__ = "1.0.0"

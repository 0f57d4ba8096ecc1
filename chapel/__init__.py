"""
Chapel: typed Supabase client for the church management app.
"""

__version__ = "0.1.0"

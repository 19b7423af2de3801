"""
UI Module - Discord UI Components

Available components:
- MatchPaginationView: Previous/Next navigation for the /tft match browser
"""

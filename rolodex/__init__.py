"""
Rolodex: imports contacts, tags what changed with an LLM, and stores it all in SQLite.
"""

# conftest.py
# Keeps the repository root importable so tests can use `src.` and `main` imports

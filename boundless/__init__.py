# boundless/__init__.py
"""
Boundless API: hackathon drafting, publishing, submissions and judging.

Usage (development):
    python -m uvicorn boundless.main:app --reload
"""

"""
Services Package

Business services backing the Todo API routes.
"""

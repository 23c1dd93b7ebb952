"""
Routes Package

HTTP endpoints of the Todo API.
"""

"""
Core Django project package for the RC Acervo media catalog.
"""

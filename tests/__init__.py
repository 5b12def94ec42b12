"""
Test suite for the svgreport package.
"""

"""
Release Tracker - upcoming game catalog, wishlists and release notifications
"""

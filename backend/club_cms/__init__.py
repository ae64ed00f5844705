"""
Club CMS Backend
================
Section content and image uploads for the club website.
"""

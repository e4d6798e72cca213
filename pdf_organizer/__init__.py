"""
PDF Organizer
=============

Content-aware filing for unsorted PDF archives.

Features:
- First-page OCR with Tesseract
- Keyword categories with any-keyword or all-keyword matching
- Collision-safe moves into category folders

Unclassified documents are never touched.
"""

__version__ = "0.1.0"
__author__ = "Dharshan"

# projpick Panels Package
"""
GTK panels. Importing this package requires Ignis and PyGObject.
"""

"""Command-line entrypoints.

    cistercian-generate   render numerals 1..9999 into the cache
    cistercian-merge      compose the demonstration comparison sheets
"""

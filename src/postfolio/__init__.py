"""postfolio: static blog and portfolio site generator.

Markdown posts go in, a tree of static HTML pages comes out.
"""

__version__ = "0.1.0"

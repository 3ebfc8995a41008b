r"""
Layout engine for hierarchically nested tables: flatten a tree of tables
(whose columns may hold nested tables) into a display grid with borders,
separator rows and gutter cells that express the nesting depth.
"""

__version__ = '0.3.0'

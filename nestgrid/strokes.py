#
# Border strokes, and the small value types used to reason about them.
#

import enum


class StrokeStyle(enum.Enum):
    outer = 'o'
    inner = 'i'
    none = '_'

    @property
    def code(self):
        return self.value


class Position(enum.Enum):
    top = 'top'
    bottom = 'bottom'
    left = 'left'
    right = 'right'


class CellType(enum.Enum):
    content = 'c'
    dummyContent = '_'
    rowSpace = 'rs'
    columnSpace = 'cs'

    @property
    def code(self):
        return self.value


class Stroke:
    r"""
    A border segment on one edge of a grid cell.  `table_id` is the schema
    table that drew it and `depth` is the nesting depth of the row that drew
    it.
    """
    def __init__(self, style, table_id, depth):
        super().__init__()
        self.style = style
        self.table_id = table_id
        self.depth = depth

    def __eq__(self, other):
        if not isinstance(other, Stroke):
            return NotImplemented
        return (self.style, self.table_id, self.depth) \
            == (other.style, other.table_id, other.depth)

    def __hash__(self):
        return hash((self.style, self.table_id, self.depth))

    def to_string(self):
        return f'{self.style.name}:{self.table_id}:{self.depth}'

    def __repr__(self):
        return f'Stroke({self.to_string()})'

    @staticmethod
    def list_to_string(strokes):
        return '[' + ','.join(s.to_string() for s in strokes) + ']'


_side_order = (Position.top, Position.right, Position.bottom, Position.left,)


class StrokeStyles:
    r"""
    The resolved stroke style of each side of a rendered cell.  Unset sides
    are `StrokeStyle.none`.
    """
    def __init__(self, **kwargs):
        super().__init__()
        self.styles = { p: StrokeStyle.none for p in _side_order }
        for k, v in kwargs.items():
            self.set_stroke_style(Position[k], v)

    def set_stroke_style(self, position, style):
        self.styles[position] = style

    def get_stroke_style(self, position):
        return self.styles[position]

    @property
    def encoding(self):
        r"""
        Four characters giving the top, right, bottom and left styles (same
        order as the CSS shorthand properties), e.g. ``'o_i_'``.
        """
        return ''.join(self.styles[p].code for p in _side_order)

    def __repr__(self):
        return f"{self.__class__.__name__}({self.encoding!r})"


class MinMaxDepth:
    r"""
    The range of stroke depths found on one side of one or more cells.  If no
    strokes were found, both `min_depth` and `max_depth` are `None`.
    """
    def __init__(self, min_depth=None, max_depth=None):
        super().__init__()
        self.min_depth = min_depth
        self.max_depth = max_depth

    def is_empty(self):
        return self.min_depth is None

    @property
    def delta(self):
        if self.is_empty():
            return 0
        return self.max_depth - self.min_depth

    @classmethod
    def from_depths(cls, depths):
        depths = list(depths)
        if not depths:
            return cls()
        return cls(min(depths), max(depths))

    @classmethod
    def combine(cls, min_max_depths):
        non_empty = [ mm for mm in min_max_depths if not mm.is_empty() ]
        if not non_empty:
            return cls()
        return cls(
            min(mm.min_depth for mm in non_empty),
            max(mm.max_depth for mm in non_empty),
        )

    def __eq__(self, other):
        if not isinstance(other, MinMaxDepth):
            return NotImplemented
        return (self.min_depth, self.max_depth) == (other.min_depth, other.max_depth)

    def __repr__(self):
        return f'MinMaxDepth({self.min_depth},{self.max_depth})'

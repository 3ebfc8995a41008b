#
# Layout of the data rows: which grid rows ("levels") and which grid columns
# each row and each node of the worksheet occupies.
#

import logging
logger = logging.getLogger(__name__)

from .schema import SchemaError
from .indextable import IndexTable
from .strokes import Stroke, StrokeStyle, Position


def make_layout_rows(data_table, pagers, *, depth, container_node):
    r"""
    Create the layout rows for the rows of `data_table` that its pager
    decides to show.
    """
    shown_rows = pagers.get_pager(data_table).rows
    num_shown = len(shown_rows)
    return [
        LayoutRow(
            data_row,
            data_table=data_table,
            depth=depth,
            container_node=container_node,
            is_first=(k == 0),
            is_last=(k == num_shown - 1),
            pagers=pagers,
        )
        for k, data_row in enumerate(shown_rows)
    ]


class LayoutRow:
    r"""
    Layout information for one data row.

    The row spans the grid rows `start_level` to `last_level` (inclusive) and
    the grid columns of the table it belongs to, i.e., the interval of its
    container column (the whole grid for rows of the root table).
    """
    def __init__(self, data_row, *, data_table, depth, container_node,
                 is_first, is_last, pagers):
        super().__init__()
        self.data_row = data_row
        self.data_table = data_table
        self.depth = depth
        self.container_node = container_node
        self.is_first = is_first
        self.is_last = is_last

        self.start_level = None
        self.last_level = None

        columns = data_table.schema_table.sorted_columns()
        self.nodes = [
            LayoutNode(
                data_row.find_node(column.column_id),
                column,
                self,
                is_first=(k == 0),
                is_last=(k == len(columns) - 1),
                pagers=pagers,
            )
            for k, column in enumerate(columns)
        ]

    _fields = ('row_id', 'depth', 'start_level', 'last_level', 'is_first', 'is_last',)

    def __repr__(self):
        return (
            f"{self.__class__.__name__}("
            + ", ".join(f"{k}={getattr(self, k)!r}" for k in self._fields)
            + ")"
        )

    @property
    def row_id(self):
        return self.data_row.row_id

    @property
    def fill_table_id(self):
        r"""
        The schema table whose styling fills the cells of this row.
        """
        return self.data_table.schema_table.table_id

    @property
    def container_column_id(self):
        if self.container_node is None:
            return None
        return self.container_node.column.column_id

    @property
    def num_levels(self):
        return self.last_level - self.start_level + 1

    def set_levels(self, start_level):
        r"""
        Place this row (and everything under it) starting at grid row
        `start_level`.  Returns the last grid row occupied by this row.
        """
        self.start_level = start_level
        height = 1
        for node in self.nodes:
            node.set_levels(start_level)
            height = max(height, node.num_levels)
        self.last_level = start_level + height - 1
        return self.last_level


class LayoutNode:
    r"""
    Layout information for the cell of one row under one schema column.  A
    leaf node occupies the single grid row `start_level`.  A node with a
    nested table stacks the nested rows downwards starting at its own
    `start_level`.
    """
    def __init__(self, data_node, column, row, *, is_first, is_last, pagers):
        super().__init__()
        self.data_node = data_node
        self.column = column
        self.row = row
        self.is_first = is_first
        self.is_last = is_last

        self.start_level = None
        self.last_level = None
        self.num_levels = 0

        self.nested_data_table = None
        self.nested_rows = []
        if column.has_nested_table() and data_node is not None:
            self.nested_data_table = data_node.find_nested_table()
            if self.nested_data_table is not None:
                self.nested_rows = make_layout_rows(
                    self.nested_data_table,
                    pagers,
                    depth=row.depth + 1,
                    container_node=self,
                )

    _fields = ('column_id', 'depth', 'start_level', 'last_level', 'is_first', 'is_last',)

    def __repr__(self):
        return (
            f"{self.__class__.__name__}("
            + ", ".join(f"{k}={getattr(self, k)!r}" for k in self._fields)
            + ")"
        )

    @property
    def column_id(self):
        return self.column.column_id

    @property
    def depth(self):
        return self.row.depth

    @property
    def container_table_id(self):
        return self.column.table_id

    def has_nested_table(self):
        return self.column.has_nested_table()

    def set_levels(self, start_level):
        self.start_level = start_level
        level = start_level
        for nested_row in self.nested_rows:
            level = nested_row.set_levels(level) + 1
        # a leaf, or an empty nested table, still takes up one grid row
        self.num_levels = max(1, level - start_level)
        self.last_level = start_level + self.num_levels - 1
        return self.last_level


# ------------------------------------------------------------------------------


class VerticalSeparator:
    r"""
    The nested table edges that fall on the left and on the right edge of
    one grid column.  Each list is ordered from the outermost table to the
    innermost one, and always ends with the stroke of the leaf column itself.
    """
    def __init__(self, left_strokes, right_strokes):
        super().__init__()
        self.left_strokes = left_strokes
        self.right_strokes = right_strokes

    def get_strokes(self, position):
        if position == Position.left:
            return self.left_strokes
        if position == Position.right:
            return self.right_strokes
        raise ValueError(f"Vertical separators only exist on the left or right, "
                         f"not {position!r}")

    def __repr__(self):
        return (f"{self.__class__.__name__}(left={Stroke.list_to_string(self.left_strokes)}, "
                f"right={Stroke.list_to_string(self.right_strokes)})")


class VerticalSeparators:
    def __init__(self, index_table):
        super().__init__()
        self.separators = {}
        for j in range(index_table.num_columns):
            path = index_table.get_column_path(j)
            left_strokes = []
            right_strokes = []
            for depth, column in enumerate(path):
                lr = index_table.get(column.column_id)
                stroke = Stroke(StrokeStyle.outer, column.table_id, depth)
                if lr.left == j:
                    left_strokes.append(stroke)
                if lr.right == j:
                    right_strokes.append(stroke)
            self.separators[path[-1].column_id] = \
                VerticalSeparator(left_strokes, right_strokes)

    def get(self, column_id):
        return self.separators[column_id]


# ------------------------------------------------------------------------------


class TableData:
    r"""
    The layout of a whole worksheet: its index table, its vertical separators
    and the leveled layout rows of its root table.
    """
    def __init__(self, root_data_table, pagers):
        super().__init__()
        self.root_data_table = root_data_table
        self.pagers = pagers

        self.index_table = IndexTable(root_data_table.schema_table)
        self.vertical_separators = VerticalSeparators(self.index_table)

        self.rows = make_layout_rows(root_data_table, pagers,
                                     depth=0, container_node=None)
        if self.rows and self.num_columns == 0:
            raise SchemaError(
                f"Table ‘{root_data_table.schema_table.table_name}’ has rows but "
                f"no columns"
            )
        level = 0
        for row in self.rows:
            level = row.set_levels(level) + 1
        self.num_levels = level

        logger.debug("Table layout has %d levels and %d columns",
                     self.num_levels, self.num_columns)

    @property
    def num_columns(self):
        return self.index_table.num_columns

    def iter_rows(self):
        r"""
        Iterate over all layout rows, parents before their nested rows.
        """
        def _iter(rows):
            for row in rows:
                yield row
                for node in row.nodes:
                    yield from _iter(node.nested_rows)
        yield from _iter(self.rows)

    def iter_nodes(self):
        for row in self.iter_rows():
            yield from row.nodes

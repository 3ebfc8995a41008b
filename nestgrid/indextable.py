import logging
logger = logging.getLogger(__name__)

from .schema import SchemaError


class LeftRight:
    def __init__(self, left, right):
        super().__init__()
        # !! both ends are inclusive !!
        self.left = left
        self.right = right

    _fields = ('left', 'right',)

    @property
    def width(self):
        return self.right - self.left + 1

    def contains(self, j):
        return self.left <= j <= self.right

    def __eq__(self, other):
        if not isinstance(other, LeftRight):
            return NotImplemented
        return (self.left, self.right) == (other.left, other.right)

    def __hash__(self):
        return hash((self.left, self.right))

    def __repr__(self):
        return f'[{self.left},{self.right}]'


class IndexTable:
    r"""
    Assigns to each column of a schema the interval of grid columns it spans.

    Leaf columns span a single grid column.  A column with a nested table
    spans the union of the intervals of its nested columns.  Columns are laid
    out from left to right in the order of their tables.

    The schema is validated on construction; a `SchemaError` is raised if it
    is malformed.
    """

    def __init__(self, root_table):
        super().__init__()

        root_table.schema.validate()

        self.root_table = root_table
        self.intervals = {}
        self._leaf_paths = []

        self.num_columns = self._assign(root_table, 0, [])
        self._table_interval = LeftRight(0, self.num_columns - 1)

        self._check_intervals()

        logger.debug("Index table has %d grid columns: %r",
                     self.num_columns, self.intervals)

    def _assign(self, table, next_col, path):
        for column in table.sorted_columns():
            if column.has_nested_table():
                start = next_col
                next_col = self._assign(column.nested_table, next_col, path + [column])
                self.intervals[column.column_id] = LeftRight(start, next_col - 1)
            else:
                self.intervals[column.column_id] = LeftRight(next_col, next_col)
                self._leaf_paths.append( path + [column] )
                next_col += 1
        return next_col

    def _check_intervals(self):
        for j, path in enumerate(self._leaf_paths):
            leaf_lr = self.intervals[path[-1].column_id]
            if leaf_lr.left != j or leaf_lr.right != j:
                raise SchemaError(
                    f"Leaf column ‘{path[-1].name}’ was assigned {leaf_lr!r}, "
                    f"expected [{j},{j}]"
                )
        for column_id, lr in self.intervals.items():
            column = self.root_table.schema.get_column(column_id)
            if not column.has_nested_table():
                continue
            child_lrs = [ self.intervals[c.column_id]
                          for c in column.nested_table.sorted_columns() ]
            if ( lr.left != min(c.left for c in child_lrs)
                 or lr.right != max(c.right for c in child_lrs) ):
                raise SchemaError(
                    f"Interval {lr!r} of column ‘{column.name}’ does not match "
                    f"its nested columns {child_lrs!r}"
                )

    # ---

    def get(self, column_id):
        return self.intervals[column_id]

    def table_interval(self):
        return self._table_interval

    def get_container_interval(self, column_id):
        r"""
        Interval covered by the rows of the table held by `column_id`.  Use
        `column_id=None` for the root table.
        """
        if column_id is None:
            return self._table_interval
        return self.intervals[column_id]

    def get_column_id(self, j):
        r"""
        Return the id of the leaf column displayed at grid column `j`.
        """
        return self._leaf_paths[j][-1].column_id

    def get_column_path(self, j):
        r"""
        Return the list of columns, from the root table down to the leaf,
        whose intervals contain grid column `j`.
        """
        return list(self._leaf_paths[j])

    def get_column_depth(self, j):
        r"""
        Number of nesting levels whose interval contains grid column `j`.  A
        column of the root table has column depth 1.
        """
        return len(self._leaf_paths[j])

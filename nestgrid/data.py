#
# Data rows of a worksheet: tables of rows, each row holding one node per
# schema column.  Nodes hold either a scalar value or a nested table.
#

import itertools

import logging
logger = logging.getLogger(__name__)

from .schema import SchemaError



class DataTable:
    r"""
    An instance of a schema table holding rows of data.  The root table of a
    worksheet is a `DataTable`, and so is every nested table under a node.
    """

    def __init__(self, schema_table, *, id_source, table_id=None):
        super().__init__()
        self.schema_table = schema_table
        self._id_source = id_source
        self.table_id = table_id if table_id is not None else id_source.new_id('DT')
        self.rows = []

    def __repr__(self):
        return (f"{self.__class__.__name__}(table_id={self.table_id!r}, "
                f"schema_table={self.schema_table.table_id!r}, "
                f"rows={len(self.rows)})")

    def add_row(self):
        row = DataRow(self, id_source=self._id_source)
        self.rows.append(row)
        return row

    @property
    def num_rows(self):
        return len(self.rows)


class DataRow:
    def __init__(self, table, *, id_source):
        super().__init__()
        self.table = table
        self._id_source = id_source
        self.row_id = id_source.new_id('R')
        self._nodes = {}

    def __repr__(self):
        return f"{self.__class__.__name__}(row_id={self.row_id!r})"

    def get_node(self, column_id):
        r"""
        Return the node of this row for the given schema column, creating an
        empty node if needed.
        """
        node = self._nodes.get(column_id, None)
        if node is None:
            column = self.table.schema_table.get_column(column_id)
            if column is None:
                raise SchemaError(
                    f"Column ‘{column_id}’ is not part of table "
                    f"‘{self.table.schema_table.table_name}’"
                )
            node = DataNode(self, column, id_source=self._id_source)
            self._nodes[column_id] = node
        return node

    def find_node(self, column_id):
        r"""
        Return the node for the given column if it was created, or `None`.
        """
        return self._nodes.get(column_id, None)

    def get_node_from_column_name(self, name):
        column = self.table.schema_table.get_column_from_name(name)
        if column is None:
            raise SchemaError(
                f"No column named ‘{name}’ in table "
                f"‘{self.table.schema_table.table_name}’"
            )
        return self.get_node(column.column_id)

    def iter_nodes(self):
        for column in self.table.schema_table.sorted_columns():
            yield self.get_node(column.column_id)


class DataNode:
    def __init__(self, row, column, *, id_source):
        super().__init__()
        self.row = row
        self.column = column
        self._id_source = id_source
        self.node_id = id_source.new_id('N')
        self.value = None
        self.status = ''
        self._nested_table = None

    def __repr__(self):
        return (f"{self.__class__.__name__}(node_id={self.node_id!r}, "
                f"column={self.column.name!r}, value={self.value!r})")

    def has_nested_table(self):
        return self.column.has_nested_table()

    @property
    def nested_table(self):
        r"""
        The nested data table under this node, created on first access.  Only
        valid for nodes of columns that carry a nested schema table.
        """
        if not self.column.has_nested_table():
            return None
        if self._nested_table is None:
            self._nested_table = DataTable(self.column.nested_table,
                                           id_source=self._id_source)
        return self._nested_table

    def find_nested_table(self):
        r"""
        Like `nested_table`, but returns `None` instead of creating an empty
        nested table.
        """
        return self._nested_table

    def set_value(self, value, status=None):
        r"""
        Set the scalar value of this node.  If the column holds a nested table,
        the value is stored in a new nested row under that table's orphan
        column.
        """
        if self.column.has_nested_table():
            orphan = self.column.nested_table.add_automatically_generated_column()
            row = self.nested_table.add_row()
            row.get_node(orphan.column_id).set_value(value, status=status)
            return
        self.value = value
        if status is not None:
            self.status = status


class IdSource:
    r"""
    Generates identifiers that are unique within one worksheet.
    """
    def __init__(self):
        super().__init__()
        self._counter = itertools.count(1)

    def new_id(self, prefix):
        return f'{prefix}{next(self._counter)}'


# ------------------------------------------------------------------------------


class TablePager:
    r"""
    Decides which rows of a data table are displayed.  Only the first
    `desired_size` rows are shown; `desired_size=None` shows all rows.
    """
    def __init__(self, data_table, desired_size=None):
        super().__init__()
        if desired_size is not None and desired_size < 1:
            raise ValueError(f"Invalid pager size: {desired_size!r}")
        self.data_table = data_table
        self.desired_size = desired_size

    @property
    def table_id(self):
        return self.data_table.table_id

    @property
    def rows(self):
        if self.desired_size is None:
            return list(self.data_table.rows)
        return self.data_table.rows[:self.desired_size]

    @property
    def num_rows_total(self):
        return self.data_table.num_rows

    @property
    def num_rows_shown(self):
        return len(self.rows)

    def is_all_rows_shown(self):
        return self.num_rows_shown == self.num_rows_total

    def __repr__(self):
        return (f"{self.__class__.__name__}(table_id={self.table_id!r}, "
                f"shown={self.num_rows_shown}/{self.num_rows_total})")


class TablePagers:
    r"""
    Provides the pager of each data table for one render pass.

    - `max_rows_top`: number of rows to show for the root table (`None` for all
      rows).

    - `max_rows_nested`: number of rows to show for nested tables.

    - `sizes`: dictionary of data table id → size, overriding the above.
    """
    def __init__(self, root_data_table, *, max_rows_top=None, max_rows_nested=None,
                 sizes=None):
        super().__init__()
        self.root_data_table = root_data_table
        self.max_rows_top = max_rows_top
        self.max_rows_nested = max_rows_nested
        self.sizes = dict(sizes) if sizes else {}
        self._pagers = {}

    def get_pager(self, data_table):
        pager = self._pagers.get(data_table.table_id, None)
        if pager is not None:
            return pager
        if data_table.table_id in self.sizes:
            size = self.sizes[data_table.table_id]
        elif data_table is self.root_data_table:
            size = self.max_rows_top
        else:
            size = self.max_rows_nested
        pager = TablePager(data_table, size)
        self._pagers[data_table.table_id] = pager
        return pager

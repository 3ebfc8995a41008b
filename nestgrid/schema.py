#
# The schema tree -- tables made of columns, which may hold nested tables.
#

import logging
logger = logging.getLogger(__name__)


ORPHAN_COLUMN_NAME = 'orphan'
r"""
Name of the column that collects scalar values when a column has both values
and a nested table.
"""


class SchemaError(ValueError):
    r"""
    Raised when a schema (or worksheet data) violates a structural invariant,
    e.g., duplicate column identifiers or an empty nested table.
    """
    pass


class Schema:
    r"""
    Owns all the tables and columns of a worksheet.

    Tables and columns refer to each other through their identifiers; the
    schema is the single place that maps identifiers to objects.  A table is
    owned by the column that contains it (or by the schema itself for the root
    table); the link from a table back to its containing column is only a
    lookup.
    """

    def __init__(self, root_table_name='root'):
        super().__init__()
        self.tables = {}
        self.columns = {}
        self._id_counter = 0
        self.root_table = self._create_table(root_table_name, parent_column_id=None)

    def _new_id(self, prefix):
        self._id_counter += 1
        return f'{prefix}{self._id_counter}'

    def _create_table(self, table_name, parent_column_id):
        table = Table(self, self._new_id('HT'), table_name,
                      parent_column_id=parent_column_id)
        self.tables[table.table_id] = table
        return table

    def _create_column(self, table_id, name, automatically_added, column_id=None):
        if column_id is None:
            column_id = self._new_id('HN')
            while column_id in self.columns:
                column_id = self._new_id('HN')
        elif column_id in self.columns:
            raise SchemaError(f"Duplicate column id ‘{column_id}’")
        column = Column(self, column_id, name, table_id=table_id,
                        automatically_added=automatically_added)
        self.columns[column_id] = column
        return column

    def get_table(self, table_id):
        return self.tables[table_id]

    def get_column(self, column_id):
        return self.columns[column_id]

    def validate(self):
        r"""
        Check the structural invariants of the schema.  Raises `SchemaError` on
        the first violation found.
        """
        seen_column_ids = set()
        seen_table_ids = set()

        def _check_table(table):
            if table.table_id in seen_table_ids:
                raise SchemaError(
                    f"Table ‘{table.table_id}’ is reachable more than once"
                )
            seen_table_ids.add(table.table_id)
            if len(set(table.ordered_column_ids)) != len(table.ordered_column_ids):
                raise SchemaError(
                    f"Duplicate column ids in table ‘{table.table_name}’ "
                    f"({table.table_id})"
                )
            for column in table.sorted_columns():
                if column.column_id in seen_column_ids:
                    raise SchemaError(f"Duplicate column id ‘{column.column_id}’")
                seen_column_ids.add(column.column_id)
                if column.table_id != table.table_id:
                    raise SchemaError(
                        f"Column ‘{column.name}’ ({column.column_id}) does not "
                        f"belong to table ‘{table.table_id}’"
                    )
                if column.has_nested_table():
                    nested = column.nested_table
                    if nested.parent_column_id != column.column_id:
                        raise SchemaError(
                            f"Nested table ‘{nested.table_id}’ does not point back "
                            f"to its column ‘{column.column_id}’"
                        )
                    if not nested.ordered_column_ids:
                        raise SchemaError(
                            f"Nested table of column ‘{column.name}’ "
                            f"({column.column_id}) is empty"
                        )
                    _check_table(nested)

        _check_table(self.root_table)
        logger.debug("Schema validated, %d tables and %d columns",
                     len(seen_table_ids), len(seen_column_ids))

    def __repr__(self):
        return f"{self.__class__.__name__}(root_table={self.root_table!r})"


class Column:
    r"""
    A column of a schema table.  A column is either a leaf column that holds
    scalar values, or holds a nested table.
    """
    def __init__(self, schema, column_id, name, *, table_id, automatically_added=False):
        super().__init__()
        self.schema = schema
        self.column_id = column_id
        self.name = name
        self.table_id = table_id
        self.automatically_added = automatically_added
        self.nested_table_id = None

    _fields = ('column_id', 'name', 'table_id', 'automatically_added', 'nested_table_id',)

    def __repr__(self):
        return (
            f"{self.__class__.__name__}("
            + ", ".join(f"{k}={getattr(self, k)!r}" for k in self._fields)
            + ")"
        )

    @property
    def table(self):
        return self.schema.get_table(self.table_id)

    @property
    def nested_table(self):
        if self.nested_table_id is None:
            return None
        return self.schema.get_table(self.nested_table_id)

    @property
    def depth(self):
        return self.table.depth

    def has_nested_table(self):
        return self.nested_table_id is not None

    def add_nested_table(self, table_name=None):
        if self.nested_table_id is not None:
            raise SchemaError(f"Column ‘{self.name}’ already has a nested table")
        if table_name is None:
            table_name = self.name
        table = self.schema._create_table(table_name, parent_column_id=self.column_id)
        self.nested_table_id = table.table_id
        return table


class Table:
    r"""
    An ordered collection of columns.  The insertion order of the columns
    defines their left-to-right display order.
    """
    def __init__(self, schema, table_id, table_name, *, parent_column_id=None):
        super().__init__()
        self.schema = schema
        self.table_id = table_id
        self.table_name = table_name
        self.parent_column_id = parent_column_id
        self.ordered_column_ids = []

    def __repr__(self):
        return (
            f"{self.__class__.__name__}(table_id={self.table_id!r}, "
            f"table_name={self.table_name!r}, columns={self.sorted_columns()!r})"
        )

    @property
    def parent_column(self):
        r"""
        The column that contains this table, or `None` for the root table.
        """
        if self.parent_column_id is None:
            return None
        return self.schema.get_column(self.parent_column_id)

    @property
    def depth(self):
        depth = 0
        column = self.parent_column
        while column is not None:
            depth += 1
            column = column.table.parent_column
        return depth

    def contains(self, column):
        return column.column_id in self.ordered_column_ids

    def get_column(self, column_id):
        if column_id not in self.ordered_column_ids:
            return None
        return self.schema.get_column(column_id)

    def get_column_from_name(self, name):
        for column in self.sorted_columns():
            if column.name == name:
                return column
        return None

    def get_column_id_from_name(self, name):
        column = self.get_column_from_name(name)
        if column is None:
            return None
        return column.column_id

    def has_nested_tables(self):
        return any(c.has_nested_table() for c in self.sorted_columns())

    def sorted_columns(self):
        return [ self.schema.get_column(cid) for cid in self.ordered_column_ids ]

    def sorted_leaf_columns(self):
        leaves = []
        for column in self.sorted_columns():
            if column.has_nested_table():
                leaves.extend( column.nested_table.sorted_leaf_columns() )
            else:
                leaves.append( column )
        return leaves

    def all_paths(self):
        r"""
        Return the list of all paths from the columns of this table down to
        leaf columns, from left to right.  Each path is a list of columns.
        """
        paths = []
        for column in self.sorted_columns():
            if column.has_nested_table():
                for subpath in column.nested_table.all_paths():
                    paths.append( [column] + subpath )
            else:
                paths.append( [column] )
        return paths

    # ---

    def add_column(self, name, automatically_added=False, column_id=None):
        column = self.schema._create_column(
            self.table_id, name, automatically_added, column_id=column_id
        )
        self.ordered_column_ids.append(column.column_id)
        return column

    def add_column_after(self, after_column_id, name):
        r"""
        Insert a new column right after the column `after_column_id`.  If that
        column is not in this table, nested tables are searched.  Returns the
        new column, or `None` if `after_column_id` was not found.
        """
        if after_column_id not in self.ordered_column_ids:
            for column in self.sorted_columns():
                if column.has_nested_table():
                    new_column = column.nested_table.add_column_after(
                        after_column_id, name
                    )
                    if new_column is not None:
                        return new_column
            return None

        column = self.schema._create_column(self.table_id, name, False)
        index = self.ordered_column_ids.index(after_column_id)
        self.ordered_column_ids.insert(index + 1, column.column_id)
        return column

    def get_automatically_added_column_name(self, name):
        r"""
        Return a column name based on `name` which does not conflict with a
        column that was not added automatically.  The name is wrapped in
        underscores until there is no such conflict.
        """
        column = self.get_column_from_name(name)
        while column is not None and not column.automatically_added:
            name = f'_{name}_'
            column = self.get_column_from_name(name)
        return name

    def add_automatically_generated_column(self, name=ORPHAN_COLUMN_NAME):
        r"""
        Return a synthetic column for `name`, reusing an existing synthetic
        column with the computed name if there is one.
        """
        target_name = self.get_automatically_added_column_name(name)
        column = self.get_column_from_name(target_name)
        if column is not None:
            # only synthetic columns survive the renaming loop above
            return column
        logger.debug("Adding automatic column ‘%s’ to table ‘%s’",
                     target_name, self.table_name)
        return self.add_column(target_name, automatically_added=True)

    # ---

    def pretty_print(self, prefix=''):
        lines = [ f"{prefix}Headers/{self.table_id}: {self.table_name}" ]
        for column in self.sorted_columns():
            flag = ' (auto)' if column.automatically_added else ''
            lines.append(f"{prefix}  {column.column_id}: {column.name}{flag}")
            if column.has_nested_table():
                lines.append( column.nested_table.pretty_print(prefix + '    ') )
        return "\n".join(lines)

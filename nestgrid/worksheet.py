#
# A worksheet bundles a schema with its root data table, and knows how to load
# both from plain data (e.g. parsed YAML or JSON).
#

import logging
logger = logging.getLogger(__name__)

from .schema import Schema, SchemaError
from .data import DataTable, IdSource, TablePagers
from .tabledata import TableData
from .tablecells import TableCells
from .csstags import TableCssTags


class Worksheet:
    r"""
    A hierarchical worksheet: a schema and the rows of its root table.

    Each call to :py:meth:`render` performs an independent render pass, with its
    own pagers and its own cell matrix.
    """
    def __init__(self, worksheet_id=None, *, schema=None, root_table_name='root'):
        super().__init__()
        if schema is None:
            schema = Schema(root_table_name)
        self.schema = schema
        self.id_source = IdSource()
        self.data_table = DataTable(self.schema.root_table, id_source=self.id_source)
        if worksheet_id is None:
            worksheet_id = self.id_source.new_id('WS')
        self.worksheet_id = worksheet_id

    def __repr__(self):
        return (f"{self.__class__.__name__}(worksheet_id={self.worksheet_id!r}, "
                f"rows={self.data_table.num_rows})")

    def make_pagers(self, *, max_rows_top=None, max_rows_nested=None, sizes=None):
        return TablePagers(self.data_table, max_rows_top=max_rows_top,
                           max_rows_nested=max_rows_nested, sizes=sizes)

    def make_css_tags(self, *, palette=None, tags=None):
        return TableCssTags(self.schema, palette=palette, tags=tags)

    def make_table_data(self, pagers=None):
        if pagers is None:
            pagers = self.make_pagers()
        return TableData(self.data_table, pagers)

    def make_table_cells(self, pagers=None):
        return TableCells(self.make_table_data(pagers))

    def render(self, grid_renderer, *, pagers=None, css_tags=None):
        if css_tags is None:
            css_tags = self.make_css_tags()
        table_cells = self.make_table_cells(pagers)
        return grid_renderer.render_table_cells(
            table_cells, css_tags, worksheet_id=self.worksheet_id
        )


# ------------------------------------------------------------------------------


def _is_scalar_cell(value):
    r"""
    Whether `value` describes a single value (possibly given as a mapping with
    a '$value' key) rather than nested records.
    """
    if isinstance(value, dict):
        return '$value' in value
    return not isinstance(value, list)


def _get_scalar_cell(value):
    if isinstance(value, dict):
        unknown_keys = set(value) - {'$value', '$status'}
        if unknown_keys:
            raise SchemaError(
                f"Invalid keys in value cell: {', '.join(sorted(map(str, unknown_keys)))}"
            )
        status = value.get('$status', None)
        if status is not None:
            status = str(status)
        return value['$value'], status
    return value, None


def _get_records(value):
    if isinstance(value, dict):
        return [ value ]
    return value


def _load_schema_columns(table, columns_data):
    if not isinstance(columns_data, list):
        raise SchemaError(
            f"Expected a list of columns for table ‘{table.table_name}’, "
            f"got {columns_data!r}"
        )
    for column_data in columns_data:
        if not isinstance(column_data, dict):
            column_data = {'name': column_data}
        if 'name' not in column_data:
            raise SchemaError(f"Column without a name in table ‘{table.table_name}’")
        name = column_data['name']
        if table.get_column_from_name(name) is not None:
            raise SchemaError(
                f"Duplicate column name ‘{name}’ in table ‘{table.table_name}’"
            )
        column = table.add_column(name, column_id=column_data.get('id', None))
        nested_columns_data = column_data.get('columns', None)
        if nested_columns_data is not None:
            nested_table = column.add_nested_table(column_data.get('table_name', None))
            _load_schema_columns(nested_table, nested_columns_data)


def _infer_schema_columns(table, records):
    for record in records:
        if not isinstance(record, dict) or _is_scalar_cell(record):
            # loose values end up in the orphan column, see _fix_empty_tables()
            continue
        for name, value in record.items():
            column = table.get_column_from_name(name)
            if column is None:
                column = table.add_column(name)
            if _is_scalar_cell(value):
                continue
            if not column.has_nested_table():
                column.add_nested_table()
            _infer_schema_columns(column.nested_table, _get_records(value))


def _fix_empty_tables(table):
    for column in table.sorted_columns():
        if column.has_nested_table():
            nested_table = column.nested_table
            if not nested_table.ordered_column_ids:
                nested_table.add_automatically_generated_column()
            _fix_empty_tables(nested_table)


def _load_rows(data_table, records):
    if not isinstance(records, list):
        raise SchemaError(f"Expected a list of rows, got {records!r}")
    for record in records:
        _load_row(data_table, record)


def _load_row(data_table, record):
    if not isinstance(record, dict) or _is_scalar_cell(record):
        raise SchemaError(
            f"Rows of table ‘{data_table.schema_table.table_name}’ must be mappings "
            f"of column names to values, got {record!r}"
        )
    row = data_table.add_row()
    for name, value in record.items():
        node = row.get_node_from_column_name(name)
        if _is_scalar_cell(value):
            cell_value, status = _get_scalar_cell(value)
            node.set_value(cell_value, status=status)
            continue
        if not node.has_nested_table():
            raise SchemaError(
                f"Column ‘{name}’ of table ‘{data_table.schema_table.table_name}’ "
                f"does not hold a nested table"
            )
        nested_table = node.nested_table
        for nested_record in _get_records(value):
            if _is_scalar_cell(nested_record):
                cell_value, status = _get_scalar_cell(nested_record)
                node.set_value(cell_value, status=status)
            else:
                _load_row(nested_table, nested_record)


def load_worksheet_data(data):
    r"""
    Create a :py:class:`Worksheet` from plain data, typically the result of
    parsing a YAML or JSON document.  The data is a mapping with the keys:

    - `worksheet_id` (optional),

    - `schema` (optional): a list of columns, each a mapping with a `name`, an
      optional `id` and an optional list of nested `columns`.  If absent, the
      schema is inferred from the rows.

    - `rows`: a list of mappings of column names to values.  The value of a
      column holding a nested table is a list of such mappings (or a single
      mapping).  A value can be given with a status code as ``{'$value': value,
      '$status': status}``.

    Raises `SchemaError` if the data does not describe a valid worksheet.
    """
    if not isinstance(data, dict):
        raise SchemaError(f"Worksheet data must be a mapping, got {type(data).__name__}")

    worksheet = Worksheet(worksheet_id=data.get('worksheet_id', None))
    root_table = worksheet.schema.root_table

    rows_data = data.get('rows', None)
    if rows_data is None:
        rows_data = []

    schema_data = data.get('schema', None)
    if schema_data is not None:
        _load_schema_columns(root_table, schema_data)
    else:
        if not isinstance(rows_data, list):
            raise SchemaError(f"Expected a list of rows, got {rows_data!r}")
        _infer_schema_columns(root_table, rows_data)
        _fix_empty_tables(root_table)

    _load_rows(worksheet.data_table, rows_data)
    if worksheet.data_table.num_rows and not root_table.ordered_column_ids:
        raise SchemaError("Worksheet has rows but no columns")

    worksheet.schema.validate()

    logger.debug("Loaded worksheet ‘%s’ with %d rows; schema:\n%s",
                 worksheet.worksheet_id, worksheet.data_table.num_rows,
                 root_table.pretty_print())
    return worksheet

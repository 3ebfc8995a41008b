import logging
logger = logging.getLogger(__name__)

from ..strokes import CellType, Position, Stroke


class RenderCell:
    r"""
    One cell as it will be displayed.

    - `attr` is the structural attribute string
      ``"<cell type code>:<table id>:<style tag>:<stroke styles>"``, see
      :py:func:`encode_cell_attributes`;

    - `value` is the display value of the cell (an empty string if none);

    - `status` is the status code of the value (an empty string if none);

    - `pagers` is a list of dictionaries, one for each table pager whose last
      displayed row ends in this cell (a nested table and its containing row
      can both end in the same cell);

    - `debug` is a dictionary of additional debugging information (empty
      unless the renderer was asked to include debug information).
    """
    def __init__(self, attr, *, cell_type, table_id, stroke_styles,
                 value='', status='', pagers=None, debug=None):
        super().__init__()
        self.attr = attr
        self.cell_type = cell_type
        self.table_id = table_id
        self.stroke_styles = stroke_styles
        self.value = value
        self.status = status
        self.pagers = list(pagers) if pagers else []
        self.debug = debug if debug is not None else {}

    _fields = ('attr', 'value', 'status', 'pagers', 'debug',)

    def __repr__(self):
        return (
            f"{self.__class__.__name__}("
            + ", ".join(f"{k}={getattr(self, k)!r}" for k in self._fields)
            + ")"
        )

    def to_json_data(self):
        d = {
            'attr': self.attr,
            'value': self.value,
            'status': self.status,
        }
        if self.pagers:
            d['pagers'] = [ dict(p) for p in self.pagers ]
        d.update(self.debug)
        return d


class RenderRow:
    def __init__(self, row_type, cells, *, row):
        super().__init__()
        self.row_type = row_type
        self.cells = cells
        self.row = row

    def __repr__(self):
        return (f"{self.__class__.__name__}(row_type={self.row_type!r}, row={self.row!r}, "
                f"cells={self.cells!r})")

    def to_json_data(self):
        return {
            'rowType': self.row_type,
            'rowCells': [ c.to_json_data() for c in self.cells ],
        }


CONTENT_ROW = 'contentRow'
SEPARATOR_ROW = 'separatorRow'


def encode_cell_attributes(cell_type, table_id, css_tag, stroke_styles):
    return f"{cell_type.code}:{table_id}:{css_tag}:{stroke_styles.encoding}"


def _display_value(layout_node):
    if layout_node is None or layout_node.data_node is None:
        return '', ''
    data_node = layout_node.data_node
    value = '' if data_node.value is None else str(data_node.value)
    return value, data_node.status or ''


class GridRenderer:
    r"""
    Base class for grid renderers.

    The base class produces the sequence of :py:class:`RenderRow` objects for
    the cells of a worksheet.  Subclasses turn that sequence into an actual
    output format by reimplementing :py:meth:`render_table_cells`.
    """

    include_debug_info = False
    r"""
    Include debugging fields (grid coordinates, depths, raw stroke lists)
    in the render cells.
    """

    def __init__(self, config=None):
        super().__init__()
        # use config to set properties on the class object.
        if config is not None:
            for k, v in config.items():
                setattr(self, k, v)

    def generate_render_rows(self, table_cells, css_tags):
        r"""
        Return the list of all render rows, in display order: for each grid
        row, the separator rows above it, the content row, and the separator
        rows below it.
        """
        render_rows = []
        for index in range(table_cells.num_rows):
            top_min_max = table_cells.get_min_max_depth(index, Position.top)
            bottom_min_max = table_cells.get_min_max_depth(index, Position.bottom)

            for separator_depth in table_cells.get_separator_depths(top_min_max,
                                                                    Position.top):
                render_rows.append(self._make_separator_row(
                    table_cells, css_tags, index, separator_depth, Position.top,
                    top_min_max,
                ))

            render_rows.append(self._make_content_row(
                table_cells, css_tags, index, top_min_max, bottom_min_max
            ))

            for separator_depth in table_cells.get_separator_depths(bottom_min_max,
                                                                    Position.bottom):
                render_rows.append(self._make_separator_row(
                    table_cells, css_tags, index, separator_depth, Position.bottom,
                    bottom_min_max,
                ))

        logger.debug("Generated %d render rows for %d grid rows",
                     len(render_rows), table_cells.num_rows)
        return render_rows

    # ---

    def _make_separator_row(self, table_cells, css_tags, index, separator_depth,
                            position, min_max_depth):
        cells = []
        for j in range(table_cells.num_cols):
            cells.extend(self._make_gutter_cells(
                table_cells, css_tags, index, j, Position.left, position,
                separator_depth
            ))

            table_id, stroke_styles = table_cells.resolve_separator_cell(
                index, j, separator_depth, position
            )
            debug = None
            if self.include_debug_info:
                c = table_cells.get_cell(index, j)
                debug = {
                    '_row': index,
                    '_col': j,
                    '_depth': c.depth,
                    '_columnDepth': table_cells.get_column_depth(j),
                    '_horizontalSeparatorDepth': separator_depth,
                    '_leftStrokes': Stroke.list_to_string(c.get_stroke_list(Position.left)),
                    '_rightStrokes': Stroke.list_to_string(c.get_stroke_list(Position.right)),
                    '_topStrokes': Stroke.list_to_string(c.get_stroke_list(Position.top)),
                    '_bottomStrokes':
                        Stroke.list_to_string(c.get_stroke_list(Position.bottom)),
                    '_position': position.name,
                    '_minMaxDepth': repr(min_max_depth),
                }
            cells.append(RenderCell(
                encode_cell_attributes(CellType.rowSpace, table_id,
                                       css_tags.get_css_tag(table_id), stroke_styles),
                cell_type=CellType.rowSpace,
                table_id=table_id,
                stroke_styles=stroke_styles,
                debug=debug,
            ))

            cells.extend(self._make_gutter_cells(
                table_cells, css_tags, index, j, Position.right, position,
                separator_depth
            ))

        return RenderRow(SEPARATOR_ROW, cells, row=index)

    def _make_gutter_cells(self, table_cells, css_tags, index, j, left_right, top_bottom,
                           horizontal_separator_depth):
        cells = []
        for column_separator_stroke in table_cells.get_gutter_strokes(j, left_right):
            table_id, stroke_styles, corner_kind = table_cells.resolve_gutter_cell(
                index, j, left_right, top_bottom, horizontal_separator_depth,
                column_separator_stroke
            )
            debug = None
            if self.include_debug_info:
                c = table_cells.get_cell(index, j)
                debug = {
                    '_row': index,
                    '_col': j,
                    '_depth': c.depth,
                    '_columnDepth': table_cells.get_column_depth(j),
                    '_horizontalSeparatorDepth': horizontal_separator_depth,
                    '_columnSeparatorStroke': column_separator_stroke.to_string(),
                    '_corner': corner_kind.value,
                    '_LR': left_right.name,
                }
            cells.append(RenderCell(
                encode_cell_attributes(CellType.columnSpace, table_id,
                                       css_tags.get_css_tag(table_id), stroke_styles),
                cell_type=CellType.columnSpace,
                table_id=table_id,
                stroke_styles=stroke_styles,
                debug=debug,
            ))
        return cells

    def _make_content_row(self, table_cells, css_tags, index, top_min_max, bottom_min_max):
        cells = []
        for j in range(table_cells.num_cols):
            column_depth = table_cells.get_column_depth(j)

            # the gutter cells of content rows sit at the column depth, so they
            # only ever continue the vertical strokes of enclosing tables
            cells.extend(self._make_gutter_cells(
                table_cells, css_tags, index, j, Position.left, Position.top,
                column_depth
            ))

            c = table_cells.get_cell(index, j)
            table_id, stroke_styles = table_cells.resolve_content_cell(
                index, j, top_min_max, bottom_min_max
            )
            cell_type = CellType.content if c.node is not None else CellType.dummyContent
            value, status = _display_value(c.node)

            pagers = [
                {
                    'tableId': p.table_id,
                    'numRowsShown': p.num_rows_shown,
                    'numRowsTotal': p.num_rows_total,
                }
                for p in c.pagers
            ]

            debug = None
            if self.include_debug_info:
                debug = {
                    '_row': index,
                    '_col': j,
                    '_depth': c.depth,
                    '_columnDepth': column_depth,
                    '_topCombinedMinMaxDepth': repr(top_min_max),
                    '_leftStrokes': Stroke.list_to_string(c.get_stroke_list(Position.left)),
                    '_rightStrokes': Stroke.list_to_string(c.get_stroke_list(Position.right)),
                    '_triangles': [ t.to_string() for t in c.triangles ],
                }

            cells.append(RenderCell(
                encode_cell_attributes(cell_type, table_id,
                                       css_tags.get_css_tag(table_id), stroke_styles),
                cell_type=cell_type,
                table_id=table_id,
                stroke_styles=stroke_styles,
                value=value,
                status=status,
                pagers=pagers,
                debug=debug,
            ))

            cells.extend(self._make_gutter_cells(
                table_cells, css_tags, index, j, Position.right, Position.top,
                column_depth
            ))

        return RenderRow(CONTENT_ROW, cells, row=index)

    # --- to be reimplemented ---

    def render_table_cells(self, table_cells, css_tags, *, worksheet_id=None):
        raise RuntimeError("Subclasses need to reimplement this method")

#
# The cell matrix of a worksheet, and the resolution of the strokes that
# separate nested tables.
#

import bisect
import enum

import logging
logger = logging.getLogger(__name__)

from .strokes import Stroke, StrokeStyle, StrokeStyles, Position, MinMaxDepth


class TriangleLocation(enum.Enum):
    topLeft = 'topLeft'
    topRight = 'topRight'
    bottomLeft = 'bottomLeft'
    bottomRight = 'bottomRight'


class Triangle:
    r"""
    Marks the corner of a row: which row (of which table, at which depth)
    has its `location` corner in this cell.
    """
    def __init__(self, table_id, row_id, depth, location):
        super().__init__()
        self.table_id = table_id
        self.row_id = row_id
        self.depth = depth
        self.location = location

    def to_string(self):
        return f'{self.location.name}:{self.table_id}:{self.row_id}:{self.depth}'

    def __repr__(self):
        return f'Triangle({self.to_string()})'


class CornerKind(enum.Enum):
    corner = 'corner'
    leftRight = 'leftRight'
    topBottom = 'topBottom'


class GridCell:
    r"""
    One cell of the grid.  Each side holds the list of all the strokes that
    were drawn on it, sorted by depth.  Strokes are only ever added.
    """
    def __init__(self):
        super().__init__()
        self.fill_table_id = None
        self.depth = 0
        self.node = None
        self.pagers = []
        self.triangles = []
        self.strokes = { p: [] for p in Position }

    def __repr__(self):
        return (
            f"{self.__class__.__name__}(fill={self.fill_table_id!r}, depth={self.depth}, "
            + ", ".join(f"{p.name}={Stroke.list_to_string(s)}"
                        for p, s in self.strokes.items())
            + ")"
        )

    def add_stroke(self, position, stroke):
        stroke_list = self.strokes[position]
        # keep sorted by depth; equal depths stay in insertion order
        k = bisect.bisect_right([ s.depth for s in stroke_list ], stroke.depth)
        stroke_list.insert(k, stroke)

    def add_top_stroke(self, stroke):
        self.add_stroke(Position.top, stroke)

    def add_bottom_stroke(self, stroke):
        self.add_stroke(Position.bottom, stroke)

    def add_left_stroke(self, stroke):
        self.add_stroke(Position.left, stroke)

    def add_right_stroke(self, stroke):
        self.add_stroke(Position.right, stroke)

    def get_stroke_list(self, position):
        return self.strokes[position]

    def get_stroke(self, depth, position):
        r"""
        Return the deepest stroke on the given side whose depth does not exceed
        `depth`, or `None`.
        """
        result = None
        for stroke in self.strokes[position]:
            if stroke.depth > depth:
                break
            result = stroke
        return result

    def get_stroke_or_none(self, depth, position):
        r"""
        Return the stroke on the given side at exactly `depth`, or `None`.
        """
        for stroke in self.strokes[position]:
            if stroke.depth == depth:
                return stroke
        return None

    def get_min_max_stroke_depth(self, position):
        return MinMaxDepth.from_depths(s.depth for s in self.strokes[position])

    def add_triangle(self, triangle):
        self.triangles.append(triangle)

    def add_pager(self, pager):
        self.pagers.append(pager)


class TableCells:
    r"""
    The matrix of grid cells of a worksheet, populated from its
    :py:class:`~nestgrid.tabledata.TableData`.

    The cells are built once, when this object is constructed.  The
    `resolve_*()` methods then decide, without modifying anything, which
    strokes to draw in the cells emitted by a grid renderer.
    """

    def __init__(self, table_data):
        super().__init__()
        self.table_data = table_data
        self.index_table = table_data.index_table
        self.vertical_separators = table_data.vertical_separators
        self.pagers = table_data.pagers
        self.root_table_id = table_data.root_data_table.schema_table.table_id

        self.num_rows = table_data.num_levels
        self.num_cols = table_data.num_columns

        self.cells = [
            [ GridCell() for _ in range(self.num_cols) ]
            for _ in range(self.num_rows)
        ]

        for row in table_data.rows:
            self._populate_from_row(row)

    def get_cell(self, index, j):
        return self.cells[index][j]

    def get_column_depth(self, j):
        r"""
        Depth of the leaf column displayed at grid column `j` (0 for columns of
        the root table).
        """
        return self.index_table.get_column_depth(j) - 1

    # --- populating the cells ---

    def _populate_from_row(self, row):
        fill = row.fill_table_id
        depth = row.depth
        lr = self.index_table.get_container_interval(row.container_column_id)
        levels = range(row.start_level, row.last_level + 1)

        for i in levels:
            for j in range(lr.left, lr.right + 1):
                c = self.cells[i][j]
                c.fill_table_id = fill
                c.depth = depth

        # top strokes
        top_stroke = Stroke(
            StrokeStyle.outer if row.is_first else StrokeStyle.inner, fill, depth
        )
        for j in range(lr.left, lr.right + 1):
            self.cells[row.start_level][j].add_top_stroke(top_stroke)

        # bottom strokes.  Rows other than the last one get a none stroke, to
        # leave a space when there is a nested table.
        bottom_stroke = Stroke(
            StrokeStyle.outer if row.is_last else StrokeStyle.none, fill, depth
        )
        for j in range(lr.left, lr.right + 1):
            self.cells[row.last_level][j].add_bottom_stroke(bottom_stroke)

        # left/right outer strokes
        outer_stroke = Stroke(StrokeStyle.outer, fill, depth)
        for i in levels:
            self.cells[i][lr.left].add_left_stroke(outer_stroke)
            self.cells[i][lr.right].add_right_stroke(outer_stroke)

        # inner vertical separators, done here so that they span the height of
        # the whole row even when a node is shorter than the row
        inner_stroke = Stroke(StrokeStyle.inner, fill, depth)
        for node in row.nodes:
            if node.is_first:
                continue
            node_lr = self.index_table.get(node.column_id)
            for i in levels:
                self.cells[i][node_lr.left].add_left_stroke(inner_stroke)

        # corner triangles
        for level, j, location in (
                (row.start_level, lr.left, TriangleLocation.topLeft),
                (row.start_level, lr.right, TriangleLocation.topRight),
                (row.last_level, lr.left, TriangleLocation.bottomLeft),
                (row.last_level, lr.right, TriangleLocation.bottomRight),
        ):
            self.cells[level][j].add_triangle(
                Triangle(fill, row.row_id, depth, location)
            )

        # table pager
        if row.is_last:
            pager = self.pagers.get_pager(row.data_table)
            if not pager.is_all_rows_shown():
                self.cells[row.last_level][lr.left].add_pager(pager)

        for node in row.nodes:
            self._populate_from_node(node)

    def _populate_from_node(self, node):
        lr = self.index_table.get(node.column_id)

        # a none stroke on the right, to leave a space for nested tables
        if not node.is_last:
            none_stroke = Stroke(StrokeStyle.none, node.container_table_id, node.depth)
            for i in range(node.start_level, node.last_level + 1):
                self.cells[i][lr.right].add_right_stroke(none_stroke)

        if node.has_nested_table():
            for nested_row in node.nested_rows:
                self._populate_from_row(nested_row)
            return

        c = self.cells[node.start_level][lr.left]
        c.depth = node.depth
        c.node = node

    # --- separator rows ---

    def get_min_max_depth(self, index, position):
        r"""
        The range of depths of all the strokes on the `position` side of all
        the cells of grid row `index`.
        """
        return MinMaxDepth.combine(
            self.cells[index][j].get_min_max_stroke_depth(position)
            for j in range(self.num_cols)
        )

    def get_separator_depths(self, min_max_depth, position):
        r"""
        Return the depths of the separator rows to emit on the given side of a
        grid row, in display order.

        Top separators start at the minimum depth and go deeper; bottom
        separators start one above the maximum depth and go shallower.  The
        strokes at the maximum depth are drawn by the content row itself.
        """
        num_separator_rows = max(0, min_max_depth.delta)
        if position == Position.top:
            current_depth, increment = min_max_depth.min_depth, 1
        elif position == Position.bottom:
            current_depth, increment = (
                (min_max_depth.max_depth - 1) if num_separator_rows else None, -1
            )
        else:
            raise ValueError(f"Separator rows are only on top or bottom, not {position!r}")
        return [ current_depth + k * increment for k in range(num_separator_rows) ]

    def resolve_separator_cell(self, index, j, separator_depth, position):
        r"""
        Resolve the strokes of the cell of a separator row of depth
        `separator_depth` placed on the `position` side of grid row `index`,
        under grid column `j`.

        Returns a tuple `(table_id, stroke_styles)`.
        """
        c = self.cells[index][j]
        column_depth = self.get_column_depth(j)

        stroke_styles = StrokeStyles()

        stroke = c.get_stroke(separator_depth, position)
        table_id = c.fill_table_id if stroke is None else stroke.table_id
        if stroke is not None and stroke.depth == separator_depth:
            stroke_styles.set_stroke_style(position, stroke.style)

        if separator_depth >= column_depth:
            for side in (Position.left, Position.right):
                side_stroke = c.get_stroke(separator_depth, side)
                if side_stroke is not None:
                    stroke_styles.set_stroke_style(side, side_stroke.style)

        return table_id, stroke_styles

    # --- gutter cells (vertical separators) ---

    def get_gutter_strokes(self, j, left_right):
        r"""
        Return the column separator strokes that need a gutter cell on the
        `left_right` side of grid column `j`, in display order (from left to
        right).  The stroke of the column itself is never included.
        """
        separator = self.vertical_separators.get(self.index_table.get_column_id(j))
        strokes = separator.get_strokes(left_right)
        if left_right == Position.left:
            return list(strokes[:-1])
        return list(reversed(strokes[:-1]))

    def resolve_gutter_cell(self, index, j, left_right, top_bottom,
                            horizontal_separator_depth, column_separator_stroke):
        r"""
        Resolve the strokes of one gutter cell next to the cell `(index, j)`.
        Here `horizontal_separator_depth` is the depth of the separator row the
        gutter cell is part of (the column depth for content rows).

        Returns a tuple `(table_id, stroke_styles, corner_kind)`.
        """
        c = self.cells[index][j]
        separator_depth = column_separator_stroke.depth

        left_right_style = StrokeStyle.none
        top_bottom_style = StrokeStyle.none
        table_id = column_separator_stroke.table_id

        if separator_depth == horizontal_separator_depth:
            corner_kind = CornerKind.corner
            stroke_lr = c.get_stroke(horizontal_separator_depth, left_right)
            stroke_tb = c.get_stroke(separator_depth, top_bottom)
            if stroke_lr is not None:
                left_right_style = stroke_lr.style
                table_id = stroke_lr.table_id
            else:
                logger.error(
                    "Missing %s stroke at corner: row=%d, column=%d, "
                    "horizontal separator depth=%d, strokes=%s",
                    left_right.name, index, j, horizontal_separator_depth,
                    Stroke.list_to_string(c.get_stroke_list(left_right))
                )
            if stroke_tb is not None:
                top_bottom_style = stroke_tb.style
            else:
                logger.error(
                    "Missing %s stroke at corner: row=%d, column=%d, "
                    "horizontal separator depth=%d, strokes=%s",
                    top_bottom.name, index, j, horizontal_separator_depth,
                    Stroke.list_to_string(c.get_stroke_list(top_bottom))
                )

        elif separator_depth > horizontal_separator_depth:
            corner_kind = CornerKind.leftRight
            stroke = c.get_stroke_or_none(horizontal_separator_depth, top_bottom)
            if stroke is not None:
                top_bottom_style = stroke.style
                table_id = stroke.table_id
            else:
                logger.debug("No %s stroke left/right of corner: row=%d, column=%d, "
                             "horizontal separator depth=%d",
                             top_bottom.name, index, j, horizontal_separator_depth)

        else:
            corner_kind = CornerKind.topBottom
            stroke = c.get_stroke(separator_depth, left_right)
            if stroke is not None:
                left_right_style = stroke.style
                table_id = stroke.table_id
            else:
                # e.g. empty cells legitimately lack the stroke
                logger.debug("No %s stroke above/below corner: row=%d, column=%d, "
                             "horizontal separator depth=%d",
                             left_right.name, index, j, horizontal_separator_depth)

        stroke_styles = StrokeStyles()
        stroke_styles.set_stroke_style(left_right, left_right_style)
        stroke_styles.set_stroke_style(top_bottom, top_bottom_style)

        return table_id, stroke_styles, corner_kind

    # --- content cells ---

    def resolve_content_cell(self, index, j, top_min_max_depth, bottom_min_max_depth):
        r"""
        Resolve the strokes of the content cell `(index, j)`.

        A top or bottom stroke is drawn by the cell only if the cell's depth is
        the maximum stroke depth on that side of the grid row; otherwise a
        separator row already draws it.  Left and right strokes are looked up at
        the column depth, since empty cells keep the depth of the row they are
        in rather than the depth of their column.

        Returns a tuple `(table_id, stroke_styles)`.
        """
        c = self.cells[index][j]
        column_depth = self.get_column_depth(j)

        stroke_styles = StrokeStyles()

        for position, min_max_depth in ((Position.top, top_min_max_depth),
                                        (Position.bottom, bottom_min_max_depth)):
            if min_max_depth.max_depth == c.depth:
                stroke = c.get_stroke_or_none(c.depth, position)
                if stroke is not None:
                    stroke_styles.set_stroke_style(position, stroke.style)

        for position in (Position.left, Position.right):
            stroke = c.get_stroke_or_none(column_depth, position)
            if stroke is not None:
                stroke_styles.set_stroke_style(position, stroke.style)

        return c.fill_table_id, stroke_styles

from pylatexenc.latexencode import UnicodeToLatexEncoder

import logging
logger = logging.getLogger(__name__)

from ..strokes import CellType, Position, StrokeStyle
from ._base import GridRenderer, SEPARATOR_ROW


class LatexGridRenderer(GridRenderer):
    r"""
    Renders the worksheet as a tabularray ``tblr`` table.  Every render cell
    becomes one tabular cell; gutter columns and separator rows are kept
    narrow so that the rules of nested tables appear as nested frames.

    The generated code requires ``\usepackage{tabularray}`` and the
    definitions returned by ``get_style_information()``.
    """

    outer_rule_style = '1pt,solid'
    inner_rule_style = '.4pt,solid'

    gutter_column_spec = 'Q[wd=2pt]'
    content_column_spec = 'Q[l]'
    separator_row_spec = '{abovesep=0pt,belowsep=0pt,ht=2pt}'

    # ------------------

    def __init__(self, config=None):
        super().__init__(config=config)
        self.latex_encoder = UnicodeToLatexEncoder(unknown_char_policy='unihex')

    def render_value(self, value):
        return self.latex_encoder.unicode_to_latex(value)

    def render_cell_content(self, render_cell):
        s = self.render_value(render_cell.value)
        for pager in render_cell.pagers:
            s += (r'\nestgridPagerMarker{' + str(pager['numRowsShown'])
                  + '}{' + str(pager['numRowsTotal']) + '}')
        return s

    def _rule_style(self, stroke_style):
        if stroke_style == StrokeStyle.outer:
            return self.outer_rule_style
        return self.inner_rule_style

    def render_table_cells(self, table_cells, css_tags, *, worksheet_id=None):
        render_rows = self.generate_render_rows(table_cells, css_tags)

        colspec = ''
        if render_rows:
            colspec = ''.join([
                (self.gutter_column_spec if c.cell_type == CellType.columnSpace
                 else self.content_column_spec)
                for c in render_rows[0].cells
            ])

        # (row, col) -> rule style, with 1-based tabularray indices.  Two cells
        # sharing an edge may both request the rule, in which case the thicker
        # one wins.
        cell_hlines = {}
        cell_vlines = {}

        def _add_rule(rules, key, stroke_style):
            style = self._rule_style(stroke_style)
            if rules.get(key) == self.outer_rule_style:
                return
            rules[key] = style

        separator_rows = []
        tab_contents = ''
        for rowj, render_row in enumerate(render_rows):
            if render_row.row_type == SEPARATOR_ROW:
                separator_rows.append(str(1+rowj))
            row_items = []
            for colj, render_cell in enumerate(render_row.cells):
                stroke_styles = render_cell.stroke_styles
                for position in Position:
                    style = stroke_styles.get_stroke_style(position)
                    if style == StrokeStyle.none:
                        continue
                    if position == Position.top:
                        _add_rule(cell_hlines, (1+rowj, 1+colj), style)
                    elif position == Position.bottom:
                        _add_rule(cell_hlines, (2+rowj, 1+colj), style)
                    elif position == Position.left:
                        _add_rule(cell_vlines, (1+colj, 1+rowj), style)
                    else:
                        _add_rule(cell_vlines, (2+colj, 1+rowj), style)
                row_items.append(self.render_cell_content(render_cell))
            tab_contents += '&'.join(row_items) + '\\\\' + '\n'

        s = (
            r'\begin{tblr}{colspec={' + colspec + r'},' + '\n'
            + r'  rowsep=1pt, colsep=2pt'
            + (
                (",\n  row{" + ",".join(separator_rows) + "}=" + self.separator_row_spec)
                if separator_rows else ''
            )
            + "".join([ ",\n  hline{"+str(rown)+"}={"+str(coln)+"}{"+lsty+"}"
                         for ((rown, coln), lsty) in sorted(cell_hlines.items()) ])
            + "".join([ ",\n  vline{"+str(coln)+"}={"+str(rown)+"}{"+lsty+"}"
                         for ((coln, rown), lsty) in sorted(cell_vlines.items()) ])
            + r'}' + '\n'
        )
        s += tab_contents
        s += r'\end{tblr}' + '\n'

        logger.debug("Rendered LaTeX table with %d rows, %d horizontal and %d vertical "
                     "rule segments", len(render_rows), len(cell_hlines), len(cell_vlines))
        return s


# ------------------------------------------------------------------------------

_latex_preamble_suggested_defs = r"""
\usepackage{tabularray}
\providecommand\nestgridPagerMarker[2]{ {\footnotesize\itshape(#1 of #2 rows)}}
"""


class GridRendererInformation:
    GridRendererClass = LatexGridRenderer

    @staticmethod
    def get_style_information(grid_renderer):
        return {
            'preamble_suggested_defs': _latex_preamble_suggested_defs
        }

    format_name = 'latex'

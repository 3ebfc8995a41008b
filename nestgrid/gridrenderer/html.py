import html
import json
import re

import logging
logger = logging.getLogger(__name__)

from ..strokes import CellType, Position, StrokeStyle
from ._base import GridRenderer, CONTENT_ROW



_rx_html_entity = re.compile(r'[&]([a-zA-Z]+|[#][0-9]+|[#]x[0-9a-fA-F]+);')


_cell_type_class_names = {
    CellType.content: 'cell-content',
    CellType.dummyContent: 'cell-dummy',
    CellType.rowSpace: 'cell-rowspace',
    CellType.columnSpace: 'cell-colspace',
}


class HtmlGridRenderer(GridRenderer):

    html_rows_joiner = "\n"
    """
    Raw HTML string to insert between table rows.  By default, we use a
    simple newline to avoid having very long lines in the HTML code.
    """

    aggressively_escape_html_attributes = False
    r"""
    If True, then values of HTML attributes are escaped as normal HTML with
    HTML entities like '&amp;'.  The default setting only escapes '"'
    characters, and will escape an '&' character only if it looks like part of
    an entity.
    """

    standalone_document = False
    r"""
    If True, the table is wrapped in a complete HTML document that includes the
    style sheet returned by `get_style_information()`.
    """

    pager_marker_template = "{num_rows_shown} of {num_rows_total} rows"

    # ------------------

    def htmlescape(self, value):
        return html.escape(value)

    def htmlescape_double_quoted_attribute_value(self, value):

        if self.aggressively_escape_html_attributes:
            return self.htmlescape(value)

        # escape the '&' in patterns that happen to look like HTML entities.
        value = _rx_html_entity.sub(lambda m: '&amp;'+m.group(1)+';', value)
        # also escape double quote characters !
        value = value.replace('"', '&quot;')
        return value

    def generate_open_tag(self, tagname, *, attrs=None, class_names=None, self_close_tag=False):
        s = f'<{tagname}'
        if not attrs:
            attrs = {}
        attrs = dict(attrs) # this way attrs can be either dict or list of 2-tuples
        if 'class' in attrs:
            raise ValueError(
                "generate_open_tag(): set HTML 'class' attribute with "
                "class_names=, not with attrs="
            )
        if class_names:
            attrs['class'] = ' '.join(class_names)
        if attrs:
            for aname, aval in attrs.items():
                s += f''' {aname}="{self.htmlescape_double_quoted_attribute_value(aval)}"'''
        if self_close_tag:
            s += '/>'
        else:
            s += '>'
        return s

    def wrap_in_tag(self, tagname, content_html, *,
                    attrs=None, class_names=None):
        s = self.generate_open_tag(tagname, attrs=attrs, class_names=class_names)
        s += str(content_html)
        s += f'</{tagname}>'
        return s

    # -----------------

    def get_cell_class_names(self, render_cell, css_tag):
        class_names = [ _cell_type_class_names[render_cell.cell_type] ]
        if css_tag:
            class_names.append(f'tag-{css_tag}')
        for position in Position:
            style = render_cell.stroke_styles.get_stroke_style(position)
            if style != StrokeStyle.none:
                class_names.append(f'stroke-{position.name}-{style.name}')
        if render_cell.status:
            class_names.append(f'status-{render_cell.status}')
        return class_names

    def render_cell(self, render_cell, css_tags):
        css_tag = css_tags.get_css_tag(render_cell.table_id)
        attrs = {
            'data-attr': render_cell.attr,
        }
        if render_cell.debug:
            attrs['data-debug'] = json.dumps(render_cell.debug)

        content = self.htmlescape(render_cell.value)
        for pager in render_cell.pagers:
            content += self.wrap_in_tag(
                'span',
                self.htmlescape(self.pager_marker_template.format(
                    num_rows_shown=pager['numRowsShown'],
                    num_rows_total=pager['numRowsTotal'],
                )),
                attrs={'data-table-id': pager['tableId']},
                class_names=['pager-more-rows'],
            )

        return self.wrap_in_tag(
            'td',
            content,
            attrs=attrs,
            class_names=self.get_cell_class_names(render_cell, css_tag),
        )

    def render_table_cells(self, table_cells, css_tags, *, worksheet_id=None):
        render_rows = self.generate_render_rows(table_cells, css_tags)

        html_rows = []
        for render_row in render_rows:
            if render_row.row_type == CONTENT_ROW:
                row_class_names = ['row-content']
            else:
                row_class_names = ['row-separator']
            html_rows.append(self.wrap_in_tag(
                'tr',
                ''.join([ self.render_cell(c, css_tags) for c in render_row.cells ]),
                class_names=row_class_names,
            ))

        table_attrs = {}
        if worksheet_id is not None:
            table_attrs['id'] = str(worksheet_id)

        s = self.wrap_in_tag(
            'table',
            self.html_rows_joiner + self.html_rows_joiner.join(html_rows)
            + self.html_rows_joiner,
            attrs=table_attrs,
            class_names=['nestgrid'],
        )

        if self.standalone_document:
            s = _html_document_template.format(
                css=_html_css_content,
                title=self.htmlescape(str(worksheet_id or '')),
                content=s,
            )
        return s


# ------------------------------------------------------------------------------

_html_css_content = r"""
table.nestgrid {
  border-collapse: collapse;
  border-spacing: 0px;
}
table.nestgrid td {
  padding: 0px;
  border: 0px solid transparent;
}
table.nestgrid td.cell-content, table.nestgrid td.cell-dummy {
  padding: 0.2em 0.5em;
}
table.nestgrid td.cell-rowspace {
  height: 4px;
}
table.nestgrid td.cell-colspace {
  width: 4px;
}

table.nestgrid td.stroke-top-outer { border-top: 1.5px solid #404040; }
table.nestgrid td.stroke-bottom-outer { border-bottom: 1.5px solid #404040; }
table.nestgrid td.stroke-left-outer { border-left: 1.5px solid #404040; }
table.nestgrid td.stroke-right-outer { border-right: 1.5px solid #404040; }
table.nestgrid td.stroke-top-inner { border-top: 1px solid #b0b0b0; }
table.nestgrid td.stroke-bottom-inner { border-bottom: 1px solid #b0b0b0; }
table.nestgrid td.stroke-left-inner { border-left: 1px solid #b0b0b0; }
table.nestgrid td.stroke-right-inner { border-right: 1px solid #b0b0b0; }

table.nestgrid td.tag-level-0 { background-color: #ffffff; }
table.nestgrid td.tag-level-1 { background-color: #f2f6fc; }
table.nestgrid td.tag-level-2 { background-color: #fcf6ec; }
table.nestgrid td.tag-level-3 { background-color: #f0f9f0; }

table.nestgrid span.pager-more-rows {
  display: block;
  font-size: 0.8em;
  font-style: italic;
  color: #606060;
}
"""

_html_document_template = r"""<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<title>{title}</title>
<style type="text/css">{css}</style>
</head>
<body>
{content}
</body>
</html>
"""


def get_html_css_content(html_grid_renderer):
    return _html_css_content


# ------------------------------------------------------------------------------

class GridRendererInformation:
    GridRendererClass = HtmlGridRenderer

    @staticmethod
    def get_style_information(grid_renderer):
        return {
            'css_content': get_html_css_content(grid_renderer),
        }

    format_name = 'html'

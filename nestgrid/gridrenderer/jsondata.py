import json

import logging
logger = logging.getLogger(__name__)

from ._base import GridRenderer


class JsonGridRenderer(GridRenderer):
    r"""
    Renders the worksheet as a JSON update document, the format a browser-side
    table component consumes.
    """

    indent = 2
    r"""
    Indentation passed on to `json.dumps()`.  Use `None` for the most compact
    output.
    """

    update_type = 'WorksheetHierarchicalDataUpdate'

    def make_json_data(self, table_cells, css_tags, *, worksheet_id=None):
        render_rows = self.generate_render_rows(table_cells, css_tags)
        return {
            'updateType': self.update_type,
            'worksheetId': worksheet_id,
            'rows': [ r.to_json_data() for r in render_rows ],
        }

    def render_table_cells(self, table_cells, css_tags, *, worksheet_id=None):
        data = self.make_json_data(table_cells, css_tags, worksheet_id=worksheet_id)
        return json.dumps(data, indent=self.indent)


class GridRendererInformation:
    GridRendererClass = JsonGridRenderer

    @staticmethod
    def get_style_information(grid_renderer):
        return {}

    format_name = 'jsondata'

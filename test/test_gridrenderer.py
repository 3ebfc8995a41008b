import unittest
import json

from nestgrid.worksheet import load_worksheet_data
from nestgrid.csstags import TableCssTags
from nestgrid.strokes import CellType, StrokeStyles, StrokeStyle
from nestgrid.gridrenderer._base import GridRenderer, encode_cell_attributes
from nestgrid.gridrenderer.jsondata import JsonGridRenderer


_addresses_data = {
    'worksheet_id': 'ws2',
    'schema': [
        {'name': 'Name'},
        {'name': 'Addresses', 'columns': [{'name': 'Street'}, {'name': 'City'}]},
    ],
    'rows': [
        {'Name': 'Alice', 'Addresses': [
            {'Street': 'Main St', 'City': 'Springfield'},
            {'Street': 'Elm St', 'City': {'$value': 'Shelbyville', '$status': 'w'}},
        ]},
    ],
}


def _load(data):
    # the loader consumes nothing, but keep each test independent
    return load_worksheet_data(json.loads(json.dumps(data)))


class TestEncodeCellAttributes(unittest.TestCase):

    def test_encode(self):
        styles = StrokeStyles(top=StrokeStyle.outer, left=StrokeStyle.inner)
        self.assertEqual(
            encode_cell_attributes(CellType.columnSpace, 'HT4', 'level-1', styles),
            'cs:HT4:level-1:o__i'
        )


class TestGridRenderer(unittest.TestCase):

    maxDiff = None

    def test_base_render_raises(self):
        ws = _load(_addresses_data)
        with self.assertRaises(RuntimeError):
            ws.render(GridRenderer())

    def test_config_sets_attributes(self):
        renderer = GridRenderer({'include_debug_info': True})
        self.assertTrue(renderer.include_debug_info)
        self.assertFalse(GridRenderer().include_debug_info)

    def test_flat_rows(self):
        ws = _load({
            'schema': ['A', 'B', 'C'],
            'rows': [ {'A': 1, 'B': 2, 'C': 3}, {'A': 4, 'B': None, 'C': 6} ],
        })
        renderer = GridRenderer()
        render_rows = renderer.generate_render_rows(ws.make_table_cells(),
                                                    ws.make_css_tags())
        self.assertEqual([ r.row_type for r in render_rows ],
                         ['contentRow', 'contentRow'])
        self.assertEqual(
            [ [ (c.attr, c.value) for c in r.cells ] for r in render_rows ],
            [
                [ ('c:HT1:level-0:o__o', '1'), ('c:HT1:level-0:o__i', '2'),
                  ('c:HT1:level-0:oo_i', '3') ],
                [ ('c:HT1:level-0:i_oo', '4'), ('c:HT1:level-0:i_oi', ''),
                  ('c:HT1:level-0:iooi', '6') ],
            ]
        )

    def test_nested_rows(self):
        ws = _load(_addresses_data)
        renderer = GridRenderer()
        render_rows = renderer.generate_render_rows(ws.make_table_cells(),
                                                    ws.make_css_tags())
        self.assertEqual(
            [ (r.row_type, r.row) for r in render_rows ],
            [ ('separatorRow', 0), ('contentRow', 0), ('contentRow', 1),
              ('separatorRow', 1) ]
        )
        self.assertEqual(
            [ [ c.attr for c in r.cells ] for r in render_rows ],
            [
                [ 'rs:HT1:level-0:o__o', 'cs:HT1:level-0:o__i', 'rs:HT1:level-0:o___',
                  'rs:HT1:level-0:o___', 'cs:HT1:level-0:oo__' ],
                [ 'c:HT1:level-0:___o', 'cs:HT1:level-0:___i', 'c:HT4:level-1:o__o',
                  'c:HT4:level-1:oo_i', 'cs:HT1:level-0:_o__' ],
                [ '_:HT1:level-0:___o', 'cs:HT1:level-0:___i', 'c:HT4:level-1:i_oo',
                  'c:HT4:level-1:iooi', 'cs:HT1:level-0:_o__' ],
                [ 'rs:HT1:level-0:__oo', 'cs:HT1:level-0:__oi', 'rs:HT1:level-0:__o_',
                  'rs:HT1:level-0:__o_', 'cs:HT1:level-0:_oo_' ],
            ]
        )
        self.assertEqual(
            [ (c.value, c.status) for c in render_rows[2].cells ],
            [ ('', ''), ('', ''), ('Elm St', ''), ('Shelbyville', 'w'), ('', '') ]
        )

    def test_idempotent(self):
        ws = _load(_addresses_data)
        renderer = JsonGridRenderer({'include_debug_info': True})
        pagers = ws.make_pagers(max_rows_nested=1)
        self.assertEqual(ws.render(renderer, pagers=pagers),
                         ws.render(renderer, pagers=ws.make_pagers(max_rows_nested=1)))
        self.assertEqual(ws.render(renderer), ws.render(renderer))

    def test_debug_info(self):
        ws = _load(_addresses_data)
        renderer = GridRenderer({'include_debug_info': True})
        render_rows = renderer.generate_render_rows(ws.make_table_cells(),
                                                    ws.make_css_tags())
        separator_cell = render_rows[0].cells[0]
        self.assertEqual(separator_cell.debug['_row'], 0)
        self.assertEqual(separator_cell.debug['_col'], 0)
        self.assertEqual(separator_cell.debug['_horizontalSeparatorDepth'], 0)
        self.assertEqual(separator_cell.debug['_position'], 'top')
        gutter_cell = render_rows[0].cells[1]
        self.assertEqual(gutter_cell.debug['_corner'], 'corner')
        self.assertEqual(gutter_cell.debug['_columnSeparatorStroke'], 'outer:HT1:0')
        content_cell = render_rows[1].cells[2]
        self.assertEqual(content_cell.debug['_columnDepth'], 1)
        self.assertEqual(content_cell.debug['_leftStrokes'],
                         '[inner:HT1:0,outer:HT4:1]')

        renderer = GridRenderer()
        render_rows = renderer.generate_render_rows(ws.make_table_cells(),
                                                    ws.make_css_tags())
        self.assertEqual(render_rows[1].cells[2].debug, {})


class TestJsonGridRenderer(unittest.TestCase):

    maxDiff = None

    def test_document(self):
        ws = _load({
            'worksheet_id': 'ws1',
            'schema': ['A', 'B'],
            'rows': [ {'A': 'x', 'B': {'$value': 2, '$status': 'e'}} ],
        })
        result = json.loads(ws.render(JsonGridRenderer()))
        self.assertEqual(result, {
            'updateType': 'WorksheetHierarchicalDataUpdate',
            'worksheetId': 'ws1',
            'rows': [
                {
                    'rowType': 'contentRow',
                    'rowCells': [
                        {'attr': 'c:HT1:level-0:o_oo', 'value': 'x', 'status': ''},
                        {'attr': 'c:HT1:level-0:oooi', 'value': '2', 'status': 'e'},
                    ],
                },
            ],
        })

    def test_pager(self):
        ws = _load({
            'worksheet_id': 'ws1',
            'schema': ['A'],
            'rows': [ {'A': 1}, {'A': 2}, {'A': 3} ],
        })
        renderer = JsonGridRenderer({'indent': None})
        result = ws.render(renderer, pagers=ws.make_pagers(max_rows_top=2))
        self.assertNotIn('\n', result)
        data = json.loads(result)
        self.assertEqual(len(data['rows']), 2)
        self.assertEqual(data['rows'][1]['rowCells'][0]['pagers'], [{
            'tableId': ws.data_table.table_id,
            'numRowsShown': 2,
            'numRowsTotal': 3,
        }])
        self.assertNotIn('pagers', data['rows'][0]['rowCells'][0])

    def test_pagers_ending_in_same_cell(self):
        # the nested table and its containing row both end in grid cell (0,0)
        ws = _load({
            'schema': [ {'name': 'N', 'columns': ['X']}, 'B' ],
            'rows': [
                {'N': [{'X': 'x1'}, {'X': 'x2'}], 'B': 'a'},
                {'N': [{'X': 'x3'}], 'B': 'b'},
            ],
        })
        nested_table = ws.data_table.rows[0].get_node_from_column_name('N').nested_table
        pagers = ws.make_pagers(max_rows_top=1, max_rows_nested=1)
        self.assertEqual(len(ws.make_table_cells(pagers).get_cell(0, 0).pagers), 2)

        data = JsonGridRenderer().make_json_data(
            ws.make_table_cells(ws.make_pagers(max_rows_top=1, max_rows_nested=1)),
            ws.make_css_tags(),
        )
        self.assertEqual(
            [ r['rowType'] for r in data['rows'] ],
            ['separatorRow', 'contentRow', 'separatorRow']
        )
        cells_with_pagers = [ c for r in data['rows'] for c in r['rowCells']
                              if 'pagers' in c ]
        self.assertEqual(len(cells_with_pagers), 1)
        self.assertEqual(cells_with_pagers[0]['value'], 'x1')
        self.assertEqual(cells_with_pagers[0]['pagers'], [
            {'tableId': ws.data_table.table_id, 'numRowsShown': 1, 'numRowsTotal': 2},
            {'tableId': nested_table.table_id, 'numRowsShown': 1, 'numRowsTotal': 2},
        ])


class TestTableCssTags(unittest.TestCase):

    def test_tags(self):
        ws = _load(_addresses_data)
        css_tags = TableCssTags(ws.schema)
        self.assertEqual(css_tags.get_css_tag('HT1'), 'level-0')
        self.assertEqual(css_tags.get_css_tag('HT4'), 'level-1')
        self.assertEqual(css_tags.get_css_tag('HT999'), '')

        css_tags = TableCssTags(ws.schema, palette=['even'], tags={'HT1': 'top'})
        self.assertEqual(css_tags.get_css_tag('HT1'), 'top')
        self.assertEqual(css_tags.get_css_tag('HT4'), 'even')

    def test_empty_palette(self):
        ws = _load(_addresses_data)
        with self.assertRaises(ValueError):
            TableCssTags(ws.schema, palette=[])


if __name__ == '__main__':
    unittest.main()

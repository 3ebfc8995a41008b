import unittest

from nestgrid.schema import Schema, SchemaError
from nestgrid.data import DataTable, IdSource, TablePager, TablePagers


def _make_worksheet_tables():
    schema = Schema()
    root = schema.root_table
    root.add_column('Name')
    tags = root.add_column('Tags')
    tags.add_nested_table().add_column('Tag')
    id_source = IdSource()
    return schema, DataTable(root, id_source=id_source)


class TestDataModel(unittest.TestCase):

    maxDiff = None

    def test_nodes(self):
        schema, data_table = _make_worksheet_tables()
        row = data_table.add_row()
        node = row.get_node_from_column_name('Name')
        node.set_value('Alice', status='ok')
        self.assertEqual(node.value, 'Alice')
        self.assertEqual(node.status, 'ok')
        self.assertIs(row.get_node(node.column.column_id), node)
        self.assertIs(row.find_node(node.column.column_id), node)
        self.assertFalse(node.has_nested_table())
        self.assertIsNone(node.nested_table)

        tags_column_id = schema.root_table.get_column_id_from_name('Tags')
        self.assertIsNone(row.find_node(tags_column_id))
        self.assertEqual([ n.column.name for n in row.iter_nodes() ], ['Name', 'Tags'])
        self.assertIsNotNone(row.find_node(tags_column_id))

    def test_unknown_column(self):
        schema, data_table = _make_worksheet_tables()
        row = data_table.add_row()
        with self.assertRaises(SchemaError):
            row.get_node_from_column_name('Nope')
        with self.assertRaises(SchemaError):
            row.get_node('HN999')

    def test_nested_table(self):
        schema, data_table = _make_worksheet_tables()
        row = data_table.add_row()
        node = row.get_node_from_column_name('Tags')
        self.assertTrue(node.has_nested_table())
        self.assertIsNone(node.find_nested_table())
        nested = node.nested_table
        self.assertIs(nested.schema_table, node.column.nested_table)
        self.assertIs(node.nested_table, nested)
        self.assertIs(node.find_nested_table(), nested)
        self.assertEqual(nested.num_rows, 0)

    def test_scalar_into_nested_column(self):
        schema, data_table = _make_worksheet_tables()
        row = data_table.add_row()
        node = row.get_node_from_column_name('Tags')
        node.set_value('loose', status='w')
        node.set_value('other')

        nested_schema_table = node.column.nested_table
        self.assertEqual([ c.name for c in nested_schema_table.sorted_columns() ],
                         ['Tag', 'orphan'])
        self.assertIsNone(node.value)
        self.assertEqual(node.nested_table.num_rows, 2)
        orphan_nodes = [
            r.get_node_from_column_name('orphan') for r in node.nested_table.rows
        ]
        self.assertEqual([ (n.value, n.status) for n in orphan_nodes ],
                         [ ('loose', 'w'), ('other', '') ])

    def test_unique_ids(self):
        schema, data_table = _make_worksheet_tables()
        ids = {data_table.table_id}
        for _ in range(3):
            row = data_table.add_row()
            ids.add(row.row_id)
            for node in row.iter_nodes():
                ids.add(node.node_id)
                if node.has_nested_table():
                    ids.add(node.nested_table.table_id)
        self.assertEqual(len(ids), 1 + 3 * (1 + 2 + 1))


class TestPagers(unittest.TestCase):

    def _make_table(self, num_rows):
        schema, data_table = _make_worksheet_tables()
        for _ in range(num_rows):
            data_table.add_row()
        return data_table

    def test_pager_all(self):
        data_table = self._make_table(3)
        pager = TablePager(data_table)
        self.assertEqual(pager.num_rows_shown, 3)
        self.assertEqual(pager.num_rows_total, 3)
        self.assertTrue(pager.is_all_rows_shown())
        self.assertEqual(pager.table_id, data_table.table_id)

    def test_pager_limited(self):
        data_table = self._make_table(3)
        pager = TablePager(data_table, 2)
        self.assertEqual(pager.rows, data_table.rows[:2])
        self.assertEqual(pager.num_rows_shown, 2)
        self.assertFalse(pager.is_all_rows_shown())

        pager = TablePager(data_table, 5)
        self.assertEqual(pager.num_rows_shown, 3)
        self.assertTrue(pager.is_all_rows_shown())

    def test_pager_invalid_size(self):
        data_table = self._make_table(1)
        with self.assertRaises(ValueError):
            TablePager(data_table, 0)

    def test_pagers(self):
        data_table = self._make_table(3)
        nested = data_table.rows[0].get_node_from_column_name('Tags').nested_table
        for _ in range(4):
            nested.add_row()
        pagers = TablePagers(data_table, max_rows_top=2, max_rows_nested=1)
        self.assertIs(pagers.get_pager(data_table), pagers.get_pager(data_table))
        self.assertEqual(pagers.get_pager(data_table).num_rows_shown, 2)
        self.assertEqual(pagers.get_pager(nested).num_rows_shown, 1)

        pagers = TablePagers(data_table, max_rows_nested=1,
                             sizes={nested.table_id: 3})
        self.assertEqual(pagers.get_pager(data_table).num_rows_shown, 3)
        self.assertEqual(pagers.get_pager(nested).num_rows_shown, 3)


if __name__ == '__main__':
    unittest.main()

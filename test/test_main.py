import unittest

import io
import os.path
import json
import tempfile

from nestgrid.main.main import main, Main, load_external_configs
from nestgrid.main.importclass import import_class
from nestgrid.__main__ import run_main
from nestgrid.gridrenderer import html as gridrenderer_html


_worksheet_yaml = """\
worksheet_id: ws1
schema:
  - name: Name
  - name: Addresses
    columns: [{name: Street}, {name: City}]
rows:
  - Name: Alice
    Addresses:
      - {Street: Main St, City: Springfield}
      - {Street: Elm St, City: Shelbyville}
      - {Street: Oak St, City: Ogdenville}
  - Name: Bob
"""


class TestMain(unittest.TestCase):

    maxDiff = None

    def test_jsondata(self):
        sout = io.StringIO()
        main(
            output=sout,
            input_content=_worksheet_yaml,
            format='jsondata',
        )
        result = json.loads(sout.getvalue())
        self.assertEqual(result['updateType'], 'WorksheetHierarchicalDataUpdate')
        self.assertEqual(result['worksheetId'], 'ws1')
        self.assertEqual(
            [ r['rowType'] for r in result['rows'] ],
            ['separatorRow', 'contentRow', 'contentRow', 'contentRow',
             'separatorRow', 'contentRow']
        )
        self.assertTrue(sout.getvalue().endswith("}\n"))

    def test_default_format(self):
        sout = io.StringIO()
        main(output=sout, input_content=_worksheet_yaml, suppress_final_newline=True)
        self.assertTrue(sout.getvalue().startswith('{'))
        self.assertTrue(sout.getvalue().endswith('}'))

    def test_worksheet_config(self):
        sout = io.StringIO()
        main(
            output=sout,
            input_content=_worksheet_yaml + """\
config:
  nestgrid:
    pagers:
      max_rows_nested: 2
    css_tags:
      tags: {HT1: top}
""",
            format='jsondata',
        )
        result = json.loads(sout.getvalue())
        cells = [ c for r in result['rows'] for c in r['rowCells'] ]
        pagers = [ p for c in cells for p in c.get('pagers', []) ]
        self.assertEqual(len(pagers), 1)
        self.assertEqual(pagers[0]['numRowsShown'], 2)
        self.assertEqual(pagers[0]['numRowsTotal'], 3)
        self.assertTrue(cells[0]['attr'].startswith('rs:HT1:top:'))

    def test_explicit_config_and_html(self):
        a = Main(
            input_content=_worksheet_yaml,
            format='html',
            config={'nestgrid': {'renderer': {'html': {'include_debug_info': True}}}},
        )
        run_info = a.run(skip_write_return_result=True)
        self.assertIn('<table id="ws1" class="nestgrid">', run_info['result'])
        self.assertIn('data-debug=', run_info['result'])
        self.assertEqual(run_info['result_info']['format_name'], 'html')
        self.assertIn('css_content', run_info['result_info']['style_information'])

    def test_input_conflict(self):
        with self.assertRaises(ValueError):
            Main(input_content=_worksheet_yaml, file='input.yaml')

    def test_config_file_next_to_input(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            input_file = os.path.join(tmpdir, 'worksheet.yaml')
            with open(input_file, 'w', encoding='utf-8') as f:
                f.write(_worksheet_yaml)
            with open(os.path.join(tmpdir, 'nestgridconfig.yml'), 'w',
                      encoding='utf-8') as f:
                f.write("nestgrid:\n  pagers:\n    max_rows_top: 1\n")

            configs = load_external_configs(tmpdir, arg_config=None)
            self.assertEqual(len(configs), 1)
            self.assertEqual(configs[0]['$_cwd'], tmpdir)

            output_file = os.path.join(tmpdir, 'out.json')
            main(file=input_file, output=output_file, format='jsondata')
            with open(output_file, encoding='utf-8') as f:
                result = json.load(f)

        content_rows = [ r for r in result['rows'] if r['rowType'] == 'contentRow' ]
        self.assertEqual(len(content_rows), 3)
        cells = [ c for r in result['rows'] for c in r['rowCells'] ]
        self.assertEqual([ p['numRowsTotal'] for c in cells for p in c.get('pagers', []) ],
                         [2])


class TestImportClass(unittest.TestCase):

    def test_short_name(self):
        mod, cls = import_class('html', default_prefix='nestgrid.gridrenderer',
                                default_classnames=['GridRendererInformation'])
        self.assertIs(mod, gridrenderer_html)
        self.assertIs(cls, gridrenderer_html.GridRendererInformation)

    def test_module_name(self):
        mod, cls = import_class('nestgrid.gridrenderer.html',
                                default_classnames=['GridRendererInformation'])
        self.assertIs(cls, gridrenderer_html.GridRendererInformation)

    def test_class_name(self):
        mod, cls = import_class('nestgrid.gridrenderer.html.HtmlGridRenderer')
        self.assertIs(cls, gridrenderer_html.HtmlGridRenderer)

    def test_not_found(self):
        with self.assertRaises(ValueError):
            import_class('nonexistentformat', default_prefix='nestgrid.gridrenderer',
                         default_classnames=['GridRendererInformation'])


class TestRunMain(unittest.TestCase):

    def test_run_main(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            input_file = os.path.join(tmpdir, 'worksheet.yaml')
            with open(input_file, 'w', encoding='utf-8') as f:
                f.write(_worksheet_yaml)
            output_file = os.path.join(tmpdir, 'out.tex')
            run_main(['-f', 'latex', '-o', output_file, input_file])
            with open(output_file, encoding='utf-8') as f:
                result = f.read()
        self.assertTrue(result.startswith(r'\begin{tblr}'))

    def test_schema_error_exit_code(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            input_file = os.path.join(tmpdir, 'worksheet.yaml')
            with open(input_file, 'w', encoding='utf-8') as f:
                f.write("schema: [A]\nrows:\n  - B: 1\n")
            with self.assertLogs('nestgrid', level='CRITICAL'):
                with self.assertRaises(SystemExit) as cm:
                    run_main(['-o', os.path.join(tmpdir, 'out.json'), input_file])
        self.assertEqual(cm.exception.code, 1)


if __name__ == '__main__':
    unittest.main()

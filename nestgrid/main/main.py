import sys
import os.path

import logging
logger = logging.getLogger(__name__)

import yaml

from ..worksheet import load_worksheet_data

from .importclass import import_class as _import_class
from .configmerger import ConfigMerger
configmerger = ConfigMerger()


_default_config = {
    'nestgrid': {
        'pagers': {
            'max_rows_top': None,
            'max_rows_nested': None,
        },
        'css_tags': {
            'palette': ['level-0', 'level-1', 'level-2', 'level-3'],
            'tags': {},
        },
        'renderer': {
            'html': {
                'include_debug_info': False,
            },
            'jsondata': {
                'indent': 2,
            },
            'latex': {},
        },
    },
}

default_format = 'jsondata'


def get_default_config():
    # fresh copy, the config merger modifies the dictionaries it is given
    return yaml.safe_load(yaml.safe_dump(_default_config))


def load_external_configs(dirname, *, arg_config):
    r"""
    Return the list of configuration dictionaries to use, by decreasing
    priority.

    If `arg_config` is a dictionary, it is used directly.  If it is a file
    name, that file is loaded.  Otherwise, ``nestgridconfig.yaml`` (or
    ``.yml``) is looked for in the folder `dirname` of the input file.
    """

    load_config_files = []

    if isinstance(arg_config, dict):
        load_config_files = [ arg_config ]
    elif isinstance(arg_config, str) and arg_config:
        load_config_files = [ arg_config ]
    else:
        fnameconfigbase = "nestgridconfig"
        fnametryexts = (".yaml", ".yml",) # only the FIRST EXISTING EXTENSION is read.
        for ext in fnametryexts:
            tryfname = os.path.join(dirname or '', f"{fnameconfigbase}{ext}")
            if os.path.exists(tryfname):
                load_config_files.append(tryfname)
                break

    logger.debug("Identified config files to load: %r", load_config_files)

    loaded_config_datas = []
    for config_file in load_config_files:
        if isinstance(config_file, dict):
            data = config_file
        else:
            with open(config_file, encoding='utf-8') as f:
                logger.info(f"Loading nestgrid config from {config_file}")
                data = yaml.safe_load(f)
            if data is None:
                data = {}
            if not isinstance(data, dict):
                raise ValueError(f"Invalid config file ‘{config_file}’, expected "
                                 f"a mapping at the top level")
            data['$_cwd'] = os.path.dirname(config_file)
        loaded_config_datas.append( data )

    return loaded_config_datas


def get_grid_renderer_information(arg_format):
    _, renderer_information = _import_class(
        arg_format,
        default_prefix='nestgrid.gridrenderer',
        default_classnames=['GridRendererInformation'],
    )
    return renderer_information



class Main:
    def __init__(self, **kwargs):
        super().__init__()

        self.kwargs = kwargs

        self.arg_format = kwargs.get('format', None)
        self.arg_file = kwargs.get('file', None)
        self.arg_input_content = kwargs.get('input_content', None)
        self.arg_config = kwargs.get('config', None)
        self.arg_output = kwargs.get('output', None)
        self.arg_suppress_final_newline = kwargs.get('suppress_final_newline', None)

        arg_file = self.arg_file
        arg_input_content = self.arg_input_content

        # Get the worksheet content

        dirname = None
        if arg_input_content is not None:
            if arg_file is not None:
                raise ValueError(
                    "You cannot specify both a FILE and input content. "
                    "Type `nestgrid --help` for more information."
                )
            input_content = arg_input_content
        elif arg_file is None or arg_file == '-':
            input_content = sys.stdin.read()
        else:
            dirname = os.path.dirname(arg_file)
            with open(arg_file, encoding='utf-8') as f:
                input_content = f.read()

        # YAML is a superset of JSON, so this reads both
        worksheet_data = yaml.safe_load(input_content)

        worksheet_config = None
        if isinstance(worksheet_data, dict):
            worksheet_config = worksheet_data.get('config', None)

        # load config & defaults

        orig_configs = load_external_configs(dirname, arg_config=self.arg_config)

        config = configmerger.recursive_assign_defaults(
            [ worksheet_config or {} ] + orig_configs + [ get_default_config() ]
        )
        logger.debug("Merged configuration is %r", config)

        self.input_content = input_content
        self.dirname = dirname
        self.worksheet_data = worksheet_data
        self.orig_configs = orig_configs
        self.config = config
        self.nestgrid_config = config.get('nestgrid', None) or {}

    def make_worksheet(self):
        return load_worksheet_data(self.worksheet_data)

    def make_grid_renderer(self):
        arg_format = self.arg_format or default_format
        renderer_information = get_grid_renderer_information(arg_format)
        renderer_configs = self.nestgrid_config.get('renderer', None) or {}
        renderer_config = renderer_configs.get(renderer_information.format_name, None)
        logger.debug("Using grid renderer ‘%s’ with config %r",
                     renderer_information.format_name, renderer_config)
        return (
            renderer_information.GridRendererClass(config=renderer_config),
            renderer_information,
        )

    def render(self):
        r"""
        Load the worksheet and render it.  Returns a tuple `(result,
        result_info)`.
        """
        worksheet = self.make_worksheet()
        grid_renderer, renderer_information = self.make_grid_renderer()

        pagers_config = self.nestgrid_config.get('pagers', None) or {}
        pagers = worksheet.make_pagers(
            max_rows_top=pagers_config.get('max_rows_top', None),
            max_rows_nested=pagers_config.get('max_rows_nested', None),
        )

        css_tags_config = self.nestgrid_config.get('css_tags', None) or {}
        css_tags = worksheet.make_css_tags(
            palette=css_tags_config.get('palette', None),
            tags=css_tags_config.get('tags', None),
        )

        result = worksheet.render(grid_renderer, pagers=pagers, css_tags=css_tags)

        result_info = {
            'worksheet': worksheet,
            'format_name': renderer_information.format_name,
            'style_information':
                renderer_information.get_style_information(grid_renderer),
        }
        return result, result_info

    def run(self, skip_write_return_result=False):

        arg_output = self.arg_output
        arg_suppress_final_newline = self.arg_suppress_final_newline

        result, result_info = self.render()

        if skip_write_return_result:
            return {
                "result": result,
                "result_info": result_info
            }

        #
        # Write to output
        #
        def open_context_fout():
            if not arg_output or arg_output == '-':
                return _TrivialContextManager(sys.stdout)
            elif hasattr(arg_output, 'write'):
                # it's a file-like object, use it directly
                return _TrivialContextManager(arg_output)
            else:
                return open(arg_output, 'w', encoding='utf-8')

        with open_context_fout() as fout:

            fout.write(result)

            if not arg_suppress_final_newline and not result.endswith("\n"):
                fout.write("\n")

            if isinstance(arg_output, str) and arg_output != '-':
                logger.info('Output to ‘%s’', arg_output)

        main_run_info = {
            'config': self.config,
            'result': result,
            'result_info': result_info,
            'output': arg_output,
        }

        return main_run_info



def main(**kwargs):
    a = Main(**kwargs)
    return a.run()




# ------------------------------------------------------------------------------



class _TrivialContextManager:
    def __init__(self, value):
        super().__init__()
        self.value = value

    def __enter__(self):
        return self.value

    def __exit__(self, *args):
        pass

import sys
import argparse
import logging

import colorlog

from .main.main import main as _main
from .schema import SchemaError
from nestgrid import __version__ as nestgrid_version


def setup_logging(level):
    # You should use colorlog >= 6.0.0a4
    handler = colorlog.StreamHandler()
    handler.setFormatter( colorlog.LevelFormatter(
        log_colors={
            "DEBUG": "white",
            "INFO": "",
            "WARNING": "red",
            "ERROR": "bold_red",
            "CRITICAL": "bold_red",
        },
        fmt={
            "DEBUG":    "%(log_color)s〰️    %(message)s",
            "INFO":     "%(log_color)s✨  %(message)s",
            "WARNING":  "%(log_color)s⚠️   %(message)s",
            "ERROR":    "%(log_color)s🚨  %(message)s",
            "CRITICAL": "%(log_color)s🚨  %(message)s",
        },
        stream=sys.stderr
    ) )

    root = colorlog.getLogger()
    root.addHandler(handler)

    root.setLevel(level)



def run_main(cmdargs=None, enable_debug_pdb=False, exit_code_on_error=1):
    try:
        _run_main_inner(cmdargs)
    except SchemaError as e:
        logging.getLogger('nestgrid').debug("Got SchemaError, traceback = ", exc_info=True)
        logging.getLogger('nestgrid').critical(
            f"Invalid worksheet\n{e}",
        )
        if exit_code_on_error is not None:
            sys.exit(exit_code_on_error)
    except Exception as e:
        logging.getLogger('nestgrid').critical('Error.', exc_info=e)
        if enable_debug_pdb:
            import pdb
            pdb.post_mortem()
        elif exit_code_on_error is not None:
            sys.exit(exit_code_on_error)


def _run_main_inner(cmdargs=None):

    args_parser = argparse.ArgumentParser(
        prog='nestgrid',
        description='Lay out hierarchically nested tables as a bordered grid',
    )

    args_parser.add_argument('-C', '--config', action='store',
                             default=None,
                             help="YAML configuration file.  By default, "
                             "‘nestgridconfig.yaml’ is used if it exists in the folder "
                             "of the input file.  In all cases the ‘config:’ section of "
                             "the worksheet file takes precedence over this config.")

    args_parser.add_argument('-o', '--output', action='store',
                             default=None,
                             help="Output file name (stdout by default or with ‘--output=-’)")

    args_parser.add_argument('-f', '--format', action='store',
                             default=None,
                             help="Output format.  One of jsondata,html,latex or a "
                             "fully specified module or class name defining a "
                             "GridRenderer subclass.")

    args_parser.add_argument('-n', '--suppress-final-newline', action='store_true',
                             default=False,
                             help="Do not add a newline at the end of the output")

    args_parser.add_argument('-v', '--verbose', action='store_true',
                             default=False,
                             help="Enable verbose debugging output")

    args_parser.add_argument('--version', action='version', version=nestgrid_version)

    args_parser.add_argument('file', metavar="FILE", nargs='?', default=None,
                             help='Worksheet file, in YAML or JSON (if not specified, '
                             'read from standard input)')

    # --

    args = args_parser.parse_args(args=cmdargs)


    #
    # set up logging
    #
    level = logging.INFO
    if args.verbose:
        level = logging.DEBUG
    setup_logging(level=level)


    #
    # Dispatch call to our main function
    #

    d = dict(args.__dict__)
    d.pop('verbose')

    _main(**d)

    return



if __name__ == '__main__':
    run_main()

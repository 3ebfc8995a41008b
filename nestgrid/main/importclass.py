import logging
logger = logging.getLogger(__name__)

import importlib


def _candidate_imports(fullname, default_classnames, default_prefix):
    if '.' not in fullname:
        if not default_classnames:
            raise ValueError(f"Missing class name: ‘{fullname}’")
        modnames = [ fullname ]
        if default_prefix is not None:
            modnames.insert(0, f"{default_prefix}.{fullname}")
        return [
            (modname, classname)
            for modname in modnames
            for classname in default_classnames
        ]

    candidates = [
        (fullname, classname)
        for classname in (default_classnames or [])
    ]
    candidates.append( tuple(fullname.rsplit('.', maxsplit=1)) )
    return candidates


def import_class(fullname, *, default_classnames=None, default_prefix=None):
    r"""
    Locate a class given a short name or a dotted path.

    A short name (e.g. ``html``) is looked up as a module under
    `default_prefix`, and then as a top-level module; the class is any of
    `default_classnames`.  A dotted name is either a module that defines one of
    `default_classnames`, or ``module.ClassName``.

    Returns the tuple `(module, class_object)`.  Raises `ValueError` if nothing
    is found.
    """
    for modname, classname in _candidate_imports(fullname, default_classnames,
                                                 default_prefix):
        try:
            mod = importlib.import_module(modname)
        except ModuleNotFoundError as e:
            if e.name is not None and modname.startswith(e.name):
                logger.debug(f"Could not find module ‘{modname}’: {str(e)}")
                continue
            # the module exists, but one of its own imports is broken
            raise

        classobj = getattr(mod, classname, None)
        if classobj is None:
            logger.debug(f"No class ‘{classname}’ in module ‘{modname}’")
            continue

        logger.debug(f"Found ‘{classname}’ in module ‘{modname}’")
        return mod, classobj

    raise ValueError(f"Failed to locate import ‘{fullname}’")

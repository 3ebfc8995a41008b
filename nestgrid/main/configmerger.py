import importlib
import os.path

from collections.abc import Mapping

import yaml

import logging
logger = logging.getLogger(__name__)



# marker
class ListProperty:
    pass



class PresetKeepMarker:
    def __init__(self, marker):
        super().__init__()
        self.marker = marker

    def process_property(self, configmerger, presetarg, result, obj, remaining_obj_list,
                         property_path, top_level_obj):

        obj[self.marker] = presetarg


# $defaults
class PresetDefaults:
    r"""
    In a list, ``{$defaults: true}`` is replaced by the items of the same list
    in the lower-priority configs.  E.g. ``palette: [highlight, {$defaults:
    true}]`` prepends a tag to the default palette.
    """
    def process_list_item(self, configmerger,
                          presetarg, list_result, list_obj, j, list_obj_remaining,
                          property_path, top_level_obj):
        logger.debug("$defaults in list ‘%s’, lower-priority lists are %r",
                     _path_str(property_path), list_obj_remaining)

        defaults = configmerger.recursive_assign_defaults_list(
            list_obj_remaining,
            property_path,
            top_level_obj=top_level_obj
        )
        list_result.extend( defaults )


# $import
class PresetImport:
    r"""
    ``$import: <target>`` merges in the config found at `<target>`, either a
    YAML file name (relative to the importing config file) or
    ``pkg:module/attribute`` naming a Python object (called if callable).
    """
    def _fetch_import(self, target, cwd):
        if target.startswith('pkg:'):
            modname, *modargs = target[len('pkg:'):].split('/')
            mod = importlib.import_module(modname)
            if len(modargs) == 0:
                raise ValueError(f"Missing attribute in preset $import target: ‘{target}’")
            try:
                obj = mod
                for part in modargs:
                    obj = getattr(obj, part)
                if callable(obj):
                    obj = obj()
                return obj
            except AttributeError:
                raise ValueError(f"Invalid preset $import target: ‘{target}’")

        fname = os.path.join(cwd, target)
        logger.debug('$import: opening file %r', fname)
        with open(fname, encoding='utf-8') as f:
            return yaml.safe_load(f)

    def process_property(self, configmerger, presetarg, result, obj, remaining_obj_list,
                         property_path, top_level_obj):
        import_targets = presetarg
        if isinstance(import_targets, str):
            import_targets = [ import_targets ]
        for import_target in import_targets:
            target_data = self._fetch_import(import_target,
                                             top_level_obj.get('$_cwd', None) or '.')
            result.update(configmerger.recursive_assign_defaults_dict(
                [ result, obj, target_data ] + remaining_obj_list,
                property_path,
                top_level_obj=top_level_obj
            ))
            logger.debug("processed property $import ‘%s’ -> %r", import_target, result)

    def process_list_item(self, configmerger,
                          presetarg, list_result, list_obj, j, list_obj_remaining,
                          property_path, top_level_obj):
        import_targets = presetarg
        if isinstance(import_targets, str):
            import_targets = [ import_targets ]

        for import_target in import_targets:
            target_data = self._fetch_import(import_target,
                                             top_level_obj.get('$_cwd', None) or '.')
            if not isinstance(target_data, list):
                target_data = [ target_data ]

            # process any $<preset>'s in the imported data, too
            new_items = configmerger.recursive_assign_defaults_list(
                [ target_data ],
                property_path,
                top_level_obj=top_level_obj
            )

            list_result.extend( new_items )


def get_default_presets():
    return {
        '$defaults': PresetDefaults(),
        '$import': PresetImport(),

        # simple internal marker for the current object file's CWD
        '$_cwd': PresetKeepMarker('$_cwd'),
    }



def _get_preset_keyvals(d):
    if not isinstance(d, dict):
        return []
    return [(k,v) for (k,v) in d.items() if isinstance(k,str) and k.startswith('$')]


def _path_str(property_path):
    return ".".join('[]' if p is ListProperty else str(p) for p in property_path)


class ConfigMerger:
    r"""
    Merges a list of configuration dictionaries, from highest to lowest
    priority.

    Dictionaries are merged key by key, recursively.  Scalars and lists from a
    higher-priority config replace those of lower-priority configs, unless the
    list uses the ``$defaults`` preset.  Keys starting with ``$`` are presets,
    see :py:func:`get_default_presets`.
    """
    def __init__(self, presets=None):
        super().__init__()
        if presets is not None:
            self.presets = dict(presets)
        else:
            self.presets = get_default_presets()

    def recursive_assign_defaults(self, obj_list):
        return self.recursive_assign_defaults_dict(obj_list, [])

    def _get_preset(self, presetname, property_path):
        preset = self.presets.get(presetname, None)
        if preset is None:
            raise ValueError(
                f"Unknown config preset ‘{presetname}’ in ‘{_path_str(property_path)}’"
            )
        return preset

    def recursive_assign_defaults_dict(self, obj_list, property_path, *, top_level_obj=None):

        if len(obj_list) == 0:
            return {}

        result = {}

        for j, obj in enumerate(obj_list):
            remaining_obj_list = obj_list[j+1:]

            if obj is None:
                continue

            if not isinstance(obj, Mapping):
                logger.warning(
                    "Incompatible config merge, ignoring value %r for ‘%s’ in chain %r",
                    obj, _path_str(property_path), obj_list
                )
                continue

            if top_level_obj is None:
                this_top_level_obj = obj
            else:
                this_top_level_obj = top_level_obj

            # process any "meta"/preset keys
            for presetname, presetarg in _get_preset_keyvals(obj):
                del obj[presetname]
                self._get_preset(presetname, property_path).process_property(
                    self, presetarg, result, obj, remaining_obj_list,
                    property_path,
                    top_level_obj=this_top_level_obj
                )

            for k in obj:

                if k in result:
                    # nothing to copy, value is already in result
                    continue

                if isinstance(obj[k], dict):
                    # recurse into sub-properties
                    result[k] = self.recursive_assign_defaults_dict(
                        [obj[k]] + [
                            (o.get(k,{}) if isinstance(o,dict) else {})
                            for o in remaining_obj_list
                        ],
                        property_path + [k],
                        top_level_obj=this_top_level_obj
                    )

                elif isinstance(obj[k], list):
                    result[k] = self.recursive_assign_defaults_list(
                        [obj[k]] + [
                            (o.get(k,None) if isinstance(o,dict) else None)
                            for o in remaining_obj_list
                        ],
                        property_path + [k],
                        top_level_obj=this_top_level_obj
                    )

                else:
                    # simply copy the scalar value.
                    result[k] = obj[k]

        return result


    def recursive_assign_defaults_list(self, obj_list, property_path, *, top_level_obj=None):

        # ignore None's in argument list
        obj_list = [ o for o in obj_list if o is not None ]

        if len(obj_list) == 0:
            return []

        obj, *remaining_obj_list = obj_list

        list_result = []

        for j, item in enumerate(obj):

            if top_level_obj is None:
                this_top_level_obj = item
            else:
                this_top_level_obj = top_level_obj

            if isinstance(item, dict):
                item_presets = _get_preset_keyvals(item)

                if len(item_presets) == 1:
                    presetname, presetarg = item_presets[0]
                    self._get_preset(presetname, property_path).process_list_item(
                        self, presetarg, list_result, obj, j, remaining_obj_list,
                        property_path + [ ListProperty ],
                        top_level_obj=this_top_level_obj
                    )
                    continue

                elif len(item_presets) > 1:
                    raise ValueError(
                        "You cannot specify multiple $<preset> keys in config "
                        "list items"
                    )

            list_result.append( item )

        return list_result

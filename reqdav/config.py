import json
import logging
import os

"""
Configuration file handling for get_davclient.

A configuration file is a JSON (or YAML, if pyyaml is installed)
mapping from section names to sections.  A section is a flat mapping of
keys prefixed with ``reqdav_`` (``reqdav_url``, ``reqdav_user``,
``reqdav_pass``, ``reqdav_auth_type`` ...).  A section may inherit the
keys of another through ``inherits``.
"""

log = logging.getLogger("reqdav")


def config_section(config, section="default"):
    if section in config and "inherits" in config[section]:
        ret = config_section(config, config[section]["inherits"])
    else:
        ret = {}
    if section in config:
        ret.update(config[section])
    return ret


def read_config(fn):
    if not fn:
        cfgdir = f"{os.environ.get('HOME', '/')}/.config/"
        for config_file in (
            f"{cfgdir}/reqdav/reqdav.conf",
            f"{cfgdir}/reqdav/reqdav.yaml",
            f"{cfgdir}/reqdav/reqdav.json",
            f"{cfgdir}/reqdav.conf",
            "/etc/reqdav.conf",
            "/etc/reqdav/reqdav.conf",
        ):
            cfg = read_config(config_file)
            if cfg:
                return cfg
        return None

    try:
        try:
            with open(fn, "rb") as config_file:
                return json.load(config_file)
        except json.decoder.JSONDecodeError:
            ## Late import, wrapped in try/except.  yaml is an optional dependency
            try:
                import yaml

                try:
                    with open(fn, "rb") as config_file:
                        return yaml.load(config_file, yaml.SafeLoader)
                except yaml.YAMLError:
                    log.error(
                        f"config file {fn} exists but is neither valid json nor yaml.  Check the syntax."
                    )
            except ImportError:
                log.error(
                    f"config file {fn} exists but is not valid json, and pyyaml is not installed."
                )

    except FileNotFoundError:
        log.info("no config file found")
    except ValueError:
        log.error("error in config file.  It will be ignored", exc_info=True)
    return {}

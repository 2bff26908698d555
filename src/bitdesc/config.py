import copy
import json
import os

try:
    import tomllib

    HAS_TOMLLIB = True
except ImportError:
    HAS_TOMLLIB = False

LOG_LEVELS = ["trace", "debug", "info", "warning", "error"]


class Config(object):
    def __init__(self, **kwargs):
        self.log_level = kwargs.get("log_level", "error")

        # script-expression
        self.compute_checksum = kwargs.get("compute_checksum", False)
        self.verify_checksum = kwargs.get("verify_checksum", False)

        # derive-key
        self.path = kwargs.get("path", "")

        if self.log_level not in LOG_LEVELS:
            raise ValueError(f"unrecognized log level: {self.log_level}")
        if self.compute_checksum and self.verify_checksum:
            raise ValueError(
                "compute_checksum and verify_checksum are mutually exclusive"
            )

    def load_config(
        self, config_dir: str = os.path.join(os.path.expanduser("~"), ".bitdesc")
    ):
        """
        Look for configuration file in ~/.bitdesc and load, if present
        """
        if HAS_TOMLLIB and os.path.exists(os.path.join(config_dir, "config.toml")):
            with open(os.path.join(config_dir, "config.toml"), "rb") as config_file:
                config_file_dict = tomllib.load(config_file)
        elif os.path.exists(os.path.join(config_dir, "config.json")):
            with open(os.path.join(config_dir, "config.json")) as config_file:
                config_file_dict = json.load(config_file)
        else:
            config_file_dict = {}

        if config_file_dict:
            # current attrs updated with defined config file attrs
            # re __init__ to avoid applying invalid keys
            config_update = copy.deepcopy(vars(self))
            config_update.update(config_file_dict)
            self.__init__(**config_update)

    def update(self, **kwargs):
        """
        Update Config with kwargs

        Avoid applying keys not defined in __init__ by re-instantiating
        """
        updated_attrs = copy.deepcopy(vars(self))
        updated_attrs.update(kwargs)
        self.__init__(**updated_attrs)

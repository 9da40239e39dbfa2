# --- ttstore_lib/services/config_service.py ---
import configparser
import logging
import os

from ttparse_lib.constants import DAY_BAND_TOLERANCE, HEADER_ROW_TOLERANCE

log = logging.getLogger("ttstore.config")


class ConfigService:
    """Manages reading from and writing to the ttparse.cfg file."""

    def __init__(self, config_path: str):
        self.config_path = config_path
        self.defaults = {
            "Storage": {
                "database": os.path.join(os.path.expanduser("~"), ".ttparse", "timetables.db"),
                "seed_rooms": "true",
            },
            "Parser": {
                "mode": "auto",
                "header_tolerance": str(HEADER_ROW_TOLERANCE),
                "band_tolerance": str(DAY_BAND_TOLERANCE),
                "include_saturday": "true",
            },
        }

    def get_settings(self) -> dict:
        """Reads settings from the config file, applying defaults if missing."""
        config = configparser.ConfigParser()
        # Apply defaults first
        for section, values in self.defaults.items():
            config[section] = values

        # Read existing file to override defaults
        if not config.read(self.config_path):
            log.info("Config file not found at %s. Creating with defaults.", self.config_path)
            self.save_settings(self._config_to_dict(config))

        return self._config_to_dict(config)

    def get_parser_options(self) -> dict:
        """Typed parser options for the extractor."""
        config = configparser.ConfigParser()
        config.read_dict(self.get_settings())
        parser = config["Parser"]
        return {
            "mode": parser.get("mode", "auto"),
            "header_tolerance": parser.getint("header_tolerance", HEADER_ROW_TOLERANCE),
            "band_tolerance": parser.getint("band_tolerance", DAY_BAND_TOLERANCE),
            "include_saturday": parser.getboolean("include_saturday", True),
        }

    def save_settings(self, settings: dict):
        """Saves a dictionary of settings to the config file."""
        config = configparser.ConfigParser()
        for section, values in settings.items():
            config[section] = {k: str(v) for k, v in values.items()}

        try:
            config_dir = os.path.dirname(self.config_path)
            if config_dir:
                os.makedirs(config_dir, exist_ok=True)
            with open(self.config_path, "w") as configfile:
                config.write(configfile)
            log.info("Settings successfully saved to %s", self.config_path)
        except IOError as e:
            log.error("Failed to write settings to %s: %s", self.config_path, e)

    def _config_to_dict(self, config: configparser.ConfigParser) -> dict:
        """Converts a ConfigParser object to a nested dictionary."""
        return {s: dict(config.items(s)) for s in config.sections()}

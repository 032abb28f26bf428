"""
Configuration file handling.

We look for the config file in ~/.config/lotter/lotter.cfg, or wherever the
LOTTER_CONFIG environment variable points.  It's in INI format:

    [books]
    base_currency = USD

    [lot]
    order = fifo
    prune = 0

Defaults are used for anything missing.
"""
import os
import configparser

from lotter.errors import ConfigurationError


CONFIG_DIR = os.path.join(os.path.expanduser("~"), ".config", "lotter")
CONFIG_PATH = os.environ.get("LOTTER_CONFIG", os.path.join(CONFIG_DIR, "lotter.cfg"))


class LotterConfig(configparser.ConfigParser):
    def make_default(self):
        self["books"] = {"base_currency": "USD"}
        self["lot"] = {"order": "fifo", "prune": "0"}
        self["obfuscate"] = {"prune": "1", "salt": ""}

    @property
    def base_currency(self):
        base = self.get("books", "base_currency", fallback="").strip()
        if not base:
            raise ConfigurationError(
                "A base currency is required, i.e. `--base USD` or "
                "`base_currency = USD` in the [books] section of " + CONFIG_PATH
            )
        return base

    @property
    def order(self):
        return self.get("lot", "order", fallback="fifo").strip()

    @property
    def prune(self):
        try:
            return self.getint("lot", "prune", fallback=0)
        except ValueError as err:
            raise ConfigurationError(f"bad [lot] prune in {CONFIG_PATH}: {err}")


CONFIG = LotterConfig()
CONFIG.make_default()


if os.path.exists(CONFIG_PATH):
    CONFIG.read(CONFIG_PATH)

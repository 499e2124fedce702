# sqlreview/engine.py
"""
Rule discovery and configuration.

Every RuleBase subclass under ``sqlreview.rules`` with a non-empty ``id`` is
registered. ``config/checks.json`` selects and configures them:

    {
      "column.required": {
        "enabled": true,
        "level": "ERROR",
        "rule_name": "Required columns",
        "payload": {"list": ["id", "created_ts"]}
      }
    }

Rules carry per-script state, so ``build_rules()`` returns fresh instances
on every call.
"""
import importlib
import json
import logging
import pkgutil

from .errors import ConfigurationError
from .parser import DEFAULT_DIALECT

logger = logging.getLogger(__name__)

RULES_PACKAGE = "sqlreview.rules"
DEFAULT_CHECKS_PATH = "config/checks.json"


class RuleEngine:
    def __init__(self, checks_config_path=DEFAULT_CHECKS_PATH, strict=False, config=None):
        # load config
        if config is None:
            with open(checks_config_path, "r", encoding="utf-8") as f:
                config = json.load(f)
        if not isinstance(config, dict):
            raise ConfigurationError("checks", "rule configuration must be a JSON object")
        self.config = config
        self.strict = strict

        self.rules = {}         # id → rule class object
        self._discover_rules()
        self._active = self._load_active_config()

    @classmethod
    def from_mapping(cls, mapping, strict=False):
        return cls(config=mapping, strict=strict)

    def _discover_rules(self):
        """Dynamically discover all rules under sqlreview.rules.*"""
        import sqlreview.rules as rules_pkg
        from sqlreview.rules.rule_base import RuleBase

        for _, name, _ in pkgutil.iter_modules(rules_pkg.__path__):
            mod = importlib.import_module(f"{RULES_PACKAGE}.{name}")

            # find classes inheriting RuleBase
            for attr in dir(mod):
                obj = getattr(mod, attr)
                if (
                    isinstance(obj, type)
                    and issubclass(obj, RuleBase)
                    and obj is not RuleBase
                ):
                    rid = getattr(obj, "id", None)
                    if rid:
                        self.rules[rid] = obj

    def _load_active_config(self):
        """(rule class, params) for every enabled rule that exists in code."""
        active = []
        for rid, params in self.config.items():
            if not isinstance(params, dict):
                self._config_error(ConfigurationError(rid, "rule entry must be an object"))
                continue

            # Skip disabled rules
            if not params.get("enabled", False):
                continue
            if str(params.get("level", "")).upper() == "DISABLED":
                continue

            rule_cls = self.rules.get(rid)
            if rule_cls is None:
                logger.warning("rule %r not found in code, skipping", rid)
                continue

            params = dict(params)  # copy
            params.setdefault("rule_name", rule_cls.rule_name)
            active.append((rule_cls, params))
        return active

    def _config_error(self, error):
        if self.strict:
            raise error
        logger.warning("disabling rule: %s", error)

    @property
    def rule_ids(self):
        return [cls.id for cls, _ in self._active]

    def build_rules(self, catalog=None, dialect=DEFAULT_DIALECT):
        """Instantiate a fresh rule object per enabled rule, in config order."""
        built = []
        for rule_cls, params in self._active:
            try:
                built.append(rule_cls(params, catalog=catalog, dialect=dialect))
            except ConfigurationError as e:
                self._config_error(e)
        return built

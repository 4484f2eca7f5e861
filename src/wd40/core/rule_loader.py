"""Rule discovery and loading."""

from __future__ import annotations

import importlib
import logging
import pkgutil
from types import ModuleType
from typing import Callable

from wd40.core.registry import RuleRegistry
from wd40.models.options import ScanOptions
from wd40.models.rule import ValidationRule

log = logging.getLogger(__name__)

RuleFactory = Callable[[ScanOptions], "list[ValidationRule]"]


def _find_rule_factory(module: ModuleType) -> RuleFactory | None:
    """Return the module's ``rules(options)`` function, if it has one."""
    factory = getattr(module, "rules", None)
    return factory if callable(factory) else None


def _load_builtin_factories() -> list[RuleFactory]:
    """Collect rule factories from the wd40.rules package."""
    import wd40.rules as rules_pkg

    found: list[RuleFactory] = []
    for _importer, modname, _ispkg in pkgutil.iter_modules(rules_pkg.__path__):
        module = importlib.import_module(f"wd40.rules.{modname}")
        factory = _find_rule_factory(module)
        if factory is not None:
            found.append(factory)
    return found


def load_rules(registry: RuleRegistry, options: ScanOptions | None = None) -> None:
    """Build and register every built-in validation rule.

    A broken rule module is a programming error, so import failures
    propagate instead of silently shrinking the rule set.
    """
    options = options or ScanOptions()
    for factory in _load_builtin_factories():
        for rule in factory(options):
            registry.register(rule)

    log.info("Loaded %d validation rules", len(registry))


def build_registry(options: ScanOptions | None = None) -> RuleRegistry:
    """Return a registry populated with the built-in rules."""
    registry = RuleRegistry()
    load_rules(registry, options)
    return registry

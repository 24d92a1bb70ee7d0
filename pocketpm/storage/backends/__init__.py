"""
Key-value store selection.

`storage.backend` in config.yaml names one of BACKENDS. Each entry gives the
module and class to import and which `storage.*` keys become constructor
arguments, so the sqlite module is only imported when a sqlite store is built.
"""

import importlib

from .base import KeyValueStore

# name -> (module, class, {constructor kwarg: storage config key})
BACKENDS: dict[str, tuple[str, str, dict[str, str]]] = {
    "sqlite": (".sqlite", "SQLiteStore", {"path": "sqlite_path"}),
    "memory": (".memory", "MemoryStore", {}),
}


def make_backend(backend_type: str, **kwargs) -> KeyValueStore:
    """Build the named store. Unknown names raise ValueError."""
    try:
        module_name, class_name, _ = BACKENDS[backend_type]
    except KeyError:
        raise ValueError(
            f"Unknown storage backend: '{backend_type}' (have: {', '.join(sorted(BACKENDS))})"
        ) from None
    cls = getattr(importlib.import_module(module_name, __name__), class_name)
    return cls(**kwargs)


def backend_from_config(storage_cfg: dict) -> KeyValueStore:
    """Build the store described by the `storage` section of config.yaml."""
    backend_type = storage_cfg.get("backend", "sqlite")
    _, _, arg_keys = BACKENDS.get(backend_type, (None, None, {}))
    kwargs = {arg: storage_cfg[key] for arg, key in arg_keys.items() if key in storage_cfg}
    return make_backend(backend_type, **kwargs)


__all__ = ["BACKENDS", "KeyValueStore", "backend_from_config", "make_backend"]

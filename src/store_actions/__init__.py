"""store_actions - caching, watching and loading decorators for store actions."""

# Action shapes
from store_actions.actions import transform_action, transform_actions

# Cache engines
from store_actions.caches import (
    CacheEngine,
    ConditionalCache,
    Disposable,
    KeyedCache,
    ResultsCache,
)

# Deferred results
from store_actions.deferred import (
    Immediate,
    Pending,
    action_optional,
    classify,
    protect_result,
)

# Errors
from store_actions.errors import (
    ActionRejected,
    BindingError,
    ConfigurationError,
    InvalidActionError,
    StoreActionsError,
)
from store_actions.guards import action_before_leave, action_before_route
from store_actions.loading import LoadingTracker
from store_actions.logging import configure_logging

# Options
from store_actions.options import ActionsOptions, create_cache_key, default_options

# Runtime API
from store_actions.runtime import ActionRuntime, create_runtime
from store_actions.store import ActionContext, Store

# Core types
from store_actions.types import (
    ActionEntry,
    ActionHandler,
    ActionObject,
    ActionTree,
    CachedAction,
    CachedResultsAction,
    ConditionalAction,
    HostStore,
    WatchCounters,
)
from store_actions.watch import ActionWatcher

__version__ = "0.1.0"

__all__ = [
    "ActionContext",
    "ActionEntry",
    "ActionHandler",
    "ActionObject",
    "ActionRejected",
    "ActionRuntime",
    "ActionTree",
    "ActionWatcher",
    "ActionsOptions",
    "BindingError",
    "CacheEngine",
    "CachedAction",
    "CachedResultsAction",
    "ConditionalAction",
    "ConditionalCache",
    "ConfigurationError",
    "Disposable",
    "HostStore",
    "Immediate",
    "InvalidActionError",
    "KeyedCache",
    "LoadingTracker",
    "Pending",
    "ResultsCache",
    "Store",
    "StoreActionsError",
    "WatchCounters",
    "action_before_leave",
    "action_before_route",
    "action_optional",
    "classify",
    "configure_logging",
    "create_cache_key",
    "create_runtime",
    "default_options",
    "protect_result",
    "transform_action",
    "transform_actions",
]

"""
Plugin support for TettoSDK.

A plugin is a callable ``plugin(api, options) -> instance``. It receives a
PluginAPI, never the SDK itself, so it cannot read the API key, the
configured agent id, or other plugins. Every paid call a plugin makes needs
a wallet handed to it by its own caller.

The returned instance is attached to the SDK under its ``name`` (or the
``name`` option). It may define:

    id            unique plugin identifier
    on_init()     run once at registration
    on_destroy()  run by TettoSDK.destroy()
    on_error(error, ErrorContext)  run when a call made through the SDK fails
"""
import asyncio
import inspect
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional

from .exceptions import InvalidWalletError, PluginError

if TYPE_CHECKING:
    from .client import TettoSDK
    from .models import Agent, CallResult
    from .wallet import TettoWallet

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ErrorContext:
    """
    Attributes:
        operation: Operation that failed (e.g. "call_agent")
        agent_id: Agent involved, if any
        input: Input of the failed call, if any
    """
    operation: str
    agent_id: Optional[str] = None
    input: Any = None


class PluginAPI:
    """
    Restricted view of a TettoSDK handed to plugins.

    Exposes calls, agent lookups, a secret-free config and plugin presence
    checks. Reassigning attributes on it has no effect on the SDK.
    """

    __slots__ = ("_call_agent", "_get_agent", "_list_agents", "_has_plugin", "_config")

    def __init__(self, sdk: "TettoSDK"):
        self._call_agent = sdk.call_agent
        self._get_agent = sdk.get_agent
        self._list_agents = sdk.list_agents
        self._has_plugin = sdk.has_plugin
        self._config = {
            "api_url": sdk.config.api_url,
            "network": sdk.config.network,
            "protocol_wallet": sdk.config.protocol_wallet,
            "debug": sdk.config.debug,
        }

    def call_agent(
        self,
        agent_id: str,
        input: Dict[str, Any],
        wallet: "TettoWallet",
        **options: Any,
    ) -> "CallResult":
        """Call an agent, paid by the wallet the plugin's caller supplied."""
        if wallet is None:
            raise InvalidWalletError("Plugins must pass the caller's wallet to call_agent")
        return self._call_agent(agent_id, input, wallet, **options)

    def get_agent(self, agent_id: str) -> "Agent":
        return self._get_agent(agent_id)

    def list_agents(self) -> List["Agent"]:
        return self._list_agents()

    def get_config(self) -> Dict[str, Any]:
        """Public configuration only: no API key, no agent id."""
        return dict(self._config)

    def has_plugin(self, plugin_id: str) -> bool:
        return bool(self._has_plugin(plugin_id))


def _run_hook(hook: Callable[..., Any], *args: Any) -> None:
    result = hook(*args)
    if inspect.isawaitable(result):
        asyncio.run(result)


def register_plugin(sdk: "TettoSDK", plugin: Callable[..., Any], options: Dict[str, Any]) -> Any:
    """
    Instantiate a plugin and attach it to ``sdk``.

    Raises:
        PluginError: If the plugin id is already registered or its name
            collides with an SDK attribute or another plugin
    """
    instance = plugin(PluginAPI(sdk), options)
    if instance is None:
        raise PluginError("Plugin returned no instance")

    plugin_id = (
        getattr(instance, "id", None)
        or getattr(plugin, "id", None)
        or getattr(plugin, "__name__", None)
    )
    name = options.get("name") or getattr(instance, "name", None) or plugin_id
    if not plugin_id or not name:
        raise PluginError("Plugin must define an id or a name")

    if plugin_id in sdk._plugins:
        raise PluginError(f"Plugin already registered: {plugin_id}")

    if hasattr(type(sdk), name) or name in vars(sdk):
        raise PluginError(
            f"Plugin name collision: '{name}' is already used on TettoSDK.\n\n"
            "Solutions:\n"
            f"1. Register the plugin under another name: tetto.use(plugin, name='custom_name')\n"
            "2. Remove the plugin that already uses this name"
        )

    sdk._plugins[plugin_id] = instance
    setattr(sdk, name, instance)
    logger.debug(f"Registered plugin {plugin_id} as {name!r}")

    on_init = getattr(instance, "on_init", None)
    if callable(on_init):
        _run_hook(on_init)
    return instance


def notify_error(plugins: Dict[str, Any], error: Exception, context: ErrorContext) -> None:
    """Run each plugin's on_error hook. A failing hook is logged and skipped."""
    for plugin_id, instance in plugins.items():
        hook = getattr(instance, "on_error", None)
        if not callable(hook):
            continue
        try:
            hook(error, context)
        except Exception as e:
            logger.warning(f"Plugin {plugin_id} on_error failed: {e}")


def destroy_plugins(plugins: Dict[str, Any]) -> None:
    for plugin_id, instance in list(plugins.items()):
        hook = getattr(instance, "on_destroy", None)
        if not callable(hook):
            continue
        try:
            _run_hook(hook)
        except Exception as e:
            logger.warning(f"Plugin {plugin_id} on_destroy failed: {e}")

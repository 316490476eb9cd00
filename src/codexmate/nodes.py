# Provider ("node") management: list, add, edit, switch, delete
import logging
from typing import Any

from codexmate.models import (
    API_KEY_FIELD,
    WIRE_API_RESPONSES,
    NodeInfo,
    NodeRemoval,
    OperationResult,
    Provider,
)
from codexmate.records import dict_to_provider, provider_to_dict
from codexmate.store import ConfigStore
from codexmate.utils.toml_writer import PROVIDERS_KEY
from codexmate.utils.validation import validate_required, validate_url

logger = logging.getLogger(__name__)

# ABOUTME: Top-level config.toml key naming the active provider
ACTIVE_PROVIDER_KEY = "model_provider"


def _providers(document: dict[str, Any]) -> dict[str, Any]:
    providers = document.get(PROVIDERS_KEY)
    if not isinstance(providers, dict):
        providers = {}
        document[PROVIDERS_KEY] = providers
    return providers


def _save_credential(store: ConfigStore, name: str, credential_key: str) -> None:
    credentials = store.read_credentials()
    entry = credentials.get(name)
    credentials[name] = {**(entry if isinstance(entry, dict) else {}), API_KEY_FIELD: credential_key}
    store.write_credentials(credentials)


def list_nodes(store: ConfigStore) -> list[NodeInfo]:
    """List every provider known to config.toml or credentials.json.

    ABOUTME: Union of both files, sorted by name
    ABOUTME: A name with only a stored credential is listed with provider=None
    """
    document = store.read_config()
    active = document.get(ACTIVE_PROVIDER_KEY, "")
    providers = document.get(PROVIDERS_KEY)
    if not isinstance(providers, dict):
        providers = {}
    credentials = store.read_credentials()

    nodes: list[NodeInfo] = []
    for name in sorted(set(providers) | set(credentials)):
        data = providers.get(name)
        entry = credentials.get(name)
        nodes.append(NodeInfo(
            name=name,
            is_active=name == active,
            provider=dict_to_provider(name, data) if isinstance(data, dict) else None,
            has_credential=isinstance(entry, dict) and bool(entry.get(API_KEY_FIELD)),
        ))
    return nodes


def switch_node(store: ConfigStore, name: str) -> OperationResult:
    """Make a provider active and install its API key into auth.json.

    ABOUTME: Sets top-level model_provider, then copies the stored key
    ABOUTME: A provider without a stored key clears OPENAI_API_KEY to ""
    """
    document = store.read_config()
    providers = document.get(PROVIDERS_KEY)
    if not isinstance(providers, dict) or not isinstance(providers.get(name), dict):
        return OperationResult(ok=False, error=f"Provider not found: {name}")

    document[ACTIVE_PROVIDER_KEY] = name
    store.write_config(document)

    entry = store.read_credentials().get(name)
    key = entry.get(API_KEY_FIELD, "") if isinstance(entry, dict) else ""
    auth = store.read_auth()
    auth[API_KEY_FIELD] = key
    store.write_auth(auth)

    logger.debug(f"Switched active provider to {name}")
    return OperationResult(ok=True)


def add_node(
    store: ConfigStore,
    name: str,
    base_url: str,
    wire_api: str = WIRE_API_RESPONSES,
    requires_openai_auth: bool | None = None,
    extra: dict[str, Any] | None = None,
    credential_key: str | None = None,
) -> OperationResult:
    """Add a new provider.

    ABOUTME: name and base_url are required; duplicate names are refused
    ABOUTME: extra fields are stored verbatim after the known ones
    ABOUTME: credential_key (if given) goes to credentials.json, never config.toml

    Args:
        store: Target store
        name: Provider name, also its table key
        base_url: API endpoint
        wire_api: Wire protocol tag ("responses" or "chat")
        requires_openai_auth: Written only when not None
        extra: Additional provider fields
        credential_key: API key to remember for this provider

    Returns:
        OperationResult; warnings hold URL format problems
    """
    error = validate_required({"name": name, "base_url": base_url}, ["name", "base_url"])
    if error:
        return OperationResult(ok=False, error="name and base_url are required")

    document = store.read_config()
    providers = _providers(document)
    if name in providers:
        return OperationResult(ok=False, error="provider already exists")

    provider = Provider(
        name=name,
        base_url=base_url,
        wire_api=wire_api,
        requires_openai_auth=requires_openai_auth,
        extra=dict(extra or {}),
    )
    providers[name] = provider_to_dict(provider)
    store.write_config(document)

    if credential_key is not None:
        _save_credential(store, name, credential_key)

    warning = validate_url(base_url)
    return OperationResult(ok=True, warnings=[warning.message] if warning else [])


def edit_node(
    store: ConfigStore,
    name: str,
    updates: dict[str, Any],
    credential_key: str | None = None,
) -> OperationResult:
    """Merge updates into an existing provider.

    ABOUTME: A None value in updates removes that field
    ABOUTME: The name field is forced back to the table key afterwards
    """
    document = store.read_config()
    providers = document.get(PROVIDERS_KEY)
    if not isinstance(providers, dict) or not isinstance(providers.get(name), dict):
        return OperationResult(ok=False, error="provider not found")

    provider = providers[name]
    for key, value in updates.items():
        if value is None:
            provider.pop(key, None)
        else:
            provider[key] = value
    provider["name"] = name
    store.write_config(document)

    if credential_key is not None:
        _save_credential(store, name, credential_key)

    base_url = provider.get("base_url")
    warning = validate_url(base_url) if isinstance(base_url, str) and "base_url" in updates else None
    return OperationResult(ok=True, warnings=[warning.message] if warning else [])


def delete_node(store: ConfigStore, name: str) -> NodeRemoval:
    """Remove a provider from config.toml and its stored credential.

    ABOUTME: Always succeeds; missing entries are simply skipped
    ABOUTME: Leaves model_provider untouched - was_active lets the caller react
    """
    document = store.read_config()
    was_active = document.get(ACTIVE_PROVIDER_KEY) == name

    providers = document.get(PROVIDERS_KEY)
    if isinstance(providers, dict) and name in providers:
        del providers[name]
        store.write_config(document)

    credentials = store.read_credentials()
    if name in credentials:
        del credentials[name]
        store.write_credentials(credentials)

    return NodeRemoval(ok=True, was_active=was_active)

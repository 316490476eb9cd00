# Project trust management
from codexmate.models import OperationResult, ProjectTrust
from codexmate.records import dict_to_project
from codexmate.store import ConfigStore
from codexmate.utils.toml_writer import PROJECTS_KEY
from codexmate.utils.validation import validate_project_path


def list_project_trust(store: ConfigStore) -> dict[str, ProjectTrust]:
    """Return trust entries keyed by absolute path."""
    projects = store.read_config().get(PROJECTS_KEY)
    if not isinstance(projects, dict):
        return {}
    return {
        path: dict_to_project(path, data)
        for path, data in projects.items()
        if isinstance(data, dict)
    }


def set_project_trust(store: ConfigStore, path: str, trust_level: str) -> OperationResult:
    """Create or update the trust level for a project.

    ABOUTME: path must be absolute - it becomes a quoted table key
    ABOUTME: Other fields already on the entry are kept

    Args:
        store: Target store
        path: Absolute project directory
        trust_level: "trusted", "untrusted", or any other tag Codex accepts

    Returns:
        OperationResult (error if path is relative)
    """
    error = validate_project_path(path)
    if error:
        return OperationResult(ok=False, error=error.message)

    document = store.read_config()
    projects = document.get(PROJECTS_KEY)
    if not isinstance(projects, dict):
        projects = {}
        document[PROJECTS_KEY] = projects

    existing = projects.get(path)
    projects[path] = {**(existing if isinstance(existing, dict) else {}), "trust_level": trust_level}
    store.write_config(document)
    return OperationResult(ok=True)


def delete_project(store: ConfigStore, path: str) -> OperationResult:
    """Remove a project entry. Missing entries are not an error."""
    document = store.read_config()
    projects = document.get(PROJECTS_KEY)
    if isinstance(projects, dict) and path in projects:
        del projects[path]
        store.write_config(document)
    return OperationResult(ok=True)

"""Known cache signatures for development trees."""

from dataclasses import dataclass
from enum import Enum

from .exceptions import ConfigurationError


class CacheCategory(str, Enum):
    """Ecosystem a cache signature belongs to."""

    NODE = "node"
    RUST = "rust"
    GO = "go"
    PYTHON = "python"
    DOCKER = "docker"
    GENERAL = "general"


@dataclass(frozen=True)
class CacheSignature:
    """A named rule set identifying one kind of disposable artifact."""

    name: str
    patterns: tuple[str, ...]  # Exact names, globs, or trailing path segments
    description: str
    is_directory: bool = True
    recursive_safe: bool = True  # Safe to delete recursively without review
    is_library: bool = False  # Dependency that needs reinstalling once removed

    @property
    def is_command_only(self) -> bool:
        """True when the cache is cleaned by external commands, not by path."""
        return not self.patterns


ALL_CATEGORIES: list[CacheCategory] = [
    CacheCategory.NODE,
    CacheCategory.RUST,
    CacheCategory.GO,
    CacheCategory.PYTHON,
    CacheCategory.DOCKER,
    CacheCategory.GENERAL,
]


# Order matters: the first signature matching an entry wins.
CACHE_SIGNATURES: dict[CacheCategory, list[CacheSignature]] = {
    CacheCategory.NODE: [
        # Libraries
        CacheSignature(
            "node_modules",
            ("node_modules",),
            "Node.js dependencies",
            is_library=True,
        ),
        # Caches
        CacheSignature("npm_cache", (".npm",), "NPM cache"),
        CacheSignature("next_build", (".next",), "Next.js build cache"),
        CacheSignature("nuxt_build", (".nuxt", ".output"), "Nuxt.js build cache"),
        CacheSignature("yarn_cache", (".yarn/cache",), "Yarn cache"),
        CacheSignature("pnpm_cache", (".pnpm-store",), "PNPM cache"),
        CacheSignature("turbo_cache", (".turbo",), "Turbo build cache"),
        CacheSignature("parcel_cache", (".parcel-cache",), "Parcel build cache"),
    ],
    CacheCategory.RUST: [
        CacheSignature(
            "cargo_target",
            ("target",),
            "Cargo build artifacts",
            is_library=True,
        ),
        CacheSignature(
            "cargo_lock",
            ("Cargo.lock",),
            "Cargo lock file (in some cases)",
            is_directory=False,
            recursive_safe=False,
        ),
    ],
    CacheCategory.GO: [
        CacheSignature(
            "go_mod_cache",
            ("pkg/mod",),
            "Go module cache",
            is_library=True,
        ),
        CacheSignature("go_build_cache", ("go-build",), "Go build cache"),
    ],
    CacheCategory.PYTHON: [
        CacheSignature("python_cache", ("__pycache__",), "Python bytecode cache"),
        CacheSignature(
            "python_bytecode",
            ("*.pyc", "*.pyo"),
            "Python bytecode files",
            is_directory=False,
        ),
        CacheSignature("pytest_cache", (".pytest_cache",), "Pytest cache"),
        CacheSignature("mypy_cache", (".mypy_cache",), "MyPy cache"),
        CacheSignature("pip_cache", (".pip",), "Pip cache"),
    ],
    CacheCategory.DOCKER: [
        # Cleaned through the Docker CLI, see docker.py
        CacheSignature(
            "docker_system",
            (),
            "Docker system cache (containers, images, volumes)",
            is_directory=False,
            recursive_safe=False,
        ),
    ],
    CacheCategory.GENERAL: [
        CacheSignature(
            "cache_dirs",
            (".cache", "cache", "@cache"),
            "General cache directories",
        ),
        CacheSignature(
            "temp_dirs",
            (".temp", "temp", "@temp", ".tmp", "tmp"),
            "Temporary directories",
        ),
        CacheSignature(
            "build_dirs",
            ("build", "dist", "out", ".build"),
            "Build output directories",
        ),
        CacheSignature(
            "log_files",
            ("*.log", "logs", ".log"),
            "Log files and directories",
            is_directory=False,
        ),
        CacheSignature(
            "exporter_dirs",
            (".exporter",),
            "Data exporter cache directories",
        ),
    ],
}


# Accepted spellings for --types
CATEGORY_ALIASES: dict[str, CacheCategory] = {
    "node": CacheCategory.NODE,
    "nodejs": CacheCategory.NODE,
    "npm": CacheCategory.NODE,
    "yarn": CacheCategory.NODE,
    "pnpm": CacheCategory.NODE,
    "rust": CacheCategory.RUST,
    "cargo": CacheCategory.RUST,
    "go": CacheCategory.GO,
    "golang": CacheCategory.GO,
    "python": CacheCategory.PYTHON,
    "py": CacheCategory.PYTHON,
    "pip": CacheCategory.PYTHON,
    "docker": CacheCategory.DOCKER,
    "general": CacheCategory.GENERAL,
    "cache": CacheCategory.GENERAL,
}


def get_signatures(category: CacheCategory) -> list[CacheSignature]:
    """Return every signature of a category in catalog order."""
    return list(CACHE_SIGNATURES[category])


def get_safe_signatures(category: CacheCategory) -> list[CacheSignature]:
    """Return the signatures that can be removed without reinstalling anything."""
    return [sig for sig in CACHE_SIGNATURES[category] if not sig.is_library]


def get_library_signatures(category: CacheCategory) -> list[CacheSignature]:
    """Return the dependency signatures of a category."""
    return [sig for sig in CACHE_SIGNATURES[category] if sig.is_library]


def select_signatures(
    categories: list[CacheCategory], include_libraries: bool = False
) -> list[tuple[CacheCategory, CacheSignature]]:
    """Build the ordered list of active (category, signature) pairs.

    Args:
        categories: Categories selected by the user, in evaluation order
        include_libraries: Whether dependency caches are eligible

    Returns:
        Ordered list of pairs; the order decides which signature wins

    """
    selected: list[tuple[CacheCategory, CacheSignature]] = []
    for category in categories:
        signatures = (
            get_signatures(category) if include_libraries else get_safe_signatures(category)
        )
        selected.extend((category, sig) for sig in signatures)
    return selected


def parse_categories(types_str: str) -> list[CacheCategory]:
    """Parse a comma-separated list of cache types.

    Args:
        types_str: Names such as ``"python,node"``, or ``"all"`` for every
            filesystem category

    Returns:
        Categories without duplicates, in the order given

    Raises:
        ConfigurationError: If a name is not a known cache type

    """
    # Docker pruning reaches beyond the tree, so it has to be named
    if types_str.strip().lower() == "all":
        return [category for category in ALL_CATEGORIES if category is not CacheCategory.DOCKER]

    categories: list[CacheCategory] = []
    for raw in types_str.split(","):
        name = raw.strip().lower()
        if not name:
            continue
        category = CATEGORY_ALIASES.get(name)
        if category is None:
            raise ConfigurationError(f"Unknown cache type: {raw.strip()}")
        if category not in categories:
            categories.append(category)

    if not categories:
        raise ConfigurationError("No cache types selected")
    return categories

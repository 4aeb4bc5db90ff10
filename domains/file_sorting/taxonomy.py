"""
Category taxonomy for File Sorting domain.

Maps file extensions to category folder names. Lookup is a linear scan in
declaration order; anything unmatched, and every folder, falls back to the
catch-all category.
"""

from dataclasses import dataclass
from typing import Iterable, Mapping

from app.utils.helpers import get_file_extension
from domains.file_sorting.errors import TaxonomyError

FALLBACK_CATEGORY = "others"

DEFAULT_CATEGORIES: dict[str, tuple[str, ...]] = {
    "images": (
        ".png", ".jpg", ".jpeg", ".gif", ".bmp", ".svg", ".webp", ".tiff", ".ico",
        ".raw", ".heic", ".ai", ".psd", ".eps",
    ),
    "documents": (
        ".pdf", ".doc", ".docx", ".txt", ".xls", ".xlsx", ".ppt", ".pptx", ".ods",
        ".odt", ".rtf", ".csv", ".json", ".geojson", ".xml", ".md", ".tex", ".epub",
    ),
    "programs": (".exe", ".msi", ".dmg", ".pkg", ".app", ".deb", ".rpm", ".bin", ".sh", ".bat", ".cmd"),
    "tunnels": (".ovpn", ".conf", ".wireguard", ".crt", ".key", ".pem", ".p12"),
    "audio": (".mp3", ".wav", ".aac", ".flac", ".ogg", ".m4a", ".wma", ".aiff", ".opus"),
    "video": (".mp4", ".avi", ".mkv", ".mov", ".webm", ".flv", ".vob", ".wmv", ".m4v", ".3gp"),
    # .dmg belongs to programs
    "archives": (".zip", ".rar", ".tar", ".gz", ".7z", ".bz2", ".xz", ".iso", ".jar"),
    "code": (
        ".js", ".jsx", ".ts", ".tsx", ".py", ".java", ".cpp", ".c", ".cs", ".h",
        ".html", ".css", ".scss", ".php", ".go", ".rs", ".rb", ".sql", ".yaml", ".yml",
    ),
    "fonts": (".ttf", ".otf", ".woff", ".woff2", ".eot"),
    # .sql belongs to code
    "database": (".db", ".sqlite", ".sqlite3", ".mdb", ".accdb"),
}


@dataclass(frozen=True, slots=True)
class Category:
    """Named bucket of recognised extensions."""

    name: str
    extensions: frozenset[str]


class Taxonomy:
    """Ordered, disjoint category table with a catch-all fallback."""

    def __init__(
        self,
        categories: Mapping[str, Iterable[str]],
        fallback: str = FALLBACK_CATEGORY,
    ):
        """
        Build and validate the category table.

        Args:
            categories: Category name to extensions, in lookup order
            fallback: Name of the catch-all category

        Raises:
            TaxonomyError: If names clash or an extension is listed twice
        """
        self.fallback = fallback
        self.categories: tuple[Category, ...] = self._build(categories, fallback)

    @staticmethod
    def _build(categories: Mapping[str, Iterable[str]], fallback: str) -> tuple[Category, ...]:
        built = []
        owners: dict[str, str] = {}

        for name, extensions in categories.items():
            if not name or name in (".", "..") or "/" in name or "\\" in name:
                raise TaxonomyError(f"Invalid category name: {name!r}")
            if name == fallback:
                raise TaxonomyError(f"Category {name!r} clashes with the fallback category")

            normalised = set()
            for ext in extensions:
                ext = ext.lower()
                if not ext.startswith(".") or len(ext) < 2:
                    raise TaxonomyError(f"Extension {ext!r} in {name!r} must start with '.'")
                if ext in owners and owners[ext] != name:
                    raise TaxonomyError(
                        f"Extension {ext!r} listed in both {owners[ext]!r} and {name!r}"
                    )
                owners[ext] = name
                normalised.add(ext)

            built.append(Category(name=name, extensions=frozenset(normalised)))

        return tuple(built)

    @property
    def names(self) -> list[str]:
        """All category folder names, fallback last."""
        return [c.name for c in self.categories] + [self.fallback]

    def category_for_extension(self, extension: str) -> str:
        """
        Resolve an extension to its category.

        Args:
            extension: Extension with leading dot, or "" for none

        Returns:
            Matching category name, or the fallback
        """
        extension = extension.lower()
        for category in self.categories:
            if extension in category.extensions:
                return category.name
        return self.fallback

    def categorize(self, name: str, is_folder: bool = False) -> str:
        """Resolve an entry name to its category; folders always fall back."""
        if is_folder:
            return self.fallback
        return self.category_for_extension(get_file_extension(name))


def default_taxonomy() -> Taxonomy:
    """Taxonomy built from the bundled category table."""
    return Taxonomy(DEFAULT_CATEGORIES)

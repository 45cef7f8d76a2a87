"""Repository for category storage and retrieval."""
import logging
from typing import List, Optional

from notelist.config import CATEGORIES_FILE_NAME
from notelist.models.schema import Category
from notelist.storage.json_collection import JsonCollection
from notelist.storage.location import StorageLocation

logger = logging.getLogger(__name__)


class CategoryRepository:
    """Repository for the category collection (``categories.json``).

    Categories are keyed by name. Notes refer to categories by name too,
    but nothing here touches the note collection: deleting a category
    leaves notes that mention it as they are.
    """

    def __init__(
        self,
        location: StorageLocation,
        filename: str = CATEGORIES_FILE_NAME,
        indent: int = 2,
    ):
        self.collection: JsonCollection[Category] = JsonCollection(
            location, filename, Category, indent=indent
        )

    def load_all(self) -> List[Category]:
        """Load every category in stored order."""
        return self.collection.read()

    def get_by_name(self, name: str) -> Optional[Category]:
        """Get a category by name.

        Args:
            name: The name of the category.

        Returns:
            The Category if found, None otherwise.
        """
        for category in self.load_all():
            if category.name == name:
                return category
        return None

    def upsert(self, category: Category) -> Category:
        """Replace the category with the same name in place, or append it."""
        with self.collection.lock:
            categories = self.load_all()
            for index, existing in enumerate(categories):
                if existing.name == category.name:
                    categories[index] = category
                    break
            else:
                categories.append(category)
            self.collection.write(categories)
        logger.debug(f"Saved category {category.name!r}")
        return category

    def delete_by_name(self, name: str) -> int:
        """Remove every category with the given name.

        Returns:
            Number of categories removed (0 when the name is unknown).
        """
        with self.collection.lock:
            categories = self.load_all()
            remaining = [c for c in categories if c.name != name]
            self.collection.write(remaining)
        removed = len(categories) - len(remaining)
        if removed:
            logger.info(f"Deleted category {name!r}")
        return removed

    def replace_all(self, categories: List[Category]) -> None:
        """Overwrite the whole collection."""
        with self.collection.lock:
            self.collection.write(list(categories))
